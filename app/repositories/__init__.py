"""
app/repositories package marker.
"""

from app.repositories.entry_repository import EntryRepository, SQLAlchemyEntryRepository

__all__ = [
    "EntryRepository",
    "SQLAlchemyEntryRepository",
]
