"""
Model package exports.

Import all SQLAlchemy models here so metadata registration works
without extra imports.
"""

from db.models.daily_entry import DailyEntry

__all__ = [
    "DailyEntry",
]
