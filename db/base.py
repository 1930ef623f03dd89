"""
db/base.py

Declarative base and shared mixins for the entry store models.
"""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, DateTime, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """
    Project-wide declarative base.

    Material weight mappings are stored as portable JSON so the same
    models run on PostgreSQL and SQLite.
    """

    type_annotation_map: dict[Any, Any] = {
        dict[str, float]: JSON,
    }


class TimestampMixin:
    """
    Adds created_at and updated_at; updated_at moves on every UPDATE.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=utcnow,
    )
