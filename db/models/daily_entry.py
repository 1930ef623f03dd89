"""
db/models/daily_entry.py

Per-user, per-day material weight entries.
"""

from __future__ import annotations

import uuid

from sqlalchemy import String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, TimestampMixin

_UNIQUE_CONSTRAINT = "uq_daily_entries_user_date"


class DailyEntry(TimestampMixin, Base):
    """
    One day's material weights for one user.

    ``data`` maps material name to weight in kilograms, e.g.::

        {"PET Bottles": 12.5, "Cardboard": 30.0}

    ``date_key`` is the ``YYYY-MM-DD`` calendar day in Asia/Kolkata.
    """

    __tablename__ = "daily_entries"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    user_id: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        index=True,
    )
    date_key: Mapped[str] = mapped_column(
        String(10),
        nullable=False,
        index=True,
        comment="YYYY-MM-DD (Asia/Kolkata)",
    )
    data: Mapped[dict[str, float]] = mapped_column(
        nullable=False,
        default=dict,
    )

    __table_args__ = (
        UniqueConstraint("user_id", "date_key", name=_UNIQUE_CONSTRAINT),
    )
