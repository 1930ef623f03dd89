"""
app/repositories/entry_repository.py

Lookup and persistence of per-day material weight entries.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Mapping
from zoneinfo import ZoneInfo

from sqlalchemy import select
from sqlalchemy.orm import Session

from db.models.daily_entry import DailyEntry

ENTRY_TIMEZONE = ZoneInfo("Asia/Kolkata")
DEFAULT_HISTORY_LIMIT = 30
MAX_HISTORY_LIMIT = 90


def to_date_key(moment: datetime | None = None) -> str:
    """
    Return the ``YYYY-MM-DD`` calendar day of *moment* in Asia/Kolkata.

    Naive datetimes are taken as UTC. Defaults to now.
    """

    if moment is None:
        moment = datetime.now(tz=ENTRY_TIMEZONE)
    elif moment.tzinfo is None:
        moment = moment.replace(tzinfo=ZoneInfo("UTC"))
    return moment.astimezone(ENTRY_TIMEZONE).strftime("%Y-%m-%d")


def clean_material_weights(data: Mapping[str, Any]) -> dict[str, float]:
    """
    Keep numeric weights only, clamping negatives to zero.
    """

    cleaned: dict[str, float] = {}
    for material, weight in data.items():
        if isinstance(weight, bool):
            continue
        try:
            number = float(weight)
        except (TypeError, ValueError):
            continue
        if not math.isfinite(number):
            continue
        cleaned[str(material)] = max(0.0, number)
    return cleaned


class EntryRepository(ABC):
    """
    Read contract the report service needs from the entry store.
    """

    @abstractmethod
    def get_material_weights(self, entry_id: str) -> dict[str, float] | None:
        """
        Return the entry's material name to weight mapping, or ``None``
        when no entry has that identifier.
        """


class SQLAlchemyEntryRepository(EntryRepository):
    """
    Data access layer for DailyEntry records.

    Operates within the caller's transaction boundary: rows are added
    and flushed but never committed or rolled back here.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def get_material_weights(self, entry_id: str) -> dict[str, float] | None:
        entry = self._session.get(DailyEntry, entry_id)
        if entry is None:
            return None
        return dict(entry.data or {})

    def get_entry_by_date(self, user_id: str, date_key: str | None = None) -> DailyEntry | None:
        """
        Return the user's entry for *date_key* (today when omitted).
        """

        key = date_key or to_date_key()
        stmt = select(DailyEntry).where(
            DailyEntry.user_id == user_id,
            DailyEntry.date_key == key,
        )
        return self._session.scalars(stmt).first()

    def upsert_entry(
        self,
        user_id: str,
        date_key: str,
        data: Mapping[str, Any],
    ) -> DailyEntry:
        """
        Replace the user's material weights for *date_key*, creating the
        entry if it does not exist yet.
        """

        cleaned = clean_material_weights(data)
        entry = self.get_entry_by_date(user_id=user_id, date_key=date_key)
        if entry is None:
            entry = DailyEntry(user_id=user_id, date_key=date_key, data=cleaned)
            self._session.add(entry)
        else:
            entry.data = cleaned
        self._session.flush()
        return entry

    def delete_entry(self, user_id: str, date_key: str) -> bool:
        """
        Delete the user's entry for *date_key*. Returns whether one existed.
        """

        entry = self.get_entry_by_date(user_id=user_id, date_key=date_key)
        if entry is None:
            return False
        self._session.delete(entry)
        self._session.flush()
        return True

    def list_history(self, user_id: str, limit: int | None = None) -> list[DailyEntry]:
        """
        Return the user's most recent entries, newest first.

        ``limit`` defaults to 30 and is capped at 90.
        """

        effective = max(1, min(limit or DEFAULT_HISTORY_LIMIT, MAX_HISTORY_LIMIT))
        stmt = (
            select(DailyEntry)
            .where(DailyEntry.user_id == user_id)
            .order_by(DailyEntry.date_key.desc())
            .limit(effective)
        )
        return list(self._session.scalars(stmt))
