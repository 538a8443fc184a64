"""Process-local cache of each user's entries for the current day."""

import threading
from dataclasses import dataclass, field
from datetime import date
from uuid import UUID
from zoneinfo import ZoneInfo

from macro_money.domain.entries import FoodLogEntry
from macro_money.services.aggregation import local_date


@dataclass
class _DayLedger:
    day: date
    timezone_name: str
    entries: list[FoodLogEntry] = field(default_factory=list)


class FoodLogLedger:
    """Today's entries per user, newest first.

    Readers get immutable snapshots. Mutations on a user that has not been
    loaded are ignored, the next read loads from the repository.
    """

    def __init__(self) -> None:
        self._ledgers: dict[UUID, _DayLedger] = {}
        self._lock = threading.RLock()

    def snapshot(
        self, user_id: UUID, day: date, timezone_name: str
    ) -> tuple[FoodLogEntry, ...] | None:
        """Return cached entries for the day, or None when not loaded."""
        with self._lock:
            ledger = self._ledgers.get(user_id)
            if ledger is None or (ledger.day, ledger.timezone_name) != (
                day,
                timezone_name,
            ):
                return None
            return tuple(ledger.entries)

    def load(
        self,
        user_id: UUID,
        day: date,
        timezone_name: str,
        entries: list[FoodLogEntry],
    ) -> tuple[FoodLogEntry, ...]:
        """Replace the cached entries for a user."""
        ordered = sorted(entries, key=lambda entry: entry.timestamp, reverse=True)
        with self._lock:
            self._ledgers[user_id] = _DayLedger(day, timezone_name, ordered)
            return tuple(ordered)

    def insert(self, user_id: UUID, entry: FoodLogEntry, index: int = 0) -> None:
        """Add an entry at a position (front by default)."""
        with self._lock:
            ledger = self._ledgers.get(user_id)
            if ledger is None:
                return
            ledger.entries.insert(index, entry)

    def replace(self, user_id: UUID, entry: FoodLogEntry) -> None:
        """Swap in a new version of an entry with the same id."""
        with self._lock:
            ledger = self._ledgers.get(user_id)
            if ledger is None:
                return
            for index, current in enumerate(ledger.entries):
                if current.id == entry.id:
                    ledger.entries[index] = entry
                    return

    def remove(self, user_id: UUID, entry_id: UUID) -> int | None:
        """Remove an entry and return the position it held."""
        with self._lock:
            ledger = self._ledgers.get(user_id)
            if ledger is None:
                return None
            for index, current in enumerate(ledger.entries):
                if current.id == entry_id:
                    del ledger.entries[index]
                    return index
            return None

    def clear(self, user_id: UUID) -> list[FoodLogEntry]:
        """Drop all cached entries of a user and return them."""
        with self._lock:
            ledger = self._ledgers.get(user_id)
            if ledger is None:
                return []
            removed = list(ledger.entries)
            ledger.entries.clear()
            return removed

    def restore(self, user_id: UUID, entries: list[FoodLogEntry]) -> None:
        """Put back entries removed by clear."""
        with self._lock:
            ledger = self._ledgers.get(user_id)
            if ledger is None:
                return
            ledger.entries[:0] = entries

    def prune(self, user_id: UUID, keep_day: date, tz: ZoneInfo) -> None:
        """Forget entries outside keep_day; a stale ledger is evicted."""
        with self._lock:
            ledger = self._ledgers.get(user_id)
            if ledger is None:
                return
            if ledger.day != keep_day:
                del self._ledgers[user_id]
                return
            ledger.entries = [
                entry
                for entry in ledger.entries
                if local_date(entry.timestamp, tz) == keep_day
            ]

    def evict(self, user_id: UUID) -> None:
        """Forget a user so the next read reloads from the repository."""
        with self._lock:
            self._ledgers.pop(user_id, None)
