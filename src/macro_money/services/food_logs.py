"""Food log service with optimistic local updates."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Protocol
from uuid import UUID, uuid4
from zoneinfo import ZoneInfo

from macro_money.domain.entries import (
    EntryChanges,
    FoodLogEntry,
    NutritionEstimate,
    normalize_description,
)
from macro_money.rounding import round_money
from macro_money.services.aggregation import day_bounds, local_date, utc_now
from macro_money.services.ledger import FoodLogLedger
from macro_money.services.mutations import (
    AddEntry,
    ClearEntries,
    DeleteEntry,
    EditEntry,
    run_mutation,
)


class FoodLogRepository(Protocol):
    """Persistence interface for food log entries."""

    def create_entry(self, user_id: UUID, entry: FoodLogEntry) -> None:
        """Persist a new entry."""

    def get_entry(self, user_id: UUID, entry_id: UUID) -> FoodLogEntry | None:
        """Return an entry by id."""

    def update_entry(self, user_id: UUID, entry: FoodLogEntry) -> None:
        """Persist the editable fields of an entry."""

    def delete_entry(self, user_id: UUID, entry_id: UUID) -> None:
        """Delete an entry."""

    def delete_all_entries(self, user_id: UUID) -> None:
        """Delete every entry of a user."""

    def list_entries(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[FoodLogEntry]:
        """Return entries with start <= timestamp < end."""

    def first_entry_time(self, user_id: UUID) -> datetime | None:
        """Return the timestamp of the user's oldest entry."""


@dataclass
class FoodLogService:
    """Create, edit and delete entries; serve today's entries from the ledger."""

    repository: FoodLogRepository
    ledger: FoodLogLedger = field(default_factory=FoodLogLedger)
    clock: Callable[[], datetime] = utc_now

    def today_entries(
        self, user_id: UUID, timezone_name: str
    ) -> tuple[FoodLogEntry, ...]:
        """Return a snapshot of the entries logged on the user's local today."""
        tz = ZoneInfo(timezone_name)
        today = local_date(self.clock(), tz)
        cached = self.ledger.snapshot(user_id, today, timezone_name)
        if cached is not None:
            return cached
        start, end = day_bounds(today, tz)
        entries = self.repository.list_entries(user_id, start, end)
        return self.ledger.load(user_id, today, timezone_name, entries)

    def confirm_estimate(
        self, user_id: UUID, estimate: NutritionEstimate
    ) -> FoodLogEntry:
        """Turn a (possibly user-edited) estimate into a logged entry."""
        return self.log_entry(
            user_id,
            description=estimate.description,
            calories=estimate.calories,
            protein=estimate.protein,
            cost=estimate.cost,
        )

    def log_entry(  # noqa: PLR0913
        self,
        user_id: UUID,
        *,
        description: str,
        calories: int,
        protein: int,
        cost: float,
        pantry_item_id: UUID | None = None,
        amount_consumed: float | None = None,
    ) -> FoodLogEntry:
        """Create an entry stamped with the current instant."""
        entry = FoodLogEntry(
            id=uuid4(),
            description=normalize_description(description),
            calories=int(_non_negative(calories, "calories")),
            protein=int(_non_negative(protein, "protein")),
            cost=round_money(_non_negative(cost, "cost")),
            timestamp=self.clock(),
            pantry_item_id=pantry_item_id,
            amount_consumed=amount_consumed,
        )
        run_mutation(AddEntry(user_id, entry), self.ledger, self.repository)
        return entry

    def edit_entry(
        self, user_id: UUID, entry_id: UUID, changes: EntryChanges
    ) -> FoodLogEntry | None:
        """Apply field edits to an entry; the timestamp is kept."""
        before = self.repository.get_entry(user_id, entry_id)
        if before is None:
            return None
        validated = EntryChanges(
            description=normalize_description(changes.description)
            if changes.description is not None
            else None,
            calories=_optional_non_negative(changes.calories, "calories"),
            protein=_optional_non_negative(changes.protein, "protein"),
            cost=round_money(_non_negative(changes.cost, "cost"))
            if changes.cost is not None
            else None,
        )
        after = validated.apply(before)
        run_mutation(EditEntry(user_id, before, after), self.ledger, self.repository)
        return after

    def delete_entry(self, user_id: UUID, entry_id: UUID) -> bool:
        """Delete an entry, returning False when it does not exist."""
        entry = self.repository.get_entry(user_id, entry_id)
        if entry is None:
            return False
        run_mutation(DeleteEntry(user_id, entry), self.ledger, self.repository)
        return True

    def clear_entries(self, user_id: UUID) -> None:
        """Delete every entry of the user."""
        run_mutation(ClearEntries(user_id), self.ledger, self.repository)

    def list_entries(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[FoodLogEntry]:
        """Return entries in a UTC time range straight from the repository."""
        return self.repository.list_entries(user_id, start, end)

    def first_entry_time(self, user_id: UUID) -> datetime | None:
        """Return when the user logged their oldest entry, if any."""
        return self.repository.first_entry_time(user_id)

    def prune_cache(self, user_id: UUID, today: date, timezone_name: str) -> None:
        """Drop cached entries that do not belong to the user's today."""
        self.ledger.prune(user_id, today, ZoneInfo(timezone_name))


def _non_negative(value: float, name: str) -> float:
    if value < 0:
        raise ValueError(f"{name} must not be negative")
    return value


def _optional_non_negative(value: int | None, name: str) -> int | None:
    if value is None:
        return None
    return int(_non_negative(value, name))
