"""Optimistic entry mutations that roll back when persistence fails."""

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol
from uuid import UUID

from macro_money.domain.entries import FoodLogEntry
from macro_money.errors import PersistenceError
from macro_money.services.ledger import FoodLogLedger

if TYPE_CHECKING:
    from macro_money.services.food_logs import FoodLogRepository

_logger = logging.getLogger(__name__)


class EntryMutation(Protocol):
    """Change applied to the ledger first and persisted second."""

    def apply(self, ledger: FoodLogLedger) -> None:
        """Apply the change locally."""

    def revert(self, ledger: FoodLogLedger) -> None:
        """Undo the local change."""

    def persist(self, repository: "FoodLogRepository") -> None:
        """Write the change to the repository."""


@dataclass
class AddEntry:
    """Log a new entry."""

    user_id: UUID
    entry: FoodLogEntry

    def apply(self, ledger: FoodLogLedger) -> None:
        ledger.insert(self.user_id, self.entry)

    def revert(self, ledger: FoodLogLedger) -> None:
        ledger.remove(self.user_id, self.entry.id)

    def persist(self, repository: "FoodLogRepository") -> None:
        repository.create_entry(self.user_id, self.entry)


@dataclass
class EditEntry:
    """Replace an entry's editable fields."""

    user_id: UUID
    before: FoodLogEntry
    after: FoodLogEntry

    def apply(self, ledger: FoodLogLedger) -> None:
        ledger.replace(self.user_id, self.after)

    def revert(self, ledger: FoodLogLedger) -> None:
        ledger.replace(self.user_id, self.before)

    def persist(self, repository: "FoodLogRepository") -> None:
        repository.update_entry(self.user_id, self.after)


@dataclass
class DeleteEntry:
    """Delete one entry."""

    user_id: UUID
    entry: FoodLogEntry
    _position: int | None = field(default=None, init=False)

    def apply(self, ledger: FoodLogLedger) -> None:
        self._position = ledger.remove(self.user_id, self.entry.id)

    def revert(self, ledger: FoodLogLedger) -> None:
        if self._position is not None:
            ledger.insert(self.user_id, self.entry, self._position)

    def persist(self, repository: "FoodLogRepository") -> None:
        repository.delete_entry(self.user_id, self.entry.id)


@dataclass
class ClearEntries:
    """Delete every entry of a user."""

    user_id: UUID
    _removed: list[FoodLogEntry] = field(default_factory=list, init=False)

    def apply(self, ledger: FoodLogLedger) -> None:
        self._removed = ledger.clear(self.user_id)

    def revert(self, ledger: FoodLogLedger) -> None:
        ledger.restore(self.user_id, self._removed)

    def persist(self, repository: "FoodLogRepository") -> None:
        repository.delete_all_entries(self.user_id)


def run_mutation(
    mutation: EntryMutation,
    ledger: FoodLogLedger,
    repository: "FoodLogRepository",
) -> None:
    """Apply a mutation locally, persist it, and undo it if the write fails."""
    mutation.apply(ledger)
    try:
        mutation.persist(repository)
    except Exception as exc:
        mutation.revert(ledger)
        _logger.exception(
            "Persisting %s failed; local change rolled back", type(mutation).__name__
        )
        raise PersistenceError("Could not save your change. Please retry.") from exc
