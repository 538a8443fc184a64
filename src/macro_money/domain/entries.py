"""Domain models for food log entries and estimates."""

from dataclasses import dataclass, replace
from datetime import datetime
from uuid import UUID

MAX_DESCRIPTION_LENGTH = 500


@dataclass(frozen=True)
class NutritionEstimate:
    """Unconfirmed nutrition and cost guess for a food description."""

    description: str
    calories: int
    protein: int
    cost: float
    source: str = "local"

    def with_overrides(
        self,
        calories: int | None = None,
        protein: int | None = None,
        cost: float | None = None,
    ) -> "NutritionEstimate":
        """Return a copy with user-supplied values taken literally."""
        return replace(
            self,
            calories=self.calories if calories is None else calories,
            protein=self.protein if protein is None else protein,
            cost=self.cost if cost is None else cost,
        )


@dataclass(frozen=True)
class FoodLogEntry:
    """Confirmed meal entry owned by a single user."""

    id: UUID
    description: str
    calories: int
    protein: int
    cost: float
    timestamp: datetime
    pantry_item_id: UUID | None = None
    amount_consumed: float | None = None


@dataclass(frozen=True)
class EntryChanges:
    """Fields a user may change on a confirmed entry."""

    description: str | None = None
    calories: int | None = None
    protein: int | None = None
    cost: float | None = None

    def apply(self, entry: FoodLogEntry) -> FoodLogEntry:
        """Return the entry with these changes; the timestamp never changes."""
        return replace(
            entry,
            description=entry.description
            if self.description is None
            else self.description,
            calories=entry.calories if self.calories is None else self.calories,
            protein=entry.protein if self.protein is None else self.protein,
            cost=entry.cost if self.cost is None else self.cost,
        )


def normalize_description(text: str) -> str:
    """Trim a food description and check its length."""
    cleaned = text.strip()
    if not cleaned:
        raise ValueError("Food description cannot be empty")
    if len(cleaned) > MAX_DESCRIPTION_LENGTH:
        raise ValueError(
            f"Food description too long (max {MAX_DESCRIPTION_LENGTH} characters)"
        )
    return cleaned
