"""Domain models for the household pantry."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class PantryItem:
    """Stocked food item tracked by servings."""

    id: UUID
    name: str
    total_cost: float
    total_servings: float
    current_servings: float
    protein_per_serving: int
    calories_per_serving: int
    serving_unit: str = "serving"
    is_out_of_stock: bool = False
    expires_at: datetime | None = None

    @property
    def cost_per_serving(self) -> float:
        """Purchase cost divided across all servings."""
        if self.total_servings <= 0:
            return 0.0
        return self.total_cost / self.total_servings


@dataclass(frozen=True)
class WasteLog:
    """Food thrown away, with the money lost."""

    id: UUID
    item_name: str
    amount_wasted: float
    cost_lost: float
    created_at: datetime
    pantry_item_id: UUID | None = None
    waste_reason: str | None = None
    is_expired: bool = False
