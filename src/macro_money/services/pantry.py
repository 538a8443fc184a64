"""Household pantry service."""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol
from uuid import UUID

from macro_money.domain.entries import FoodLogEntry
from macro_money.domain.pantry import PantryItem
from macro_money.errors import PersistenceError
from macro_money.rounding import round_money, round_whole, truncate_money
from macro_money.services.food_logs import FoodLogService

_logger = logging.getLogger(__name__)


class PantryRepository(Protocol):
    """Persistence interface for pantry items."""

    def list_items(self, user_id: UUID) -> list[PantryItem]:
        """Return all pantry items of a user, newest first."""

    def get_item(self, user_id: UUID, item_id: UUID) -> PantryItem | None:
        """Return a pantry item by id."""

    def create_item(self, user_id: UUID, payload: dict[str, object]) -> PantryItem:
        """Create a pantry item and return it."""

    def update_item(
        self, user_id: UUID, item_id: UUID, payload: dict[str, object]
    ) -> PantryItem | None:
        """Update a pantry item and return it."""

    def delete_item(self, user_id: UUID, item_id: UUID) -> None:
        """Delete a pantry item."""


@dataclass
class PantryService:
    """Track pantry stock and log meals eaten from it."""

    repository: PantryRepository
    food_log_service: FoodLogService

    def list_items(self, user_id: UUID) -> list[PantryItem]:
        """Return in-stock items first, then out-of-stock ones."""
        items = self.repository.list_items(user_id)
        return sorted(items, key=lambda item: item.is_out_of_stock)

    def get_item(self, user_id: UUID, item_id: UUID) -> PantryItem | None:
        """Return a pantry item by id."""
        return self.repository.get_item(user_id, item_id)

    def add_item(  # noqa: PLR0913
        self,
        user_id: UUID,
        *,
        name: str,
        total_cost: float,
        total_servings: float,
        protein_per_serving: int,
        calories_per_serving: int,
        serving_unit: str = "serving",
        expires_at: datetime | None = None,
    ) -> PantryItem:
        """Stock a new item with all of its servings available."""
        payload = _item_payload(
            name=name,
            total_cost=total_cost,
            total_servings=total_servings,
            protein_per_serving=protein_per_serving,
            calories_per_serving=calories_per_serving,
        )
        payload["serving_unit"] = serving_unit
        payload["expires_at"] = expires_at.isoformat() if expires_at else None
        payload["is_out_of_stock"] = False
        return self.repository.create_item(user_id, payload)

    def update_item(  # noqa: PLR0913
        self,
        user_id: UUID,
        item_id: UUID,
        *,
        name: str,
        total_cost: float,
        total_servings: float,
        protein_per_serving: int,
        calories_per_serving: int,
    ) -> PantryItem | None:
        """Replace an item's details; it is refilled to the new total and in stock."""
        payload = _item_payload(
            name=name,
            total_cost=total_cost,
            total_servings=total_servings,
            protein_per_serving=protein_per_serving,
            calories_per_serving=calories_per_serving,
        )
        payload["is_out_of_stock"] = False
        return self.repository.update_item(user_id, item_id, payload)

    def delete_item(self, user_id: UUID, item_id: UUID) -> bool:
        """Delete an item, returning False when it does not exist."""
        if self.repository.get_item(user_id, item_id) is None:
            return False
        self.repository.delete_item(user_id, item_id)
        return True

    def restock(self, user_id: UUID, item_id: UUID) -> PantryItem | None:
        """Refill an item to its full servings and mark it in stock."""
        item = self.repository.get_item(user_id, item_id)
        if item is None:
            return None
        return self.repository.update_item(
            user_id,
            item_id,
            {"current_servings": item.total_servings, "is_out_of_stock": False},
        )

    def remove_servings(
        self, user_id: UUID, item: PantryItem, servings: float
    ) -> PantryItem | None:
        """Take servings out of stock, marking the item out at zero."""
        if servings <= 0:
            raise ValueError("Servings must be positive")
        if item.is_out_of_stock or servings > item.current_servings:
            raise ValueError(
                f"Only {item.current_servings:g} servings of {item.name} left"
            )
        remaining = item.current_servings - servings
        return self.repository.update_item(
            user_id,
            item.id,
            {"current_servings": remaining, "is_out_of_stock": remaining <= 0},
        )

    def consume(
        self, user_id: UUID, item_id: UUID, servings: float
    ) -> tuple[PantryItem, FoodLogEntry] | None:
        """Log servings eaten from the pantry as a food entry."""
        item = self.repository.get_item(user_id, item_id)
        if item is None:
            return None
        updated = self.remove_servings(user_id, item, servings)
        try:
            entry = self.food_log_service.log_entry(
                user_id,
                description=f"{item.name} ({servings:g} {item.serving_unit})",
                calories=round_whole(item.calories_per_serving * servings),
                protein=round_whole(item.protein_per_serving * servings),
                cost=round_money(item.cost_per_serving * servings),
                pantry_item_id=item.id,
                amount_consumed=servings,
            )
        except PersistenceError:
            self.restore_servings(user_id, item)
            raise
        return updated or item, entry

    def restore_servings(self, user_id: UUID, item: PantryItem) -> None:
        """Put an item back to the stock level it had before a failed write."""
        _logger.warning("Restoring pantry servings for %s", item.id)
        self.repository.update_item(
            user_id,
            item.id,
            {
                "current_servings": item.current_servings,
                "is_out_of_stock": item.is_out_of_stock,
            },
        )


def _item_payload(
    *,
    name: str,
    total_cost: float,
    total_servings: float,
    protein_per_serving: int,
    calories_per_serving: int,
) -> dict[str, object]:
    cleaned = name.strip()
    if not cleaned:
        raise ValueError("Item name is required")
    if total_servings <= 0:
        raise ValueError("Total servings must be positive")
    if min(total_cost, protein_per_serving, calories_per_serving) < 0:
        raise ValueError("Cost and nutrition values must not be negative")
    return {
        "name": cleaned,
        "total_cost": truncate_money(total_cost),
        "total_servings": total_servings,
        "current_servings": total_servings,
        "protein_per_serving": int(protein_per_serving),
        "calories_per_serving": int(calories_per_serving),
    }
