"""Food waste tracking service."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Protocol
from uuid import UUID
from zoneinfo import ZoneInfo

from macro_money.domain.pantry import WasteLog
from macro_money.errors import PersistenceError
from macro_money.rounding import round_money, to_decimal, truncate_money
from macro_money.services.aggregation import day_bounds, utc_now
from macro_money.services.pantry import PantryService

_logger = logging.getLogger(__name__)

RECENT_WASTE_LIMIT = 50


class WasteLogRepository(Protocol):
    """Persistence interface for waste logs."""

    def list_waste_logs(self, user_id: UUID, limit: int) -> list[WasteLog]:
        """Return recent waste logs, newest first."""

    def list_waste_logs_between(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[WasteLog]:
        """Return waste logs with start <= created_at < end."""

    def create_waste_log(self, user_id: UUID, payload: dict[str, object]) -> WasteLog:
        """Create a waste log and return it."""

    def delete_waste_log(self, user_id: UUID, log_id: UUID) -> None:
        """Delete a waste log."""


@dataclass
class WasteService:
    """Record thrown-away food and the money it cost."""

    repository: WasteLogRepository
    pantry_service: PantryService
    clock: Callable[[], datetime] = utc_now

    def list_logs(
        self, user_id: UUID, limit: int = RECENT_WASTE_LIMIT
    ) -> list[WasteLog]:
        """Return recent waste logs."""
        return self.repository.list_waste_logs(user_id, limit)

    def log_waste(  # noqa: PLR0913
        self,
        user_id: UUID,
        *,
        amount_wasted: float,
        item_name: str | None = None,
        pantry_item_id: UUID | None = None,
        cost_lost: float | None = None,
        waste_reason: str | None = None,
        is_expired: bool = False,
    ) -> WasteLog:
        """Log waste; pantry items lose the wasted servings."""
        if amount_wasted <= 0:
            raise ValueError("Amount wasted must be positive")
        name = (item_name or "").strip()
        item = None
        if pantry_item_id is not None:
            item = self.pantry_service.get_item(user_id, pantry_item_id)
            if item is None:
                raise ValueError("Unknown pantry item")
            name = name or item.name
            if cost_lost is None:
                cost_lost = item.cost_per_serving * amount_wasted
        if not name:
            raise ValueError("Item name is required")
        if cost_lost is not None and cost_lost < 0:
            raise ValueError("Cost lost must not be negative")
        payload: dict[str, object] = {
            "pantry_item_id": str(pantry_item_id) if pantry_item_id else None,
            "item_name": name,
            "amount_wasted": amount_wasted,
            "cost_lost": truncate_money(cost_lost or 0.0),
            "waste_reason": waste_reason,
            "is_expired": is_expired,
            "created_at": self.clock().isoformat(),
        }
        if item is None:
            return self.repository.create_waste_log(user_id, payload)

        self.pantry_service.remove_servings(user_id, item, amount_wasted)
        try:
            return self.repository.create_waste_log(user_id, payload)
        except Exception as exc:
            _logger.exception("Failed to save waste log for pantry item %s", item.id)
            self.pantry_service.restore_servings(user_id, item)
            raise PersistenceError(
                "Could not save the waste log. Please retry."
            ) from exc

    def delete_log(self, user_id: UUID, log_id: UUID) -> None:
        """Delete a waste log."""
        self.repository.delete_waste_log(user_id, log_id)

    def total_waste_cost(self, user_id: UUID) -> float:
        """Return the money lost across recent waste logs."""
        return _sum_cost(self.list_logs(user_id))

    def waste_cost_on(self, user_id: UUID, day: date, timezone_name: str) -> float:
        """Return the money lost on one local date."""
        start, end = day_bounds(day, ZoneInfo(timezone_name))
        return _sum_cost(self.repository.list_waste_logs_between(user_id, start, end))


def _sum_cost(logs: list[WasteLog]) -> float:
    total = Decimal(0)
    for log in logs:
        total += to_decimal(log.cost_lost)
    return round_money(total)
