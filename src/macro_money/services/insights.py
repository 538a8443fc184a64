"""Spending efficiency and pantry insights."""

import math
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from uuid import UUID
from zoneinfo import ZoneInfo

from macro_money.domain.history import DayAggregate
from macro_money.domain.insights import (
    EfficiencyPoint,
    Insights,
    PantryRunway,
    ValueFood,
)
from macro_money.domain.pantry import PantryItem
from macro_money.rounding import round_money
from macro_money.services.aggregation import local_date, utc_now
from macro_money.services.pantry import PantryService
from macro_money.services.rollover import HistoryRepository

WINDOW_DAYS = 14
TOP_VALUE_FOODS = 5


@dataclass
class InsightsService:
    """Derive trends from archived days and pantry stock."""

    history_repository: HistoryRepository
    pantry_service: PantryService
    clock: Callable[[], datetime] = utc_now

    def get_insights(self, user_id: UUID, timezone_name: str) -> Insights:
        history = self.history_repository.list_days(user_id, WINDOW_DAYS)
        in_stock = [
            item
            for item in self.pantry_service.list_items(user_id)
            if not item.is_out_of_stock
        ]
        today = local_date(self.clock(), ZoneInfo(timezone_name))
        return Insights(
            efficiency=efficiency_series(history, today),
            pantry_runway=pantry_runway(in_stock, history),
            top_value_foods=top_value_foods(in_stock),
        )


def efficiency_series(
    history: list[DayAggregate], today: date
) -> list[EfficiencyPoint]:
    """Return cost per 100 g protein for the last 14 days, oldest first."""
    by_date = {day.date: day for day in history}
    points = []
    for offset in range(WINDOW_DAYS - 1, -1, -1):
        day = today - timedelta(days=offset)
        archived = by_date.get(day)
        value = None
        if archived is not None and archived.protein > 0:
            value = round_money(archived.cost / (archived.protein / 100))
        points.append(EfficiencyPoint(day=day, cost_per_100g_protein=value))
    return points


def pantry_runway(
    items: list[PantryItem], history: list[DayAggregate]
) -> PantryRunway:
    """Return how many days the pantry's calories would last."""
    recent = history[:WINDOW_DAYS]
    if not recent:
        return PantryRunway(days=0, percentage=0.0)
    average = sum(day.calories for day in recent) / len(recent)
    if average == 0:
        return PantryRunway(days=0, percentage=0.0)
    stocked = sum(item.calories_per_serving * item.current_servings for item in items)
    days = math.floor(stocked / average)
    return PantryRunway(days=days, percentage=min(100.0, days / WINDOW_DAYS * 100))


def top_value_foods(items: list[PantryItem]) -> list[ValueFood]:
    """Rank items by cost per gram of protein, cheapest first."""
    ranked = [
        ValueFood(
            name=item.name,
            cost_per_gram_protein=item.cost_per_serving / item.protein_per_serving,
            protein_per_serving=item.protein_per_serving,
        )
        for item in items
        if item.protein_per_serving > 0 and item.total_servings > 0
    ]
    ranked.sort(key=lambda food: food.cost_per_gram_protein)
    return ranked[:TOP_VALUE_FOODS]
