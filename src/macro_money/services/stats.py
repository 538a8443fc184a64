"""Statistics service for food logs."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import Decimal
from uuid import UUID
from zoneinfo import ZoneInfo

from macro_money.domain.entries import FoodLogEntry
from macro_money.domain.history import DailyTotals, DayAggregate
from macro_money.rounding import round_money, to_decimal
from macro_money.services.aggregation import (
    day_bounds,
    day_totals,
    local_date,
    utc_now,
)
from macro_money.services.food_logs import FoodLogService
from macro_money.services.rollover import HistoryRepository

DECEMBER = 12


@dataclass
class PeriodSummary:
    """Aggregated totals for a period."""

    daily: list[DailyTotals]
    avg_calories: float
    avg_protein: float
    avg_cost: float


@dataclass
class StatsService:
    """Service for computing user stats by timezone."""

    food_log_service: FoodLogService
    history_repository: HistoryRepository
    clock: Callable[[], datetime] = utc_now

    def get_today(self, user_id: UUID, timezone_name: str) -> DailyTotals:
        """Return today's totals in the user's timezone."""
        totals, _ = self.get_today_with_entries(user_id, timezone_name)
        return totals

    def get_today_with_entries(
        self, user_id: UUID, timezone_name: str
    ) -> tuple[DailyTotals, tuple[FoodLogEntry, ...]]:
        """Return today's totals and entries."""
        tz = ZoneInfo(timezone_name)
        today = local_date(self.clock(), tz)
        entries = self.food_log_service.today_entries(user_id, timezone_name)
        return day_totals(entries, today, tz), entries

    def get_week(self, user_id: UUID, timezone_name: str) -> PeriodSummary:
        """Return week-to-date totals and averages."""
        tz = ZoneInfo(timezone_name)
        today = local_date(self.clock(), tz)
        start = today - timedelta(days=today.weekday())
        return self._summarize(user_id, start, start + timedelta(days=7), tz)

    def get_month(self, user_id: UUID, timezone_name: str) -> PeriodSummary:
        """Return month-to-date totals and averages."""
        tz = ZoneInfo(timezone_name)
        start = local_date(self.clock(), tz).replace(day=1)
        if start.month == DECEMBER:
            end = start.replace(year=start.year + 1, month=1)
        else:
            end = start.replace(month=start.month + 1)
        return self._summarize(user_id, start, end, tz)

    def get_history(self, user_id: UUID, limit: int = 60) -> list[DayAggregate]:
        """Return archived days, newest first."""
        return self.history_repository.list_days(user_id, limit)

    def _summarize(
        self, user_id: UUID, start: date, end: date, tz: ZoneInfo
    ) -> PeriodSummary:
        range_start, _ = day_bounds(start, tz)
        range_end, _ = day_bounds(end, tz)
        entries = tuple(
            self.food_log_service.list_entries(user_id, range_start, range_end)
        )
        daily = [
            day_totals(entries, start + timedelta(days=offset), tz)
            for offset in range((end - start).days)
        ]
        return _period_summary(daily)


def _period_summary(daily: list[DailyTotals]) -> PeriodSummary:
    total_days = max(len(daily), 1)
    calories = sum(day.calories for day in daily)
    protein = sum(day.protein for day in daily)
    cost = sum((to_decimal(day.cost) for day in daily), Decimal(0))
    return PeriodSummary(
        daily=daily,
        avg_calories=calories / total_days,
        avg_protein=protein / total_days,
        avg_cost=round_money(cost / total_days),
    )
