"""Local calendar-day aggregation of food log entries."""

from collections.abc import Iterable
from datetime import UTC, date, datetime, time, timedelta
from decimal import Decimal
from zoneinfo import ZoneInfo

from macro_money.domain.entries import FoodLogEntry
from macro_money.domain.goals import Goals
from macro_money.domain.history import DailyTotals, DayAggregate
from macro_money.rounding import round_money, to_decimal


def utc_now() -> datetime:
    """Return the current instant in UTC."""
    return datetime.now(tz=UTC)


def local_date(timestamp: datetime, tz: ZoneInfo) -> date:
    """Return the calendar date of an instant in the given timezone."""
    return timestamp.astimezone(tz).date()


def day_bounds(day: date, tz: ZoneInfo) -> tuple[datetime, datetime]:
    """Return the UTC instants where a local day starts and the next one starts."""
    start = datetime.combine(day, time.min, tzinfo=tz)
    end = datetime.combine(day + timedelta(days=1), time.min, tzinfo=tz)
    return start.astimezone(UTC), end.astimezone(UTC)


def day_totals(
    entries: Iterable[FoodLogEntry], day: date, tz: ZoneInfo
) -> DailyTotals:
    """Sum entries whose timestamp falls on the given local date."""
    snapshot = tuple(entries)
    calories = 0
    protein = 0
    cost = Decimal(0)
    for entry in snapshot:
        if local_date(entry.timestamp, tz) != day:
            continue
        calories += entry.calories
        protein += entry.protein
        cost += to_decimal(entry.cost)
    return DailyTotals(
        day=day, calories=calories, protein=protein, cost=round_money(cost)
    )


def bucket_by_day(
    entries: Iterable[FoodLogEntry], tz: ZoneInfo
) -> dict[date, list[FoodLogEntry]]:
    """Group entries by local date, oldest day first."""
    buckets: dict[date, list[FoodLogEntry]] = {}
    for entry in sorted(entries, key=lambda item: item.timestamp):
        buckets.setdefault(local_date(entry.timestamp, tz), []).append(entry)
    return dict(sorted(buckets.items()))


def elapsed_dates(last_seen: date, today: date) -> list[date]:
    """Return every date from last_seen up to, but excluding, today."""
    days = []
    current = last_seen
    while current < today:
        days.append(current)
        current += timedelta(days=1)
    return days


def build_day_aggregate(
    day: date,
    entries: Iterable[FoodLogEntry],
    goals: Goals,
    tz: ZoneInfo,
    waste_cost: float = 0.0,
) -> DayAggregate:
    """Freeze a day's totals next to the goals in effect right now."""
    totals = day_totals(entries, day, tz)
    return DayAggregate(
        date=day,
        calories=totals.calories,
        protein=totals.protein,
        cost=totals.cost,
        goal_calories=goals.calories,
        goal_protein=goals.protein,
        goal_budget=goals.budget,
        waste_cost=round_money(waste_cost),
    )
