"""Domain models for daily totals and archived history."""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class DailyTotals:
    """Summed nutrition and spending for one local calendar day."""

    day: date
    calories: int
    protein: int
    cost: float


@dataclass(frozen=True)
class DayAggregate:
    """Archived day compared against the goals in effect when it closed."""

    date: date
    calories: int
    protein: int
    cost: float
    goal_calories: int
    goal_protein: int
    goal_budget: float
    waste_cost: float = 0.0
