"""Domain models for goals and user preferences."""

from dataclasses import dataclass
from datetime import date

DEFAULT_CALORIES_GOAL = 2000
DEFAULT_PROTEIN_GOAL = 150
DEFAULT_BUDGET_GOAL = 15.0


@dataclass(frozen=True)
class Goals:
    """Daily targets for calories, protein and spending."""

    calories: int = DEFAULT_CALORIES_GOAL
    protein: int = DEFAULT_PROTEIN_GOAL
    budget: float = DEFAULT_BUDGET_GOAL


@dataclass(frozen=True)
class UserPreferences:
    """Per-user application preferences."""

    notifications: bool = False
    dark_mode: bool = True
    timezone: str | None = None
    last_seen_date: date | None = None
