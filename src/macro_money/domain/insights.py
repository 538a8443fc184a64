"""Domain models for spending and pantry insights."""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class EfficiencyPoint:
    """Cost per 100 g of protein on one day, None without data."""

    day: date
    cost_per_100g_protein: float | None


@dataclass(frozen=True)
class PantryRunway:
    days: int
    percentage: float


@dataclass(frozen=True)
class ValueFood:
    name: str
    cost_per_gram_protein: float
    protein_per_serving: int


@dataclass(frozen=True)
class Insights:
    efficiency: list[EfficiencyPoint]
    pantry_runway: PantryRunway
    top_value_foods: list[ValueFood]
