"""Offline keyword-rule estimator for calories, protein and cost.

Every rule belongs to an exclusion group. Within a group only the matching
rule with the highest priority contributes, so "greek yogurt" replaces the
generic "yogurt" rule instead of adding to it. Groups are independent and
their contributions add up. Restaurant rules share one group and stack with
ingredient groups: "chipotle bowl with chicken" counts the whole Chipotle
meal plus the chicken.
"""

import re
from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal
from typing import Literal

from macro_money.domain.entries import NutritionEstimate
from macro_money.rounding import round_money, round_whole, to_decimal

QuantityMode = Literal["one", "count", "pair"]

DEFAULT_CALORIES = 200
DEFAULT_PROTEIN = 10
DEFAULT_COST = 2.0


@dataclass(frozen=True)
class FoodRule:
    """Keyword rule with per-unit calories, protein and cost."""

    name: str
    pattern: re.Pattern[str]
    calories: float
    protein: float
    cost: float
    group: str | None = None
    priority: int = 0
    quantity: QuantityMode = "one"

    @property
    def exclusion_group(self) -> str:
        """Group name; ungrouped rules form a group of their own."""
        return self.group or self.name

    def units(self, text: str) -> int:
        """Return matched units in lowercased text, 0 when the rule misses."""
        match = self.pattern.search(text)
        if match is None:
            return 0
        if self.quantity == "count":
            raw = match.groupdict().get("count")
            count = int(raw) if raw else 0
            return count or 1
        if self.quantity == "pair":
            return 2 if "2" in text else 1
        return 1


def food_rule(  # noqa: PLR0913
    name: str,
    *phrases: str,
    calories: float,
    protein: float,
    cost: float,
    group: str | None = None,
    priority: int = 0,
    quantity: QuantityMode = "one",
) -> FoodRule:
    """Build a rule that fires when any phrase occurs in the text."""
    pattern = re.compile("|".join(re.escape(phrase) for phrase in phrases))
    return FoodRule(
        name=name,
        pattern=pattern,
        calories=calories,
        protein=protein,
        cost=cost,
        group=group,
        priority=priority,
        quantity=quantity,
    )


DEFAULT_RULES: tuple[FoodRule, ...] = (
    FoodRule(
        name="eggs",
        pattern=re.compile(r"(?:(?P<count>\d+)\s*)?eggs?"),
        calories=72,
        protein=6,
        cost=0.35,
        quantity="count",
    ),
    food_rule(
        "chicken breast",
        "chicken breast",
        calories=165,
        protein=31,
        cost=1.50,
        group="chicken",
        priority=10,
        quantity="pair",
    ),
    food_rule(
        "chicken",
        "chicken",
        calories=200,
        protein=27,
        cost=1.25,
        group="chicken",
        quantity="pair",
    ),
    food_rule("tuna", "tuna", calories=100, protein=22, cost=1.00, quantity="pair"),
    food_rule(
        "greek yogurt",
        "greek yogurt",
        calories=100,
        protein=17,
        cost=1.00,
        group="yogurt",
        priority=10,
    ),
    food_rule("yogurt", "yogurt", calories=150, protein=6, cost=0.75, group="yogurt"),
    food_rule(
        "protein supplement",
        "protein shake",
        "protein powder",
        "whey",
        calories=120,
        protein=25,
        cost=0.80,
    ),
    food_rule("milk", "milk", calories=150, protein=8, cost=0.50),
    food_rule(
        "brown rice",
        "brown rice",
        calories=215,
        protein=5,
        cost=0.35,
        group="rice",
        priority=10,
    ),
    food_rule("rice", "rice", calories=200, protein=4, cost=0.30, group="rice"),
    food_rule("legumes", "beans", "lentils", calories=225, protein=15, cost=0.50),
    food_rule("peanut butter", "peanut butter", calories=190, protein=7, cost=0.40),
    food_rule("cottage cheese", "cottage cheese", calories=220, protein=28, cost=2.00),
    food_rule("tofu", "tofu", calories=180, protein=20, cost=1.00),
    food_rule("sardines", "sardine", calories=190, protein=23, cost=1.50),
    food_rule("bread", "toast", "bread", calories=80, protein=3, cost=0.15),
    food_rule("oats", "oatmeal", "oats", calories=150, protein=5, cost=0.25),
    food_rule("banana", "banana", calories=105, protein=1, cost=0.25),
    food_rule(
        "chipotle",
        "chipotle",
        calories=850,
        protein=45,
        cost=11.50,
        group="restaurant",
        priority=60,
    ),
    food_rule(
        "chick-fil-a",
        "chick-fil-a",
        "chick fil a",
        "chickfila",
        calories=800,
        protein=40,
        cost=10.00,
        group="restaurant",
        priority=50,
    ),
    food_rule(
        "panda express",
        "panda express",
        calories=900,
        protein=30,
        cost=10.50,
        group="restaurant",
        priority=40,
    ),
    food_rule(
        "mcdonalds",
        "mcdonald",
        "big mac",
        calories=1000,
        protein=35,
        cost=9.00,
        group="restaurant",
        priority=30,
    ),
    food_rule(
        "taco bell",
        "taco bell",
        calories=700,
        protein=25,
        cost=8.00,
        group="restaurant",
        priority=20,
    ),
    food_rule(
        "subway",
        "subway",
        calories=600,
        protein=30,
        cost=10.00,
        group="restaurant",
        priority=10,
    ),
)


def matching_rules(
    text: str, rules: Sequence[FoodRule] = DEFAULT_RULES
) -> list[tuple[FoodRule, int]]:
    """Return the contributing rule and unit count for each exclusion group."""
    lowered = text.strip().lower()
    winners: dict[str, tuple[FoodRule, int]] = {}
    for rule in rules:
        units = rule.units(lowered)
        if not units:
            continue
        current = winners.get(rule.exclusion_group)
        if current is None or (rule.priority, rule.name) > (
            current[0].priority,
            current[0].name,
        ):
            winners[rule.exclusion_group] = (rule, units)
    return sorted(winners.values(), key=lambda pair: pair[0].name)


def estimate_nutrition(
    text: str, rules: Sequence[FoodRule] = DEFAULT_RULES
) -> NutritionEstimate:
    """Estimate calories, protein and cost of a free-text meal description."""
    calories = Decimal(0)
    protein = Decimal(0)
    cost = Decimal(0)
    for rule, units in matching_rules(text, rules):
        calories += to_decimal(rule.calories) * units
        protein += to_decimal(rule.protein) * units
        cost += to_decimal(rule.cost) * units

    description = text.strip()
    if calories == 0:
        return NutritionEstimate(
            description=description,
            calories=DEFAULT_CALORIES,
            protein=DEFAULT_PROTEIN,
            cost=DEFAULT_COST,
            source="local",
        )
    return NutritionEstimate(
        description=description,
        calories=round_whole(calories),
        protein=round_whole(protein),
        cost=round_money(cost),
        source="local",
    )
