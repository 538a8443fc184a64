"""Tests for spending and pantry insights."""

from datetime import date, timedelta
from uuid import uuid4

from macro_money.domain.history import DayAggregate
from macro_money.domain.pantry import PantryItem
from macro_money.services.insights import (
    efficiency_series,
    pantry_runway,
    top_value_foods,
)

TODAY = date(2024, 5, 14)


def _day(
    day: date, calories: int = 2000, protein: int = 150, cost: float = 15.0
) -> DayAggregate:
    return DayAggregate(day, calories, protein, cost, 2000, 150, 15.0)


def _item(name: str, **kwargs: float) -> PantryItem:
    values = {
        "total_cost": 10.0,
        "total_servings": 10,
        "current_servings": 10,
        "protein_per_serving": 10,
        "calories_per_serving": 100,
    }
    values.update(kwargs)
    return PantryItem(id=uuid4(), name=name, **values)


def test_efficiency_covers_fourteen_days() -> None:
    history = [
        _day(TODAY - timedelta(days=1), protein=120, cost=9.0),
        _day(TODAY - timedelta(days=2), protein=0, cost=5.0),
        _day(TODAY - timedelta(days=20)),
    ]

    points = efficiency_series(history, TODAY)

    assert len(points) == 14
    assert points[0].day == TODAY - timedelta(days=13)
    assert points[-1].day == TODAY
    assert points[-2].cost_per_100g_protein == 7.5
    assert points[-3].cost_per_100g_protein is None
    assert [point for point in points if point.cost_per_100g_protein] == [points[-2]]


def test_pantry_runway_uses_recent_average() -> None:
    history = [_day(TODAY - timedelta(days=offset)) for offset in range(1, 4)]
    items = [_item("rice", calories_per_serving=2000, current_servings=5)]

    runway = pantry_runway(items, history)

    assert runway.days == 5
    assert runway.percentage == 5 / 14 * 100


def test_pantry_runway_caps_percentage() -> None:
    history = [_day(TODAY, calories=100)]
    items = [_item("oats", calories_per_serving=150, current_servings=30)]

    runway = pantry_runway(items, history)

    assert runway.days == 45
    assert runway.percentage == 100.0


def test_pantry_runway_without_history_is_zero() -> None:
    runway = pantry_runway([_item("oats")], [])

    assert (runway.days, runway.percentage) == (0, 0.0)


def test_top_value_foods_ranks_cost_per_gram_protein() -> None:
    items = [
        _item("steak", total_cost=30.0, total_servings=3, protein_per_serving=50),
        _item("lentils", total_cost=2.0, total_servings=8, protein_per_serving=18),
        _item("candy", protein_per_serving=0),
        _item("tuna", total_cost=6.0, total_servings=6, protein_per_serving=22),
    ]

    ranked = top_value_foods(items)

    assert [food.name for food in ranked] == ["lentils", "tuna", "steak"]


def test_top_value_foods_keeps_five() -> None:
    items = [_item(f"food {index}", total_cost=index + 1.0) for index in range(8)]

    assert len(top_value_foods(items)) == 5


def test_get_insights_ignores_out_of_stock_items(
    container, user_id, history_repository
) -> None:
    history_repository.days[(user_id, TODAY - timedelta(days=1))] = _day(
        TODAY - timedelta(days=1), calories=1000
    )
    rice = container.pantry_service.add_item(
        user_id,
        name="Rice",
        total_cost=5.0,
        total_servings=10,
        protein_per_serving=4,
        calories_per_serving=200,
    )
    beans = container.pantry_service.add_item(
        user_id,
        name="Beans",
        total_cost=1.0,
        total_servings=1,
        protein_per_serving=15,
        calories_per_serving=225,
    )
    container.pantry_service.consume(user_id, beans.id, 1)

    insights = container.insights_service.get_insights(user_id, "UTC")

    assert insights.pantry_runway.days == 2
    assert [food.name for food in insights.top_value_foods] == [rice.name]
    assert insights.efficiency[-2].cost_per_100g_protein == 10.0
