"""Tests for stats service."""

from datetime import UTC, date, datetime

from macro_money.domain.history import DayAggregate
from tests.conftest import make_entry


def test_get_today_aggregates_by_timezone(
    container, user_id, food_log_repository
) -> None:
    food_log_repository.add(
        user_id, make_entry(datetime(2024, 5, 14, 11, tzinfo=UTC), calories=500)
    )
    food_log_repository.add(
        user_id, make_entry(datetime(2024, 5, 13, 11, tzinfo=UTC), calories=200)
    )

    totals = container.stats_service.get_today(user_id, "UTC")

    assert totals.day == date(2024, 5, 14)
    assert totals.calories == 500
    assert totals.protein == 18


def test_get_today_with_entries_returns_newest_first(
    container, user_id, food_log_repository
) -> None:
    first = make_entry(datetime(2024, 5, 14, 7, tzinfo=UTC))
    second = make_entry(datetime(2024, 5, 14, 9, tzinfo=UTC))
    food_log_repository.add(user_id, first)
    food_log_repository.add(user_id, second)

    totals, entries = container.stats_service.get_today_with_entries(user_id, "UTC")

    assert totals.calories == 432
    assert entries == (second, first)


def test_get_week_covers_monday_to_sunday(
    container, user_id, food_log_repository
) -> None:
    food_log_repository.add(
        user_id,
        make_entry(datetime(2024, 5, 13, 9, tzinfo=UTC), calories=700, cost=7.0),
    )
    food_log_repository.add(
        user_id, make_entry(datetime(2024, 5, 12, 9, tzinfo=UTC), calories=999)
    )

    summary = container.stats_service.get_week(user_id, "UTC")

    assert [day.day for day in summary.daily][0] == date(2024, 5, 13)
    assert len(summary.daily) == 7
    assert summary.avg_calories == 100
    assert summary.avg_cost == 1.0


def test_get_month_has_one_row_per_day(container, user_id, food_log_repository) -> None:
    food_log_repository.add(
        user_id, make_entry(datetime(2024, 5, 1, 9, tzinfo=UTC), calories=310)
    )

    summary = container.stats_service.get_month(user_id, "UTC")

    assert len(summary.daily) == 31
    assert summary.daily[0].calories == 310
    assert summary.avg_calories == 10


def test_get_history_returns_newest_first(
    container, user_id, history_repository
) -> None:
    for day in (date(2024, 5, 11), date(2024, 5, 13), date(2024, 5, 12)):
        history_repository.days[(user_id, day)] = DayAggregate(
            day, 100, 10, 1.0, 2000, 150, 15.0
        )

    history = container.stats_service.get_history(user_id, limit=2)

    assert [day.date for day in history] == [date(2024, 5, 13), date(2024, 5, 12)]
