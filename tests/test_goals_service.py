"""Tests for goals and user settings services."""

import pytest

from macro_money.domain.goals import Goals, UserPreferences
from macro_money.services.goals import GoalsService
from macro_money.services.user_settings import UserSettingsService, is_valid_timezone
from tests.conftest import InMemoryGoalsRepository, InMemoryUserSettingsRepository


def test_goals_default_when_unset(user_id) -> None:
    service = GoalsService(InMemoryGoalsRepository())

    assert service.get_goals(user_id) == Goals(2000, 150, 15.0)


def test_set_goals_normalises_values(user_id) -> None:
    repository = InMemoryGoalsRepository()
    service = GoalsService(repository)

    stored = service.set_goals(user_id, Goals(1800, 120, 12.345))

    assert stored == Goals(1800, 120, 12.35)
    assert service.get_goals(user_id) == stored


@pytest.mark.parametrize(
    "goals", [Goals(0, 150, 15.0), Goals(2000, -1, 15.0), Goals(2000, 150, 0.0)]
)
def test_set_goals_rejects_non_positive(user_id, goals: Goals) -> None:
    repository = InMemoryGoalsRepository()

    with pytest.raises(ValueError):
        GoalsService(repository).set_goals(user_id, goals)
    assert repository.goals == {}


def test_preferences_default_when_unset(user_id) -> None:
    service = UserSettingsService(InMemoryUserSettingsRepository())

    assert service.get_preferences(user_id) == UserPreferences()
    assert service.get_timezone(user_id) == "UTC"


def test_update_preferences_keeps_unset_fields(user_id) -> None:
    service = UserSettingsService(InMemoryUserSettingsRepository())
    service.update_preferences(user_id, dark_mode=False)

    updated = service.update_preferences(user_id, timezone="Europe/Berlin")

    assert updated.dark_mode is False
    assert updated.timezone == "Europe/Berlin"
    assert service.get_timezone(user_id) == "Europe/Berlin"


def test_update_preferences_rejects_unknown_timezone(user_id) -> None:
    service = UserSettingsService(InMemoryUserSettingsRepository())

    with pytest.raises(ValueError, match="Unknown timezone"):
        service.update_preferences(user_id, timezone="Mars/Olympus")


def test_default_timezone_is_configurable(user_id) -> None:
    service = UserSettingsService(
        InMemoryUserSettingsRepository(), default_timezone="Asia/Tokyo"
    )

    assert service.get_timezone(user_id) == "Asia/Tokyo"


def test_is_valid_timezone() -> None:
    assert is_valid_timezone("America/New_York")
    assert not is_valid_timezone("Not/AZone")
