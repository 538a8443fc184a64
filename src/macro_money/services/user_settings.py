"""User settings service."""

from dataclasses import dataclass, replace
from datetime import date
from typing import Protocol
from uuid import UUID
from zoneinfo import ZoneInfo

from macro_money.domain.goals import UserPreferences


class UserSettingsRepository(Protocol):
    """Persistence interface for user settings."""

    def get_preferences(self, user_id: UUID) -> UserPreferences | None:
        """Return the user's settings row if present."""

    def upsert_preferences(self, user_id: UUID, preferences: UserPreferences) -> None:
        """Store notifications, dark mode and timezone."""

    def set_last_seen_date(self, user_id: UUID, day: date) -> None:
        """Record the last local date the user was observed on."""


@dataclass
class UserSettingsService:
    """Service for user settings."""

    repository: UserSettingsRepository
    default_timezone: str = "UTC"

    def get_preferences(self, user_id: UUID) -> UserPreferences:
        """Return stored preferences or defaults."""
        return self.repository.get_preferences(user_id) or UserPreferences()

    def update_preferences(
        self,
        user_id: UUID,
        *,
        notifications: bool | None = None,
        dark_mode: bool | None = None,
        timezone: str | None = None,
    ) -> UserPreferences:
        """Update the given preferences and keep the rest."""
        if timezone is not None and not is_valid_timezone(timezone):
            raise ValueError(f"Unknown timezone: {timezone}")
        current = self.get_preferences(user_id)
        updated = replace(
            current,
            notifications=current.notifications
            if notifications is None
            else notifications,
            dark_mode=current.dark_mode if dark_mode is None else dark_mode,
            timezone=current.timezone if timezone is None else timezone,
        )
        self.repository.upsert_preferences(user_id, updated)
        return updated

    def get_timezone(self, user_id: UUID) -> str:
        """Return the user timezone or the default if unset."""
        return self.get_preferences(user_id).timezone or self.default_timezone

    def get_last_seen_date(self, user_id: UUID) -> date | None:
        """Return the last local date a rollover check ran for the user."""
        return self.get_preferences(user_id).last_seen_date

    def set_last_seen_date(self, user_id: UUID, day: date) -> None:
        """Persist the last local date a rollover check ran for the user."""
        self.repository.set_last_seen_date(user_id, day)


def is_valid_timezone(value: str) -> bool:
    """Return True for IANA timezone names."""
    try:
        ZoneInfo(value)
    except Exception:
        return False
    return True
