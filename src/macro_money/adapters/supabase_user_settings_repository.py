"""Supabase repository for user settings."""

from dataclasses import dataclass
from datetime import UTC, date, datetime
from uuid import UUID

from supabase import Client

from macro_money.domain.goals import UserPreferences
from macro_money.services.user_settings import UserSettingsRepository


@dataclass
class SupabaseUserSettingsRepository(UserSettingsRepository):
    """Supabase implementation for user settings."""

    client: Client

    def get_preferences(self, user_id: UUID) -> UserPreferences | None:
        """Return the stored settings row for a user."""
        response = (
            self.client.table("user_settings")
            .select("notifications, dark_mode, timezone, last_seen_date")
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        last_seen = row.get("last_seen_date")
        return UserPreferences(
            notifications=bool(row.get("notifications", False)),
            dark_mode=bool(row.get("dark_mode", True)),
            timezone=row.get("timezone"),
            last_seen_date=date.fromisoformat(last_seen) if last_seen else None,
        )

    def upsert_preferences(self, user_id: UUID, preferences: UserPreferences) -> None:
        """Store notifications, dark mode and timezone."""
        self._upsert(
            user_id,
            {
                "notifications": preferences.notifications,
                "dark_mode": preferences.dark_mode,
                "timezone": preferences.timezone,
            },
        )

    def set_last_seen_date(self, user_id: UUID, day: date) -> None:
        """Update the user's last seen local date."""
        self._upsert(user_id, {"last_seen_date": day.isoformat()})

    def _upsert(self, user_id: UUID, values: dict[str, object]) -> None:
        self.client.table("user_settings").upsert(
            {
                "user_id": str(user_id),
                **values,
                "updated_at": datetime.now(tz=UTC).isoformat(),
            },
            on_conflict="user_id",
        ).execute()
