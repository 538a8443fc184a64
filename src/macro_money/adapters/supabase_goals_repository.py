"""Supabase repository for daily goals."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from macro_money.domain.goals import Goals
from macro_money.services.goals import GoalsRepository


@dataclass
class SupabaseGoalsRepository(GoalsRepository):
    """Supabase implementation for the user_goals table."""

    client: Client

    def get_goals(self, user_id: UUID) -> Goals | None:
        """Return the stored goals for a user."""
        response = (
            self.client.table("user_goals")
            .select("calories, protein, budget")
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        return Goals(
            calories=int(row["calories"]),
            protein=int(row["protein"]),
            budget=float(row["budget"]),
        )

    def upsert_goals(self, user_id: UUID, goals: Goals) -> None:
        """Create or replace the user's goals."""
        self.client.table("user_goals").upsert(
            {
                "user_id": str(user_id),
                "calories": goals.calories,
                "protein": goals.protein,
                "budget": goals.budget,
                "updated_at": datetime.now(tz=UTC).isoformat(),
            },
            on_conflict="user_id",
        ).execute()
