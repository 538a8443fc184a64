"""Supabase repository for archived days."""

from dataclasses import dataclass
from datetime import date
from uuid import UUID

from supabase import Client

from macro_money.domain.history import DayAggregate
from macro_money.services.rollover import HistoryRepository


@dataclass
class SupabaseHistoryRepository(HistoryRepository):
    """Supabase implementation for the day_history table."""

    client: Client

    def get_day(self, user_id: UUID, day: date) -> DayAggregate | None:
        """Return the archived row of a date, if present."""
        response = (
            self.client.table("day_history")
            .select("*")
            .eq("user_id", str(user_id))
            .eq("date", day.isoformat())
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_day(response.data[0])

    def create_day(self, user_id: UUID, aggregate: DayAggregate) -> None:
        """Insert an archived day; an existing row for the date is kept."""
        self.client.table("day_history").upsert(
            {
                "user_id": str(user_id),
                "date": aggregate.date.isoformat(),
                "calories": aggregate.calories,
                "protein": aggregate.protein,
                "cost": aggregate.cost,
                "goal_calories": aggregate.goal_calories,
                "goal_protein": aggregate.goal_protein,
                "goal_budget": aggregate.goal_budget,
                "waste_cost": aggregate.waste_cost,
            },
            on_conflict="user_id,date",
            ignore_duplicates=True,
        ).execute()

    def list_days(self, user_id: UUID, limit: int) -> list[DayAggregate]:
        """Return archived days, newest first."""
        response = (
            self.client.table("day_history")
            .select("*")
            .eq("user_id", str(user_id))
            .order("date", desc=True)
            .limit(limit)
            .execute()
        )
        return [_parse_day(row) for row in response.data or []]


def _parse_day(row: dict[str, object]) -> DayAggregate:
    return DayAggregate(
        date=date.fromisoformat(str(row["date"])),
        calories=int(row.get("calories") or 0),
        protein=int(row.get("protein") or 0),
        cost=float(row.get("cost") or 0.0),
        goal_calories=int(row.get("goal_calories") or 0),
        goal_protein=int(row.get("goal_protein") or 0),
        goal_budget=float(row.get("goal_budget") or 0.0),
        waste_cost=float(row.get("waste_cost") or 0.0),
    )
