"""Supabase repository for food log entries."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from macro_money.domain.entries import FoodLogEntry
from macro_money.services.food_logs import FoodLogRepository


@dataclass
class SupabaseFoodLogRepository(FoodLogRepository):
    """Supabase implementation for the food_logs table."""

    client: Client

    def create_entry(self, user_id: UUID, entry: FoodLogEntry) -> None:
        """Insert a new entry row."""
        response = (
            self.client.table("food_logs")
            .insert(
                {
                    "id": str(entry.id),
                    "user_id": str(user_id),
                    "description": entry.description,
                    "calories": entry.calories,
                    "protein": entry.protein,
                    "cost": entry.cost,
                    "created_at": entry.timestamp.isoformat(),
                    "pantry_item_id": str(entry.pantry_item_id)
                    if entry.pantry_item_id
                    else None,
                    "amount_consumed": entry.amount_consumed,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create food log entry")

    def get_entry(self, user_id: UUID, entry_id: UUID) -> FoodLogEntry | None:
        """Return an entry by id, if present."""
        response = (
            self.client.table("food_logs")
            .select("*")
            .eq("id", str(entry_id))
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_entry(response.data[0])

    def update_entry(self, user_id: UUID, entry: FoodLogEntry) -> None:
        """Update the editable columns of an entry."""
        response = (
            self.client.table("food_logs")
            .update(
                {
                    "description": entry.description,
                    "calories": entry.calories,
                    "protein": entry.protein,
                    "cost": entry.cost,
                }
            )
            .eq("id", str(entry.id))
            .eq("user_id", str(user_id))
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update food log entry")

    def delete_entry(self, user_id: UUID, entry_id: UUID) -> None:
        """Delete one entry."""
        self.client.table("food_logs").delete().eq("id", str(entry_id)).eq(
            "user_id", str(user_id)
        ).execute()

    def delete_all_entries(self, user_id: UUID) -> None:
        """Delete every entry of a user."""
        self.client.table("food_logs").delete().eq("user_id", str(user_id)).execute()

    def list_entries(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[FoodLogEntry]:
        """Return entries in the time range, newest first."""
        response = (
            self.client.table("food_logs")
            .select("*")
            .eq("user_id", str(user_id))
            .gte("created_at", start.isoformat())
            .lt("created_at", end.isoformat())
            .order("created_at", desc=True)
            .execute()
        )
        return [_parse_entry(row) for row in response.data or []]

    def first_entry_time(self, user_id: UUID) -> datetime | None:
        """Return created_at of the oldest entry."""
        response = (
            self.client.table("food_logs")
            .select("created_at")
            .eq("user_id", str(user_id))
            .order("created_at")
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return datetime.fromisoformat(str(response.data[0]["created_at"]))


def _parse_entry(row: dict[str, object]) -> FoodLogEntry:
    pantry_item_id = row.get("pantry_item_id")
    amount_consumed = row.get("amount_consumed")
    return FoodLogEntry(
        id=UUID(str(row["id"])),
        description=str(row.get("description", "")),
        calories=int(row.get("calories") or 0),
        protein=int(row.get("protein") or 0),
        cost=float(row.get("cost") or 0.0),
        timestamp=datetime.fromisoformat(str(row["created_at"])),
        pantry_item_id=UUID(str(pantry_item_id)) if pantry_item_id else None,
        amount_consumed=float(amount_consumed)
        if amount_consumed is not None
        else None,
    )
