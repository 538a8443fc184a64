"""Supabase repository for waste logs."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from macro_money.domain.pantry import WasteLog
from macro_money.services.waste import WasteLogRepository


@dataclass
class SupabaseWasteLogRepository(WasteLogRepository):
    """Supabase implementation for the waste_logs table."""

    client: Client

    def list_waste_logs(self, user_id: UUID, limit: int) -> list[WasteLog]:
        """Return recent waste logs, newest first."""
        response = (
            self.client.table("waste_logs")
            .select("*")
            .eq("user_id", str(user_id))
            .order("created_at", desc=True)
            .limit(limit)
            .execute()
        )
        return [_parse_log(row) for row in response.data or []]

    def list_waste_logs_between(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[WasteLog]:
        """Return waste logs in the time range."""
        response = (
            self.client.table("waste_logs")
            .select("*")
            .eq("user_id", str(user_id))
            .gte("created_at", start.isoformat())
            .lt("created_at", end.isoformat())
            .execute()
        )
        return [_parse_log(row) for row in response.data or []]

    def create_waste_log(self, user_id: UUID, payload: dict[str, object]) -> WasteLog:
        """Create a waste log and return it."""
        response = (
            self.client.table("waste_logs")
            .insert({"user_id": str(user_id), **payload})
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create waste log")
        return _parse_log(response.data[0])

    def delete_waste_log(self, user_id: UUID, log_id: UUID) -> None:
        """Delete a waste log."""
        self.client.table("waste_logs").delete().eq("id", str(log_id)).eq(
            "user_id", str(user_id)
        ).execute()


def _parse_log(row: dict[str, object]) -> WasteLog:
    pantry_item_id = row.get("pantry_item_id")
    return WasteLog(
        id=UUID(str(row["id"])),
        item_name=str(row.get("item_name", "")),
        amount_wasted=float(row.get("amount_wasted") or 0.0),
        cost_lost=float(row.get("cost_lost") or 0.0),
        created_at=datetime.fromisoformat(str(row["created_at"])),
        pantry_item_id=UUID(str(pantry_item_id)) if pantry_item_id else None,
        waste_reason=row.get("waste_reason"),
        is_expired=bool(row.get("is_expired", False)),
    )
