"""Supabase implementation for pantry items."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from macro_money.domain.pantry import PantryItem
from macro_money.services.pantry import PantryRepository


@dataclass
class SupabasePantryRepository(PantryRepository):
    """Supabase-backed repository for the pantry_items table."""

    client: Client

    def list_items(self, user_id: UUID) -> list[PantryItem]:
        """Return all pantry items of a user, newest first."""
        response = (
            self.client.table("pantry_items")
            .select("*")
            .eq("user_id", str(user_id))
            .order("created_at", desc=True)
            .execute()
        )
        return [_parse_item(row) for row in response.data or []]

    def get_item(self, user_id: UUID, item_id: UUID) -> PantryItem | None:
        """Return a pantry item by id, if present."""
        response = (
            self.client.table("pantry_items")
            .select("*")
            .eq("id", str(item_id))
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_item(response.data[0])

    def create_item(self, user_id: UUID, payload: dict[str, object]) -> PantryItem:
        """Create a pantry item and return it."""
        response = (
            self.client.table("pantry_items")
            .insert({"user_id": str(user_id), **payload})
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create pantry item")
        return _parse_item(response.data[0])

    def update_item(
        self, user_id: UUID, item_id: UUID, payload: dict[str, object]
    ) -> PantryItem | None:
        """Update a pantry item and return it."""
        response = (
            self.client.table("pantry_items")
            .update({**payload, "updated_at": datetime.now(tz=UTC).isoformat()})
            .eq("id", str(item_id))
            .eq("user_id", str(user_id))
            .execute()
        )
        if not response.data:
            return None
        return _parse_item(response.data[0])

    def delete_item(self, user_id: UUID, item_id: UUID) -> None:
        """Delete a pantry item."""
        self.client.table("pantry_items").delete().eq("id", str(item_id)).eq(
            "user_id", str(user_id)
        ).execute()


def _parse_item(row: dict[str, object]) -> PantryItem:
    """Parse a pantry row into a domain model."""
    expires_raw = row.get("expires_at")
    expires_at = (
        datetime.fromisoformat(expires_raw)
        if isinstance(expires_raw, str) and expires_raw
        else None
    )
    total_servings = float(row.get("total_servings") or 1.0)
    current_servings = row.get("current_servings")
    return PantryItem(
        id=UUID(str(row["id"])),
        name=str(row.get("name", "")),
        total_cost=float(row.get("total_cost") or 0.0),
        total_servings=total_servings,
        current_servings=float(
            total_servings if current_servings is None else current_servings
        ),
        protein_per_serving=int(row.get("protein_per_serving") or 0),
        calories_per_serving=int(row.get("calories_per_serving") or 0),
        serving_unit=str(row.get("serving_unit") or "serving"),
        is_out_of_stock=bool(row.get("is_out_of_stock", False)),
        expires_at=expires_at,
    )
