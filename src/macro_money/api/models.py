"""Pydantic request models for the HTTP API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from macro_money.domain.entries import MAX_DESCRIPTION_LENGTH


class EstimateRequest(BaseModel):
    """Free-text meal description to estimate."""

    model_config = ConfigDict(populate_by_name=True)

    food_description: str = Field(
        alias="foodDescription", min_length=1, max_length=MAX_DESCRIPTION_LENGTH
    )


class EntryCreate(BaseModel):
    """Confirmed estimate; omitted numbers are estimated from the description."""

    description: str = Field(min_length=1, max_length=MAX_DESCRIPTION_LENGTH)
    calories: int | None = Field(default=None, ge=0)
    protein: int | None = Field(default=None, ge=0)
    cost: float | None = Field(default=None, ge=0, allow_inf_nan=False)


class EntryUpdate(BaseModel):
    description: str | None = Field(
        default=None, min_length=1, max_length=MAX_DESCRIPTION_LENGTH
    )
    calories: int | None = Field(default=None, ge=0)
    protein: int | None = Field(default=None, ge=0)
    cost: float | None = Field(default=None, ge=0, allow_inf_nan=False)


class GoalsUpdate(BaseModel):
    calories: int = Field(gt=0)
    protein: int = Field(gt=0)
    budget: float = Field(gt=0, allow_inf_nan=False)


class SettingsUpdate(BaseModel):
    notifications: bool | None = None
    dark_mode: bool | None = None
    timezone: str | None = None


class PantryItemCreate(BaseModel):
    """New pantry item; all servings start in stock."""

    name: str = Field(min_length=1, max_length=200)
    total_cost: float = Field(ge=0, allow_inf_nan=False)
    total_servings: float = Field(gt=0, allow_inf_nan=False)
    protein_per_serving: int = Field(default=0, ge=0)
    calories_per_serving: int = Field(default=0, ge=0)
    serving_unit: str = "serving"
    expires_at: datetime | None = None


class PantryItemUpdate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    total_cost: float = Field(ge=0, allow_inf_nan=False)
    total_servings: float = Field(gt=0, allow_inf_nan=False)
    protein_per_serving: int = Field(default=0, ge=0)
    calories_per_serving: int = Field(default=0, ge=0)


class ConsumeRequest(BaseModel):
    servings: float = Field(default=1.0, gt=0, allow_inf_nan=False)


class WasteCreate(BaseModel):
    """Wasted food, either free text or tied to a pantry item."""

    amount_wasted: float = Field(gt=0, allow_inf_nan=False)
    item_name: str | None = Field(default=None, max_length=200)
    pantry_item_id: UUID | None = None
    cost_lost: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    waste_reason: str | None = None
    is_expired: bool = False
