"""Pantry, waste and insights endpoints."""

from __future__ import annotations

from dataclasses import asdict
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, HTTPException, Request, status

from macro_money.api.auth import require_observed_user, require_user
from macro_money.api.models import (  # noqa: TC001
    ConsumeRequest,
    PantryItemCreate,
    PantryItemUpdate,
    WasteCreate,
)

if TYPE_CHECKING:
    from macro_money.containers import AppContainer
    from macro_money.domain.pantry import PantryItem

router = APIRouter(prefix="/api", tags=["pantry"])


@router.get("/pantry")
async def list_pantry(
    request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    """Return pantry items, in-stock first."""
    container: AppContainer = request.app.state.container
    items = container.pantry_service.list_items(user_id)
    return {"items": [_item_payload(item) for item in items]}


@router.post("/pantry", status_code=status.HTTP_201_CREATED)
async def add_pantry_item(
    payload: PantryItemCreate,
    request: Request,
    user_id: UUID = Depends(require_user),
) -> dict[str, object]:
    """Stock a new pantry item."""
    container: AppContainer = request.app.state.container
    item = container.pantry_service.add_item(user_id, **payload.model_dump())
    return _item_payload(item)


@router.patch("/pantry/{item_id}")
async def update_pantry_item(
    item_id: UUID,
    payload: PantryItemUpdate,
    request: Request,
    user_id: UUID = Depends(require_user),
) -> dict[str, object]:
    """Replace a pantry item's details."""
    container: AppContainer = request.app.state.container
    item = container.pantry_service.update_item(
        user_id, item_id, **payload.model_dump()
    )
    if item is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return _item_payload(item)


@router.delete("/pantry/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_pantry_item(
    item_id: UUID, request: Request, user_id: UUID = Depends(require_user)
) -> None:
    """Delete a pantry item."""
    container: AppContainer = request.app.state.container
    if not container.pantry_service.delete_item(user_id, item_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)


@router.post("/pantry/{item_id}/consume")
async def consume_pantry_item(
    item_id: UUID,
    payload: ConsumeRequest,
    request: Request,
    user_id: UUID = Depends(require_observed_user),
) -> dict[str, object]:
    """Eat servings from the pantry and log them as an entry."""
    container: AppContainer = request.app.state.container
    result = container.pantry_service.consume(user_id, item_id, payload.servings)
    if result is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    item, entry = result
    return {"item": _item_payload(item), "entry": asdict(entry)}


@router.post("/pantry/{item_id}/restock")
async def restock_pantry_item(
    item_id: UUID, request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    """Refill a pantry item to its full servings."""
    container: AppContainer = request.app.state.container
    item = container.pantry_service.restock(user_id, item_id)
    if item is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return _item_payload(item)


@router.get("/waste")
async def list_waste(
    request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    """Return recent waste logs and the money they cost."""
    container: AppContainer = request.app.state.container
    logs = container.waste_service.list_logs(user_id)
    return {
        "logs": [asdict(log) for log in logs],
        "total_cost_lost": container.waste_service.total_waste_cost(user_id),
    }


@router.post("/waste", status_code=status.HTTP_201_CREATED)
async def log_waste(
    payload: WasteCreate,
    request: Request,
    user_id: UUID = Depends(require_observed_user),
) -> dict[str, object]:
    """Record wasted food."""
    container: AppContainer = request.app.state.container
    log = container.waste_service.log_waste(user_id, **payload.model_dump())
    return asdict(log)


@router.delete("/waste/{log_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_waste(
    log_id: UUID, request: Request, user_id: UUID = Depends(require_observed_user)
) -> None:
    """Delete a waste log."""
    container: AppContainer = request.app.state.container
    container.waste_service.delete_log(user_id, log_id)


@router.get("/insights")
async def insights(
    request: Request, user_id: UUID = Depends(require_observed_user)
) -> dict[str, object]:
    """Return spending efficiency, pantry runway and top value foods."""
    container: AppContainer = request.app.state.container
    timezone_name = container.user_settings_service.get_timezone(user_id)
    return asdict(container.insights_service.get_insights(user_id, timezone_name))


def _item_payload(item: PantryItem) -> dict[str, object]:
    return {**asdict(item), "cost_per_serving": round(item.cost_per_serving, 2)}
