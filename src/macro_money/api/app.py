"""FastAPI application factory."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import asdict
from uuid import UUID

from fastapi import Depends, FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from macro_money.api.auth import require_observed_user, require_user
from macro_money.api.models import (
    EntryCreate,
    EntryUpdate,
    EstimateRequest,
    GoalsUpdate,
    SettingsUpdate,
)
from macro_money.api.pantry import router as pantry_router
from macro_money.app_logging import configure_logging
from macro_money.config import parse_allowed_origins
from macro_money.containers import AppContainer
from macro_money.domain.entries import EntryChanges
from macro_money.domain.goals import Goals
from macro_money.errors import PersistenceError
from macro_money.services.stats import PeriodSummary


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    origins = parse_allowed_origins(container.settings.allowed_origins)
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.include_router(pantry_router)

    @app.exception_handler(PersistenceError)
    async def persistence_error(_: Request, exc: PersistenceError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": str(exc), "retryable": True},
        )

    @app.exception_handler(ValueError)
    async def value_error(_: Request, exc: ValueError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)}
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/api/estimate", dependencies=[Depends(require_user)])
    async def estimate_meal(payload: EstimateRequest) -> dict[str, object]:
        """Estimate calories, protein and cost of a meal description."""
        result = await container.estimation_service.estimate(payload.food_description)
        return asdict(result)

    @app.get("/api/entries")
    async def list_entries(
        user_id: UUID = Depends(require_observed_user),
    ) -> dict[str, object]:
        """Return today's entries, newest first."""
        timezone_name = container.user_settings_service.get_timezone(user_id)
        entries = container.food_log_service.today_entries(user_id, timezone_name)
        return {"entries": [asdict(entry) for entry in entries]}

    @app.post("/api/entries", status_code=status.HTTP_201_CREATED)
    async def create_entry(
        payload: EntryCreate, user_id: UUID = Depends(require_observed_user)
    ) -> dict[str, object]:
        """Confirm an estimate, estimating any number that was left out."""
        if None in (payload.calories, payload.protein, payload.cost):
            estimate = await container.estimation_service.estimate(payload.description)
            entry = container.food_log_service.confirm_estimate(
                user_id,
                estimate.with_overrides(
                    calories=payload.calories,
                    protein=payload.protein,
                    cost=payload.cost,
                ),
            )
        else:
            entry = container.food_log_service.log_entry(
                user_id,
                description=payload.description,
                calories=payload.calories,
                protein=payload.protein,
                cost=payload.cost,
            )
        return asdict(entry)

    @app.patch("/api/entries/{entry_id}")
    async def edit_entry(
        entry_id: UUID,
        payload: EntryUpdate,
        user_id: UUID = Depends(require_observed_user),
    ) -> dict[str, object]:
        """Edit the description or numbers of an entry."""
        entry = container.food_log_service.edit_entry(
            user_id,
            entry_id,
            EntryChanges(
                description=payload.description,
                calories=payload.calories,
                protein=payload.protein,
                cost=payload.cost,
            ),
        )
        if entry is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return asdict(entry)

    @app.delete("/api/entries/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_entry(
        entry_id: UUID, user_id: UUID = Depends(require_observed_user)
    ) -> None:
        """Delete one entry."""
        if not container.food_log_service.delete_entry(user_id, entry_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)

    @app.delete("/api/entries", status_code=status.HTTP_204_NO_CONTENT)
    async def clear_entries(user_id: UUID = Depends(require_observed_user)) -> None:
        """Delete every entry of the user."""
        container.food_log_service.clear_entries(user_id)

    @app.get("/api/today")
    async def today(
        user_id: UUID = Depends(require_observed_user),
    ) -> dict[str, object]:
        """Return today's totals next to the goals."""
        timezone_name = container.user_settings_service.get_timezone(user_id)
        totals, entries = container.stats_service.get_today_with_entries(
            user_id, timezone_name
        )
        return {
            "totals": asdict(totals),
            "goals": asdict(container.goals_service.get_goals(user_id)),
            "entries": [asdict(entry) for entry in entries],
        }

    @app.get("/api/week")
    async def week(
        user_id: UUID = Depends(require_observed_user),
    ) -> dict[str, object]:
        """Return week-to-date totals and averages."""
        timezone_name = container.user_settings_service.get_timezone(user_id)
        return _summary_payload(
            container.stats_service.get_week(user_id, timezone_name)
        )

    @app.get("/api/month")
    async def month(
        user_id: UUID = Depends(require_observed_user),
    ) -> dict[str, object]:
        """Return month-to-date totals and averages."""
        timezone_name = container.user_settings_service.get_timezone(user_id)
        return _summary_payload(
            container.stats_service.get_month(user_id, timezone_name)
        )

    @app.get("/api/history")
    async def history(
        user_id: UUID = Depends(require_observed_user), limit: int = 60
    ) -> dict[str, object]:
        """Return archived days, newest first."""
        days = container.stats_service.get_history(user_id, limit)
        return {"days": [asdict(day) for day in days]}

    @app.get("/api/goals")
    async def get_goals(user_id: UUID = Depends(require_user)) -> dict[str, object]:
        """Return the user's daily goals."""
        return asdict(container.goals_service.get_goals(user_id))

    @app.put("/api/goals")
    async def set_goals(
        payload: GoalsUpdate, user_id: UUID = Depends(require_user)
    ) -> dict[str, object]:
        """Replace the user's daily goals."""
        goals = container.goals_service.set_goals(
            user_id,
            Goals(
                calories=payload.calories,
                protein=payload.protein,
                budget=payload.budget,
            ),
        )
        return asdict(goals)

    @app.get("/api/settings")
    async def get_settings(user_id: UUID = Depends(require_user)) -> dict[str, object]:
        """Return the user's preferences."""
        return asdict(container.user_settings_service.get_preferences(user_id))

    @app.put("/api/settings")
    async def update_settings(
        payload: SettingsUpdate, user_id: UUID = Depends(require_user)
    ) -> dict[str, object]:
        """Update the user's preferences."""
        preferences = container.user_settings_service.update_preferences(
            user_id,
            notifications=payload.notifications,
            dark_mode=payload.dark_mode,
            timezone=payload.timezone,
        )
        return asdict(preferences)

    return app


def _summary_payload(summary: PeriodSummary) -> dict[str, object]:
    return {
        "daily": [asdict(day) for day in summary.daily],
        "avg_calories": summary.avg_calories,
        "avg_protein": summary.avg_protein,
        "avg_cost": summary.avg_cost,
    }
