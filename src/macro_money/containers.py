"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import ClientOptions, create_client

from macro_money.adapters.openai_estimation_client import OpenAIEstimationClient
from macro_money.adapters.supabase_food_log_repository import (
    SupabaseFoodLogRepository,
)
from macro_money.adapters.supabase_goals_repository import SupabaseGoalsRepository
from macro_money.adapters.supabase_history_repository import (
    SupabaseHistoryRepository,
)
from macro_money.adapters.supabase_identity_provider import SupabaseIdentityProvider
from macro_money.adapters.supabase_pantry_repository import SupabasePantryRepository
from macro_money.adapters.supabase_user_settings_repository import (
    SupabaseUserSettingsRepository,
)
from macro_money.adapters.supabase_waste_log_repository import (
    SupabaseWasteLogRepository,
)
from macro_money.config import Settings
from macro_money.services.cache import InMemoryCache
from macro_money.services.estimation import EstimationService
from macro_money.services.food_logs import FoodLogService
from macro_money.services.goals import GoalsService
from macro_money.services.identity import IdentityProvider
from macro_money.services.insights import InsightsService
from macro_money.services.pantry import PantryService
from macro_money.services.rollover import RolloverService
from macro_money.services.stats import StatsService
from macro_money.services.user_settings import UserSettingsService
from macro_money.services.waste import WasteService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    identity_provider: IdentityProvider
    estimation_service: EstimationService
    food_log_service: FoodLogService
    goals_service: GoalsService
    user_settings_service: UserSettingsService
    rollover_service: RolloverService
    stats_service: StatsService
    pantry_service: PantryService
    waste_service: WasteService
    insights_service: InsightsService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url,
        resolved_settings.supabase_service_key,
        options=ClientOptions(
            postgrest_client_timeout=resolved_settings.supabase_timeout_seconds
        ),
    )
    history_repository = SupabaseHistoryRepository(supabase_client)
    openai_client = (
        OpenAIEstimationClient.create(resolved_settings.openai_api_key)
        if resolved_settings.openai_api_key
        else None
    )
    estimation_service = EstimationService(
        client=openai_client,
        cache=InMemoryCache(),
        model=resolved_settings.openai_model,
        store=resolved_settings.openai_store,
        timeout_seconds=resolved_settings.estimation_timeout_seconds,
        cache_ttl_seconds=resolved_settings.estimate_cache_ttl_seconds,
    )
    food_log_service = FoodLogService(SupabaseFoodLogRepository(supabase_client))
    goals_service = GoalsService(SupabaseGoalsRepository(supabase_client))
    user_settings_service = UserSettingsService(
        SupabaseUserSettingsRepository(supabase_client),
        default_timezone=resolved_settings.default_timezone,
    )
    pantry_service = PantryService(
        SupabasePantryRepository(supabase_client), food_log_service
    )
    waste_service = WasteService(
        SupabaseWasteLogRepository(supabase_client), pantry_service
    )
    rollover_service = RolloverService(
        food_log_service=food_log_service,
        history_repository=history_repository,
        goals_service=goals_service,
        user_settings_service=user_settings_service,
        waste_service=waste_service,
    )
    stats_service = StatsService(food_log_service, history_repository)
    insights_service = InsightsService(history_repository, pantry_service)

    async def close_resources() -> None:
        if openai_client is not None:
            await openai_client.close()

    return AppContainer(
        settings=resolved_settings,
        identity_provider=SupabaseIdentityProvider(supabase_client),
        estimation_service=estimation_service,
        food_log_service=food_log_service,
        goals_service=goals_service,
        user_settings_service=user_settings_service,
        rollover_service=rollover_service,
        stats_service=stats_service,
        pantry_service=pantry_service,
        waste_service=waste_service,
        insights_service=insights_service,
        close_resources=close_resources,
    )
