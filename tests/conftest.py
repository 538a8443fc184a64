"""Shared test fixtures."""

import asyncio
from dataclasses import dataclass, field, fields, replace
from datetime import UTC, date, datetime, timedelta
from uuid import UUID, uuid4

import pytest

from macro_money.config import Settings
from macro_money.containers import AppContainer
from macro_money.domain.entries import FoodLogEntry
from macro_money.domain.goals import Goals, UserPreferences
from macro_money.domain.history import DayAggregate
from macro_money.domain.pantry import PantryItem, WasteLog
from macro_money.services.cache import InMemoryCache
from macro_money.services.estimation import EstimationClient, EstimationService
from macro_money.services.food_logs import FoodLogRepository, FoodLogService
from macro_money.services.goals import GoalsRepository, GoalsService
from macro_money.services.identity import IdentityProvider
from macro_money.services.insights import InsightsService
from macro_money.services.pantry import PantryRepository, PantryService
from macro_money.services.rollover import HistoryRepository, RolloverService
from macro_money.services.stats import StatsService
from macro_money.services.user_settings import (
    UserSettingsRepository,
    UserSettingsService,
)
from macro_money.services.waste import WasteLogRepository, WasteService

TEST_TOKEN = "test-access-token"
SERVICE_KEY = (
    "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9"
    ".eyJyb2xlIjoic2VydmljZV9yb2xlIn0"
    ".c2lnbmF0dXJl"
)


@dataclass
class FixedClock:
    """Clock that only moves when a test moves it."""

    now: datetime = field(
        default_factory=lambda: datetime(2024, 5, 14, 12, 0, tzinfo=UTC)
    )

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


class BackendUnavailableError(RuntimeError):
    """Simulated storage outage."""


@dataclass
class InMemoryFoodLogRepository(FoodLogRepository):
    """In-memory food log repository for tests."""

    entries: dict[UUID, tuple[UUID, FoodLogEntry]] = field(default_factory=dict)
    failing: set[str] = field(default_factory=set)
    list_calls: int = 0

    def _check(self, operation: str) -> None:
        if operation in self.failing:
            raise BackendUnavailableError(f"{operation} failed")

    def add(self, user_id: UUID, entry: FoodLogEntry) -> None:
        self.entries[entry.id] = (user_id, entry)

    def create_entry(self, user_id: UUID, entry: FoodLogEntry) -> None:
        self._check("create_entry")
        self.add(user_id, entry)

    def get_entry(self, user_id: UUID, entry_id: UUID) -> FoodLogEntry | None:
        stored = self.entries.get(entry_id)
        if stored is None or stored[0] != user_id:
            return None
        return stored[1]

    def update_entry(self, user_id: UUID, entry: FoodLogEntry) -> None:
        self._check("update_entry")
        self.entries[entry.id] = (user_id, entry)

    def delete_entry(self, user_id: UUID, entry_id: UUID) -> None:
        self._check("delete_entry")
        self.entries.pop(entry_id, None)

    def delete_all_entries(self, user_id: UUID) -> None:
        self._check("delete_all_entries")
        for entry_id in [
            key for key, (owner, _) in self.entries.items() if owner == user_id
        ]:
            del self.entries[entry_id]

    def list_entries(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[FoodLogEntry]:
        self.list_calls += 1
        return sorted(
            (
                entry
                for owner, entry in self.entries.values()
                if owner == user_id and start <= entry.timestamp < end
            ),
            key=lambda entry: entry.timestamp,
            reverse=True,
        )

    def first_entry_time(self, user_id: UUID) -> datetime | None:
        timestamps = [
            entry.timestamp
            for owner, entry in self.entries.values()
            if owner == user_id
        ]
        return min(timestamps, default=None)


@dataclass
class InMemoryGoalsRepository(GoalsRepository):
    """In-memory goals repository for tests."""

    goals: dict[UUID, Goals] = field(default_factory=dict)

    def get_goals(self, user_id: UUID) -> Goals | None:
        return self.goals.get(user_id)

    def upsert_goals(self, user_id: UUID, goals: Goals) -> None:
        self.goals[user_id] = goals


@dataclass
class InMemoryUserSettingsRepository(UserSettingsRepository):
    """In-memory user settings repository for tests."""

    preferences: dict[UUID, UserPreferences] = field(default_factory=dict)

    def get_preferences(self, user_id: UUID) -> UserPreferences | None:
        return self.preferences.get(user_id)

    def upsert_preferences(self, user_id: UUID, preferences: UserPreferences) -> None:
        current = self.preferences.get(user_id, UserPreferences())
        self.preferences[user_id] = replace(
            preferences, last_seen_date=current.last_seen_date
        )

    def set_last_seen_date(self, user_id: UUID, day: date) -> None:
        current = self.preferences.get(user_id, UserPreferences())
        self.preferences[user_id] = replace(current, last_seen_date=day)


@dataclass
class InMemoryHistoryRepository(HistoryRepository):
    """In-memory day history repository for tests."""

    days: dict[tuple[UUID, date], DayAggregate] = field(default_factory=dict)
    fail_on: set[date] = field(default_factory=set)
    create_calls: int = 0

    def get_day(self, user_id: UUID, day: date) -> DayAggregate | None:
        return self.days.get((user_id, day))

    def create_day(self, user_id: UUID, aggregate: DayAggregate) -> None:
        self.create_calls += 1
        if aggregate.date in self.fail_on:
            raise BackendUnavailableError(f"archiving {aggregate.date} failed")
        self.days.setdefault((user_id, aggregate.date), aggregate)

    def list_days(self, user_id: UUID, limit: int) -> list[DayAggregate]:
        owned = [day for (owner, _), day in self.days.items() if owner == user_id]
        return sorted(owned, key=lambda day: day.date, reverse=True)[:limit]


_PANTRY_FIELDS = {item.name for item in fields(PantryItem)}


def _pantry_values(payload: dict[str, object]) -> dict[str, object]:
    values = {key: value for key, value in payload.items() if key in _PANTRY_FIELDS}
    if isinstance(values.get("expires_at"), str):
        values["expires_at"] = datetime.fromisoformat(values["expires_at"])
    return values


@dataclass
class InMemoryPantryRepository(PantryRepository):
    """In-memory pantry repository for tests."""

    items: dict[UUID, tuple[UUID, PantryItem]] = field(default_factory=dict)

    def list_items(self, user_id: UUID) -> list[PantryItem]:
        return [item for owner, item in self.items.values() if owner == user_id]

    def get_item(self, user_id: UUID, item_id: UUID) -> PantryItem | None:
        stored = self.items.get(item_id)
        if stored is None or stored[0] != user_id:
            return None
        return stored[1]

    def create_item(self, user_id: UUID, payload: dict[str, object]) -> PantryItem:
        item = PantryItem(id=uuid4(), **_pantry_values(payload))
        self.items[item.id] = (user_id, item)
        return item

    def update_item(
        self, user_id: UUID, item_id: UUID, payload: dict[str, object]
    ) -> PantryItem | None:
        current = self.get_item(user_id, item_id)
        if current is None:
            return None
        item = replace(current, **_pantry_values(payload))
        self.items[item_id] = (user_id, item)
        return item

    def delete_item(self, user_id: UUID, item_id: UUID) -> None:
        self.items.pop(item_id, None)


@dataclass
class InMemoryWasteLogRepository(WasteLogRepository):
    """In-memory waste log repository for tests."""

    logs: dict[UUID, tuple[UUID, WasteLog]] = field(default_factory=dict)
    fail_writes: bool = False

    def _owned(self, user_id: UUID) -> list[WasteLog]:
        return sorted(
            (log for owner, log in self.logs.values() if owner == user_id),
            key=lambda log: log.created_at,
            reverse=True,
        )

    def list_waste_logs(self, user_id: UUID, limit: int) -> list[WasteLog]:
        return self._owned(user_id)[:limit]

    def list_waste_logs_between(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[WasteLog]:
        return [log for log in self._owned(user_id) if start <= log.created_at < end]

    def create_waste_log(self, user_id: UUID, payload: dict[str, object]) -> WasteLog:
        if self.fail_writes:
            raise BackendUnavailableError("create_waste_log failed")
        pantry_item_id = payload.get("pantry_item_id")
        log = WasteLog(
            id=uuid4(),
            item_name=str(payload["item_name"]),
            amount_wasted=float(payload["amount_wasted"]),
            cost_lost=float(payload["cost_lost"]),
            created_at=datetime.fromisoformat(str(payload["created_at"])),
            pantry_item_id=UUID(str(pantry_item_id)) if pantry_item_id else None,
            waste_reason=payload.get("waste_reason"),
            is_expired=bool(payload.get("is_expired", False)),
        )
        self.logs[log.id] = (user_id, log)
        return log

    def delete_waste_log(self, user_id: UUID, log_id: UUID) -> None:
        self.logs.pop(log_id, None)


@dataclass
class FakeIdentityProvider(IdentityProvider):
    """Identity provider with a fixed token table."""

    tokens: dict[str, UUID] = field(default_factory=dict)

    def resolve_user(self, access_token: str) -> UUID | None:
        return self.tokens.get(access_token)


@dataclass
class FakeEstimationClient(EstimationClient):
    """Remote estimator returning a canned payload, error or delay."""

    payload: object = field(
        default_factory=lambda: {"calories": 250.4, "protein": 20.5, "cost": 3.456}
    )
    error: Exception | None = None
    delay_seconds: float = 0.0
    calls: list[str] = field(default_factory=list)

    async def estimate(  # noqa: PLR0913
        self,
        *,
        model: str,
        store: bool,
        description: str,
        schema: dict[str, object],
        prompt: str,
    ) -> dict[str, object]:
        self.calls.append(description)
        if self.delay_seconds:
            await asyncio.sleep(self.delay_seconds)
        if self.error is not None:
            raise self.error
        return self.payload


def make_entry(  # noqa: PLR0913
    timestamp: datetime,
    *,
    description: str = "3 eggs",
    calories: int = 216,
    protein: int = 18,
    cost: float = 1.05,
) -> FoodLogEntry:
    """Build a food log entry at a given instant."""
    return FoodLogEntry(
        id=uuid4(),
        description=description,
        calories=calories,
        protein=protein,
        cost=cost,
        timestamp=timestamp,
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key=SERVICE_KEY,
        allowed_origins="https://app.example.com",
    )


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def user_id() -> UUID:
    return uuid4()


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {TEST_TOKEN}"}


@pytest.fixture
def food_log_repository() -> InMemoryFoodLogRepository:
    return InMemoryFoodLogRepository()


@pytest.fixture
def history_repository() -> InMemoryHistoryRepository:
    return InMemoryHistoryRepository()


@pytest.fixture
def container(
    settings: Settings,
    clock: FixedClock,
    user_id: UUID,
    food_log_repository: InMemoryFoodLogRepository,
    history_repository: InMemoryHistoryRepository,
) -> AppContainer:
    food_log_service = FoodLogService(food_log_repository, clock=clock)
    goals_service = GoalsService(InMemoryGoalsRepository())
    user_settings_service = UserSettingsService(InMemoryUserSettingsRepository())
    pantry_service = PantryService(InMemoryPantryRepository(), food_log_service)
    waste_service = WasteService(
        InMemoryWasteLogRepository(), pantry_service, clock=clock
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        identity_provider=FakeIdentityProvider({TEST_TOKEN: user_id}),
        estimation_service=EstimationService(client=None, cache=InMemoryCache()),
        food_log_service=food_log_service,
        goals_service=goals_service,
        user_settings_service=user_settings_service,
        rollover_service=RolloverService(
            food_log_service=food_log_service,
            history_repository=history_repository,
            goals_service=goals_service,
            user_settings_service=user_settings_service,
            waste_service=waste_service,
            clock=clock,
        ),
        stats_service=StatsService(food_log_service, history_repository, clock=clock),
        pantry_service=pantry_service,
        waste_service=waste_service,
        insights_service=InsightsService(
            history_repository, pantry_service, clock=clock
        ),
        close_resources=close_resources,
    )
