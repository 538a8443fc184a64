"""Day-boundary rollover that archives finished days."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime
from typing import Protocol
from uuid import UUID
from zoneinfo import ZoneInfo

from macro_money.domain.history import DayAggregate
from macro_money.services.aggregation import (
    bucket_by_day,
    build_day_aggregate,
    day_bounds,
    elapsed_dates,
    local_date,
    utc_now,
)
from macro_money.services.food_logs import FoodLogService
from macro_money.services.goals import GoalsService
from macro_money.services.user_settings import UserSettingsService
from macro_money.services.waste import WasteService

_logger = logging.getLogger(__name__)


class HistoryRepository(Protocol):
    """Persistence interface for archived days."""

    def get_day(self, user_id: UUID, day: date) -> DayAggregate | None:
        """Return the archived aggregate of a date."""

    def create_day(self, user_id: UUID, aggregate: DayAggregate) -> None:
        """Store a new aggregate."""

    def list_days(self, user_id: UUID, limit: int) -> list[DayAggregate]:
        """Return archived days, newest first."""


@dataclass
class RolloverService:
    """Archive every finished day the user has not been seen on."""

    food_log_service: FoodLogService
    history_repository: HistoryRepository
    goals_service: GoalsService
    user_settings_service: UserSettingsService
    waste_service: WasteService
    clock: Callable[[], datetime] = utc_now

    def check(self, user_id: UUID, now: datetime | None = None) -> list[DayAggregate]:
        """Archive elapsed days and return the aggregates written.

        Safe to call on every request: it only does work when the user's local
        date moved past the last date they were seen on, or, for a user never
        seen before, past the date of their oldest entry. The last-seen date is
        advanced only after every archival write succeeded.
        """
        timezone_name = self.user_settings_service.get_timezone(user_id)
        tz = ZoneInfo(timezone_name)
        today = local_date(now or self.clock(), tz)
        last_seen = self.user_settings_service.get_last_seen_date(user_id)
        if last_seen is None:
            # never observed: start from the oldest entry so no logged day is skipped
            first_entry = self.food_log_service.first_entry_time(user_id)
            if first_entry is None or local_date(first_entry, tz) >= today:
                self.user_settings_service.set_last_seen_date(user_id, today)
                return []
            last_seen = local_date(first_entry, tz)
        if last_seen >= today:
            return []

        pending = elapsed_dates(last_seen, today)
        start, _ = day_bounds(pending[0], tz)
        end, _ = day_bounds(today, tz)
        buckets = bucket_by_day(
            self.food_log_service.list_entries(user_id, start, end), tz
        )
        goals = self.goals_service.get_goals(user_id)
        archived = []
        for day in pending:
            entries = buckets.get(day)
            if not entries:
                continue
            if self.history_repository.get_day(user_id, day) is not None:
                continue
            aggregate = build_day_aggregate(
                day,
                entries,
                goals,
                tz,
                waste_cost=self.waste_service.waste_cost_on(
                    user_id, day, timezone_name
                ),
            )
            self.history_repository.create_day(user_id, aggregate)
            _logger.info(
                "Archived %s for user %s (%s kcal, %s g protein, %.2f spent)",
                day,
                user_id,
                aggregate.calories,
                aggregate.protein,
                aggregate.cost,
            )
            archived.append(aggregate)

        self.food_log_service.prune_cache(user_id, today, timezone_name)
        self.user_settings_service.set_last_seen_date(user_id, today)
        return archived

