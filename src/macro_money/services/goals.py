"""Daily goals service."""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from macro_money.domain.goals import Goals
from macro_money.rounding import round_money


class GoalsRepository(Protocol):
    """Persistence interface for user goals."""

    def get_goals(self, user_id: UUID) -> Goals | None:
        """Return stored goals, if any."""

    def upsert_goals(self, user_id: UUID, goals: Goals) -> None:
        """Store goals for a user."""


@dataclass
class GoalsService:
    """Read and update the targets shown on the live dashboard."""

    repository: GoalsRepository

    def get_goals(self, user_id: UUID) -> Goals:
        """Return the user's goals or the defaults."""
        return self.repository.get_goals(user_id) or Goals()

    def set_goals(self, user_id: UUID, goals: Goals) -> Goals:
        """Validate and store new goals; archived days keep their snapshot."""
        if goals.calories <= 0 or goals.protein <= 0 or goals.budget <= 0:
            raise ValueError("Goals must be positive")
        normalized = Goals(
            calories=int(goals.calories),
            protein=int(goals.protein),
            budget=round_money(goals.budget),
        )
        self.repository.upsert_goals(user_id, normalized)
        return normalized
