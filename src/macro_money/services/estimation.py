"""Nutrition estimation with a remote model and an offline fallback."""

import asyncio
import logging
from dataclasses import dataclass, replace
from typing import Protocol

from pydantic import ValidationError

from macro_money.domain.entries import NutritionEstimate, normalize_description
from macro_money.domain.estimation import RemoteError, RemoteEstimate
from macro_money.errors import EstimationError
from macro_money.rounding import round_money, round_whole
from macro_money.services.cache import Cache
from macro_money.services.estimator import estimate_nutrition

_logger = logging.getLogger(__name__)

ESTIMATE_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "calories": {"type": "number", "minimum": 0},
        "protein": {"type": "number", "minimum": 0},
        "cost": {"type": "number", "minimum": 0},
    },
    "required": ["calories", "protein", "cost"],
    "additionalProperties": False,
}

ESTIMATE_PROMPT = (
    "You are a nutrition and food cost expert. Analyze the food description "
    "and return total calories, grams of protein and the estimated cost in USD.\n"
    "If it sounds like restaurant or fast food, use restaurant prices. "
    "If it sounds like home cooking, use grocery store prices. "
    "Be realistic about portion sizes and use average US prices.\n"
    "Examples:\n"
    '- "3 eggs" -> {"calories": 216, "protein": 18, "cost": 1.05}\n'
    '- "chipotle burrito bowl" -> {"calories": 850, "protein": 45, "cost": 11.50}\n'
    '- "protein shake with milk" -> {"calories": 270, "protein": 32, "cost": 1.60}'
)


class EstimationClient(Protocol):
    """Interface for a remote nutrition estimation model."""

    async def estimate(
        self,
        *,
        model: str,
        store: bool,
        description: str,
        schema: dict[str, object],
        prompt: str,
    ) -> dict[str, object]:
        """Return the raw estimate payload for a description."""


@dataclass
class EstimationService:
    """Estimate meals remotely, degrading to the keyword estimator."""

    client: EstimationClient | None
    cache: Cache
    model: str = "gpt-5-mini"
    store: bool = False
    timeout_seconds: float = 8.0
    cache_ttl_seconds: int = 3600

    async def estimate(self, description: str) -> NutritionEstimate:
        """Return an editable estimate; never fails once the input is valid."""
        cleaned = normalize_description(description)
        if self.client is None:
            return estimate_nutrition(cleaned)

        cache_key = f"estimate:{cleaned.lower()}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, NutritionEstimate):
            return replace(cached, description=cleaned)

        try:
            raw = await asyncio.wait_for(
                self.client.estimate(
                    model=self.model,
                    store=self.store,
                    description=cleaned,
                    schema=ESTIMATE_SCHEMA,
                    prompt=ESTIMATE_PROMPT,
                ),
                timeout=self.timeout_seconds,
            )
            estimate = parse_remote_estimate(cleaned, raw)
        except Exception as exc:
            _logger.warning(
                "Remote estimation failed, using keyword estimator: %s: %s",
                type(exc).__name__,
                exc,
            )
            return estimate_nutrition(cleaned)

        self.cache.set(cache_key, estimate, ttl_seconds=self.cache_ttl_seconds)
        return estimate


def parse_remote_estimate(description: str, raw: object) -> NutritionEstimate:
    """Validate a remote payload and normalise its numbers."""
    if not isinstance(raw, dict):
        raise EstimationError("Remote estimate is not an object")
    if "error" in raw:
        try:
            message = RemoteError.model_validate(raw).error
        except ValidationError:
            message = "unknown error"
        raise EstimationError(message)
    try:
        payload = RemoteEstimate.model_validate(raw)
    except ValidationError as exc:
        raise EstimationError("Remote estimate failed validation") from exc
    return NutritionEstimate(
        description=description,
        calories=round_whole(payload.calories),
        protein=round_whole(payload.protein),
        cost=round_money(payload.cost),
        source="remote",
    )
