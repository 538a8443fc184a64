"""OpenAI Responses API client for nutrition estimates."""

import json
import re
from dataclasses import dataclass

from openai import AsyncOpenAI

from macro_money.services.estimation import EstimationClient

_CODE_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$")


@dataclass
class OpenAIEstimationClient(EstimationClient):
    """Estimation client backed by OpenAI Responses API."""

    client: AsyncOpenAI

    @classmethod
    def create(cls, api_key: str) -> "OpenAIEstimationClient":
        """Create an OpenAI estimation client."""
        return cls(client=AsyncOpenAI(api_key=api_key))

    async def estimate(
        self,
        *,
        model: str,
        store: bool,
        description: str,
        schema: dict[str, object],
        prompt: str,
    ) -> dict[str, object]:
        """Call OpenAI Responses API with structured outputs."""
        response = await self.client.responses.create(
            model=model,
            instructions=prompt,
            input=[
                {
                    "role": "user",
                    "content": [{"type": "input_text", "text": description}],
                }
            ],
            text={
                "format": {
                    "type": "json_schema",
                    "name": "nutrition_estimate",
                    "strict": True,
                    "schema": schema,
                }
            },
            store=store,
        )
        output_text = response.output_text
        if not output_text:
            raise RuntimeError("OpenAI returned an empty response")
        return json.loads(_CODE_FENCE.sub("", output_text.strip()))

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self.client.close()
