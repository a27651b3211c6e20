"""OpenAI Responses API client for structured JSON generation."""

import json
from dataclasses import dataclass, field
from typing import Protocol

from openai import AsyncOpenAI


@dataclass(frozen=True)
class ModelReply:
    """Parsed JSON payload with token usage of a model call."""

    payload: dict[str, object]
    usage: dict[str, int] = field(default_factory=dict)


class JsonModelClient(Protocol):
    """Interface for LLM calls that return a JSON object."""

    async def generate(  # noqa: PLR0913
        self,
        *,
        model: str,
        instructions: str,
        prompt: str,
        schema: dict[str, object],
        schema_name: str,
        temperature: float | None = None,
        reasoning_effort: str | None = None,
        store: bool = False,
    ) -> ModelReply:
        """Return the structured output of a single model call."""


@dataclass
class OpenAIJsonClient(JsonModelClient):
    """JSON model client backed by the OpenAI Responses API."""

    client: AsyncOpenAI

    @classmethod
    def create(cls, api_key: str) -> "OpenAIJsonClient":
        """Create an OpenAI JSON client."""
        return cls(client=AsyncOpenAI(api_key=api_key))

    async def generate(  # noqa: PLR0913
        self,
        *,
        model: str,
        instructions: str,
        prompt: str,
        schema: dict[str, object],
        schema_name: str,
        temperature: float | None = None,
        reasoning_effort: str | None = None,
        store: bool = False,
    ) -> ModelReply:
        """Call OpenAI Responses API with structured outputs."""
        request_payload: dict[str, object] = {
            "model": model,
            "instructions": instructions,
            "input": [
                {
                    "role": "user",
                    "content": [{"type": "input_text", "text": prompt}],
                }
            ],
            "text": {
                "format": {
                    "type": "json_schema",
                    "name": schema_name,
                    "strict": True,
                    "schema": schema,
                }
            },
            "store": store,
        }
        if temperature is not None:
            request_payload["temperature"] = temperature
        if reasoning_effort:
            request_payload["reasoning"] = {"effort": reasoning_effort}

        response = await self.client.responses.create(**request_payload)
        output_text = response.output_text
        if not output_text:
            raise RuntimeError("OpenAI returned an empty response")
        payload = json.loads(output_text)
        if not isinstance(payload, dict):
            raise RuntimeError("OpenAI returned a non-object JSON payload")
        return ModelReply(payload=payload, usage=_usage_counts(response))


def _usage_counts(response: object) -> dict[str, int]:
    """Extract token counts from a Responses API result, if reported."""
    usage = getattr(response, "usage", None)
    if usage is None:
        return {}
    counts: dict[str, int] = {}
    for key in ("input_tokens", "output_tokens", "total_tokens"):
        value = getattr(usage, key, None)
        if isinstance(value, int):
            counts[key] = value
    return counts
