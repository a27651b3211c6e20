"""Extraction of food mentions from free-text meal descriptions."""

from dataclasses import dataclass, field
from typing import Protocol

from eatcount.adapters.openai_json_client import JsonModelClient
from eatcount.domain.extraction import ExtractionResponse
from eatcount.domain.nutrition import FoodQuery

EXTRACTION_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "items": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "grams": {"type": "number", "minimum": 0},
                    "query": {"type": "string"},
                    "include_terms": {"type": "array", "items": {"type": "string"}},
                    "exclude_terms": {"type": "array", "items": {"type": "string"}},
                },
                "required": [
                    "name",
                    "grams",
                    "query",
                    "include_terms",
                    "exclude_terms",
                ],
                "additionalProperties": False,
            },
        }
    },
    "required": ["items"],
    "additionalProperties": False,
}

EXTRACTION_INSTRUCTIONS = (
    "You extract foods from a meal description for calorie tracking. "
    "Return one item per distinct food. For each item give: "
    "name, the food as the user wrote it; "
    "grams, the portion in grams, estimating a typical portion when none is given; "
    "query, a short English search expression for the FatSecret food database; "
    "include_terms, lowercase English words a correct database entry name should "
    "contain (e.g. cooking method or variety); "
    "exclude_terms, lowercase English words that indicate a wrong entry "
    "(e.g. 'raw' for cooked pasta, 'sauce' for a plain vegetable)."
)


@dataclass(frozen=True)
class ExtractionResult:
    """Food queries extracted from a description and the model usage."""

    queries: list[FoodQuery]
    usage: dict[str, int] = field(default_factory=dict)


class FoodExtractor(Protocol):
    """Interface for turning meal descriptions into food queries."""

    async def extract(self, description: str) -> ExtractionResult:
        """Return food queries mentioned in the description."""


@dataclass
class OpenAIFoodExtractor(FoodExtractor):
    """Food extractor that prompts a JSON model client."""

    client: JsonModelClient
    model: str
    temperature: float | None = 0.3
    reasoning_effort: str | None = None
    store: bool = False

    async def extract(self, description: str) -> ExtractionResult:
        """Extract food queries via the configured client."""
        reply = await self.client.generate(
            model=self.model,
            instructions=EXTRACTION_INSTRUCTIONS,
            prompt=f"Meal description: {description}",
            schema=EXTRACTION_SCHEMA,
            schema_name="food_extract",
            temperature=self.temperature,
            reasoning_effort=self.reasoning_effort,
            store=self.store,
        )
        response = ExtractionResponse.model_validate(reply.payload)
        return ExtractionResult(
            queries=[item.to_query() for item in response.items],
            usage=reply.usage,
        )
