"""AI fallback estimation of per-100g nutrients for unresolved foods."""

import logging
from dataclasses import dataclass, field

from pydantic import ValidationError

from eatcount.adapters.openai_json_client import JsonModelClient
from eatcount.domain.extraction import EstimationResponse, NutrientEstimate
from eatcount.domain.nutrition import (
    ESTIMATED,
    FailedFood,
    FoodQuery,
    NutrientProfile,
    ResolvedFood,
)
from eatcount.errors import EstimationBatchError

_logger = logging.getLogger(__name__)

_NUMBER = {"type": "number", "minimum": 0}

ESTIMATION_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "items": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "calories": _NUMBER,
                    "protein": _NUMBER,
                    "fat": _NUMBER,
                    "carbohydrate": _NUMBER,
                    "fiber": _NUMBER,
                    "sugar": _NUMBER,
                    "saturated_fat": _NUMBER,
                    "sodium": _NUMBER,
                },
                "required": [
                    "name",
                    "calories",
                    "protein",
                    "fat",
                    "carbohydrate",
                    "fiber",
                    "sugar",
                    "saturated_fat",
                    "sodium",
                ],
                "additionalProperties": False,
            },
        }
    },
    "required": ["items"],
    "additionalProperties": False,
}

ESTIMATION_INSTRUCTIONS = (
    "You are a nutrition expert. Estimate the nutritional values for the given "
    "foods PER 100 GRAMS. Return one item per food, in the same order as given. "
    "Calories are kcal per 100g; protein, fat, carbohydrate, fiber, sugar and "
    "saturated_fat are grams per 100g; sodium is mg per 100g. "
    "Use standard nutritional reference values. If uncertain, provide "
    "conservative estimates based on similar foods. "
    "IMPORTANT: always return values PER 100 GRAMS, regardless of the portion "
    "size mentioned."
)


@dataclass(frozen=True)
class EstimationOutcome:
    """Foods estimated by the model and foods that remain unresolved."""

    estimated: list[ResolvedFood] = field(default_factory=list)
    still_failed: list[FailedFood] = field(default_factory=list)


@dataclass
class FallbackEstimator:
    """Estimate nutrients for failed foods with a single batched model call."""

    client: JsonModelClient
    model: str
    temperature: float | None = 0.3
    reasoning_effort: str | None = None
    store: bool = False

    async def estimate(self, failed: list[FailedFood]) -> EstimationOutcome:
        """Return estimates for every failed food, or all of them still failed."""
        if not failed:
            return EstimationOutcome()
        try:
            estimates = await self._request_estimates(failed)
        except Exception:
            _logger.exception(
                "AI nutrition estimation failed for %s foods", len(failed)
            )
            return EstimationOutcome(still_failed=list(failed))

        estimated = [
            ResolvedFood(
                query=failed_food.query,
                nutrients=_profile_from_estimate(estimate),
                provenance=ESTIMATED,
            )
            for failed_food, estimate in zip(failed, estimates, strict=True)
        ]
        _logger.info("AI nutrition estimation succeeded for %s foods", len(estimated))
        return EstimationOutcome(estimated=estimated)

    async def _request_estimates(
        self, failed: list[FailedFood]
    ) -> list[NutrientEstimate]:
        foods = ", ".join(describe_query(item.query) for item in failed)
        reply = await self.client.generate(
            model=self.model,
            instructions=ESTIMATION_INSTRUCTIONS,
            prompt=f"Estimate nutrition for these foods (per 100g): {foods}",
            schema=ESTIMATION_SCHEMA,
            schema_name="nutrition_estimate",
            temperature=self.temperature,
            reasoning_effort=self.reasoning_effort,
            store=self.store,
        )
        try:
            response = EstimationResponse.model_validate(reply.payload)
        except ValidationError as exc:
            raise EstimationBatchError(f"Malformed estimation response: {exc}") from exc
        if len(response.items) != len(failed):
            raise EstimationBatchError(
                f"Expected {len(failed)} estimates, got {len(response.items)}"
            )
        return response.items


def describe_query(query: FoodQuery) -> str:
    """Render a query as a food name with its portion as a size hint."""
    return f"{query.name} ({query.grams:g}g)"


def _profile_from_estimate(estimate: NutrientEstimate) -> NutrientProfile:
    return NutrientProfile(
        calories=estimate.calories,
        protein_g=estimate.protein,
        fat_g=estimate.fat,
        carbs_g=estimate.carbohydrate,
        fiber_g=estimate.fiber,
        sugar_g=estimate.sugar,
        saturated_fat_g=estimate.saturated_fat,
        sodium_mg=estimate.sodium,
    )
