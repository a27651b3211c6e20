"""Resolution of food queries against the FatSecret database."""

import asyncio
import logging
from dataclasses import dataclass, field

import httpx

from eatcount.adapters.fatsecret_client import FatSecretClient
from eatcount.domain.nutrition import (
    MEASURED,
    FailedFood,
    FoodDetails,
    FoodQuery,
    NutrientProfile,
    ResolvedFood,
    Serving,
)
from eatcount.errors import (
    DetailFetchError,
    FatSecretApiError,
    FoodResolutionError,
    NoStandardServingError,
    NotFoundError,
    SearchError,
    SourceUnavailableError,
)
from eatcount.services.scoring import pick_best_candidate

_logger = logging.getLogger(__name__)

_STANDARD_UNITS = 100.0


@dataclass(frozen=True)
class ResolutionOutcome:
    """Disjoint lists of resolved and failed food queries."""

    resolved: list[ResolvedFood] = field(default_factory=list)
    failed: list[FailedFood] = field(default_factory=list)


@dataclass
class SourceResolver:
    """Resolve food queries to measured per-100g nutrients."""

    client: FatSecretClient

    async def resolve(self, queries: list[FoodQuery]) -> ResolutionOutcome:
        """Resolve all queries concurrently; never raises for a query's failure."""
        if not queries:
            return ResolutionOutcome()
        if not self.client.is_available:
            _logger.warning(
                "FatSecret is not configured, %s foods left unresolved", len(queries)
            )
            return _fail_all(
                queries, "FatSecret API not configured", SourceUnavailableError.kind
            )
        try:
            await self.client.initialize()
            results = await asyncio.gather(
                *(self._resolve_one(query) for query in queries)
            )
        except SourceUnavailableError as exc:
            _logger.warning("FatSecret unavailable: %s", exc)
            return _fail_all(queries, str(exc), exc.kind)
        except Exception as exc:
            _logger.exception("Critical error while resolving foods")
            return _fail_all(
                queries,
                f"Critical error while resolving foods: {exc}",
                FoodResolutionError.kind,
            )

        outcome = ResolutionOutcome()
        for result in results:
            if isinstance(result, ResolvedFood):
                outcome.resolved.append(result)
            else:
                outcome.failed.append(result)
        return outcome

    async def _resolve_one(self, query: FoodQuery) -> ResolvedFood | FailedFood:
        try:
            return await self._lookup(query)
        except FoodResolutionError as exc:
            _logger.warning("Could not resolve %r: %s", query.search_terms, exc)
            return FailedFood(query=query, error=str(exc), kind=exc.kind)
        except Exception as exc:
            _logger.exception("Unexpected error resolving %r", query.search_terms)
            return FailedFood(
                query=query,
                error=f'Error processing food item "{query.search_terms}": {exc}',
                kind=FoodResolutionError.kind,
            )

    async def _lookup(self, query: FoodQuery) -> ResolvedFood:
        try:
            candidates = await self.client.search_foods(query.search_terms)
        except (FatSecretApiError, httpx.HTTPError) as exc:
            raise SearchError(
                f'Error searching food item "{query.search_terms}": {exc}'
            ) from exc
        best = pick_best_candidate(query, candidates)
        if best is None:
            raise NotFoundError(f'No results found for "{query.search_terms}"')

        try:
            details = await self.client.get_food(best.food_id)
        except (FatSecretApiError, httpx.HTTPError) as exc:
            raise DetailFetchError(
                f'Error fetching food details for ID "{best.food_id}": {exc}'
            ) from exc
        if details is None:
            raise DetailFetchError(f'Food item with ID "{best.food_id}" does not exist')

        serving = _standard_serving(details)
        return ResolvedFood(
            query=query,
            nutrients=_profile_from_serving(serving),
            provenance=MEASURED,
            source_ref=details.food_id,
        )


def is_standard_serving(serving: Serving) -> bool:
    """Return True when a serving describes exactly 100 grams."""
    if (
        serving.number_of_units == _STANDARD_UNITS
        and serving.measurement_description == "g"
    ):
        return True
    return serving.serving_description == "100 g"


def _standard_serving(details: FoodDetails) -> Serving:
    for serving in details.servings:
        if is_standard_serving(serving):
            return serving
    raise NoStandardServingError(
        f'No servings found for food "{details.name}" with 100g measurement'
    )


def _profile_from_serving(serving: Serving) -> NutrientProfile:
    return NutrientProfile(
        calories=serving.calories,
        protein_g=serving.protein_g,
        fat_g=serving.fat_g,
        carbs_g=serving.carbs_g,
        fiber_g=serving.fiber_g,
        sugar_g=serving.sugar_g,
        saturated_fat_g=serving.saturated_fat_g,
        sodium_mg=serving.sodium_mg,
    )


def _fail_all(queries: list[FoodQuery], error: str, kind: str) -> ResolutionOutcome:
    return ResolutionOutcome(
        failed=[FailedFood(query=query, error=error, kind=kind) for query in queries]
    )
