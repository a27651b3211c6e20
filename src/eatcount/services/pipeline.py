"""Meal nutrition pipeline: source resolution, AI fallback, aggregation."""

import logging
from dataclasses import dataclass

from eatcount.domain.nutrition import FoodQuery, MealAggregate
from eatcount.services.aggregation import aggregate_meal
from eatcount.services.estimator import FallbackEstimator
from eatcount.services.resolver import SourceResolver

_logger = logging.getLogger(__name__)


@dataclass
class MealPipeline:
    """Turn food queries into a meal aggregate."""

    resolver: SourceResolver
    estimator: FallbackEstimator

    async def run(self, queries: list[FoodQuery]) -> MealAggregate:
        """Resolve against the database first, then estimate what is left."""
        resolution = await self.resolver.resolve(queries)
        _logger.info(
            "FatSecret results: resolved=%s failed=%s",
            len(resolution.resolved),
            len(resolution.failed),
        )
        resolved = list(resolution.resolved)
        failed = list(resolution.failed)
        if failed:
            _logger.info("Using AI fallback for %s foods", len(failed))
            estimation = await self.estimator.estimate(failed)
            resolved.extend(estimation.estimated)
            failed = estimation.still_failed
            _logger.info(
                "After AI fallback: resolved=%s still_failed=%s",
                len(resolved),
                len(failed),
            )
        return aggregate_meal(resolved, failed)
