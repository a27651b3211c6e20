"""Meal logging service."""

import logging
from dataclasses import dataclass
from datetime import UTC, date, datetime
from typing import Protocol
from uuid import UUID
from zoneinfo import ZoneInfo

from eatcount.domain.meals import MEAL_TYPES, MealLogResult, MealRecord
from eatcount.domain.nutrition import ItemNutrients, MacroProfile
from eatcount.errors import MealLoggingError
from eatcount.services.extraction import ExtractionResult, FoodExtractor
from eatcount.services.formatting import format_meal_summary
from eatcount.services.meal_type import MealTypeDetector, time_based_meal_type
from eatcount.services.pipeline import MealPipeline
from eatcount.services.stats import local_day_range

_logger = logging.getLogger(__name__)


class MealRepository(Protocol):
    """Persistence interface for meals."""

    def create_meal(  # noqa: PLR0913
        self,
        user_id: UUID,
        meal_type: str,
        logged_at: datetime,
        description: str,
        totals: MacroProfile,
    ) -> UUID:
        """Create a meal row and return its id."""

    def create_meal_items(self, meal_id: UUID, items: list[ItemNutrients]) -> None:
        """Create item rows for a meal."""

    def record_usage(
        self, user_id: UUID, meal_id: UUID | None, usage: dict[str, int]
    ) -> None:
        """Store model token usage for a request."""

    def list_meals(
        self,
        user_id: UUID,
        start: datetime,
        end: datetime,
        meal_type: str | None = None,
    ) -> list[MealRecord]:
        """Return meals logged in ``[start, end)``, oldest first."""

    def get_meal(self, meal_id: UUID) -> MealRecord | None:
        """Return a meal by id."""

    def update_meal(
        self,
        meal_id: UUID,
        description: str | None = None,
        meal_type: str | None = None,
        logged_at: datetime | None = None,
    ) -> None:
        """Update the given meal fields."""

    def delete_meal(self, meal_id: UUID) -> bool:
        """Delete a meal with its items; return False if it did not exist."""


@dataclass
class MealLogService:
    """Service that extracts, quantifies and persists meals."""

    extractor: FoodExtractor
    pipeline: MealPipeline
    repository: MealRepository
    meal_type_detector: MealTypeDetector | None = None
    timezone_name: str = "UTC"

    async def preview(
        self, description: str, meal_type: str | None = None
    ) -> MealLogResult:
        """Compute the meal summary without persisting it."""
        requested_type = _normalize_meal_type(meal_type)
        extraction = await self._extract(description)
        resolved_type = requested_type or await self._detect_meal_type(
            description, datetime.now(tz=UTC)
        )
        aggregate = await self.pipeline.run(extraction.queries)
        return MealLogResult(
            meal_id=None,
            meal_type=resolved_type,
            aggregate=aggregate,
            message=format_meal_summary(aggregate, resolved_type),
        )

    async def log_meal(
        self,
        user_id: UUID,
        description: str,
        meal_type: str | None = None,
        logged_at: datetime | None = None,
    ) -> MealLogResult:
        """Compute the meal summary and persist the meal with its items."""
        logged_at = logged_at or datetime.now(tz=UTC)
        requested_type = _normalize_meal_type(meal_type)
        extraction = await self._extract(description)
        resolved_type = requested_type or await self._detect_meal_type(
            description, logged_at
        )
        aggregate = await self.pipeline.run(extraction.queries)
        meal_id: UUID | None = None
        try:
            meal_id = self.repository.create_meal(
                user_id=user_id,
                meal_type=resolved_type,
                logged_at=logged_at,
                description=description,
                totals=aggregate.totals,
            )
            self.repository.create_meal_items(meal_id, list(aggregate.items))
            if extraction.usage:
                self.repository.record_usage(user_id, meal_id, extraction.usage)
        except Exception as exc:
            _logger.exception("Failed to persist meal for user %s", user_id)
            if meal_id is not None:
                self._discard_meal(meal_id)
            raise MealLoggingError from exc

        _logger.info(
            "Meal %s logged: items=%s failed=%s calories=%s",
            meal_id,
            len(aggregate.items),
            len(aggregate.failed),
            aggregate.totals.calories,
        )
        return MealLogResult(
            meal_id=meal_id,
            meal_type=resolved_type,
            aggregate=aggregate,
            message=format_meal_summary(aggregate, resolved_type),
        )

    def list_meals(
        self, user_id: UUID, day: date | None = None, meal_type: str | None = None
    ) -> list[MealRecord]:
        """Return the meals of a local day, today by default."""
        tz = ZoneInfo(self.timezone_name)
        day = day or datetime.now(tz=tz).date()
        start, end = local_day_range(day, tz)
        return self.repository.list_meals(
            user_id, start, end, meal_type=_normalize_meal_type(meal_type)
        )

    def update_meal(
        self,
        meal_id: UUID,
        description: str | None = None,
        meal_type: str | None = None,
        logged_at: datetime | None = None,
    ) -> MealRecord | None:
        """Update meal fields and return the stored meal, or None if missing."""
        if description is None and meal_type is None and logged_at is None:
            raise ValueError("No fields to update")
        if self.repository.get_meal(meal_id) is None:
            return None
        self.repository.update_meal(
            meal_id,
            description=description,
            meal_type=_normalize_meal_type(meal_type),
            logged_at=logged_at,
        )
        return self.repository.get_meal(meal_id)

    def delete_meal(self, meal_id: UUID) -> bool:
        """Delete a meal and its items."""
        deleted = self.repository.delete_meal(meal_id)
        if deleted:
            _logger.info("Meal %s deleted", meal_id)
        return deleted

    async def _extract(self, description: str) -> ExtractionResult:
        try:
            extraction = await self.extractor.extract(description)
        except Exception as exc:
            _logger.exception("Food extraction failed")
            raise MealLoggingError from exc
        _logger.info("Extracted %s foods from description", len(extraction.queries))
        return extraction

    async def _detect_meal_type(self, description: str, logged_at: datetime) -> str:
        hour = logged_at.astimezone(ZoneInfo(self.timezone_name)).hour
        if self.meal_type_detector is None:
            return time_based_meal_type(hour).meal_type
        detection = await self.meal_type_detector.detect(description, hour)
        return detection.meal_type

    def _discard_meal(self, meal_id: UUID) -> None:
        """Remove a partially stored meal so no meal is left without items."""
        try:
            self.repository.delete_meal(meal_id)
        except Exception:
            _logger.exception("Failed to remove incomplete meal %s", meal_id)


def _normalize_meal_type(meal_type: str | None) -> str | None:
    if not meal_type:
        return None
    normalized = meal_type.upper()
    if normalized not in MEAL_TYPES:
        raise ValueError(f"Unknown meal type: {meal_type}")
    return normalized
