"""Domain models for meal logging."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from eatcount.domain.nutrition import MacroProfile, MealAggregate

BREAKFAST = "BREAKFAST"
LUNCH = "LUNCH"
DINNER = "DINNER"
SNACK = "SNACK"

MEAL_TYPES = (BREAKFAST, LUNCH, DINNER, SNACK)

MEAL_TYPE_LABELS = {
    BREAKFAST: ("breakfast", "🍳"),
    LUNCH: ("lunch", "🍝"),
    DINNER: ("dinner", "🍽️"),
    SNACK: ("snack", "🍌"),
}


def meal_type_for_hour(hour: int) -> str:
    """Guess the meal type from the local hour of the day."""
    if 5 <= hour < 11:  # noqa: PLR2004
        return BREAKFAST
    if 11 <= hour < 15:  # noqa: PLR2004
        return LUNCH
    if 15 <= hour < 19:  # noqa: PLR2004
        return SNACK
    if 19 <= hour < 23:  # noqa: PLR2004
        return DINNER
    return SNACK


@dataclass(frozen=True)
class MealLogResult:
    """Outcome of logging or previewing a meal."""

    meal_id: UUID | None
    meal_type: str
    aggregate: MealAggregate
    message: str


HIGH_CONFIDENCE = "high"
MEDIUM_CONFIDENCE = "medium"
LOW_CONFIDENCE = "low"


@dataclass(frozen=True)
class MealTypeDetection:
    """Meal type inferred from a description and the time of day."""

    meal_type: str
    confidence: str
    reason: str


@dataclass(frozen=True)
class MealRecord:
    """Stored meal with its totals."""

    meal_id: UUID
    meal_type: str
    logged_at: datetime
    description: str
    totals: MacroProfile
