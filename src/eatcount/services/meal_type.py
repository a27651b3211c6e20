"""Meal type detection from a description and the local hour."""

import logging
from dataclasses import dataclass
from typing import Protocol

from eatcount.adapters.openai_json_client import JsonModelClient
from eatcount.domain.extraction import MealTypeReply
from eatcount.domain.meals import (
    BREAKFAST,
    DINNER,
    LOW_CONFIDENCE,
    LUNCH,
    MEAL_TYPES,
    SNACK,
    MealTypeDetection,
    meal_type_for_hour,
)

_logger = logging.getLogger(__name__)

MEAL_TYPE_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "meal_type": {"type": "string", "enum": list(MEAL_TYPES)},
        "confidence": {"type": "string", "enum": ["high", "medium", "low"]},
        "reason": {"type": "string"},
    },
    "required": ["meal_type", "confidence", "reason"],
    "additionalProperties": False,
}

MEAL_TYPE_INSTRUCTIONS = (
    "You are a meal type classifier. Decide which meal the user's message "
    f"describes: {BREAKFAST} (morning meal, coffee with pastries), {LUNCH} "
    f"(midday meal), {DINNER} (evening meal) or {SNACK} (small bites between "
    "meals). Look for explicit words in any language, such as breakfast, "
    "lunch, dinner, snack, colazione, pranzo, cena, spuntino or merenda, and "
    "for time references such as 'this morning' or 'tonight'. "
    "When the text gives no clear indication, use the current time: "
    "05:00-10:30 breakfast, 11:00-14:30 lunch, 15:00-18:00 snack, "
    "18:30-22:00 dinner, otherwise snack. "
    "Confidence is high when an explicit keyword is found, medium when "
    "inferred from context, low when based on the time only. "
    "Keep the reason to one short sentence."
)

_PERIOD_REASONS = {
    BREAKFAST: "Based on the time (morning)",
    LUNCH: "Based on the time (midday)",
    DINNER: "Based on the time (evening)",
}


class MealTypeDetector(Protocol):
    """Interface for meal type detection."""

    async def detect(self, description: str, hour: int) -> MealTypeDetection:
        """Return the meal type for a description logged at a local hour."""


def time_based_meal_type(hour: int) -> MealTypeDetection:
    """Detect the meal type from the local hour alone."""
    meal_type = meal_type_for_hour(hour)
    if meal_type == SNACK:
        reason = (
            "Based on the time (afternoon)"
            if 15 <= hour < 19  # noqa: PLR2004
            else "Based on the time (night)"
        )
    else:
        reason = _PERIOD_REASONS[meal_type]
    return MealTypeDetection(
        meal_type=meal_type, confidence=LOW_CONFIDENCE, reason=reason
    )


def describe_hour(hour: int) -> str:
    """Return the part of the day an hour belongs to."""
    if 5 <= hour < 12:  # noqa: PLR2004
        return "morning"
    if 12 <= hour < 17:  # noqa: PLR2004
        return "afternoon"
    if 17 <= hour < 21:  # noqa: PLR2004
        return "evening"
    return "night"


@dataclass
class OpenAIMealTypeDetector(MealTypeDetector):
    """Meal type detector that asks the model and falls back to the clock."""

    client: JsonModelClient
    model: str
    temperature: float | None = 0.1
    reasoning_effort: str | None = None
    store: bool = False

    async def detect(self, description: str, hour: int) -> MealTypeDetection:
        """Classify the description; any model failure uses the time of day."""
        try:
            reply = await self.client.generate(
                model=self.model,
                instructions=MEAL_TYPE_INSTRUCTIONS,
                prompt=(
                    f"Current time: {hour}:00 ({describe_hour(hour)})\n\n"
                    f'User message: "{description}"'
                ),
                schema=MEAL_TYPE_SCHEMA,
                schema_name="meal_type",
                temperature=self.temperature,
                reasoning_effort=self.reasoning_effort,
                store=self.store,
            )
            parsed = MealTypeReply.model_validate(reply.payload)
        except Exception:
            _logger.exception("Meal type detection failed")
            return time_based_meal_type(hour)

        meal_type = parsed.meal_type.upper()
        if meal_type not in MEAL_TYPES:
            _logger.warning("Model returned unknown meal type %r", parsed.meal_type)
            return time_based_meal_type(hour)
        _logger.info(
            "Meal type detection: %s (%s) - %s",
            meal_type,
            parsed.confidence,
            parsed.reason,
        )
        return MealTypeDetection(
            meal_type=meal_type, confidence=parsed.confidence, reason=parsed.reason
        )
