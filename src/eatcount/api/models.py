"""Request models for the API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class MealPreviewRequest(BaseModel):
    """Free-text meal description to quantify."""

    description: str = Field(min_length=1, max_length=2000)
    meal_type: str | None = None


class MealLogRequest(MealPreviewRequest):
    """Meal description to quantify and store for a user."""

    user_id: UUID


class MealUpdateRequest(BaseModel):
    """Stored meal fields to change; omitted fields stay as they are."""

    description: str | None = Field(default=None, min_length=1, max_length=2000)
    meal_type: str | None = None
    logged_at: datetime | None = None


class CalorieTargetRequest(BaseModel):
    """Daily calorie target for a user."""

    user_id: UUID
    calories: int = Field(gt=0)
