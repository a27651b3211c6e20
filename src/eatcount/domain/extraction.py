"""Models for structured model outputs."""

from pydantic import BaseModel, Field

from eatcount.domain.nutrition import FoodQuery


class ExtractedFood(BaseModel):
    """Single food mention returned by the extraction model."""

    name: str = Field(min_length=1)
    grams: float = Field(gt=0)
    query: str = Field(min_length=1)
    include_terms: list[str] = Field(default_factory=list)
    exclude_terms: list[str] = Field(default_factory=list)

    def to_query(self) -> FoodQuery:
        """Convert into an immutable food query."""
        return FoodQuery(
            name=self.name,
            grams=self.grams,
            search_terms=self.query,
            include_hints=frozenset(term for term in self.include_terms if term),
            exclude_hints=frozenset(term for term in self.exclude_terms if term),
        )


class ExtractionResponse(BaseModel):
    """Structured output for food extraction."""

    items: list[ExtractedFood]


class NutrientEstimate(BaseModel):
    """Per-100g nutrient estimate for one food."""

    name: str
    calories: float = Field(ge=0)
    protein: float = Field(ge=0)
    fat: float = Field(ge=0)
    carbohydrate: float = Field(ge=0)
    fiber: float = Field(ge=0)
    sugar: float = Field(ge=0)
    saturated_fat: float = Field(ge=0)
    sodium: float = Field(ge=0)


class EstimationResponse(BaseModel):
    """Structured output for batched nutrient estimation."""

    items: list[NutrientEstimate]


class MealTypeReply(BaseModel):
    """Structured output for meal type detection."""

    meal_type: str
    confidence: str
    reason: str
