"""Nutrition domain models."""

from dataclasses import dataclass, field
from typing import Literal

Provenance = Literal["measured", "estimated"]

MEASURED: Provenance = "measured"
ESTIMATED: Provenance = "estimated"


@dataclass(frozen=True)
class FoodQuery:
    """One food mention extracted from a meal description."""

    name: str
    grams: float
    search_terms: str
    include_hints: frozenset[str] = field(default_factory=frozenset)
    exclude_hints: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        if self.grams <= 0:
            raise ValueError(f"grams must be positive, got {self.grams}")


@dataclass(frozen=True)
class NutrientProfile:
    """Nutrients per 100 grams of a food, independent of where they came from."""

    calories: float
    protein_g: float
    fat_g: float
    carbs_g: float
    fiber_g: float | None = None
    sugar_g: float | None = None
    saturated_fat_g: float | None = None
    sodium_mg: float | None = None


@dataclass(frozen=True)
class MacroProfile:
    """Macronutrient totals."""

    calories: float
    protein_g: float
    fat_g: float
    carbs_g: float


@dataclass(frozen=True)
class ResolvedFood:
    """A food query paired with its per-100g nutrients."""

    query: FoodQuery
    nutrients: NutrientProfile
    provenance: Provenance
    source_ref: str | None = None


@dataclass(frozen=True)
class FailedFood:
    """A food query that could not be resolved, with the reason."""

    query: FoodQuery
    error: str
    kind: str


@dataclass(frozen=True)
class ItemNutrients:
    """Absolute nutrients for the portion of one resolved food."""

    name: str
    grams: float
    provenance: Provenance
    calories: float
    protein_g: float
    fat_g: float
    carbs_g: float
    fiber_g: float | None = None
    sugar_g: float | None = None
    saturated_fat_g: float | None = None
    sodium_mg: float | None = None
    source_ref: str | None = None


@dataclass(frozen=True)
class MealAggregate:
    """Per-item nutrients, rounded meal totals and the foods that failed."""

    items: tuple[ItemNutrients, ...]
    failed: tuple[FailedFood, ...]
    totals: MacroProfile


@dataclass(frozen=True)
class FoodCandidate:
    """Search hit returned by the food database."""

    food_id: str
    name: str
    food_type: str
    brand_name: str | None = None


@dataclass(frozen=True)
class Serving:
    """A single serving entry of a food with its nutrients."""

    serving_id: str
    serving_description: str
    number_of_units: float | None
    measurement_description: str
    metric_serving_amount: float | None
    metric_serving_unit: str | None
    calories: float
    protein_g: float
    fat_g: float
    carbs_g: float
    fiber_g: float | None = None
    sugar_g: float | None = None
    saturated_fat_g: float | None = None
    sodium_mg: float | None = None


@dataclass(frozen=True)
class FoodDetails:
    """Full food entry with all of its servings."""

    food_id: str
    name: str
    food_type: str
    servings: tuple[Serving, ...]
