"""Portion scaling and meal-level aggregation."""

from collections.abc import Iterable

from eatcount.domain.nutrition import (
    FailedFood,
    ItemNutrients,
    MacroProfile,
    MealAggregate,
    ResolvedFood,
)


def scale_food(food: ResolvedFood) -> ItemNutrients:
    """Scale a per-100g record to the requested portion."""
    factor = food.query.grams / 100.0
    nutrients = food.nutrients
    return ItemNutrients(
        name=food.query.name,
        grams=food.query.grams,
        provenance=food.provenance,
        calories=nutrients.calories * factor,
        protein_g=nutrients.protein_g * factor,
        fat_g=nutrients.fat_g * factor,
        carbs_g=nutrients.carbs_g * factor,
        fiber_g=_scale_optional(nutrients.fiber_g, factor),
        sugar_g=_scale_optional(nutrients.sugar_g, factor),
        saturated_fat_g=_scale_optional(nutrients.saturated_fat_g, factor),
        sodium_mg=_scale_optional(nutrients.sodium_mg, factor),
        source_ref=food.source_ref,
    )


def sum_macros(items: Iterable[ItemNutrients]) -> MacroProfile:
    """Sum unrounded macros over items."""
    total = MacroProfile(0.0, 0.0, 0.0, 0.0)
    for item in items:
        total = MacroProfile(
            calories=total.calories + item.calories,
            protein_g=total.protein_g + item.protein_g,
            fat_g=total.fat_g + item.fat_g,
            carbs_g=total.carbs_g + item.carbs_g,
        )
    return total


def round_macros(macros: MacroProfile, digits: int = 1) -> MacroProfile:
    """Round each macro field independently."""
    return MacroProfile(
        calories=round(macros.calories, digits),
        protein_g=round(macros.protein_g, digits),
        fat_g=round(macros.fat_g, digits),
        carbs_g=round(macros.carbs_g, digits),
    )


def aggregate_meal(
    resolved: Iterable[ResolvedFood], failed: Iterable[FailedFood] = ()
) -> MealAggregate:
    """Build the meal aggregate; totals are rounded only after summation."""
    items = tuple(scale_food(food) for food in resolved)
    return MealAggregate(
        items=items,
        failed=tuple(failed),
        totals=round_macros(sum_macros(items)),
    )


def _scale_optional(value: float | None, factor: float) -> float | None:
    if value is None:
        return None
    return value * factor
