"""Tests for portion scaling and meal aggregation."""

import itertools

import pytest

from eatcount.domain.nutrition import (
    ESTIMATED,
    MEASURED,
    FailedFood,
    NutrientProfile,
    ResolvedFood,
)
from eatcount.services.aggregation import aggregate_meal, scale_food
from tests.conftest import make_query

_TOLERANCE = 0.05


def _resolved(name: str, grams: float, profile: NutrientProfile) -> ResolvedFood:
    return ResolvedFood(
        query=make_query(name, grams=grams), nutrients=profile, provenance=MEASURED
    )


def test_pasta_portion_is_scaled_from_per_100g() -> None:
    food = _resolved(
        "pasta al pomodoro",
        200,
        NutrientProfile(calories=150, protein_g=5, fat_g=2, carbs_g=28),
    )

    item = scale_food(food)

    assert item.calories == pytest.approx(300)
    assert item.protein_g == pytest.approx(10)
    assert item.fat_g == pytest.approx(4)
    assert item.carbs_g == pytest.approx(56)
    assert item.fiber_g is None


def test_scaling_is_linear_in_grams() -> None:
    profile = NutrientProfile(
        calories=123.4,
        protein_g=7.7,
        fat_g=3.3,
        carbs_g=19.1,
        fiber_g=2.2,
        sugar_g=4.4,
        saturated_fat_g=1.1,
        sodium_mg=321.0,
    )
    single = scale_food(_resolved("x", 85, profile))
    double = scale_food(_resolved("x", 170, profile))

    for field in (
        "calories",
        "protein_g",
        "fat_g",
        "carbs_g",
        "fiber_g",
        "sugar_g",
        "saturated_fat_g",
        "sodium_mg",
    ):
        assert getattr(double, field) == pytest.approx(
            2 * getattr(single, field), abs=_TOLERANCE
        )


def test_totals_match_item_sum_and_keep_failures() -> None:
    foods = [
        _resolved("a", 133, NutrientProfile(111.1, 3.33, 1.17, 20.05)),
        _resolved("b", 47, NutrientProfile(263.0, 9.1, 3.2, 49.0)),
        ResolvedFood(
            query=make_query("c", grams=250),
            nutrients=NutrientProfile(64.0, 1.2, 0.4, 14.3),
            provenance=ESTIMATED,
        ),
    ]
    failed = [FailedFood(query=make_query("d"), error="nope", kind="not_found")]

    aggregate = aggregate_meal(foods, failed)

    assert len(aggregate.items) == 3
    assert aggregate.failed == tuple(failed)
    assert aggregate.items[2].provenance == ESTIMATED
    for total_field in ("calories", "protein_g", "fat_g", "carbs_g"):
        item_sum = sum(getattr(item, total_field) for item in aggregate.items)
        total = getattr(aggregate.totals, total_field)
        assert abs(total - item_sum) <= _TOLERANCE
        assert total == round(total, 1)


def test_aggregation_is_order_independent() -> None:
    foods = [
        _resolved("a", 133, NutrientProfile(111.1, 3.33, 1.17, 20.05)),
        _resolved("b", 47, NutrientProfile(263.0, 9.1, 3.2, 49.0)),
        _resolved("c", 250, NutrientProfile(64.0, 1.2, 0.4, 14.3)),
    ]
    expected = aggregate_meal(foods).totals

    for permutation in itertools.permutations(foods):
        totals = aggregate_meal(permutation).totals
        assert totals.calories == pytest.approx(expected.calories, abs=_TOLERANCE)
        assert totals.protein_g == pytest.approx(expected.protein_g, abs=_TOLERANCE)
        assert totals.fat_g == pytest.approx(expected.fat_g, abs=_TOLERANCE)
        assert totals.carbs_g == pytest.approx(expected.carbs_g, abs=_TOLERANCE)


def test_empty_meal_has_zero_totals() -> None:
    aggregate = aggregate_meal([])

    assert aggregate.items == ()
    assert aggregate.totals.calories == 0
