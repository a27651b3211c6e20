"""Tests for candidate scoring."""

from eatcount.domain.nutrition import FoodCandidate
from eatcount.services.scoring import pick_best_candidate, score_candidate
from tests.conftest import make_query


def _candidate(food_id: str, name: str, food_type: str = "Brand") -> FoodCandidate:
    return FoodCandidate(food_id=food_id, name=name, food_type=food_type)


def test_score_counts_hints_and_generic_bonus() -> None:
    query = make_query("pasta", include=("cooked", "spaghetti"), exclude=("dry",))

    assert score_candidate(query, _candidate("1", "Pasta")) == 10
    assert score_candidate(query, _candidate("2", "Spaghetti, Cooked")) == 14
    assert score_candidate(query, _candidate("3", "Dry Spaghetti")) == 9
    assert score_candidate(query, _candidate("4", "Pasta", "Generic")) == 13


def test_hint_matching_is_case_insensitive_substring() -> None:
    query = make_query("rice", include=("WHITE",), exclude=("Brown",))

    assert score_candidate(query, _candidate("1", "Long-grain whiteish rice")) == 12
    assert score_candidate(query, _candidate("2", "BROWN RICE")) == 7


def test_pick_best_prefers_generic_over_branded() -> None:
    query = make_query("chicken breast")
    candidates = [
        _candidate("1", "Chicken Breast Fillets"),
        _candidate("2", "Chicken Breast", "Generic"),
    ]

    assert pick_best_candidate(query, candidates).food_id == "2"


def test_pick_best_penalizes_excluded_terms() -> None:
    query = make_query("pasta", include=("cooked",), exclude=("sauce",))
    candidates = [
        _candidate("1", "Cooked Pasta with Sauce", "Generic"),
        _candidate("2", "Cooked Pasta", "Generic"),
    ]

    assert pick_best_candidate(query, candidates).food_id == "2"


def test_ties_keep_first_candidate_and_are_deterministic() -> None:
    query = make_query("apple")
    candidates = [
        _candidate("first", "Apple", "Generic"),
        _candidate("second", "Apple", "Generic"),
        _candidate("third", "Apple", "Generic"),
    ]

    winners = {pick_best_candidate(query, candidates).food_id for _ in range(20)}

    assert winners == {"first"}


def test_pick_best_returns_none_for_no_candidates() -> None:
    assert pick_best_candidate(make_query("anything"), []) is None
