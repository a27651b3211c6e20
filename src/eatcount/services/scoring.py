"""Ranking of food database candidates against a food query."""

from eatcount.domain.nutrition import FoodCandidate, FoodQuery

BASE_SCORE = 10
INCLUDE_BONUS = 2
EXCLUDE_PENALTY = 3
GENERIC_BONUS = 3
GENERIC_FOOD_TYPE = "Generic"


def score_candidate(query: FoodQuery, candidate: FoodCandidate) -> int:
    """Score a candidate by hint matches in its name and by its food type."""
    name = candidate.name.lower()
    score = BASE_SCORE
    for hint in query.include_hints:
        if hint.lower() in name:
            score += INCLUDE_BONUS
    for hint in query.exclude_hints:
        if hint.lower() in name:
            score -= EXCLUDE_PENALTY
    # branded entries carry noisier nutrient data
    if candidate.food_type == GENERIC_FOOD_TYPE:
        score += GENERIC_BONUS
    return score


def pick_best_candidate(
    query: FoodQuery, candidates: list[FoodCandidate]
) -> FoodCandidate | None:
    """Return the highest scoring candidate, keeping source order on ties."""
    best: FoodCandidate | None = None
    best_score = 0
    for candidate in candidates:
        score = score_candidate(query, candidate)
        if best is None or score > best_score:
            best = candidate
            best_score = score
    return best
