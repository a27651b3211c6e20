"""Domain models for statistics."""

from dataclasses import dataclass, field
from datetime import date

from eatcount.domain.nutrition import MacroProfile


@dataclass(frozen=True)
class DailyTotals:
    """Daily total macros."""

    day: date
    calories: float
    protein_g: float
    fat_g: float
    carbs_g: float
    meals_count: int = 0


@dataclass(frozen=True)
class DailySummary:
    """One day of meals measured against the calorie target."""

    day: date
    meals_count: int
    totals: MacroProfile
    target: int
    remaining: float
    percentage: int
    by_meal_type: dict[str, MacroProfile] = field(default_factory=dict)


@dataclass(frozen=True)
class WeeklySummary:
    """Monday-to-Sunday totals per day."""

    week_start: date
    week_end: date
    target: int
    daily: tuple[DailyTotals, ...]
    days_logged: int
    average_calories: int
