"""Daily and weekly statistics measured against the calorie target."""

from dataclasses import dataclass
from datetime import UTC, date, datetime, time, timedelta
from typing import Protocol
from uuid import UUID
from zoneinfo import ZoneInfo

from eatcount.domain.meals import MealRecord
from eatcount.domain.nutrition import MacroProfile
from eatcount.domain.stats import DailySummary, DailyTotals, WeeklySummary
from eatcount.services.aggregation import round_macros

DEFAULT_CALORIE_TARGET = 2000


class StatsRepository(Protocol):
    """Persistence interface for meal statistics."""

    def list_meals(
        self,
        user_id: UUID,
        start: datetime,
        end: datetime,
        meal_type: str | None = None,
    ) -> list[MealRecord]:
        """Return meals logged in ``[start, end)``, oldest first."""


class TargetRepository(Protocol):
    """Persistence interface for the daily calorie target."""

    def get_calorie_target(self, user_id: UUID) -> int | None:
        """Return the user's target if set."""

    def set_calorie_target(self, user_id: UUID, calories: int) -> None:
        """Store the user's target."""


def local_day_range(day: date, tz: ZoneInfo) -> tuple[datetime, datetime]:
    """Return the UTC bounds of a local calendar day."""
    start = datetime.combine(day, time.min, tzinfo=tz)
    end = start + timedelta(days=1)
    return start.astimezone(UTC), end.astimezone(UTC)


@dataclass
class StatsService:
    """Service for daily and weekly summaries in one timezone."""

    repository: StatsRepository
    targets: TargetRepository
    timezone_name: str = "UTC"
    default_target: int = DEFAULT_CALORIE_TARGET

    def get_target(self, user_id: UUID) -> int | None:
        """Return the stored calorie target, if any."""
        return self.targets.get_calorie_target(user_id)

    def set_target(self, user_id: UUID, calories: int) -> int:
        """Store a positive calorie target."""
        if calories <= 0:
            raise ValueError("Calorie target must be positive")
        self.targets.set_calorie_target(user_id, calories)
        return calories

    def daily_summary(self, user_id: UUID, day: date | None = None) -> DailySummary:
        """Return one day's totals, per meal type breakdown and target progress."""
        tz = ZoneInfo(self.timezone_name)
        day = day or datetime.now(tz=tz).date()
        start, end = local_day_range(day, tz)
        meals = self.repository.list_meals(user_id, start, end)

        totals = _sum_meals(meals)
        by_type: dict[str, MacroProfile] = {}
        for meal in meals:
            by_type[meal.meal_type] = _add(
                by_type.get(meal.meal_type, MacroProfile(0.0, 0.0, 0.0, 0.0)),
                meal.totals,
            )

        target = self._target_or_default(user_id)
        return DailySummary(
            day=day,
            meals_count=len(meals),
            totals=round_macros(totals),
            target=target,
            remaining=round(target - totals.calories, 1),
            percentage=round(totals.calories / target * 100),
            by_meal_type={
                meal_type: round_macros(macros) for meal_type, macros in by_type.items()
            },
        )

    def weekly_summary(
        self, user_id: UUID, week_offset: int = 0, today: date | None = None
    ) -> WeeklySummary:
        """Return Monday-to-Sunday totals; ``week_offset=-1`` is last week."""
        tz = ZoneInfo(self.timezone_name)
        today = today or datetime.now(tz=tz).date()
        week_start = today - timedelta(days=today.weekday(), weeks=-week_offset)
        start, _ = local_day_range(week_start, tz)
        _, end = local_day_range(week_start + timedelta(days=6), tz)
        meals = self.repository.list_meals(user_id, start, end)

        daily = tuple(
            _aggregate_day(week_start + timedelta(days=offset), meals, tz)
            for offset in range(7)
        )
        logged = [entry for entry in daily if entry.meals_count]
        average = (
            round(sum(entry.calories for entry in logged) / len(logged))
            if logged
            else 0
        )
        return WeeklySummary(
            week_start=week_start,
            week_end=week_start + timedelta(days=6),
            target=self._target_or_default(user_id),
            daily=daily,
            days_logged=len(logged),
            average_calories=average,
        )

    def _target_or_default(self, user_id: UUID) -> int:
        return self.targets.get_calorie_target(user_id) or self.default_target


def _aggregate_day(day: date, meals: list[MealRecord], tz: ZoneInfo) -> DailyTotals:
    day_meals = [meal for meal in meals if meal.logged_at.astimezone(tz).date() == day]
    totals = round_macros(_sum_meals(day_meals))
    return DailyTotals(
        day=day,
        calories=totals.calories,
        protein_g=totals.protein_g,
        fat_g=totals.fat_g,
        carbs_g=totals.carbs_g,
        meals_count=len(day_meals),
    )


def _sum_meals(meals: list[MealRecord]) -> MacroProfile:
    total = MacroProfile(0.0, 0.0, 0.0, 0.0)
    for meal in meals:
        total = _add(total, meal.totals)
    return total


def _add(left: MacroProfile, right: MacroProfile) -> MacroProfile:
    return MacroProfile(
        calories=left.calories + right.calories,
        protein_g=left.protein_g + right.protein_g,
        fat_g=left.fat_g + right.fat_g,
        carbs_g=left.carbs_g + right.carbs_g,
    )
