"""Text rendering of meal aggregates and daily summaries."""

from eatcount.domain.meals import MEAL_TYPE_LABELS
from eatcount.domain.nutrition import ESTIMATED, MealAggregate
from eatcount.domain.stats import DailySummary

DISCLAIMER = (
    "_Note: this is an approximate estimate of the nutritional values and may "
    "differ from the actual values._"
)

_PROGRESS_CELLS = 10


def format_meal_summary(aggregate: MealAggregate, meal_type: str | None = None) -> str:
    """Render recognized items, failed items and totals as a chat message."""
    sections: list[str] = []
    if meal_type in MEAL_TYPE_LABELS:
        label, emoji = MEAL_TYPE_LABELS[meal_type]
        sections.append(f"{emoji} Meal: {label}")

    recognized = ["✅ Recognized:"]
    for item in aggregate.items:
        line = f"- {item.name} ({item.grams:.1f}g): {item.calories:.1f} kcal"
        if item.provenance == ESTIMATED:
            line += " (AI estimate)"
        recognized.append(line)
    if not aggregate.items:
        recognized.append("- nothing")
    sections.append("\n".join(recognized))

    if aggregate.failed:
        failed_lines = ["⚠️ Could not get nutrition data for:"]
        failed_lines.extend(
            f"- {failed.query.name} ({failed.query.grams:g} g)"
            for failed in aggregate.failed
        )
        sections.append("\n".join(failed_lines))

    totals = aggregate.totals
    sections.append(
        "📊 Summary:\n"
        f"Calories: {totals.calories:.1f} kcal\n"
        f"Protein: {totals.protein_g:.1f} g\n"
        f"Fat: {totals.fat_g:.1f} g\n"
        f"Carbs: {totals.carbs_g:.1f} g"
    )
    sections.append(DISCLAIMER)
    return "\n\n".join(sections)


def format_progress_bar(percentage: int) -> str:
    """Render target progress as a ten cell bar, capped at 100%."""
    filled = min(_PROGRESS_CELLS, max(0, round(percentage / 10)))
    return "🟩" * filled + "⬜" * (_PROGRESS_CELLS - filled)


def format_daily_summary(summary: DailySummary) -> str:
    """Render a day's totals and target progress as a chat message."""
    header = f"📅 Summary for {summary.day:%d/%m/%Y}"
    if not summary.meals_count:
        return f"{header}\n\nNo meals logged for this day."

    totals = summary.totals
    sections = [
        header,
        f"🍽️ Meals logged: {summary.meals_count}",
        f"🔥 Calories: {totals.calories:.0f} / {summary.target} kcal\n"
        f"{format_progress_bar(summary.percentage)} {summary.percentage}%",
    ]
    if summary.remaining > 0:
        sections.append(f"💫 Remaining: {summary.remaining:.0f} kcal")
    elif summary.remaining == 0:
        sections.append("✅ Target reached!")
    else:
        sections.append(f"⚠️ Over by: {-summary.remaining:.0f} kcal")

    breakdown = []
    for meal_type, macros in summary.by_meal_type.items():
        label, emoji = MEAL_TYPE_LABELS.get(meal_type, (meal_type.lower(), "🍴"))
        breakdown.append(f"{emoji} {label.capitalize()}: {macros.calories:.0f} kcal")
    if breakdown:
        sections.append("\n".join(breakdown))

    sections.append(
        "📊 Macros:\n"
        f"Protein: {totals.protein_g:.1f} g\n"
        f"Fat: {totals.fat_g:.1f} g\n"
        f"Carbs: {totals.carbs_g:.1f} g"
    )
    return "\n\n".join(sections)
