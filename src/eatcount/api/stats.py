"""Daily summary, weekly summary and calorie target endpoints."""

from __future__ import annotations

from dataclasses import asdict
from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request

from eatcount.api.dependencies import get_container, require_api_key
from eatcount.api.models import CalorieTargetRequest
from eatcount.services.formatting import format_daily_summary

router = APIRouter(
    prefix="/api", tags=["stats"], dependencies=[Depends(require_api_key)]
)


@router.get("/summary/daily")
async def daily_summary(
    request: Request,
    user_id: UUID,
    day: date | None = Query(default=None, alias="date"),
) -> dict[str, object]:
    """Return one day's totals measured against the calorie target."""
    summary = get_container(request).stats_service.daily_summary(user_id, day)
    return {
        "date": summary.day.isoformat(),
        "meals_count": summary.meals_count,
        "totals": asdict(summary.totals),
        "target": summary.target,
        "remaining": summary.remaining,
        "percentage": summary.percentage,
        "by_meal_type": {
            meal_type: asdict(macros)
            for meal_type, macros in summary.by_meal_type.items()
        },
        "message": format_daily_summary(summary),
    }


@router.get("/summary/weekly")
async def weekly_summary(
    request: Request, user_id: UUID, week_offset: int = 0
) -> dict[str, object]:
    """Return per-day totals for a Monday-to-Sunday week."""
    summary = get_container(request).stats_service.weekly_summary(
        user_id, week_offset=week_offset
    )
    return {
        "week_start": summary.week_start.isoformat(),
        "week_end": summary.week_end.isoformat(),
        "target": summary.target,
        "daily_totals": [
            {**asdict(entry), "day": entry.day.isoformat()} for entry in summary.daily
        ],
        "days_logged": summary.days_logged,
        "average_calories": summary.average_calories,
    }


@router.get("/target")
async def get_target(request: Request, user_id: UUID) -> dict[str, int | None]:
    """Return the stored calorie target, or null if none was set."""
    return {"target": get_container(request).stats_service.get_target(user_id)}


@router.put("/target")
async def set_target(body: CalorieTargetRequest, request: Request) -> dict[str, object]:
    """Store the daily calorie target."""
    target = get_container(request).stats_service.set_target(
        body.user_id, body.calories
    )
    return {"success": True, "target": target}
