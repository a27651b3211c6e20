"""Meal logging API endpoints."""

from __future__ import annotations

from dataclasses import asdict
from datetime import date
from typing import TYPE_CHECKING
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from eatcount.api.dependencies import get_container, require_api_key
from eatcount.api.models import MealLogRequest, MealPreviewRequest, MealUpdateRequest
from eatcount.errors import MealLoggingError

if TYPE_CHECKING:
    from eatcount.domain.meals import MealLogResult, MealRecord

router = APIRouter(
    prefix="/api/meals", tags=["meals"], dependencies=[Depends(require_api_key)]
)


@router.post("", status_code=status.HTTP_201_CREATED)
async def log_meal(body: MealLogRequest, request: Request) -> dict[str, object]:
    """Quantify a meal description and store the meal."""
    container = get_container(request)
    try:
        result = await container.meal_log_service.log_meal(
            user_id=body.user_id,
            description=body.description,
            meal_type=body.meal_type,
        )
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc
    except MealLoggingError as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY, detail=exc.user_message
        ) from exc
    return _result_payload(result)


@router.post("/preview")
async def preview_meal(body: MealPreviewRequest, request: Request) -> dict[str, object]:
    """Quantify a meal description without storing it."""
    container = get_container(request)
    try:
        result = await container.meal_log_service.preview(
            body.description, meal_type=body.meal_type
        )
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc
    except MealLoggingError as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY, detail=exc.user_message
        ) from exc
    return _result_payload(result)


@router.get("")
async def list_meals(
    request: Request,
    user_id: UUID,
    day: date | None = Query(default=None, alias="date"),
    meal_type: str | None = None,
) -> dict[str, object]:
    """List the meals of one day, today by default."""
    container = get_container(request)
    try:
        meals = container.meal_log_service.list_meals(
            user_id, day=day, meal_type=meal_type
        )
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc
    return {"meals": [_meal_payload(meal) for meal in meals]}


@router.put("/{meal_id}")
async def update_meal(
    meal_id: UUID, body: MealUpdateRequest, request: Request
) -> dict[str, object]:
    """Change the description, type or time of a stored meal."""
    if not body.model_dump(exclude_none=True):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="No fields to update"
        )
    container = get_container(request)
    try:
        meal = container.meal_log_service.update_meal(
            meal_id,
            description=body.description,
            meal_type=body.meal_type,
            logged_at=body.logged_at,
        )
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc
    if meal is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return _meal_payload(meal)


@router.delete("/{meal_id}")
async def delete_meal(meal_id: UUID, request: Request) -> dict[str, object]:
    """Delete a stored meal with its items."""
    container = get_container(request)
    if not container.meal_log_service.delete_meal(meal_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return {"success": True}


def _meal_payload(meal: MealRecord) -> dict[str, object]:
    return {
        "meal_id": str(meal.meal_id),
        "meal_type": meal.meal_type,
        "logged_at": meal.logged_at.isoformat(),
        "description": meal.description,
        "totals": asdict(meal.totals),
    }


def _result_payload(result: MealLogResult) -> dict[str, object]:
    aggregate = result.aggregate
    return {
        "meal_id": str(result.meal_id) if result.meal_id else None,
        "meal_type": result.meal_type,
        "message": result.message,
        "totals": asdict(aggregate.totals),
        "items": [asdict(item) for item in aggregate.items],
        "failed": [
            {
                "name": failed.query.name,
                "grams": failed.query.grams,
                "error": failed.error,
                "kind": failed.kind,
            }
            for failed in aggregate.failed
        ],
    }
