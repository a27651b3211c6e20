"""Supabase repository for meals."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any
from uuid import UUID

from supabase import Client

from eatcount.domain.meals import MealRecord
from eatcount.domain.nutrition import ItemNutrients, MacroProfile
from eatcount.services.meals import MealRepository


@dataclass
class SupabaseMealRepository(MealRepository):
    """Supabase implementation for meals and their items."""

    client: Client

    def create_meal(  # noqa: PLR0913
        self,
        user_id: UUID,
        meal_type: str,
        logged_at: datetime,
        description: str,
        totals: MacroProfile,
    ) -> UUID:
        """Create a meal row and return its id."""
        response = (
            self.client.table("meals")
            .insert(
                {
                    "user_id": str(user_id),
                    "type": meal_type,
                    "logged_at": logged_at.isoformat(),
                    "description": description,
                    "total_calories": totals.calories,
                    "total_protein_g": totals.protein_g,
                    "total_fat_g": totals.fat_g,
                    "total_carbs_g": totals.carbs_g,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create meal")
        return UUID(response.data[0]["id"])

    def create_meal_items(self, meal_id: UUID, items: list[ItemNutrients]) -> None:
        """Create meal item rows."""
        payload = [
            {
                "meal_id": str(meal_id),
                "name": item.name,
                "amount_grams": item.grams,
                "calories": item.calories,
                "protein_g": item.protein_g,
                "fat_g": item.fat_g,
                "carbs_g": item.carbs_g,
                "fiber_g": item.fiber_g,
                "sugar_g": item.sugar_g,
                "saturated_fat_g": item.saturated_fat_g,
                "sodium_mg": item.sodium_mg,
                "provenance": item.provenance,
                "source_ref": item.source_ref,
            }
            for item in items
        ]
        if payload:
            self.client.table("meal_items").insert(payload).execute()

    def record_usage(
        self, user_id: UUID, meal_id: UUID | None, usage: dict[str, int]
    ) -> None:
        """Store model token usage for a request."""
        self.client.table("ai_usage").insert(
            {
                "user_id": str(user_id),
                "meal_id": str(meal_id) if meal_id else None,
                "input_tokens": usage.get("input_tokens", 0),
                "output_tokens": usage.get("output_tokens", 0),
                "total_tokens": usage.get("total_tokens", 0),
            }
        ).execute()

    def list_meals(
        self,
        user_id: UUID,
        start: datetime,
        end: datetime,
        meal_type: str | None = None,
    ) -> list[MealRecord]:
        """Return meals logged in ``[start, end)``, oldest first."""
        query = (
            self.client.table("meals")
            .select(_MEAL_COLUMNS)
            .eq("user_id", str(user_id))
            .gte("logged_at", start.isoformat())
            .lt("logged_at", end.isoformat())
        )
        if meal_type:
            query = query.eq("type", meal_type)
        response = query.order("logged_at").execute()
        return [_parse_meal(row) for row in response.data or []]

    def get_meal(self, meal_id: UUID) -> MealRecord | None:
        """Return a meal by id."""
        response = (
            self.client.table("meals")
            .select(_MEAL_COLUMNS)
            .eq("id", str(meal_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_meal(response.data[0])

    def update_meal(
        self,
        meal_id: UUID,
        description: str | None = None,
        meal_type: str | None = None,
        logged_at: datetime | None = None,
    ) -> None:
        """Update the given meal fields."""
        payload: dict[str, Any] = {}
        if description is not None:
            payload["description"] = description
        if meal_type is not None:
            payload["type"] = meal_type
        if logged_at is not None:
            payload["logged_at"] = logged_at.isoformat()
        if payload:
            self.client.table("meals").update(payload).eq(
                "id", str(meal_id)
            ).execute()

    def delete_meal(self, meal_id: UUID) -> bool:
        """Delete a meal with its items."""
        self.client.table("meal_items").delete().eq("meal_id", str(meal_id)).execute()
        response = self.client.table("meals").delete().eq("id", str(meal_id)).execute()
        return bool(response.data)


_MEAL_COLUMNS = (
    "id, type, logged_at, description, "
    "total_calories, total_protein_g, total_fat_g, total_carbs_g"
)


def _parse_meal(row: dict[str, Any]) -> MealRecord:
    return MealRecord(
        meal_id=UUID(str(row["id"])),
        meal_type=str(row["type"]),
        logged_at=datetime.fromisoformat(str(row["logged_at"])),
        description=str(row.get("description") or ""),
        totals=MacroProfile(
            calories=float(row.get("total_calories") or 0),
            protein_g=float(row.get("total_protein_g") or 0),
            fat_g=float(row.get("total_fat_g") or 0),
            carbs_g=float(row.get("total_carbs_g") or 0),
        ),
    )
