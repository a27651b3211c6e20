"""Supabase repository for user settings."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from eatcount.services.stats import TargetRepository


@dataclass
class SupabaseUserSettingsRepository(TargetRepository):
    """Supabase implementation for the daily calorie target."""

    client: Client

    def get_calorie_target(self, user_id: UUID) -> int | None:
        """Return the stored calorie target for a user."""
        response = (
            self.client.table("user_settings")
            .select("calorie_target")
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        target = response.data[0].get("calorie_target")
        return int(target) if target is not None else None

    def set_calorie_target(self, user_id: UUID, calories: int) -> None:
        """Create or update the user's calorie target."""
        self.client.table("user_settings").upsert(
            {
                "user_id": str(user_id),
                "calorie_target": calories,
                "updated_at": datetime.now(tz=UTC).isoformat(),
            },
            on_conflict="user_id",
        ).execute()
