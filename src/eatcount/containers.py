"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from eatcount.adapters.fatsecret_client import FatSecretClient, HttpxFatSecretClient
from eatcount.adapters.openai_json_client import OpenAIJsonClient
from eatcount.adapters.supabase_meal_repository import SupabaseMealRepository
from eatcount.adapters.supabase_user_settings_repository import (
    SupabaseUserSettingsRepository,
)
from eatcount.config import Settings
from eatcount.services.estimator import FallbackEstimator
from eatcount.services.extraction import OpenAIFoodExtractor
from eatcount.services.meal_type import OpenAIMealTypeDetector
from eatcount.services.meals import MealLogService
from eatcount.services.pipeline import MealPipeline
from eatcount.services.resolver import SourceResolver
from eatcount.services.stats import StatsService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    fatsecret_client: FatSecretClient
    meal_pipeline: MealPipeline
    meal_log_service: MealLogService
    stats_service: StatsService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    fatsecret_client = HttpxFatSecretClient.create(
        client_id=resolved_settings.fatsecret_client_id,
        client_secret=resolved_settings.fatsecret_client_secret,
        token_url=resolved_settings.fatsecret_token_url,
        api_url=resolved_settings.fatsecret_api_url,
        scope=resolved_settings.fatsecret_scope,
    )
    openai_client = OpenAIJsonClient.create(resolved_settings.openai_api_key)
    model_options = {
        "model": resolved_settings.openai_model,
        "temperature": resolved_settings.openai_temperature,
        "reasoning_effort": resolved_settings.openai_reasoning_effort,
        "store": resolved_settings.openai_store,
    }
    meal_pipeline = MealPipeline(
        resolver=SourceResolver(fatsecret_client),
        estimator=FallbackEstimator(client=openai_client, **model_options),
    )
    meal_repository = SupabaseMealRepository(supabase_client)
    meal_log_service = MealLogService(
        extractor=OpenAIFoodExtractor(client=openai_client, **model_options),
        pipeline=meal_pipeline,
        repository=meal_repository,
        meal_type_detector=OpenAIMealTypeDetector(
            client=openai_client,
            model=resolved_settings.openai_model,
            reasoning_effort=resolved_settings.openai_reasoning_effort,
            store=resolved_settings.openai_store,
        ),
        timezone_name=resolved_settings.timezone,
    )
    stats_service = StatsService(
        repository=meal_repository,
        targets=SupabaseUserSettingsRepository(supabase_client),
        timezone_name=resolved_settings.timezone,
        default_target=resolved_settings.default_calorie_target,
    )

    async def close_resources() -> None:
        await fatsecret_client.close()

    return AppContainer(
        settings=resolved_settings,
        fatsecret_client=fatsecret_client,
        meal_pipeline=meal_pipeline,
        meal_log_service=meal_log_service,
        stats_service=stats_service,
        close_resources=close_resources,
    )
