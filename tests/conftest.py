"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4

import pytest

from eatcount.adapters.fatsecret_client import FatSecretClient
from eatcount.adapters.openai_json_client import JsonModelClient, ModelReply
from eatcount.config import Settings
from eatcount.containers import AppContainer
from eatcount.domain.meals import MealRecord, MealTypeDetection
from eatcount.domain.nutrition import (
    FoodCandidate,
    FoodDetails,
    FoodQuery,
    ItemNutrients,
    MacroProfile,
    Serving,
)
from eatcount.errors import SourceUnavailableError
from eatcount.services.estimator import FallbackEstimator
from eatcount.services.extraction import ExtractionResult, FoodExtractor
from eatcount.services.meal_type import MealTypeDetector
from eatcount.services.meals import MealLogService, MealRepository
from eatcount.services.pipeline import MealPipeline
from eatcount.services.resolver import SourceResolver
from eatcount.services.stats import StatsService, TargetRepository


def make_query(
    name: str,
    grams: float = 100,
    include: tuple[str, ...] = (),
    exclude: tuple[str, ...] = (),
) -> FoodQuery:
    """Build a query whose search terms equal its name."""
    return FoodQuery(
        name=name,
        grams=grams,
        search_terms=name,
        include_hints=frozenset(include),
        exclude_hints=frozenset(exclude),
    )


def make_serving(  # noqa: PLR0913
    calories: float,
    protein_g: float,
    fat_g: float,
    carbs_g: float,
    *,
    description: str = "100 g",
    units: float | None = 100.0,
    measurement: str = "g",
) -> Serving:
    """Build a serving, by default a standard 100 g one."""
    return Serving(
        serving_id="1",
        serving_description=description,
        number_of_units=units,
        measurement_description=measurement,
        metric_serving_amount=units,
        metric_serving_unit="g",
        calories=calories,
        protein_g=protein_g,
        fat_g=fat_g,
        carbs_g=carbs_g,
        fiber_g=1.0,
        sugar_g=2.0,
        saturated_fat_g=0.5,
        sodium_mg=10.0,
    )


def make_food(food_id: str, name: str, *servings: Serving) -> FoodDetails:
    """Build food details with the given servings."""
    return FoodDetails(
        food_id=food_id, name=name, food_type="Generic", servings=servings
    )


@dataclass
class FakeFatSecretClient(FatSecretClient):
    """Fake FatSecret client keyed by search term and food id."""

    candidates: dict[str, list[FoodCandidate]] = field(default_factory=dict)
    foods: dict[str, FoodDetails | None] = field(default_factory=dict)
    search_errors: dict[str, Exception] = field(default_factory=dict)
    detail_errors: dict[str, Exception] = field(default_factory=dict)
    available: bool = True
    initialize_error: Exception | None = None
    search_calls: list[str] = field(default_factory=list)
    food_calls: list[str] = field(default_factory=list)

    @property
    def is_available(self) -> bool:
        return self.available

    async def initialize(self) -> None:
        if not self.available:
            raise SourceUnavailableError("FatSecret credentials are not configured")
        if self.initialize_error is not None:
            raise self.initialize_error

    async def search_foods(self, term: str) -> list[FoodCandidate]:
        self.search_calls.append(term)
        if term in self.search_errors:
            raise self.search_errors[term]
        return self.candidates.get(term, [])

    async def get_food(self, food_id: str) -> FoodDetails | None:
        self.food_calls.append(food_id)
        if food_id in self.detail_errors:
            raise self.detail_errors[food_id]
        return self.foods.get(food_id)

    def add_food(self, term: str, food: FoodDetails) -> None:
        """Register a single search hit that resolves to the given food."""
        self.candidates[term] = [
            FoodCandidate(food_id=food.food_id, name=food.name, food_type="Generic")
        ]
        self.foods[food.food_id] = food


def estimate_item(name: str, calories: float = 100.0) -> dict[str, object]:
    """Build a per-100g estimate as returned by the model."""
    return {
        "name": name,
        "calories": calories,
        "protein": 2.0,
        "fat": 1.0,
        "carbohydrate": 20.0,
        "fiber": 1.5,
        "sugar": 3.0,
        "saturated_fat": 0.2,
        "sodium": 5.0,
    }


@dataclass
class FakeJsonModelClient(JsonModelClient):
    """Fake model client returning a fixed payload or raising an error."""

    payload: dict[str, object] = field(default_factory=lambda: {"items": []})
    usage: dict[str, int] = field(
        default_factory=lambda: {
            "input_tokens": 10,
            "output_tokens": 5,
            "total_tokens": 15,
        }
    )
    error: Exception | None = None
    calls: list[dict[str, object]] = field(default_factory=list)

    async def generate(  # noqa: PLR0913
        self,
        *,
        model: str,
        instructions: str,
        prompt: str,
        schema: dict[str, object],
        schema_name: str,
        temperature: float | None = None,
        reasoning_effort: str | None = None,
        store: bool = False,
    ) -> ModelReply:
        self.calls.append(
            {
                "model": model,
                "instructions": instructions,
                "prompt": prompt,
                "schema_name": schema_name,
                "temperature": temperature,
            }
        )
        if self.error is not None:
            raise self.error
        return ModelReply(payload=self.payload, usage=self.usage)


@dataclass
class FakeFoodExtractor(FoodExtractor):
    """Fake extractor returning fixed queries."""

    queries: list[FoodQuery] = field(default_factory=list)
    usage: dict[str, int] = field(default_factory=lambda: {"total_tokens": 42})
    error: Exception | None = None
    descriptions: list[str] = field(default_factory=list)

    async def extract(self, description: str) -> ExtractionResult:
        self.descriptions.append(description)
        if self.error is not None:
            raise self.error
        return ExtractionResult(queries=list(self.queries), usage=self.usage)


@dataclass
class InMemoryMealRepository(MealRepository):
    """In-memory meal repository for tests."""

    meals: dict[UUID, dict[str, object]] = field(default_factory=dict)
    items: dict[UUID, list[ItemNutrients]] = field(default_factory=dict)
    usage: list[dict[str, object]] = field(default_factory=list)
    fail_on_create: bool = False
    fail_on_items: bool = False

    def create_meal(  # noqa: PLR0913
        self,
        user_id: UUID,
        meal_type: str,
        logged_at: datetime,
        description: str,
        totals: MacroProfile,
    ) -> UUID:
        if self.fail_on_create:
            raise RuntimeError("Failed to create meal")
        meal_id = uuid4()
        self.meals[meal_id] = {
            "user_id": user_id,
            "type": meal_type,
            "logged_at": logged_at,
            "description": description,
            "totals": totals,
        }
        return meal_id

    def create_meal_items(self, meal_id: UUID, items: list[ItemNutrients]) -> None:
        if self.fail_on_items:
            raise RuntimeError("meal_items insert failed")
        self.items[meal_id] = list(items)

    def record_usage(
        self, user_id: UUID, meal_id: UUID | None, usage: dict[str, int]
    ) -> None:
        self.usage.append({"user_id": user_id, "meal_id": meal_id, **usage})

    def list_meals(
        self,
        user_id: UUID,
        start: datetime,
        end: datetime,
        meal_type: str | None = None,
    ) -> list[MealRecord]:
        records = [
            self._record(meal_id)
            for meal_id, meal in self.meals.items()
            if meal["user_id"] == user_id
            and start <= meal["logged_at"] < end
            and (meal_type is None or meal["type"] == meal_type)
        ]
        return sorted(records, key=lambda record: record.logged_at)

    def get_meal(self, meal_id: UUID) -> MealRecord | None:
        if meal_id not in self.meals:
            return None
        return self._record(meal_id)

    def update_meal(
        self,
        meal_id: UUID,
        description: str | None = None,
        meal_type: str | None = None,
        logged_at: datetime | None = None,
    ) -> None:
        meal = self.meals[meal_id]
        if description is not None:
            meal["description"] = description
        if meal_type is not None:
            meal["type"] = meal_type
        if logged_at is not None:
            meal["logged_at"] = logged_at

    def delete_meal(self, meal_id: UUID) -> bool:
        self.items.pop(meal_id, None)
        return self.meals.pop(meal_id, None) is not None

    def add_meal(
        self,
        user_id: UUID,
        logged_at: datetime,
        calories: float,
        meal_type: str = "LUNCH",
    ) -> UUID:
        """Store a meal with fixed macros derived from its calories."""
        return self.create_meal(
            user_id=user_id,
            meal_type=meal_type,
            logged_at=logged_at,
            description=f"{meal_type.lower()} meal",
            totals=MacroProfile(calories, calories / 20, calories / 50, calories / 10),
        )

    def _record(self, meal_id: UUID) -> MealRecord:
        meal = self.meals[meal_id]
        return MealRecord(
            meal_id=meal_id,
            meal_type=meal["type"],
            logged_at=meal["logged_at"],
            description=meal["description"],
            totals=meal["totals"],
        )


@dataclass
class InMemoryTargetRepository(TargetRepository):
    """In-memory calorie target storage for tests."""

    targets: dict[UUID, int] = field(default_factory=dict)

    def get_calorie_target(self, user_id: UUID) -> int | None:
        return self.targets.get(user_id)

    def set_calorie_target(self, user_id: UUID, calories: int) -> None:
        self.targets[user_id] = calories


@dataclass
class FakeMealTypeDetector(MealTypeDetector):
    """Fake detector returning a fixed meal type and recording its inputs."""

    meal_type: str = "DINNER"
    calls: list[tuple[str, int]] = field(default_factory=list)

    async def detect(self, description: str, hour: int) -> MealTypeDetection:
        self.calls.append((description, hour))
        return MealTypeDetection(
            meal_type=self.meal_type, confidence="high", reason="keyword"
        )


@pytest.fixture
def settings() -> Settings:
    return Settings(
        openai_api_key="openai-key",
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
        fatsecret_client_id="client-id",
        fatsecret_client_secret="client-secret",
        api_key="api-key",
    )


@pytest.fixture
def fatsecret_client() -> FakeFatSecretClient:
    client = FakeFatSecretClient()
    client.add_food(
        "pasta al pomodoro",
        make_food("1001", "Pasta with Tomato Sauce", make_serving(150, 5, 2, 28)),
    )
    return client


@pytest.fixture
def model_client() -> FakeJsonModelClient:
    return FakeJsonModelClient()


@pytest.fixture
def extractor() -> FakeFoodExtractor:
    return FakeFoodExtractor(queries=[make_query("pasta al pomodoro", grams=200)])


@pytest.fixture
def meal_repository() -> InMemoryMealRepository:
    return InMemoryMealRepository()


@pytest.fixture
def target_repository() -> InMemoryTargetRepository:
    return InMemoryTargetRepository()


@pytest.fixture
def stats_service(
    meal_repository: InMemoryMealRepository,
    target_repository: InMemoryTargetRepository,
) -> StatsService:
    return StatsService(repository=meal_repository, targets=target_repository)


@pytest.fixture
def pipeline(
    fatsecret_client: FakeFatSecretClient, model_client: FakeJsonModelClient
) -> MealPipeline:
    return MealPipeline(
        resolver=SourceResolver(fatsecret_client),
        estimator=FallbackEstimator(client=model_client, model="gpt-4o-mini"),
    )


@pytest.fixture
def container(
    settings: Settings,
    fatsecret_client: FakeFatSecretClient,
    extractor: FakeFoodExtractor,
    meal_repository: InMemoryMealRepository,
    pipeline: MealPipeline,
    stats_service: StatsService,
) -> AppContainer:
    meal_log_service = MealLogService(
        extractor=extractor,
        pipeline=pipeline,
        repository=meal_repository,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        fatsecret_client=fatsecret_client,
        meal_pipeline=pipeline,
        meal_log_service=meal_log_service,
        stats_service=stats_service,
        close_resources=close_resources,
    )
