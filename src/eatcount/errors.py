"""Error taxonomy for food resolution and meal logging."""


class FoodResolutionError(Exception):
    """A single food query could not be resolved against the food database."""

    kind = "resolution_failed"


class NotFoundError(FoodResolutionError):
    """The food search returned no candidates."""

    kind = "not_found"


class SearchError(FoodResolutionError):
    """The food search call itself failed."""

    kind = "search_failed"


class DetailFetchError(FoodResolutionError):
    """The chosen candidate could not be fetched or does not exist."""

    kind = "detail_fetch_failed"


class NoStandardServingError(FoodResolutionError):
    """The food has no serving that represents exactly 100 grams."""

    kind = "no_standard_serving"


class SourceUnavailableError(FoodResolutionError):
    """The food database is not configured or rejected the credentials."""

    kind = "source_unavailable"


class EstimationBatchError(Exception):
    """The model returned an unusable batch of nutrient estimates."""

    kind = "estimation_failed"


class FatSecretApiError(RuntimeError):
    """Non-successful response from the FatSecret API."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class MealLoggingError(Exception):
    """Request-level failure safe to show to the end user."""

    default_message = (
        "Sorry, we could not process your meal right now. Please try again later."
    )

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)
        self.user_message = message or self.default_message
