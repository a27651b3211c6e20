"""FatSecret Platform API client."""

import logging
from dataclasses import dataclass
from typing import Protocol

import httpx

from eatcount.domain.nutrition import FoodCandidate, FoodDetails, Serving
from eatcount.errors import FatSecretApiError, SourceUnavailableError

_logger = logging.getLogger(__name__)

_UNAUTHORIZED = 401


class FatSecretClient(Protocol):
    """Interface for FatSecret food database interactions."""

    @property
    def is_available(self) -> bool:
        """Return False when the client has no credentials to work with."""

    async def initialize(self) -> None:
        """Acquire an access token if one is not cached yet."""

    async def search_foods(self, term: str) -> list[FoodCandidate]:
        """Search foods by free text."""

    async def get_food(self, food_id: str) -> FoodDetails | None:
        """Fetch a food with all servings, or None if it does not exist."""


@dataclass
class HttpxFatSecretClient(FatSecretClient):
    """HTTPX-backed FatSecret client with an in-memory bearer token."""

    client_id: str | None
    client_secret: str | None
    http_client: httpx.AsyncClient
    token_url: str = "https://oauth.fatsecret.com/connect/token"
    api_url: str = "https://platform.fatsecret.com/rest/server.api"
    scope: str = "basic"
    timeout: float = 15
    _access_token: str | None = None

    @classmethod
    def create(  # noqa: PLR0913
        cls,
        client_id: str | None,
        client_secret: str | None,
        token_url: str = "https://oauth.fatsecret.com/connect/token",
        api_url: str = "https://platform.fatsecret.com/rest/server.api",
        scope: str = "basic",
    ) -> "HttpxFatSecretClient":
        """Create a FatSecret client with a managed httpx session."""
        return cls(
            client_id=client_id,
            client_secret=client_secret,
            http_client=httpx.AsyncClient(),
            token_url=token_url,
            api_url=api_url,
            scope=scope,
        )

    @property
    def is_available(self) -> bool:
        """Return True when both credentials are configured."""
        return bool(self.client_id and self.client_secret)

    async def initialize(self) -> None:
        """Fetch and cache an access token unless one is already held."""
        if self._access_token is not None:
            return
        self._access_token = await self._fetch_token()
        _logger.info("FatSecret client initialized")

    async def search_foods(self, term: str) -> list[FoodCandidate]:
        """Search foods by free text."""
        payload = await self._call(
            {"method": "foods.search", "search_expression": term, "format": "json"}
        )
        foods = payload.get("foods")
        if not isinstance(foods, dict):
            return []
        return [
            FoodCandidate(
                food_id=str(food["food_id"]),
                name=str(food.get("food_name", "")),
                food_type=str(food.get("food_type", "")),
                brand_name=food.get("brand_name"),
            )
            for food in _as_list(foods.get("food"))
            if isinstance(food, dict) and food.get("food_id")
        ]

    async def get_food(self, food_id: str) -> FoodDetails | None:
        """Fetch a food by FatSecret id."""
        payload = await self._call(
            {"method": "food.get.v4", "food_id": food_id, "format": "json"}
        )
        food = payload.get("food")
        if not isinstance(food, dict) or not food:
            return None
        servings = food.get("servings")
        if not isinstance(servings, dict):
            servings = {}
        return FoodDetails(
            food_id=str(food.get("food_id", food_id)),
            name=str(food.get("food_name", "")),
            food_type=str(food.get("food_type", "")),
            servings=tuple(
                _parse_serving(serving)
                for serving in _as_list(servings.get("serving"))
                if isinstance(serving, dict)
            ),
        )

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    async def _call(self, params: dict[str, str]) -> dict[str, object]:
        """GET the API with a bearer token, re-authenticating once on 401."""
        response = await self._authorized_get(params)
        if response.status_code == _UNAUTHORIZED:
            _logger.warning(
                "FatSecret %s returned 401, refreshing token", params["method"]
            )
            self._access_token = None
            response = await self._authorized_get(params)
        if response.is_error:
            raise FatSecretApiError(
                f"FatSecret {params['method']} failed: "
                f"{response.status_code} {response.reason_phrase}",
                status_code=response.status_code,
            )
        try:
            payload = response.json()
        except ValueError as exc:
            raise FatSecretApiError(
                f"FatSecret {params['method']} returned invalid JSON",
                status_code=response.status_code,
            ) from exc
        if not isinstance(payload, dict):
            raise FatSecretApiError(
                f"FatSecret {params['method']} returned an unexpected payload",
                status_code=response.status_code,
            )
        error = payload.get("error")
        if error:
            if isinstance(error, dict):
                error = f"error {error.get('code')}: {error.get('message')}"
            raise FatSecretApiError(
                f"FatSecret {params['method']} {error}",
                status_code=response.status_code,
            )
        return payload

    async def _authorized_get(self, params: dict[str, str]) -> httpx.Response:
        await self.initialize()
        return await self.http_client.get(
            self.api_url,
            params=params,
            headers={"Authorization": f"Bearer {self._access_token}"},
            timeout=self.timeout,
        )

    async def _fetch_token(self) -> str:
        """Exchange client credentials for an access token."""
        if not self.is_available:
            raise SourceUnavailableError("FatSecret credentials are not configured")
        try:
            response = await self.http_client.post(
                self.token_url,
                data={
                    "grant_type": "client_credentials",
                    "client_id": self.client_id,
                    "client_secret": self.client_secret,
                    "scope": self.scope,
                },
                timeout=self.timeout,
            )
        except httpx.HTTPError as exc:
            raise SourceUnavailableError(
                f"FatSecret token request failed: {exc}"
            ) from exc
        if response.is_error:
            raise SourceUnavailableError(
                "Failed to get FatSecret token: "
                f"{response.status_code} {response.reason_phrase} - {response.text}"
            )
        token = response.json().get("access_token")
        if not token:
            raise SourceUnavailableError("FatSecret token response has no access_token")
        return str(token)


def _as_list(value: object) -> list[dict[str, object]]:
    """Normalize FatSecret's single-object-or-list collections."""
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def _to_float(value: object) -> float | None:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _parse_serving(serving: dict[str, object]) -> Serving:
    return Serving(
        serving_id=str(serving.get("serving_id", "")),
        serving_description=str(serving.get("serving_description", "")),
        number_of_units=_to_float(serving.get("number_of_units")),
        measurement_description=str(serving.get("measurement_description", "")),
        metric_serving_amount=_to_float(serving.get("metric_serving_amount")),
        metric_serving_unit=serving.get("metric_serving_unit"),
        calories=_to_float(serving.get("calories")) or 0.0,
        protein_g=_to_float(serving.get("protein")) or 0.0,
        fat_g=_to_float(serving.get("fat")) or 0.0,
        carbs_g=_to_float(serving.get("carbohydrate")) or 0.0,
        fiber_g=_to_float(serving.get("fiber")),
        sugar_g=_to_float(serving.get("sugar")),
        saturated_fat_g=_to_float(serving.get("saturated_fat")),
        sodium_mg=_to_float(serving.get("sodium")),
    )
