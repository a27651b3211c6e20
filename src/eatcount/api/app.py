"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from importlib.metadata import PackageNotFoundError, version

from fastapi import FastAPI

from eatcount.api.meals import router as meals_router
from eatcount.api.stats import router as stats_router
from eatcount.app_logging import configure_logging
from eatcount.containers import AppContainer


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        fatsecret_client = app.state.container.fatsecret_client
        if fatsecret_client.is_available:
            try:
                await fatsecret_client.initialize()
            except Exception:
                logger.exception("Failed to initialize FatSecret client")
        else:
            logger.warning("FatSecret credentials not set, client disabled")
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(meals_router)
    app.include_router(stats_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/version")
    async def app_version() -> dict[str, str]:
        """Return the installed package version."""
        return {
            "version": _package_version(),
            "name": "EatCount",
            "timestamp": datetime.now(tz=UTC).isoformat(),
        }

    return app


def _package_version() -> str:
    try:
        return version("eatcount")
    except PackageNotFoundError:
        return "unknown"
