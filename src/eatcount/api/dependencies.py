"""Shared FastAPI dependencies."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import Depends, Header, HTTPException, Request, status

if TYPE_CHECKING:
    from eatcount.containers import AppContainer


def get_container(request: Request) -> AppContainer:
    """Return the container attached to the app."""
    return request.app.state.container


def _get_api_key(request: Request) -> str | None:
    return get_container(request).settings.api_key


async def require_api_key(
    x_api_key: str | None = Header(default=None),
    api_key: str | None = Depends(_get_api_key),
) -> None:
    """Ensure requests carry the configured API key, if one is set."""
    if api_key and x_api_key != api_key:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
