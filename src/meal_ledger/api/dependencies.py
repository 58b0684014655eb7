"""Request dependencies shared by API routers."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import Header, HTTPException, Request, status

from meal_ledger.domain.models import AuthenticatedUser
from meal_ledger.services.auth import AuthenticationError

if TYPE_CHECKING:
    from meal_ledger.containers import AppContainer

_logger = logging.getLogger(__name__)


def get_container(request: Request) -> AppContainer:
    """Return the dependency container stored on the app."""
    return request.app.state.container


def require_user(
    request: Request,
    authorization: str | None = Header(default=None),
    apikey: str | None = Header(default=None),
) -> AuthenticatedUser:
    """Ensure requests carry a valid API key and bearer token."""
    container = get_container(request)
    try:
        return container.auth_service.authenticate(authorization, apikey)
    except AuthenticationError as exc:
        _logger.info("Rejected request to %s: %s", request.url.path, exc)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized"
        ) from exc
