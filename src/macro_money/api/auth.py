"""Bearer token authentication and per-request rollover for user endpoints."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import Depends, Header, HTTPException, Request, status

if TYPE_CHECKING:
    from macro_money.containers import AppContainer

_logger = logging.getLogger(__name__)


async def require_user(
    request: Request, authorization: str | None = Header(default=None)
) -> UUID:
    """Resolve the bearer token to a user id or reject the request."""
    scheme, _, token = (authorization or "").partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    container: AppContainer = request.app.state.container
    user_id = container.identity_provider.resolve_user(token.strip())
    if user_id is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    return user_id


async def require_observed_user(
    request: Request, user_id: UUID = Depends(require_user)
) -> UUID:
    """Authenticate, then archive any finished days before the route runs.

    Used by every route that reads or writes day-sensitive data. A failed
    rollover is logged and retried on the next request.
    """
    container: AppContainer = request.app.state.container
    try:
        container.rollover_service.check(user_id)
    except Exception:
        _logger.exception("Rollover check failed", extra={"user_id": user_id})
    return user_id
