"""Authorization gate — protects mutating routes behind an admin session."""

from __future__ import annotations

import logging
from functools import wraps
from typing import TYPE_CHECKING, Any

from fastapi import HTTPException, Request, status

from salon_cms.exceptions import UnauthorizedError

if TYPE_CHECKING:
    from collections.abc import Callable, Coroutine

    from salon_cms.config import AuthConfig

logger = logging.getLogger(__name__)

DEV_USER = {"email": "dev@localhost", "name": "Development bypass"}


def get_user(request: Request) -> dict[str, Any] | None:
    """Extract the signed-in admin from the session, if present."""
    return request.session.get("user") if hasattr(request, "session") else None


def check_admin(request: Request, config: AuthConfig) -> dict[str, Any]:
    """Return the admin user or raise UnauthorizedError.

    ``SKIP_AUTH=true`` admits every request as the development user.
    """
    if config.skip_auth:
        return DEV_USER
    user = get_user(request)
    if not user or not config.is_email_allowed(user.get("email", "")):
        raise UnauthorizedError("Authentication required")
    return user


def is_authorized(request: Request, config: AuthConfig) -> bool:
    try:
        check_admin(request, config)
    except UnauthorizedError:
        return False
    return True


def require_authenticated_user(request: Request) -> dict[str, Any]:
    """Return the admin user or raise HTTP 401. Usable as a FastAPI dependency."""
    try:
        return check_admin(request, request.app.state.settings.auth)
    except UnauthorizedError as exc:
        logger.info("Rejected unauthenticated request — path=%s", request.url.path)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(exc),
        ) from exc


def require_auth(
    func: Callable[..., Coroutine[object, object, object]],
) -> Callable[..., Coroutine[object, object, object]]:
    """Ensure the request has an authorized admin session."""

    @wraps(func)
    async def wrapper(request: Request, *args: object, **kwargs: object) -> object:
        require_authenticated_user(request)
        return await func(request, *args, **kwargs)

    return wrapper
