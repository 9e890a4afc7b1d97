"""Admin sign-in routes."""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Form, HTTPException, Request, status

from salon_cms.auth.credentials import verify_credentials
from salon_cms.auth.middleware import get_user, is_authorized

router = APIRouter(prefix="/admin", tags=["auth"])

logger = logging.getLogger(__name__)


@router.get("")
async def admin_status(request: Request) -> dict:
    """Tell the admin UI whether to show the dashboard or the login form."""
    authorized = is_authorized(request, request.app.state.settings.auth)
    return {"authorized": authorized, "view": "dashboard" if authorized else "login"}


@router.post("/login")
async def login(
    request: Request,
    email: Annotated[str, Form(...)],
    token: Annotated[str, Form(...)],
) -> dict:
    if not verify_credentials(request.app.state.settings.auth, email, token):
        logger.warning("Admin sign-in rejected — email=%s", email)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    request.session["user"] = {"email": email}
    logger.info("Admin signed in — email=%s", email)
    return {"success": True, "email": email}


@router.post("/logout")
async def logout(request: Request) -> dict:
    user = get_user(request)
    request.session.pop("user", None)
    if user:
        logger.info("Admin signed out — email=%s", user.get("email"))
    return {"success": True}
