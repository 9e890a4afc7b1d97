"""Admin sign-in check against the shared admin token and allowed emails."""

from __future__ import annotations

import secrets
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from salon_cms.config import AuthConfig


def verify_credentials(config: AuthConfig, email: str, token: str) -> bool:
    """Return True when ``token`` matches the admin token and ``email`` is allowed.

    An unset admin token disables sign-in entirely.
    """
    if not config.admin_token or not email:
        return False
    if not secrets.compare_digest(token.encode(), config.admin_token.encode()):
        return False
    return config.is_email_allowed(email)
