"""Authentication module — admin session gate."""

from salon_cms.auth.credentials import verify_credentials
from salon_cms.auth.middleware import is_authorized, require_auth, require_authenticated_user

__all__ = ["is_authorized", "require_auth", "require_authenticated_user", "verify_credentials"]
