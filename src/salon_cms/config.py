"""Application configuration loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path


def _env(key: str, default: str = "") -> str:
    return os.environ.get(key, default)


def _env_list(key: str) -> tuple[str, ...]:
    return tuple(item.strip() for item in _env(key).split(",") if item.strip())


@dataclass(frozen=True)
class ContentConfig:
    """Where the JSON content documents and uploaded images live."""

    data_dir: Path = field(default_factory=lambda: Path(_env("SALON_DATA_DIR", "public/data")))
    images_dir: Path = field(default_factory=lambda: Path(_env("SALON_IMAGES_DIR", "public/images")))
    images_url_prefix: str = field(default_factory=lambda: _env("SALON_IMAGES_URL_PREFIX", "/images/"))


@dataclass(frozen=True)
class AuthConfig:
    """Admin sign-in configuration."""

    admin_token: str = field(default_factory=lambda: _env("ADMIN_TOKEN"))
    allowed_emails: tuple[str, ...] = field(default_factory=lambda: _env_list("ALLOWED_EMAILS"))
    skip_auth: bool = field(default_factory=lambda: _env("SKIP_AUTH").lower() == "true")
    admin_path: str = field(default_factory=lambda: _env("ADMIN_PATH", "/admin"))

    def is_email_allowed(self, email: str) -> bool:
        """An empty allow-list admits any email that presents the admin token."""
        if not self.allowed_emails:
            return True
        return email.lower() in {allowed.lower() for allowed in self.allowed_emails}


@dataclass(frozen=True)
class AppConfig:
    env: str = field(default_factory=lambda: _env("APP_ENV", "development"))
    log_level: str = field(default_factory=lambda: _env("LOG_LEVEL", "INFO"))
    secret_key: str = field(default_factory=lambda: _env("SECRET_KEY"))
    slow_request_ms: int = field(default_factory=lambda: int(_env("SLOW_REQUEST_MS", "800")))

    @property
    def is_development(self) -> bool:
        return self.env == "development"


@dataclass(frozen=True)
class Settings:
    content: ContentConfig = field(default_factory=ContentConfig)
    auth: AuthConfig = field(default_factory=AuthConfig)
    app: AppConfig = field(default_factory=AppConfig)


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """Build settings once per process."""
    return Settings()
