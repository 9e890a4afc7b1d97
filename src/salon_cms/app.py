"""FastAPI application factory and CLI entry point."""

from __future__ import annotations

import logging
import secrets
import time
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

import uvicorn
from fastapi import FastAPI, Request
from starlette.middleware.sessions import SessionMiddleware

from salon_cms.config import load_settings
from salon_cms.editor.registry import SessionRegistry
from salon_cms.logging import configure_logging
from salon_cms.routes import auth, content, menu, public, sessions
from salon_cms.routes.errors import register_error_handlers
from salon_cms.services.pages import PageRenderer
from salon_cms.services.publish import ContentPublisher
from salon_cms.storage.content_store import JsonContentStore
from salon_cms.storage.images import ImageStore
from salon_cms.storage.page_cache import PageCache

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Awaitable, Callable

    from starlette.responses import Response

    from salon_cms.config import Settings

logger = logging.getLogger(__name__)


def _init_state(app: FastAPI, settings: Settings) -> None:
    store = JsonContentStore(settings.content.data_dir)
    page_cache = PageCache()
    publisher = ContentPublisher(store, page_cache)
    app.state.settings = settings
    app.state.store = store
    app.state.page_cache = page_cache
    app.state.publisher = publisher
    app.state.images = ImageStore(settings.content.images_dir, url_prefix=settings.content.images_url_prefix)
    app.state.renderer = PageRenderer()
    app.state.sessions = SessionRegistry(publisher.publish)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the app; ``settings`` defaults to the environment."""
    settings = settings or load_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        configure_logging(settings.app.log_level)
        _init_state(app, settings)
        settings.content.data_dir.mkdir(parents=True, exist_ok=True)
        if settings.auth.skip_auth:
            logger.warning("SKIP_AUTH is enabled — admin routes are open to every request")
        logger.info(
            "Salon CMS started — env=%s data_dir=%s images_dir=%s",
            settings.app.env,
            settings.content.data_dir,
            settings.content.images_dir,
        )
        yield
        logger.info("Salon CMS shutdown complete")

    app = FastAPI(title="Salon CMS", lifespan=lifespan)

    secret_key = settings.app.secret_key
    if not secret_key:
        secret_key = secrets.token_urlsafe(32)
        logger.warning("SECRET_KEY is not set — admin sessions will not survive a restart")
    app.add_middleware(SessionMiddleware, secret_key=secret_key, https_only=not settings.app.is_development)

    @app.middleware("http")
    async def log_slow_requests(request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
        started_at = time.monotonic()
        response = await call_next(request)
        duration_ms = (time.monotonic() - started_at) * 1000
        if duration_ms > settings.app.slow_request_ms:
            logger.warning(
                "Slow request — method=%s path=%s status=%d duration_ms=%.0f",
                request.method,
                request.url.path,
                response.status_code,
                duration_ms,
            )
        return response

    register_error_handlers(app)
    for router in (public.router, auth.router, sessions.router, content.router, menu.router):
        app.include_router(router)
    return app


def main() -> None:
    """Entry point for ``salon-cms``."""
    settings = load_settings()
    configure_logging(settings.app.log_level)
    uvicorn.run(create_app(settings), host="0.0.0.0", port=8000, log_config=None)  # noqa: S104


if __name__ == "__main__":
    main()
