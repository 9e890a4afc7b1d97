"""Public routes — cached home page, content JSON, liveness."""

from __future__ import annotations

import logging
import os

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse

router = APIRouter(tags=["public"])

logger = logging.getLogger(__name__)


@router.get("/", response_class=HTMLResponse)
async def home(request: Request) -> HTMLResponse:
    """Render the public home page, served from the page cache until the next publish."""
    store = request.app.state.store
    renderer = request.app.state.renderer
    cache = request.app.state.page_cache

    async def render() -> str:
        snapshot = await store.read_snapshot()
        logger.info("Rendering home page — menu=%d gallery=%d", len(snapshot.menu), len(snapshot.gallery))
        return await renderer.render_home(snapshot)

    return HTMLResponse(await cache.get_or_render("home", render))


@router.get("/api/content")
async def get_content(request: Request) -> dict:
    """Return every section plus the version token to send back when publishing."""
    snapshot, version = await request.app.state.store.load()
    return {"content": snapshot.to_document(), "version": version}


@router.get("/healthz")
async def healthz(request: Request) -> dict:
    data_dir = request.app.state.store.data_dir
    writable = data_dir.is_dir() and os.access(data_dir, os.W_OK)
    return {"status": "ok" if writable else "degraded", "data_dir_writable": writable}
