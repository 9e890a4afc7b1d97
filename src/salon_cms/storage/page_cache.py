"""In-memory cache of rendered public pages."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)


class PageCache:
    """Cache rendered HTML by key until the next publish invalidates it."""

    def __init__(self) -> None:
        self._pages: dict[str, str] = {}
        self._generation = 0

    def __contains__(self, key: str) -> bool:
        return key in self._pages

    @property
    def generation(self) -> int:
        return self._generation

    async def get_or_render(self, key: str, render: Callable[[], Awaitable[str]]) -> str:
        cached = self._pages.get(key)
        if cached is not None:
            return cached
        generation = self._generation
        html = await render()
        # An invalidation during render means this html may be stale.
        if generation == self._generation:
            self._pages[key] = html
        return html

    def invalidate(self) -> None:
        dropped = len(self._pages)
        self._pages.clear()
        self._generation += 1
        logger.info("Page cache invalidated — dropped=%d generation=%d", dropped, self._generation)
