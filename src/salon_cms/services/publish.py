"""Publish protocol — persist a full snapshot, then invalidate cached public pages."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from salon_cms.models.content import Section
from salon_cms.models.publish import PublishReceipt

if TYPE_CHECKING:
    from salon_cms.models.content import ContentSnapshot
    from salon_cms.storage.content_store import JsonContentStore

logger = logging.getLogger(__name__)


@runtime_checkable
class CacheInvalidator(Protocol):
    """Anything holding rendered public pages that must be dropped after a publish."""

    def invalidate(self) -> None:
        ...


class ContentPublisher:
    """Write every section of a snapshot as one batch and signal cache invalidation.

    Errors from the store propagate unchanged (PersistenceError and its
    subclasses); invalidation only happens after the whole batch is written.
    """

    def __init__(self, store: JsonContentStore, invalidator: CacheInvalidator) -> None:
        self._store = store
        self._invalidator = invalidator

    async def publish(self, snapshot: ContentSnapshot, *, if_match: str | None = None) -> PublishReceipt:
        version = await self._store.write_snapshot(snapshot, if_match=if_match)
        self._invalidator.invalidate()
        logger.info("Content published — version=%s if_match=%s", version, if_match)
        return PublishReceipt(version=version, sections=[section.value for section in Section])
