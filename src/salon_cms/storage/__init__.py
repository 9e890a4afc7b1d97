"""Persistence for content documents, uploaded images, and rendered pages."""

from salon_cms.storage.content_store import JsonContentStore
from salon_cms.storage.images import ImageStore
from salon_cms.storage.page_cache import PageCache

__all__ = ["ImageStore", "JsonContentStore", "PageCache"]
