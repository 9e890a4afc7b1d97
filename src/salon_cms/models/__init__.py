"""Content data models."""

from salon_cms.models.content import (
    MENU_CATEGORIES,
    ContentSnapshot,
    FaqItem,
    GalleryItem,
    MenuItem,
    Section,
    StaffItem,
)

__all__ = [
    "MENU_CATEGORIES",
    "ContentSnapshot",
    "FaqItem",
    "GalleryItem",
    "MenuItem",
    "Section",
    "StaffItem",
]
