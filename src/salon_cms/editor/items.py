"""List edits the admin editors perform before handing a section to the session.

Each helper returns a new list; the input sequence is never modified.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, TypeVar

from salon_cms.models.content import FaqItem, GalleryItem, MenuItem, StaffItem

if TYPE_CHECKING:
    from collections.abc import Sequence

    from salon_cms.models.base import ItemBase

T = TypeVar("T", bound="ItemBase")

PLACEHOLDER_IMAGE = "/images/hero.png"


def new_menu_item(category: str) -> MenuItem:
    return MenuItem(category=category, name="新規メニュー", price=0)


def new_gallery_item() -> GalleryItem:
    return GalleryItem(image=PLACEHOLDER_IMAGE, title="New Style")


def new_staff_item() -> StaffItem:
    return StaffItem(name="New Staff", role="Stylist", image=PLACEHOLDER_IMAGE)


def new_faq_item() -> FaqItem:
    return FaqItem(question="新しい質問", answer="")


def _index_of(items: Sequence[T], item_id: str) -> int:
    for index, item in enumerate(items):
        if item.id == item_id:
            return index
    raise LookupError(f"Item {item_id} not found")


def append_item(items: Sequence[T], item: T) -> list[T]:
    return [*items, item]


def remove_item(items: Sequence[T], item_id: str) -> list[T]:
    return [item for item in items if item.id != item_id]


def update_item(items: Sequence[T], item_id: str, **changes: Any) -> list[T]:
    """Replace fields on one item; raises LookupError for an unknown id."""
    index = _index_of(items, item_id)
    updated = list(items)
    updated[index] = type(items[index]).model_validate({**items[index].model_dump(), **changes})
    return updated


def move_item(items: Sequence[T], active_id: str, over_id: str) -> list[T]:
    """Move ``active_id`` to the position currently held by ``over_id`` (drag-reorder)."""
    old_index = _index_of(items, active_id)
    new_index = _index_of(items, over_id)
    moved = list(items)
    moved.insert(new_index, moved.pop(old_index))
    return moved
