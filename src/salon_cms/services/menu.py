"""Single-item menu operations that write ``menu.json`` directly.

These bypass the editing session: each call reads the stored menu, applies one
change, writes it back, and invalidates cached pages.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from salon_cms.editor.items import append_item, remove_item, update_item
from salon_cms.models.content import ContentSnapshot, MenuItem, Section

if TYPE_CHECKING:
    from collections.abc import Sequence

    from salon_cms.services.publish import CacheInvalidator
    from salon_cms.storage.content_store import JsonContentStore

logger = logging.getLogger(__name__)


def _parse_price(value: Any) -> int:
    try:
        price = int(float(value))
    except (TypeError, ValueError, OverflowError):
        raise ValueError("Invalid input: price must be a number") from None
    if price < 0:
        raise ValueError("Invalid input: price must not be negative")
    return price


def _validate_menu(raw: Any) -> tuple[MenuItem, ...]:
    if not isinstance(raw, list | tuple):
        raise ValueError("Invalid format: menu must be a list")
    try:
        return ContentSnapshot.model_validate({"menu": raw}).menu
    except ValidationError as exc:
        raise ValueError(f"Invalid format: {exc.error_count()} menu error(s)") from exc


async def get_menu(store: JsonContentStore) -> tuple[MenuItem, ...]:
    return _validate_menu(await store.read(Section.MENU))


async def _save_menu(
    items: Sequence[MenuItem],
    store: JsonContentStore,
    invalidator: CacheInvalidator,
) -> None:
    await store.write(Section.MENU, [item.model_dump(mode="json") for item in items])
    invalidator.invalidate()


async def add_menu_item(
    store: JsonContentStore,
    invalidator: CacheInvalidator,
    *,
    name: str,
    price: Any,
    category: str,
    description: str = "",
) -> MenuItem:
    """Append a new item to the end of the menu."""
    if not name:
        raise ValueError("Invalid input: name is required")
    item = MenuItem(name=name, price=_parse_price(price), category=category, description=description or "")
    items = append_item(await get_menu(store), item)
    await _save_menu(items, store, invalidator)
    logger.info("Menu item added — id=%s category=%s", item.id, category)
    return item


async def update_menu_item(
    store: JsonContentStore,
    invalidator: CacheInvalidator,
    *,
    item_id: str,
    name: str,
    price: Any,
    category: str,
    description: str = "",
) -> MenuItem:
    """Replace an item's fields in place, keeping its position. Unknown id raises LookupError."""
    if not item_id or not name:
        raise ValueError("Invalid input: id and name are required")
    items = update_item(
        await get_menu(store),
        item_id,
        name=name,
        price=_parse_price(price),
        category=category,
        description=description or "",
    )
    await _save_menu(items, store, invalidator)
    logger.info("Menu item updated — id=%s", item_id)
    return next(item for item in items if item.id == item_id)


async def delete_menu_item(
    store: JsonContentStore,
    invalidator: CacheInvalidator,
    item_id: str,
) -> bool:
    """Remove an item; returns False when no item had that id."""
    current = await get_menu(store)
    items = remove_item(current, item_id)
    await _save_menu(items, store, invalidator)
    removed = len(items) != len(current)
    logger.info("Menu item deleted — id=%s removed=%s", item_id, removed)
    return removed


async def reorder_menu(
    store: JsonContentStore,
    invalidator: CacheInvalidator,
    items: Any,
) -> tuple[MenuItem, ...]:
    """Overwrite the menu with ``items`` in the given order."""
    menu = _validate_menu(items)
    await _save_menu(menu, store, invalidator)
    logger.info("Menu reordered — items=%d", len(menu))
    return menu
