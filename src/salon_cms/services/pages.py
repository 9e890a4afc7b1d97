"""Public page rendering from the stored content."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from jinja2 import Environment, FileSystemLoader, select_autoescape

from salon_cms.models.content import MENU_CATEGORIES

if TYPE_CHECKING:
    from collections.abc import Sequence

    from salon_cms.models.content import ContentSnapshot, MenuItem

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"


def group_menu_by_category(items: Sequence[MenuItem]) -> list[tuple[str, list[MenuItem]]]:
    """Group items by category in the fixed salon order.

    Categories outside the fixed list follow in first-seen order. Items keep
    their menu order within each group.
    """
    groups: dict[str, list[MenuItem]] = {}
    for item in items:
        groups.setdefault(item.category, []).append(item)
    ordered = [c for c in MENU_CATEGORIES if c in groups]
    ordered += [c for c in groups if c not in MENU_CATEGORIES]
    return [(category, groups[category]) for category in ordered]


def format_price(price: int) -> str:
    return f"¥{price:,}"


class PageRenderer:
    """Render the public home page with Jinja2."""

    def __init__(self, templates_dir: Path = TEMPLATES_DIR) -> None:
        self._env = Environment(
            loader=FileSystemLoader(str(templates_dir)),
            autoescape=select_autoescape(["html"]),
        )
        self._env.filters["price"] = format_price

    async def render_home(self, snapshot: ContentSnapshot) -> str:
        template = self._env.get_template("home.html")
        return template.render(
            menu_groups=group_menu_by_category(snapshot.menu),
            gallery=snapshot.gallery,
            staff=snapshot.staff,
            faq=snapshot.faq,
            site=snapshot.site_info,
        )
