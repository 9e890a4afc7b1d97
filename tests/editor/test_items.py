"""Tests for list edit helpers and new-item defaults."""

import pytest

from salon_cms.editor.items import (
    PLACEHOLDER_IMAGE,
    append_item,
    move_item,
    new_faq_item,
    new_gallery_item,
    new_menu_item,
    new_staff_item,
    remove_item,
    update_item,
)
from salon_cms.models.content import FaqItem


@pytest.fixture
def faqs() -> list[FaqItem]:
    return [FaqItem(id=str(i), question=f"Q{i}", answer=f"A{i}") for i in range(1, 5)]


def test_new_items_have_unique_ids():
    assert new_faq_item().id != new_faq_item().id


def test_new_item_defaults():
    menu = new_menu_item("Spa")
    assert (menu.category, menu.price, menu.description) == ("Spa", 0, "")
    assert new_gallery_item().image == PLACEHOLDER_IMAGE
    staff = new_staff_item()
    assert (staff.name, staff.role, staff.image) == ("New Staff", "Stylist", PLACEHOLDER_IMAGE)


def test_append_returns_new_list(faqs):
    extra = FaqItem(id="9", question="Q9", answer="A9")
    result = append_item(faqs, extra)
    assert result[-1] == extra
    assert len(faqs) == 4


def test_remove_unknown_id_keeps_items(faqs):
    assert remove_item(faqs, "missing") == faqs
    assert [f.id for f in remove_item(faqs, "2")] == ["1", "3", "4"]


def test_update_item_replaces_fields_in_place(faqs):
    result = update_item(faqs, "3", answer="Changed")
    assert result[2].answer == "Changed"
    assert result[2].id == "3"
    assert faqs[2].answer == "A3"


def test_update_item_unknown_id(faqs):
    with pytest.raises(LookupError):
        update_item(faqs, "missing", answer="x")


@pytest.mark.parametrize(
    ("active", "over", "expected"),
    [
        ("1", "3", ["2", "3", "1", "4"]),
        ("4", "1", ["4", "1", "2", "3"]),
        ("2", "2", ["1", "2", "3", "4"]),
    ],
)
def test_move_item_matches_drag_reorder(faqs, active, over, expected):
    assert [f.id for f in move_item(faqs, active, over)] == expected
