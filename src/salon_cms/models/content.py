"""Content snapshot model — every editable section of the site at one point in time."""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator, model_validator

from salon_cms.exceptions import InvalidSectionError
from salon_cms.models.base import ItemBase

MENU_CATEGORIES = ("Cut", "Color", "Perm", "Treatment", "Spa", "Other")


class Section(StrEnum):
    """The five content sections; each is one JSON document on disk."""

    MENU = "menu"
    GALLERY = "gallery"
    STAFF = "staff"
    FAQ = "faq"
    SITE_INFO = "siteInfo"

    @classmethod
    def parse(cls, value: object) -> Section:
        """Coerce a raw key to a Section or raise InvalidSectionError."""
        if isinstance(value, Section):
            return value
        try:
            return cls(value)
        except ValueError:
            raise InvalidSectionError(value) from None

    @property
    def filename(self) -> str:
        if self is Section.SITE_INFO:
            return "site-info.json"
        return f"{self.value}.json"

    @property
    def field_name(self) -> str:
        if self is Section.SITE_INFO:
            return "site_info"
        return self.value

    def empty(self) -> list[Any] | dict[str, Any]:
        """Default value used when the document is missing or unreadable."""
        return {} if self is Section.SITE_INFO else []


class MenuItem(ItemBase):
    category: str
    name: str
    price: int = Field(ge=0)
    description: str = ""


class GalleryItem(ItemBase):
    image: str
    title: str
    description: str = ""


class StaffItem(ItemBase):
    name: str
    role: str
    image: str
    message: str = ""


class FaqItem(ItemBase):
    question: str
    answer: str


def _freeze(value: Any) -> Any:
    if isinstance(value, Mapping):
        return MappingProxyType({key: _freeze(item) for key, item in value.items()})
    if isinstance(value, list | tuple):
        return tuple(_freeze(item) for item in value)
    return value


def _thaw(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {key: _thaw(item) for key, item in value.items()}
    if isinstance(value, tuple):
        return [_thaw(item) for item in value]
    return value


def _ensure_unique_ids(section: str, items: tuple[ItemBase, ...]) -> None:
    seen: set[str] = set()
    for item in items:
        if item.id in seen:
            raise ValueError(f"Duplicate id {item.id!r} in {section}")
        seen.add(item.id)


class ContentSnapshot(BaseModel):
    """Immutable value of all five sections.

    List order is display order and is significant for equality. Mutation
    produces a new snapshot via :meth:`with_section`. ``site_info`` is held as
    a read-only mapping (nested lists become tuples) so a snapshot shared by
    history and baseline cannot change underneath either.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    menu: tuple[MenuItem, ...] = ()
    gallery: tuple[GalleryItem, ...] = ()
    staff: tuple[StaffItem, ...] = ()
    faq: tuple[FaqItem, ...] = ()
    site_info: dict[str, Any] = Field(default_factory=dict, alias="siteInfo", validate_default=True)

    @field_validator("site_info", mode="after")
    @classmethod
    def _freeze_site_info(cls, value: dict[str, Any]) -> Mapping[str, Any]:
        return _freeze(value)

    @field_serializer("site_info")
    def _dump_site_info(self, value: Mapping[str, Any]) -> dict[str, Any]:
        return _thaw(value)

    @model_validator(mode="after")
    def _check_unique_ids(self) -> ContentSnapshot:
        for section in (Section.MENU, Section.GALLERY, Section.STAFF, Section.FAQ):
            _ensure_unique_ids(section.value, getattr(self, section.field_name))
        return self

    @classmethod
    def empty(cls) -> ContentSnapshot:
        return cls()

    def get(self, section: Section | str) -> Any:
        return getattr(self, Section.parse(section).field_name)

    def with_section(self, section: Section | str, data: Any) -> ContentSnapshot:
        """Return a copy with ``section`` replaced by ``data`` (validated)."""
        key = Section.parse(section)
        values: dict[str, Any] = {s.value: self.get(s) for s in Section}
        values[key.value] = data
        return type(self).model_validate(values)

    def section_document(self, section: Section | str) -> list[dict[str, Any]] | dict[str, Any]:
        """JSON-ready value of one section, as written to its file."""
        key = Section.parse(section)
        value = self.get(key)
        if key is Section.SITE_INFO:
            return _thaw(value)
        return [item.model_dump(mode="json") for item in value]

    def to_document(self) -> dict[str, Any]:
        return {section.value: self.section_document(section) for section in Section}
