"""Shared base for list items stored in the content documents."""

from __future__ import annotations

from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


class ItemBase(BaseModel):
    """Immutable list entry identified by a UUID string."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str = Field(default_factory=lambda: str(uuid4()))
