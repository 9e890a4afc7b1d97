"""Publish result models shared by the publisher and the editing session."""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, Field


class PublishReceipt(BaseModel):
    """Returned by the publisher after every section was written."""

    success: bool = True
    version: str | None = None
    sections: list[str] = Field(default_factory=list)
    published_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
