"""Editing session — history, dirty tracking, and publish for one admin."""

from __future__ import annotations

import logging
from enum import StrEnum
from typing import TYPE_CHECKING, Any, Protocol
from uuid import uuid4

from pydantic import BaseModel

from salon_cms.editor.history import (
    HistoryAction,
    HistoryState,
    InitAction,
    RedoAction,
    UndoAction,
    UpdateSectionAction,
    apply,
)
from salon_cms.exceptions import SessionError
from salon_cms.models.content import ContentSnapshot, Section

if TYPE_CHECKING:
    from salon_cms.models.publish import PublishReceipt

logger = logging.getLogger(__name__)


class PublishFn(Protocol):
    async def __call__(self, snapshot: ContentSnapshot, *, if_match: str | None = None) -> PublishReceipt: ...


class PublishStatus(StrEnum):
    PUBLISHED = "published"
    SKIPPED = "skipped"


class PublishOutcome(BaseModel):
    status: PublishStatus
    snapshot: ContentSnapshot
    version: str | None = None


class SessionStatus(BaseModel):
    """Flags the admin UI binds its undo, redo and publish controls to."""

    session_id: str
    is_dirty: bool
    can_undo: bool
    can_redo: bool
    is_saving: bool
    past_depth: int
    future_depth: int
    version: str | None = None
    last_error: str | None = None


class EditingSession:
    """Owns one admin's undo/redo history and the last-published baseline.

    Editing calls are synchronous and may interleave with an in-flight
    :meth:`publish`; the payload sent is the present captured when publish
    was called, and later edits only touch in-memory state.
    """

    def __init__(self, publish_fn: PublishFn, *, session_id: str | None = None) -> None:
        self.session_id = session_id or str(uuid4())
        self._publish_fn = publish_fn
        self._history: HistoryState | None = None
        self._baseline: ContentSnapshot | None = None
        self._version: str | None = None
        self._saving = False
        self.last_error: Exception | None = None

    def initialize(self, snapshot: ContentSnapshot, *, version: str | None = None) -> None:
        """Start the session from the persisted content. Allowed once."""
        if self._history is not None:
            raise SessionError(f"Session {self.session_id} is already initialized")
        self._dispatch(InitAction(snapshot=snapshot))
        self._baseline = snapshot
        self._version = version
        logger.info("Editing session initialized — session=%s version=%s", self.session_id, version)

    def _dispatch(self, action: HistoryAction) -> None:
        self._history = apply(self._history, action)
        logger.debug(
            "History action — session=%s action=%s past=%d future=%d",
            self.session_id,
            action.type,
            len(self._history.past),
            len(self._history.future),
        )

    def _require_history(self) -> HistoryState:
        if self._history is None:
            raise SessionError(f"Session {self.session_id} has not been initialized")
        return self._history

    @property
    def history(self) -> HistoryState:
        return self._require_history()

    @property
    def present(self) -> ContentSnapshot:
        return self._require_history().present

    @property
    def baseline(self) -> ContentSnapshot:
        self._require_history()
        assert self._baseline is not None
        return self._baseline

    @property
    def version(self) -> str | None:
        return self._version

    @property
    def is_dirty(self) -> bool:
        return self.present != self.baseline

    def dirty_sections(self) -> list[str]:
        """Sections whose present value differs from the last published baseline."""
        present, baseline = self.present, self.baseline
        return [section.value for section in Section if present.get(section) != baseline.get(section)]

    @property
    def can_undo(self) -> bool:
        return self._require_history().can_undo

    @property
    def can_redo(self) -> bool:
        return self._require_history().can_redo

    @property
    def is_saving(self) -> bool:
        return self._saving

    def update_section(self, section: Section | str, data: Any) -> None:
        self._require_history()
        self._dispatch(UpdateSectionAction(section=str(section), data=data))

    def undo(self) -> None:
        self._require_history()
        self._dispatch(UndoAction())

    def redo(self) -> None:
        self._require_history()
        self._dispatch(RedoAction())

    async def publish(self, *, force: bool = False) -> PublishOutcome:
        """Persist the current present and adopt it as the new baseline.

        A call made while another publish is in flight is skipped. On failure
        the baseline is left as it was, so the session stays dirty and the
        caller can retry; the error is kept on ``last_error`` and re-raised.

        ``force`` drops the version check, overwriting whatever another writer
        stored since this session loaded. It is how an admin resolves a
        ConflictError without losing the session's edits.
        """
        snapshot = self.present
        if self._saving:
            logger.warning("Publish already in progress — session=%s, skipping", self.session_id)
            return PublishOutcome(status=PublishStatus.SKIPPED, snapshot=snapshot, version=self._version)

        self._saving = True
        self.last_error = None
        try:
            receipt = await self._publish_fn(snapshot, if_match=None if force else self._version)
        except Exception as exc:
            self.last_error = exc
            logger.warning("Publish failed — session=%s force=%s error=%s", self.session_id, force, exc)
            raise
        finally:
            self._saving = False

        self._baseline = snapshot
        if self._version is not None and receipt.version is not None:
            self._version = receipt.version
        logger.info(
            "Publish succeeded — session=%s sections=%d dirty=%s",
            self.session_id,
            len(receipt.sections),
            self.is_dirty,
        )
        return PublishOutcome(status=PublishStatus.PUBLISHED, snapshot=snapshot, version=receipt.version)

    def status(self) -> SessionStatus:
        history = self._require_history()
        return SessionStatus(
            session_id=self.session_id,
            is_dirty=self.is_dirty,
            can_undo=history.can_undo,
            can_redo=history.can_redo,
            is_saving=self._saving,
            past_depth=len(history.past),
            future_depth=len(history.future),
            version=self._version,
            last_error=str(self.last_error) if self.last_error else None,
        )
