"""In-process registry of open editing sessions, held on ``app.state``."""

from __future__ import annotations

import logging
from collections import OrderedDict
from typing import TYPE_CHECKING

from salon_cms.editor.session import EditingSession
from salon_cms.exceptions import SessionError

if TYPE_CHECKING:
    from salon_cms.editor.session import PublishFn
    from salon_cms.models.content import ContentSnapshot

logger = logging.getLogger(__name__)
_MAX_SESSIONS = 64


class SessionRegistry:
    """Create, look up, and discard editing sessions by id.

    Sessions are never shared between admins; each browser gets its own id.
    When the cap is reached the oldest clean session is dropped. Only when
    every idle session has unpublished edits is the oldest dirty one dropped,
    with a warning naming the sections lost. Sessions mid-publish are kept.
    """

    def __init__(self, publish_fn: PublishFn, *, max_sessions: int = _MAX_SESSIONS) -> None:
        self._publish_fn = publish_fn
        self._max_sessions = max_sessions
        self._sessions: OrderedDict[str, EditingSession] = OrderedDict()

    def __len__(self) -> int:
        return len(self._sessions)

    def create(self, snapshot: ContentSnapshot, *, version: str | None = None) -> EditingSession:
        session = EditingSession(self._publish_fn)
        session.initialize(snapshot, version=version)
        self._sessions[session.session_id] = session
        self._evict(keep=session.session_id)
        return session

    def get(self, session_id: str) -> EditingSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionError(f"Editing session {session_id} not found")
        self._sessions.move_to_end(session_id)
        return session

    def discard(self, session_id: str) -> bool:
        return self._sessions.pop(session_id, None) is not None

    def _victim(self, keep: str) -> EditingSession | None:
        idle = [s for s in self._sessions.values() if not s.is_saving and s.session_id != keep]
        return next((s for s in idle if not s.is_dirty), idle[0] if idle else None)

    def _evict(self, keep: str) -> None:
        while len(self._sessions) > self._max_sessions:
            victim = self._victim(keep)
            if victim is None:
                return
            del self._sessions[victim.session_id]
            unsaved = victim.dirty_sections()
            if unsaved:
                logger.warning(
                    "Evicted editing session with unpublished edits — session=%s sections=%s",
                    victim.session_id,
                    ",".join(unsaved),
                )
            else:
                logger.info("Evicted idle editing session — session=%s", victim.session_id)
