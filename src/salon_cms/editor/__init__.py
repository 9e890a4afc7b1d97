"""Editing session — undo/redo history and publish for the content admin."""

from salon_cms.editor.history import HistoryState
from salon_cms.editor.registry import SessionRegistry
from salon_cms.editor.session import EditingSession, PublishOutcome, PublishStatus, SessionStatus

__all__ = [
    "EditingSession",
    "HistoryState",
    "PublishOutcome",
    "PublishStatus",
    "SessionRegistry",
    "SessionStatus",
]
