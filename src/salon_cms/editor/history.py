"""Linear undo/redo history over content snapshots."""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from salon_cms.models.content import ContentSnapshot, Section


class HistoryState(BaseModel):
    """Past, present, and future snapshots of one editing session.

    ``past`` is ordered oldest to newest (top of stack is the last element);
    ``future`` is ordered nearest to farthest (top of stack is the first
    element). Every transition returns a new state; a no-op transition
    returns ``self``.
    """

    model_config = ConfigDict(frozen=True)

    past: tuple[ContentSnapshot, ...] = ()
    present: ContentSnapshot
    future: tuple[ContentSnapshot, ...] = ()

    @classmethod
    def init(cls, snapshot: ContentSnapshot) -> HistoryState:
        return cls(present=snapshot)

    @property
    def can_undo(self) -> bool:
        return bool(self.past)

    @property
    def can_redo(self) -> bool:
        return bool(self.future)

    def update_section(self, section: Section | str, data: Any) -> HistoryState:
        """Replace one section; the old present goes onto ``past`` and ``future`` is cleared."""
        present = self.present.with_section(section, data)
        return HistoryState(past=(*self.past, self.present), present=present, future=())

    def undo(self) -> HistoryState:
        if not self.past:
            return self
        return HistoryState(
            past=self.past[:-1],
            present=self.past[-1],
            future=(self.present, *self.future),
        )

    def redo(self) -> HistoryState:
        if not self.future:
            return self
        return HistoryState(
            past=(*self.past, self.present),
            present=self.future[0],
            future=self.future[1:],
        )


class InitAction(BaseModel):
    type: Literal["init"] = "init"
    snapshot: ContentSnapshot


class UpdateSectionAction(BaseModel):
    type: Literal["update_section"] = "update_section"
    section: str
    data: Any


class UndoAction(BaseModel):
    type: Literal["undo"] = "undo"


class RedoAction(BaseModel):
    type: Literal["redo"] = "redo"


HistoryAction = Annotated[
    InitAction | UpdateSectionAction | UndoAction | RedoAction,
    Field(discriminator="type"),
]


def apply(state: HistoryState | None, action: HistoryAction) -> HistoryState:
    """Reduce ``action`` onto ``state``. Only ``init`` is valid without a state."""
    if isinstance(action, InitAction):
        return HistoryState.init(action.snapshot)
    if state is None:
        raise ValueError(f"Cannot apply {action.type!r} before init")
    if isinstance(action, UpdateSectionAction):
        return state.update_section(action.section, action.data)
    if isinstance(action, UndoAction):
        return state.undo()
    if isinstance(action, RedoAction):
        return state.redo()
    raise TypeError(f"Unsupported history action: {action!r}")
