"""Editing session routes — section edits, list item edits, undo/redo, publish."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import BaseModel

from salon_cms.auth.middleware import require_authenticated_user
from salon_cms.editor import items as item_ops
from salon_cms.models.content import Section

if TYPE_CHECKING:
    from salon_cms.editor.session import EditingSession

router = APIRouter(
    prefix="/admin/sessions",
    tags=["sessions"],
    dependencies=[Depends(require_authenticated_user)],
)

logger = logging.getLogger(__name__)


class SectionUpdate(BaseModel):
    data: Any


class NewItem(BaseModel):
    category: str = "Other"


class MoveItem(BaseModel):
    over_id: str


def _view(session: EditingSession) -> dict:
    return {"status": session.status().model_dump(), "content": session.present.to_document()}


def _session(request: Request, session_id: str) -> EditingSession:
    return request.app.state.sessions.get(session_id)


def _list_section(section: str) -> Section:
    key = Section.parse(section)
    if key is Section.SITE_INFO:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="siteInfo is a record, not a list",
        )
    return key


_FACTORIES = {
    Section.GALLERY: item_ops.new_gallery_item,
    Section.STAFF: item_ops.new_staff_item,
    Section.FAQ: item_ops.new_faq_item,
}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_session(request: Request) -> dict:
    """Open a session initialized from the stored content."""
    snapshot, version = await request.app.state.store.load()
    session = request.app.state.sessions.create(snapshot, version=version)
    logger.info("Editing session opened — session=%s", session.session_id)
    return _view(session)


@router.get("/{session_id}")
async def get_session(request: Request, session_id: str) -> dict:
    return _view(_session(request, session_id))


@router.delete("/{session_id}")
async def discard_session(request: Request, session_id: str) -> dict:
    discarded = request.app.state.sessions.discard(session_id)
    return {"success": discarded}


@router.put("/{session_id}/sections/{section}")
async def update_section(request: Request, session_id: str, section: str, body: SectionUpdate) -> dict:
    session = _session(request, session_id)
    session.update_section(section, body.data)
    return _view(session)


@router.post("/{session_id}/sections/{section}/items")
async def add_item(request: Request, session_id: str, section: str, body: NewItem | None = None) -> dict:
    """Append a new item with the editor's placeholder values."""
    session = _session(request, session_id)
    key = _list_section(section)
    if key is Section.MENU:
        item = item_ops.new_menu_item((body or NewItem()).category)
    else:
        item = _FACTORIES[key]()
    session.update_section(key, item_ops.append_item(session.present.get(key), item))
    return _view(session)


@router.patch("/{session_id}/sections/{section}/items/{item_id}")
async def update_item(request: Request, session_id: str, section: str, item_id: str, changes: dict[str, Any]) -> dict:
    session = _session(request, session_id)
    key = _list_section(section)
    changes.pop("id", None)
    try:
        updated = item_ops.update_item(session.present.get(key), item_id, **changes)
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    session.update_section(key, updated)
    return _view(session)


@router.delete("/{session_id}/sections/{section}/items/{item_id}")
async def remove_item(request: Request, session_id: str, section: str, item_id: str) -> dict:
    session = _session(request, session_id)
    key = _list_section(section)
    session.update_section(key, item_ops.remove_item(session.present.get(key), item_id))
    return _view(session)


@router.post("/{session_id}/sections/{section}/items/{item_id}/move")
async def move_item(request: Request, session_id: str, section: str, item_id: str, body: MoveItem) -> dict:
    session = _session(request, session_id)
    key = _list_section(section)
    try:
        moved = item_ops.move_item(session.present.get(key), item_id, body.over_id)
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    session.update_section(key, moved)
    return _view(session)


@router.post("/{session_id}/undo")
async def undo(request: Request, session_id: str) -> dict:
    session = _session(request, session_id)
    session.undo()
    return _view(session)


@router.post("/{session_id}/redo")
async def redo(request: Request, session_id: str) -> dict:
    session = _session(request, session_id)
    session.redo()
    return _view(session)


@router.post("/{session_id}/publish")
async def publish(request: Request, session_id: str, force: bool = False) -> dict:
    """Publish the session's present snapshot. Failures leave the session dirty.

    After a 409 the admin can retry with ``?force=true`` to overwrite the
    newer stored content with this session's edits.
    """
    session = _session(request, session_id)
    outcome = await session.publish(force=force)
    return {
        "success": True,
        "outcome": outcome.status,
        "version": outcome.version,
        "status": session.status().model_dump(),
    }
