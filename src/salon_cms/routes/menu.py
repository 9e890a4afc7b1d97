"""Menu routes — add, update, delete and reorder single menu items in place."""

from __future__ import annotations

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Form, HTTPException, Request, status

from salon_cms.auth.middleware import require_authenticated_user
from salon_cms.services import menu as menu_svc

router = APIRouter(
    prefix="/admin/menu",
    tags=["menu"],
    dependencies=[Depends(require_authenticated_user)],
)

logger = logging.getLogger(__name__)


def _bad_request(exc: Exception) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


@router.post("/items", status_code=status.HTTP_201_CREATED)
async def add_menu_item(
    request: Request,
    name: Annotated[str, Form()] = "",
    price: Annotated[str, Form()] = "",
    category: Annotated[str, Form()] = "",
    description: Annotated[str, Form()] = "",
) -> dict:
    state = request.app.state
    try:
        item = await menu_svc.add_menu_item(
            state.store, state.page_cache, name=name, price=price, category=category, description=description
        )
    except ValueError as exc:
        raise _bad_request(exc) from exc
    return {"success": True, "item": item.model_dump()}


@router.post("/items/{item_id}")
async def update_menu_item(
    request: Request,
    item_id: str,
    name: Annotated[str, Form()] = "",
    price: Annotated[str, Form()] = "",
    category: Annotated[str, Form()] = "",
    description: Annotated[str, Form()] = "",
) -> dict:
    state = request.app.state
    try:
        item = await menu_svc.update_menu_item(
            state.store,
            state.page_cache,
            item_id=item_id,
            name=name,
            price=price,
            category=category,
            description=description,
        )
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Item not found") from exc
    except ValueError as exc:
        raise _bad_request(exc) from exc
    return {"success": True, "item": item.model_dump()}


@router.delete("/items/{item_id}")
async def delete_menu_item(request: Request, item_id: str) -> dict:
    state = request.app.state
    removed = await menu_svc.delete_menu_item(state.store, state.page_cache, item_id)
    return {"success": True, "removed": removed}


@router.put("/order")
async def reorder_menu(request: Request, items: Annotated[Any, Body()]) -> dict:
    state = request.app.state
    try:
        menu = await menu_svc.reorder_menu(state.store, state.page_cache, items)
    except ValueError as exc:
        raise _bad_request(exc) from exc
    return {"success": True, "count": len(menu)}
