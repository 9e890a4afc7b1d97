"""Content API routes — one-shot publish and image upload/delete."""

import logging
from typing import Annotated

from fastapi import APIRouter, File, Header, HTTPException, Request, UploadFile, status
from pydantic import BaseModel

from salon_cms.auth.middleware import require_auth
from salon_cms.models.content import ContentSnapshot

router = APIRouter(prefix="/api", tags=["content"])

logger = logging.getLogger(__name__)


class DeleteImageRequest(BaseModel):
    url: str


@router.post("/content/publish")
@require_auth
async def publish_content(
    request: Request,
    snapshot: ContentSnapshot,
    if_match: Annotated[str | None, Header()] = None,
) -> dict:
    """Publish a full snapshot sent by the client, outside any server-side session."""
    receipt = await request.app.state.publisher.publish(snapshot, if_match=if_match)
    return receipt.model_dump(mode="json")


@router.post("/upload")
@require_auth
async def upload_image(request: Request, file: Annotated[UploadFile | None, File()] = None) -> dict:
    if file is None or not file.filename:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded")
    data = await file.read()
    result = await request.app.state.images.upload(file.filename or "", data)
    return result.model_dump()


@router.post("/delete-image")
@require_auth
async def delete_image(request: Request, body: DeleteImageRequest) -> dict:
    result = await request.app.state.images.delete(body.url)
    logger.info("Image delete requested — url=%s message=%s", body.url, result.message)
    return result.model_dump()
