"""Map domain exceptions to JSON error responses."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from salon_cms.exceptions import (
    ConflictError,
    ImageUploadError,
    InvalidImagePathError,
    InvalidSectionError,
    PartialPersistenceError,
    PersistenceError,
    SessionError,
    UnauthorizedError,
)

if TYPE_CHECKING:
    from fastapi import FastAPI

logger = logging.getLogger(__name__)


def _error(status_code: int, message: str, **extra: object) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message, **extra})


async def _unauthorized(request: Request, exc: Exception) -> JSONResponse:
    return _error(status.HTTP_401_UNAUTHORIZED, str(exc))


async def _session_not_found(request: Request, exc: Exception) -> JSONResponse:
    return _error(status.HTTP_404_NOT_FOUND, str(exc))


async def _unprocessable(request: Request, exc: Exception) -> JSONResponse:
    if isinstance(exc, ValidationError):
        return _error(
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            "Invalid content",
            details=exc.errors(include_url=False, include_context=False, include_input=False),
        )
    return _error(status.HTTP_422_UNPROCESSABLE_ENTITY, str(exc))


async def _conflict(request: Request, exc: Exception) -> JSONResponse:
    logger.warning("Publish rejected, content changed — path=%s", request.url.path)
    return _error(status.HTTP_409_CONFLICT, str(exc))


async def _partial_persistence(request: Request, exc: Exception) -> JSONResponse:
    assert isinstance(exc, PartialPersistenceError)
    logger.error("Partial publish — written=%s failed=%s", exc.written, exc.failed)
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc), written=exc.written, failed=exc.failed)


async def _persistence(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Publish failed — path=%s error=%s", request.url.path, exc)
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc))


async def _bad_image_path(request: Request, exc: Exception) -> JSONResponse:
    return _error(status.HTTP_400_BAD_REQUEST, str(exc))


async def _upload_failed(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Image upload failed — error=%s", exc)
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc))


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(UnauthorizedError, _unauthorized)
    app.add_exception_handler(SessionError, _session_not_found)
    app.add_exception_handler(InvalidSectionError, _unprocessable)
    app.add_exception_handler(ValidationError, _unprocessable)
    app.add_exception_handler(ConflictError, _conflict)
    app.add_exception_handler(PartialPersistenceError, _partial_persistence)
    app.add_exception_handler(PersistenceError, _persistence)
    app.add_exception_handler(InvalidImagePathError, _bad_image_path)
    app.add_exception_handler(ImageUploadError, _upload_failed)
