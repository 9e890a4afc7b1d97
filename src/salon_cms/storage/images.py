"""Uploaded image storage under a restricted public directory."""

from __future__ import annotations

import asyncio
import logging
import re
import time
from pathlib import Path

from pydantic import BaseModel

from salon_cms.exceptions import ImageUploadError, InvalidImagePathError

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s")


class ImageUploadResult(BaseModel):
    success: bool
    url: str


class ImageDeleteResult(BaseModel):
    success: bool
    message: str


class ImageStore:
    """Store images as files and hand back ``/images/...`` references.

    Only references under ``url_prefix`` that resolve inside ``images_dir``
    are accepted for deletion.
    """

    def __init__(self, images_dir: Path, *, url_prefix: str = "/images/") -> None:
        self._images_dir = Path(images_dir)
        self._url_prefix = url_prefix if url_prefix.endswith("/") else url_prefix + "/"

    @staticmethod
    def make_filename(original: str, *, now_ms: int | None = None) -> str:
        """Timestamp-prefixed name with whitespace replaced by underscores."""
        stamp = now_ms if now_ms is not None else int(time.time() * 1000)
        return f"{stamp}_{_WHITESPACE.sub('_', Path(original).name)}"

    def resolve(self, url: str) -> Path:
        """Map an image reference to its file, rejecting anything outside the images dir."""
        if not url.startswith(self._url_prefix):
            raise InvalidImagePathError(f"Invalid path. Must start with {self._url_prefix}")
        root = self._images_dir.resolve()
        path = (root / url[len(self._url_prefix):]).resolve()
        if not path.is_relative_to(root) or path == root:
            raise InvalidImagePathError("Invalid path traversal")
        return path

    def _upload(self, filename: str, data: bytes) -> ImageUploadResult:
        name = self.make_filename(filename)
        self._images_dir.mkdir(parents=True, exist_ok=True)
        try:
            (self._images_dir / name).write_bytes(data)
        except OSError as exc:
            raise ImageUploadError(f"Upload failed: {exc}") from exc
        logger.info("Image uploaded — name=%s bytes=%d", name, len(data))
        return ImageUploadResult(success=True, url=f"{self._url_prefix}{name}")

    async def upload(self, filename: str, data: bytes) -> ImageUploadResult:
        if not filename or not Path(filename).name:
            raise ImageUploadError("No file uploaded")
        return await asyncio.to_thread(self._upload, filename, data)

    def _delete(self, path: Path) -> ImageDeleteResult:
        try:
            path.unlink()
        except FileNotFoundError:
            return ImageDeleteResult(success=True, message="File not found, but treated as deleted")
        logger.info("Image deleted — path=%s", path)
        return ImageDeleteResult(success=True, message="File deleted")

    async def delete(self, url: str) -> ImageDeleteResult:
        path = self.resolve(url)
        return await asyncio.to_thread(self._delete, path)
