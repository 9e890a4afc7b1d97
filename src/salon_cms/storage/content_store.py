"""Flat-file content store — one JSON document per section."""

from __future__ import annotations

import asyncio
import hashlib
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from salon_cms.exceptions import ConflictError, PartialPersistenceError, PersistenceError
from salon_cms.models.content import ContentSnapshot, Section

logger = logging.getLogger(__name__)


def _dumps(data: Any) -> bytes:
    return json.dumps(data, ensure_ascii=False, indent=2).encode("utf-8")


def _stage(path: Path, data: bytes) -> Path:
    """Write ``data`` to a temp file beside ``path`` and return the temp path."""
    fd, tmp = tempfile.mkstemp(prefix=path.name + ".", suffix=".tmp", dir=str(path.parent))
    tmp_path = Path(tmp)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise
    return tmp_path


def _atomic_write_bytes(path: Path, data: bytes) -> None:
    tmp_path = _stage(path, data)
    try:
        os.replace(tmp_path, path)
    finally:
        tmp_path.unlink(missing_ok=True)


class JsonContentStore:
    """Read and overwrite the five content documents under ``data_dir``.

    ``write_snapshot`` stages every section to a temp file first and only then
    swaps them into place, so a serialization or disk error while staging
    leaves every document untouched. If a swap fails midway, sections already
    swapped are restored from their previous bytes.
    """

    def __init__(self, data_dir: Path) -> None:
        self._data_dir = Path(data_dir)
        self._lock = asyncio.Lock()

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def path_for(self, section: Section | str) -> Path:
        return self._data_dir / Section.parse(section).filename

    # -- reads --

    def _read_section(self, section: Section) -> Any:
        path = self.path_for(section)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return section.empty()
        except (OSError, ValueError):
            logger.warning("Unreadable content file, using default — section=%s path=%s", section, path, exc_info=True)
            return section.empty()
        if not isinstance(data, type(section.empty())):
            logger.warning("Content file has wrong shape, using default — section=%s path=%s", section, path)
            return section.empty()
        return data

    def _read_snapshot(self) -> ContentSnapshot:
        values: dict[str, Any] = {}
        for section in Section:
            raw = self._read_section(section)
            try:
                ContentSnapshot.model_validate({section.value: raw})
            except ValidationError:
                logger.warning("Invalid content in section=%s, using default", section, exc_info=True)
                raw = section.empty()
            values[section.value] = raw
        return ContentSnapshot.model_validate(values)

    def _version(self) -> str:
        digest = hashlib.sha256()
        for section in Section:
            path = self.path_for(section)
            digest.update(section.filename.encode())
            try:
                digest.update(path.read_bytes())
            except FileNotFoundError:
                digest.update(b"\0missing")
        return digest.hexdigest()[:16]

    async def read(self, section: Section | str) -> Any:
        """Return a section's stored value, or its empty default if absent or corrupt."""
        return await asyncio.to_thread(self._read_section, Section.parse(section))

    async def read_snapshot(self) -> ContentSnapshot:
        return await asyncio.to_thread(self._read_snapshot)

    async def version(self) -> str:
        """Return an etag-style token that changes whenever any document changes."""
        return await asyncio.to_thread(self._version)

    async def load(self) -> tuple[ContentSnapshot, str]:
        """Read the snapshot together with the version it was read at."""
        async with self._lock:
            return await asyncio.to_thread(lambda: (self._read_snapshot(), self._version()))

    # -- writes --

    def _write_section(self, section: Section, data: Any) -> str:
        self._data_dir.mkdir(parents=True, exist_ok=True)
        try:
            payload = _dumps(data)
        except (TypeError, ValueError) as exc:
            raise PersistenceError(f"Cannot serialize section {section}: {exc}") from exc
        try:
            _atomic_write_bytes(self.path_for(section), payload)
        except OSError as exc:
            raise PersistenceError(f"Failed to write section {section}: {exc}") from exc
        logger.info("Section written — section=%s", section)
        return self._version()

    async def write(self, section: Section | str, data: Any) -> str:
        """Overwrite one section and return the new version token."""
        key = Section.parse(section)
        async with self._lock:
            return await asyncio.to_thread(self._write_section, key, data)

    def _write_snapshot(self, snapshot: ContentSnapshot, if_match: str | None) -> str:
        if if_match is not None:
            current = self._version()
            if current != if_match:
                raise ConflictError(if_match, current)

        self._data_dir.mkdir(parents=True, exist_ok=True)
        staged: dict[Section, Path] = {}
        try:
            for section in Section:
                try:
                    payload = _dumps(snapshot.section_document(section))
                except (TypeError, ValueError) as exc:
                    raise PersistenceError(f"Cannot serialize section {section}: {exc}") from exc
                try:
                    staged[section] = _stage(self.path_for(section), payload)
                except OSError as exc:
                    raise PersistenceError(f"Failed to stage section {section}: {exc}") from exc
            self._swap(staged)
        finally:
            for tmp_path in staged.values():
                tmp_path.unlink(missing_ok=True)

        version = self._version()
        logger.info("Snapshot written — sections=%d version=%s", len(staged), version)
        return version

    def _swap(self, staged: dict[Section, Path]) -> None:
        previous: dict[Section, bytes | None] = {}
        for section in staged:
            try:
                previous[section] = self.path_for(section).read_bytes()
            except FileNotFoundError:
                previous[section] = None
            except OSError as exc:
                raise PersistenceError(f"Failed to read section {section} before swap: {exc}") from exc

        swapped: list[Section] = []
        for section, tmp_path in staged.items():
            try:
                os.replace(tmp_path, self.path_for(section))
            except OSError as exc:
                logger.error("Swap failed, rolling back — section=%s swapped=%s", section, swapped)
                self._rollback(swapped, previous, failed_at=section, cause=exc)
                raise PersistenceError(f"Failed to write section {section}: {exc}") from exc
            swapped.append(section)

    def _rollback(
        self,
        swapped: list[Section],
        previous: dict[Section, bytes | None],
        *,
        failed_at: Section,
        cause: OSError,
    ) -> None:
        not_restored: list[Section] = []
        for section in swapped:
            path = self.path_for(section)
            old = previous[section]
            try:
                if old is None:
                    path.unlink(missing_ok=True)
                else:
                    _atomic_write_bytes(path, old)
            except OSError:
                logger.exception("Rollback failed — section=%s", section)
                not_restored.append(section)
        if not_restored:
            remaining = [s.value for s in Section if s not in swapped]
            raise PartialPersistenceError(
                f"Publish left content partially written (failed at {failed_at})",
                written=[s.value for s in not_restored],
                failed=remaining,
            ) from cause

    async def write_snapshot(self, snapshot: ContentSnapshot, *, if_match: str | None = None) -> str:
        """Write all five sections as one batch and return the new version token.

        With ``if_match`` set, the batch is rejected with ConflictError when the
        stored documents changed since that token was issued; without it the
        last writer wins.
        """
        async with self._lock:
            return await asyncio.to_thread(self._write_snapshot, snapshot, if_match)
