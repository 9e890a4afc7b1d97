"""Domain exceptions raised by the editing session, stores, and publisher."""

from __future__ import annotations


class SalonCMSError(Exception):
    """Base class for salon-cms errors."""


class InvalidSectionError(SalonCMSError, ValueError):
    """Raised when a section key is not one of the five content sections."""

    def __init__(self, section: object) -> None:
        super().__init__(f"Unknown content section: {section!r}")
        self.section = section


class SessionError(SalonCMSError):
    """Raised when an editing session is used out of order or cannot be found."""


class UnauthorizedError(SalonCMSError):
    """Raised when a mutating operation is attempted without admin capability."""


class PersistenceError(SalonCMSError):
    """Raised when the content store cannot durably write a batch."""


class PartialPersistenceError(PersistenceError):
    """Raised when some sections were written and others were not.

    The store is left inconsistent with the caller's baseline; ``written`` and
    ``failed`` name the sections on each side.
    """

    def __init__(self, message: str, *, written: list[str], failed: list[str]) -> None:
        super().__init__(message)
        self.written = written
        self.failed = failed


class ConflictError(PersistenceError):
    """Raised when the store changed since the caller's version token was taken."""

    def __init__(self, expected: str, actual: str) -> None:
        super().__init__(f"Content changed since it was loaded (expected={expected} actual={actual})")
        self.expected = expected
        self.actual = actual


class InvalidImagePathError(SalonCMSError, ValueError):
    """Raised when an image reference points outside the images directory."""


class ImageUploadError(SalonCMSError):
    """Raised when an uploaded image cannot be stored."""
