"""Exception types raised inside mdpreview services.

Public entry points convert these into ``EncodingFailure`` / ``PersistenceFailure``
values, so callers outside the services layer never need to catch them.
"""

from __future__ import annotations


class MdPreviewError(Exception):
    """Base class for mdpreview errors."""


class EncodingError(MdPreviewError):
    """Raised when an encoder cannot serialize a document."""

    def __init__(self, format: str, message: str) -> None:
        super().__init__(message)
        self.format = format
        self.message = message


class PersistenceError(MdPreviewError):
    """Raised when the draft store cannot load or save."""


__all__ = ["MdPreviewError", "EncodingError", "PersistenceError"]
