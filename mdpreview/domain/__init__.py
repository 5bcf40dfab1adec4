"""Domain layer: interfaces, errors and immutable models."""

from .errors import EncodingError, MdPreviewError, PersistenceError
from .interfaces import (
    IEncoder,
    IEncoderRegistry,
    IFileService,
    IHighlighter,
    IMarkdownRenderer,
    IPersistenceAdapter,
)
from .models import (
    Artifact,
    BufferState,
    Document,
    EncodingFailure,
    ExportFormat,
    ExportRequest,
    Fragment,
    PersistenceFailure,
    RenderedView,
)

__all__ = [
    "Artifact",
    "BufferState",
    "Document",
    "EncodingError",
    "EncodingFailure",
    "ExportFormat",
    "ExportRequest",
    "Fragment",
    "IEncoder",
    "IEncoderRegistry",
    "IFileService",
    "IHighlighter",
    "IMarkdownRenderer",
    "IPersistenceAdapter",
    "MdPreviewError",
    "PersistenceError",
    "PersistenceFailure",
    "RenderedView",
]
