from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Protocol

from mdpreview.domain.models import Artifact, ExportFormat, Fragment


class IHighlighter(Protocol):
    """Map (code, language) to styled fragments. Must never raise."""

    def highlight(self, code: str, language: str | None) -> Sequence[Fragment]: ...


class IPersistenceAdapter(Protocol):
    """Opaque key/value store used to keep the draft across sessions."""

    def load(self, key: str) -> str | None: ...
    def save(self, key: str, value: str) -> None: ...


class IMarkdownRenderer(Protocol):
    """Convert Markdown text to a full HTML string for the live preview."""

    def to_html(self, markdown_text: str) -> str: ...


class IFileService(Protocol):
    """Read/write files. Writes should be atomic when possible."""

    def read_text(self, path: Path) -> str: ...
    def write_text_atomic(self, path: Path, text: str) -> None: ...
    def write_bytes_atomic(self, path: Path, data: bytes) -> None: ...


class IConfigService(Protocol):
    def get(self, section: str, key: str, default: str | None = None) -> str | None: ...
    def get_int(self, section: str, key: str, default: int | None = None) -> int | None: ...
    def get_float(
        self, section: str, key: str, default: float | None = None
    ) -> float | None: ...
    def get_bool(self, section: str, key: str, default: bool | None = None) -> bool | None: ...
    def as_dict(self) -> Mapping[str, Mapping[str, str]]: ...
    def app_version(self) -> str: ...


class IAppConfig(IConfigService, Protocol):
    def get_version(self) -> str: ...


class IEncoder(ABC):
    """Export strategy: serialize the source text into one output format."""

    format: ExportFormat
    label: str  # e.g. "Export HTML…"

    @abstractmethod
    def encode(self, source_text: str) -> Artifact:
        """Produce the artifact or raise EncodingError."""
        raise NotImplementedError


class IEncoderRegistry(Protocol):
    def register(self, e: IEncoder) -> None: ...
    def get(self, fmt: ExportFormat | str) -> IEncoder: ...
    def all(self) -> list[IEncoder]: ...
