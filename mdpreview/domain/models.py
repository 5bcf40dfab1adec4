from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

# ---------------------------------------------------------------------------
# Inline nodes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Text:
    text: str


@dataclass(frozen=True)
class Emphasis:
    children: tuple[Inline, ...]


@dataclass(frozen=True)
class Strong:
    children: tuple[Inline, ...]


@dataclass(frozen=True)
class Code:
    text: str


@dataclass(frozen=True)
class Link:
    href: str
    title: str
    children: tuple[Inline, ...]


@dataclass(frozen=True)
class Image:
    src: str
    alt: str
    title: str = ""


Inline = Union[Text, Emphasis, Strong, Code, Link, Image]

# ---------------------------------------------------------------------------
# Block nodes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Paragraph:
    children: tuple[Inline, ...]


@dataclass(frozen=True)
class Heading:
    level: int
    children: tuple[Inline, ...]

    def __post_init__(self) -> None:
        if not 1 <= self.level <= 6:
            raise ValueError(f"Heading level must be 1..6, got {self.level}")


@dataclass(frozen=True)
class CodeFence:
    language: str | None
    text: str

    def __post_init__(self) -> None:
        if self.language is not None and not self.language:
            raise ValueError("CodeFence language must be None or a non-empty tag")


@dataclass(frozen=True)
class ListBlock:
    ordered: bool
    items: tuple[tuple[Block, ...], ...]
    start: int = 1


@dataclass(frozen=True)
class Quote:
    children: tuple[Block, ...]


@dataclass(frozen=True)
class ThematicBreak:
    pass


@dataclass(frozen=True)
class RawHTML:
    html: str


Block = Union[Paragraph, Heading, CodeFence, ListBlock, Quote, ThematicBreak, RawHTML]


@dataclass(frozen=True)
class Document:
    """Immutable parse result. A new parse supersedes it, nothing mutates it."""

    blocks: tuple[Block, ...] = ()


# ---------------------------------------------------------------------------
# Rendered view
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Fragment:
    text: str
    style: str = ""


@dataclass(frozen=True)
class HighlightedCode:
    language: str | None
    fragments: tuple[Fragment, ...]

    @property
    def text(self) -> str:
        return "".join(f.text for f in self.fragments)


@dataclass(frozen=True)
class RenderedView:
    """Same shape as Document; code fences replaced by HighlightedCode."""

    blocks: tuple[object, ...] = ()


# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------


class ExportFormat(str, Enum):
    MARKDOWN = "markdown"
    HTML = "html"
    TEXT = "text"
    PDF = "pdf"

    @classmethod
    def parse(cls, value: str | ExportFormat) -> ExportFormat:
        """Accept canonical names plus the file-extension aliases (md, txt, htm)."""
        if isinstance(value, ExportFormat):
            return value
        key = str(value).strip().lower().lstrip(".")
        key = _FORMAT_ALIASES.get(key, key)
        return cls(key)


_FORMAT_ALIASES = {"md": "markdown", "txt": "text", "htm": "html"}


@dataclass(frozen=True)
class ExportRequest:
    format: ExportFormat
    source_text: str


@dataclass(frozen=True)
class Artifact:
    data: bytes
    filename: str
    mime_type: str

    @property
    def extension(self) -> str:
        return self.filename.rsplit(".", 1)[-1]


@dataclass(frozen=True)
class EncodingFailure:
    """Returned (never raised) when an export cannot produce its artifact."""

    format: str
    message: str

    def __str__(self) -> str:
        return f"{self.format} export failed: {self.message}"


# ---------------------------------------------------------------------------
# Editing session
# ---------------------------------------------------------------------------


class BufferState(Enum):
    CLEAN = "clean"
    DIRTY = "dirty"


@dataclass(frozen=True)
class PersistenceFailure:
    key: str
    operation: str  # "load" | "save"
    message: str = ""

