"""Concrete service implementations and export strategies."""

from .draft_store import SettingsDraftStore
from .export_service import build_default_registry, encode, export_document
from .file_service import FileService
from .highlighter import PlainHighlighter, PygmentsHighlighter
from .markdown_parser import MarkdownParser, parse
from .markdown_renderer import MarkdownRenderer, PreviewSettings
from .source_buffer import DraftSession, SourceBuffer
from .view_renderer import HtmlWriter, render

__all__ = [
    "DraftSession",
    "FileService",
    "HtmlWriter",
    "MarkdownParser",
    "MarkdownRenderer",
    "PlainHighlighter",
    "PreviewSettings",
    "PygmentsHighlighter",
    "SettingsDraftStore",
    "SourceBuffer",
    "build_default_registry",
    "encode",
    "export_document",
    "parse",
    "render",
]
