"""Encoder strategies and registry."""

from .base import EncoderRegistry
from .html_encoder import HtmlEncoder
from .markdown_encoder import MarkdownEncoder
from .pdf_encoder import PdfEncoder, PdfPageSetup, paginate
from .text_encoder import TextEncoder

__all__ = [
    "EncoderRegistry",
    "HtmlEncoder",
    "MarkdownEncoder",
    "PdfEncoder",
    "PdfPageSetup",
    "TextEncoder",
    "paginate",
]
