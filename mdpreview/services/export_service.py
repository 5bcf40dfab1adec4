"""Single export entry point for UI and CLI callers."""

from __future__ import annotations

import logging

from mdpreview.domain.errors import EncodingError
from mdpreview.domain.interfaces import IEncoderRegistry, IHighlighter
from mdpreview.domain.models import Artifact, EncodingFailure, ExportFormat, ExportRequest
from mdpreview.services.exporters import (
    EncoderRegistry,
    HtmlEncoder,
    MarkdownEncoder,
    PdfEncoder,
    PdfPageSetup,
    TextEncoder,
)

logger = logging.getLogger(__name__)


def build_default_registry(
    highlighter: IHighlighter | None = None, pdf_setup: PdfPageSetup | None = None
) -> EncoderRegistry:
    """Registry with the four built-in encoders."""
    registry = EncoderRegistry()
    registry.register(MarkdownEncoder())
    registry.register(HtmlEncoder(highlighter=highlighter))
    registry.register(TextEncoder())
    registry.register(PdfEncoder(setup=pdf_setup))
    return registry


def get_export_format_choices(registry: IEncoderRegistry | None = None) -> list[str]:
    """Return the registered format identifiers, sorted."""
    registry = registry or build_default_registry()
    return sorted(e.format.value for e in registry.all())


def encode(
    request: ExportRequest, registry: IEncoderRegistry | None = None
) -> Artifact | EncodingFailure:
    """
    Run the encoder for ``request.format``.

    Never raises for encoder problems: unknown formats and EncodingError both
    come back as an EncodingFailure carrying the requested format.
    """
    registry = registry or build_default_registry()
    fmt_name = getattr(request.format, "value", str(request.format))
    try:
        encoder = registry.get(request.format)
    except KeyError:
        available = ", ".join(get_export_format_choices(registry))
        logger.warning("Unknown export format %r (available: %s)", fmt_name, available)
        return EncodingFailure(fmt_name, f"Unknown export format: {fmt_name}. Available: {available}.")

    try:
        artifact = encoder.encode(request.source_text)
    except EncodingError as e:
        logger.error("Export to %s failed: %s", e.format, e.message)
        return EncodingFailure(e.format, e.message)

    logger.debug("Exported %s (%d bytes)", artifact.filename, len(artifact.data))
    return artifact


def export_document(
    source_text: str, format: ExportFormat | str, registry: IEncoderRegistry | None = None
) -> Artifact | EncodingFailure:
    """Export ``source_text`` as ``format`` ("markdown", "html", "text" or "pdf")."""
    try:
        fmt = ExportFormat.parse(format)
    except ValueError:
        logger.warning("Unknown export format %r", format)
        return EncodingFailure(str(format), f"Unknown export format: {format}.")
    return encode(ExportRequest(format=fmt, source_text=source_text), registry)
