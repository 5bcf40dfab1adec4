from __future__ import annotations

from mdpreview.domain.interfaces import IEncoder
from mdpreview.domain.models import Artifact, ExportFormat
from mdpreview.services.exporters.base import encode_utf8, text_artifact
from mdpreview.utils.constants import EXPORT_BASENAME


class MarkdownEncoder(IEncoder):
    """The source text, byte for byte."""

    format = ExportFormat.MARKDOWN
    label = "Export Markdown…"

    def encode(self, source_text: str) -> Artifact:
        data = encode_utf8(self.format, source_text)
        return text_artifact(data, EXPORT_BASENAME, "md", "text/markdown")
