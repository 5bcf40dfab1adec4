from __future__ import annotations

from mdpreview.domain.interfaces import IEncoder
from mdpreview.domain.models import Artifact, ExportFormat
from mdpreview.services.exporters.base import encode_utf8, text_artifact
from mdpreview.utils.constants import EXPORT_BASENAME


class TextEncoder(IEncoder):
    """Plain text export. Markdown syntax is left in place, not stripped."""

    format = ExportFormat.TEXT
    label = "Export Text…"

    def encode(self, source_text: str) -> Artifact:
        data = encode_utf8(self.format, source_text)
        return text_artifact(data, EXPORT_BASENAME, "txt", "text/plain")
