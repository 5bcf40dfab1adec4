from __future__ import annotations

from html import escape

from mdpreview.domain.interfaces import IEncoder, IHighlighter
from mdpreview.domain.models import Artifact, Document, ExportFormat, Heading
from mdpreview.services.exporters.base import encode_utf8, text_artifact
from mdpreview.services.highlighter import PygmentsHighlighter
from mdpreview.services.markdown_parser import MarkdownParser, plain_text
from mdpreview.services.view_renderer import HtmlWriter, render
from mdpreview.utils.constants import EXPORT_BASENAME, EXPORT_HTML_TEMPLATE

DEFAULT_TITLE = "Markdown Preview"


def _document_title(doc: Document) -> str:
    for block in doc.blocks:
        if isinstance(block, Heading):
            title = plain_text(block.children).strip()
            if title:
                return title
    return DEFAULT_TITLE


class HtmlEncoder(IEncoder):
    """Parse, highlight and write a standalone HTML page."""

    format = ExportFormat.HTML
    label = "Export HTML…"

    def __init__(
        self, highlighter: IHighlighter | None = None, parser: MarkdownParser | None = None
    ) -> None:
        self.highlighter = highlighter or PygmentsHighlighter()
        self.parser = parser or MarkdownParser()
        self._writer = HtmlWriter()

    def encode(self, source_text: str) -> Artifact:
        doc = self.parser.parse(source_text)
        body = self._writer.write(render(doc, self.highlighter))
        css_fn = getattr(self.highlighter, "css", None)
        page = EXPORT_HTML_TEMPLATE.format(
            title=escape(_document_title(doc), quote=False),
            css=css_fn() if callable(css_fn) else "",
            body=body,
        )
        return text_artifact(encode_utf8(self.format, page), EXPORT_BASENAME, "html", "text/html")
