from __future__ import annotations

import logging
from dataclasses import dataclass

from PyQt6.QtCore import QBuffer, QIODevice, QMarginsF, QPointF, QSizeF
from PyQt6.QtGui import QFont, QGuiApplication, QPageLayout, QPageSize, QPainter, QPdfWriter

from mdpreview.domain.errors import EncodingError
from mdpreview.domain.interfaces import IEncoder
from mdpreview.domain.models import Artifact, ExportFormat
from mdpreview.utils.constants import APP_NAME, PDF_BASENAME

logger = logging.getLogger(__name__)

MM_TO_PT = 72.0 / 25.4

# Application started for exports run outside the GUI; kept for the process lifetime.
_headless_app: QGuiApplication | None = None


def ensure_gui_application() -> QGuiApplication:
    """Return the running QGuiApplication, starting an offscreen one if there is none."""
    global _headless_app
    app = QGuiApplication.instance()
    if app is None:
        logger.debug("No Qt application running; starting an offscreen one for PDF export")
        _headless_app = QGuiApplication([APP_NAME, "-platform", "offscreen"])
        app = _headless_app
    return app


@dataclass(frozen=True)
class PdfPageSetup:
    """
    Fixed page geometry in points (1/72 inch).

    Defaults reproduce the previewer's original output: A4 portrait, text
    started 10 mm from the top-left corner, 16 pt font, 1.15 line spacing.
    """

    page_width: float = 210.0 * MM_TO_PT
    page_height: float = 297.0 * MM_TO_PT
    margin_left: float = 10.0 * MM_TO_PT
    margin_top: float = 10.0 * MM_TO_PT
    margin_bottom: float = 10.0 * MM_TO_PT
    font_family: str = "Helvetica"
    font_size: float = 16.0
    line_height_factor: float = 1.15

    @property
    def line_height(self) -> float:
        return self.font_size * self.line_height_factor

    @property
    def printable_height(self) -> float:
        return self.page_height - self.margin_top - self.margin_bottom

    @property
    def lines_per_page(self) -> int:
        return max(1, int(self.printable_height // self.line_height))


def paginate(text: str, setup: PdfPageSetup) -> list[list[str]]:
    """
    Split ``text`` on newlines and distribute the lines over pages.

    The vertical cursor advances one line height per line; a new page starts
    whenever the next line would cross the bottom margin, so every page holds
    ``setup.lines_per_page`` lines except possibly the last. Long lines are not
    wrapped. Empty text still yields one (blank) page.
    """
    lines = text.replace("\r\n", "\n").split("\n")
    per_page = setup.lines_per_page
    pages: list[list[str]] = []
    current: list[str] = []
    for line in lines:
        if len(current) == per_page:
            pages.append(current)
            current = []
        current.append(line)
    pages.append(current)
    return pages


class PdfEncoder(IEncoder):
    """
    Literal plain-text PDF layout (not Markdown-aware).

    Pages are painted into an in-memory buffer; the artifact only exists once
    the painter has finished, so callers never see a partial document.
    """

    format = ExportFormat.PDF
    label = "Export PDF…"

    def __init__(self, setup: PdfPageSetup | None = None, title: str = "document") -> None:
        self.setup = setup or PdfPageSetup()
        self.title = title

    def encode(self, source_text: str) -> Artifact:
        ensure_gui_application()
        pages = paginate(source_text, self.setup)
        try:
            data = self._render(pages)
        except EncodingError:
            raise
        except Exception as e:
            raise EncodingError(self.format.value, f"PDF rendering failed: {e}") from e

        logger.debug("Rendered %d PDF page(s), %d bytes", len(pages), len(data))
        return Artifact(data=data, filename=f"{PDF_BASENAME}.pdf", mime_type="application/pdf")

    def _render(self, pages: list[list[str]]) -> bytes:
        s = self.setup
        buffer = QBuffer()
        if not buffer.open(QIODevice.OpenModeFlag.WriteOnly):
            raise EncodingError(self.format.value, "Cannot open in-memory PDF buffer")

        writer = QPdfWriter(buffer)
        writer.setResolution(72)  # one device pixel per point
        writer.setTitle(self.title)
        writer.setCreator(APP_NAME)
        page_size = QPageSize(
            QSizeF(s.page_width, s.page_height),
            QPageSize.Unit.Point,
            "",
            QPageSize.SizeMatchPolicy.ExactMatch,
        )
        writer.setPageLayout(
            QPageLayout(
                page_size,
                QPageLayout.Orientation.Portrait,
                QMarginsF(0, 0, 0, 0),
                QPageLayout.Unit.Point,
            )
        )

        painter = QPainter()
        if not painter.begin(writer):
            raise EncodingError(self.format.value, "Cannot start PDF painter")
        try:
            font = QFont(s.font_family)
            font.setPointSizeF(s.font_size)
            painter.setFont(font)
            ascent = painter.fontMetrics().ascent()
            for index, page in enumerate(pages):
                if index and not writer.newPage():
                    raise EncodingError(self.format.value, f"Cannot start page {index + 1}")
                for row, line in enumerate(page):
                    y = s.margin_top + row * s.line_height
                    painter.drawText(QPointF(s.margin_left, y + ascent), line)
        finally:
            painter.end()

        buffer.close()
        return bytes(buffer.data())
