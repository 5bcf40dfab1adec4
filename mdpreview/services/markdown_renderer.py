from __future__ import annotations

from dataclasses import dataclass, replace

from mdpreview.domain.interfaces import IHighlighter, IMarkdownRenderer
from mdpreview.services.highlighter import PygmentsHighlighter
from mdpreview.services.markdown_parser import MarkdownParser
from mdpreview.services.view_renderer import HtmlWriter, render
from mdpreview.utils.constants import (
    CSS_PALETTE_DARK,
    CSS_PALETTE_LIGHT,
    CSS_PREVIEW,
    FONT_SIZE_MAX,
    FONT_SIZE_MIN,
    HTML_TEMPLATE,
)


@dataclass(frozen=True)
class PreviewSettings:
    """View-only state owned by the UI. Never reaches the parser or encoders."""

    style: str = "default"
    font_size: int = 16
    dark_mode: bool = True

    def with_font_delta(self, delta: int) -> PreviewSettings:
        size = min(max(self.font_size + delta, FONT_SIZE_MIN), FONT_SIZE_MAX)
        return replace(self, font_size=size)

    def toggled_dark_mode(self) -> PreviewSettings:
        return replace(self, dark_mode=not self.dark_mode)


class MarkdownRenderer(IMarkdownRenderer):
    """
    Live preview renderer: parse, highlight code fences, write HTML and wrap it
    in the preview template with CSS for the current PreviewSettings.
    """

    def __init__(
        self,
        highlighter: IHighlighter | None = None,
        settings: PreviewSettings | None = None,
        parser: MarkdownParser | None = None,
    ) -> None:
        self.settings = settings or PreviewSettings()
        self.highlighter = highlighter or PygmentsHighlighter(self.settings.style)
        self.parser = parser or MarkdownParser()
        self._writer = HtmlWriter()

    def to_html(self, markdown_text: str) -> str:
        view = render(self.parser.parse(markdown_text), self.highlighter)
        body = self._writer.write(view)
        return HTML_TEMPLATE.format(css=self._css(), body=body)

    def _css(self) -> str:
        palette = CSS_PALETTE_DARK if self.settings.dark_mode else CSS_PALETTE_LIGHT
        font = f"body {{ font-size: {self.settings.font_size}px; }}\n"
        css_fn = getattr(self.highlighter, "css", None)
        code_css = css_fn() if callable(css_fn) else ""
        return palette + CSS_PREVIEW + font + code_css
