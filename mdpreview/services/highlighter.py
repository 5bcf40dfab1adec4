from __future__ import annotations

from collections.abc import Sequence

from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.token import STANDARD_TYPES
from pygments.util import ClassNotFound

from mdpreview.domain.interfaces import IHighlighter
from mdpreview.domain.models import Fragment

PLAIN_LANGUAGE = "plain"
NEUTRAL_STYLE = ""


def _style_tag(ttype) -> str:
    # Walk up to the nearest token type Pygments has a short CSS class for.
    while ttype not in STANDARD_TYPES:
        ttype = ttype.parent
    return STANDARD_TYPES[ttype]


class PlainHighlighter(IHighlighter):
    """No-op highlighter: the whole code block is one unstyled fragment."""

    def highlight(self, code: str, language: str | None) -> Sequence[Fragment]:
        return (Fragment(code, NEUTRAL_STYLE),)

    def css(self) -> str:
        return ""


class PygmentsHighlighter(IHighlighter):
    """
    Pygments-backed highlighter.

    Fragments carry Pygments' short CSS class names (``k``, ``s2``, ...) so the
    stylesheet from :meth:`css` colours them. Unknown or missing languages fall
    back to a single neutral fragment.
    """

    def __init__(self, style: str = "default") -> None:
        self.style = style

    def highlight(self, code: str, language: str | None) -> Sequence[Fragment]:
        if not language or language.lower() == PLAIN_LANGUAGE:
            return (Fragment(code, NEUTRAL_STYLE),)
        try:
            lexer = get_lexer_by_name(language.lower(), stripnl=False, ensurenl=False)
        except ClassNotFound:
            return (Fragment(code, NEUTRAL_STYLE),)

        fragments: list[Fragment] = []
        for ttype, value in lexer.get_tokens(code):
            if not value:
                continue
            tag = _style_tag(ttype)
            if fragments and fragments[-1].style == tag:
                fragments[-1] = Fragment(fragments[-1].text + value, tag)
            else:
                fragments.append(Fragment(value, tag))
        return tuple(fragments) or (Fragment(code, NEUTRAL_STYLE),)

    def css(self, selector: str = ".highlight") -> str:
        return HtmlFormatter(style=self.style).get_style_defs(selector)
