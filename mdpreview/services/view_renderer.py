from __future__ import annotations

from collections.abc import Sequence
from html import escape

from mdpreview.domain.interfaces import IHighlighter
from mdpreview.domain.models import (
    Code,
    CodeFence,
    Document,
    Emphasis,
    Fragment,
    Heading,
    HighlightedCode,
    Image,
    Inline,
    Link,
    ListBlock,
    Paragraph,
    Quote,
    RawHTML,
    RenderedView,
    Strong,
    Text,
    ThematicBreak,
)
from mdpreview.services.highlighter import PLAIN_LANGUAGE


def render(doc: Document, highlighter: IHighlighter) -> RenderedView:
    """Build the view for ``doc``; code fences are highlighted, nothing else changes."""
    return RenderedView(_render_blocks(doc.blocks, highlighter))


def _render_blocks(blocks: Sequence[object], highlighter: IHighlighter) -> tuple[object, ...]:
    out: list[object] = []
    for block in blocks:
        if isinstance(block, CodeFence):
            fragments = highlighter.highlight(block.text, block.language or PLAIN_LANGUAGE)
            out.append(HighlightedCode(block.language, tuple(fragments)))
        elif isinstance(block, Quote):
            out.append(Quote(_render_blocks(block.children, highlighter)))
        elif isinstance(block, ListBlock):
            items = tuple(_render_blocks(item, highlighter) for item in block.items)
            out.append(ListBlock(block.ordered, items, block.start))
        else:
            out.append(block)
    return tuple(out)


def _text(s: str) -> str:
    return escape(s, quote=False)


def _attr(s: str) -> str:
    return escape(s, quote=True)


class HtmlWriter:
    """
    Serialize a RenderedView to an HTML fragment.

    Every piece of document text is escaped; RawHTML blocks are the single
    exception and are emitted verbatim (author-trusted markup).
    """

    def write(self, view: RenderedView) -> str:
        return "\n".join(self._block(b) for b in view.blocks)

    def _block(self, block: object) -> str:
        if isinstance(block, Paragraph):
            return f"<p>{self._inlines(block.children)}</p>"
        if isinstance(block, Heading):
            return f"<h{block.level}>{self._inlines(block.children)}</h{block.level}>"
        if isinstance(block, HighlightedCode):
            return self._code(block)
        if isinstance(block, ListBlock):
            tag = "ol" if block.ordered else "ul"
            start = f' start="{block.start}"' if block.ordered and block.start != 1 else ""
            items = "".join(f"<li>{self._item(item)}</li>" for item in block.items)
            return f"<{tag}{start}>{items}</{tag}>"
        if isinstance(block, Quote):
            inner = "\n".join(self._block(b) for b in block.children)
            return f"<blockquote>\n{inner}\n</blockquote>"
        if isinstance(block, ThematicBreak):
            return "<hr />"
        if isinstance(block, RawHTML):
            return block.html
        if isinstance(block, CodeFence):
            # Un-rendered tree passed in directly: no highlighting available.
            return self._code(HighlightedCode(block.language, (Fragment(block.text),)))
        raise TypeError(f"Unknown block node: {block!r}")

    def _item(self, blocks: Sequence[object]) -> str:
        # Tight items: a lone paragraph is written without <p>.
        if len(blocks) == 1 and isinstance(blocks[0], Paragraph):
            return self._inlines(blocks[0].children)
        return "\n".join(self._block(b) for b in blocks)

    def _code(self, block: HighlightedCode) -> str:
        cls = f' class="language-{_attr(block.language)}"' if block.language else ""
        spans = []
        for frag in block.fragments:
            if frag.style:
                spans.append(f'<span class="{_attr(frag.style)}">{_text(frag.text)}</span>')
            else:
                spans.append(_text(frag.text))
        return f'<pre class="highlight"><code{cls}>{"".join(spans)}</code></pre>'

    def _inlines(self, nodes: Sequence[Inline]) -> str:
        return "".join(self._inline(n) for n in nodes)

    def _inline(self, node: Inline) -> str:
        if isinstance(node, Text):
            return _text(node.text)
        if isinstance(node, Strong):
            return f"<strong>{self._inlines(node.children)}</strong>"
        if isinstance(node, Emphasis):
            return f"<em>{self._inlines(node.children)}</em>"
        if isinstance(node, Code):
            return f"<code>{_text(node.text)}</code>"
        if isinstance(node, Link):
            title = f' title="{_attr(node.title)}"' if node.title else ""
            return f'<a href="{_attr(node.href)}"{title}>{self._inlines(node.children)}</a>'
        if isinstance(node, Image):
            title = f' title="{_attr(node.title)}"' if node.title else ""
            return f'<img src="{_attr(node.src)}" alt="{_attr(node.alt)}"{title} />'
        raise TypeError(f"Unknown inline node: {node!r}")


def to_html_body(doc: Document, highlighter: IHighlighter) -> str:
    return HtmlWriter().write(render(doc, highlighter))
