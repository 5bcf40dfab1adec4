from __future__ import annotations

import logging
import re
from collections.abc import Sequence

from markdown_it import MarkdownIt
from markdown_it.tree import SyntaxTreeNode

from mdpreview.domain.models import (
    Block,
    Code,
    CodeFence,
    Document,
    Emphasis,
    Heading,
    Image,
    Inline,
    Link,
    ListBlock,
    Paragraph,
    Quote,
    RawHTML,
    Strong,
    Text,
    ThematicBreak,
)

logger = logging.getLogger(__name__)

_HTML_OPEN_RE = re.compile(r"^ {0,3}(?:<!--|</?(?P<tag>[A-Za-z][A-Za-z0-9-]*)(?:[\s/>]|$))")

# Block-level elements that start a raw HTML block. Anything else (script,
# span, ...) is treated as ordinary text and escaped on output.
_BLOCK_TAGS = frozenset(
    """
    address article aside blockquote center details dialog dd div dl dt
    fieldset figcaption figure footer form h1 h2 h3 h4 h5 h6 header hr
    li main nav ol p pre section summary table tbody td tfoot th thead tr ul
    """.split()
)

# Characters that can start or close a construct somewhere in a line.
_ACTIVE_CHARS = frozenset("\\`*_[]!<>#~-+=&")
_ORDERED_MARKER_RE = re.compile(r"^ {0,3}\d{1,9}[.)](?:[ \t]|$)")


def plain_text(nodes: Sequence[Inline]) -> str:
    parts: list[str] = []
    for node in nodes:
        if isinstance(node, (Text, Code)):
            parts.append(node.text)
        elif isinstance(node, Image):
            parts.append(node.alt)
        else:
            parts.append(plain_text(node.children))
    return "".join(parts)


def _is_plain(body: str) -> bool:
    """True when nothing in ``body`` could be read as markup."""
    if _ACTIVE_CHARS.intersection(body):
        return False
    seen_text = False
    blank_after_text = False
    for line in body.split("\n"):
        if not line.strip():
            blank_after_text = seen_text
            continue
        if blank_after_text:
            return False
        if line.startswith(("    ", "\t")) or _ORDERED_MARKER_RE.match(line):
            return False
        seen_text = True
    return True


def _merge_text(nodes: list[Inline]) -> tuple[Inline, ...]:
    merged: list[Inline] = []
    for node in nodes:
        if isinstance(node, Text) and merged and isinstance(merged[-1], Text):
            merged[-1] = Text(merged[-1].text + node.text)
        elif not (isinstance(node, Text) and not node.text):
            merged.append(node)
    return tuple(merged)


def _strip_newline(s: str) -> str:
    return s[:-1] if s.endswith("\n") else s


class MarkdownParser:
    """
    Markdown to ``Document`` parser on top of markdown-it (CommonMark).

    Never raises: if the tokenizer fails the whole input is kept as a single
    paragraph. Text without any markdown-active character is returned verbatim
    as one paragraph.

    Differences from plain CommonMark:

    * a fence language tag must follow the opening marker directly
      (```` ```js ````); ```` ``` js ```` is a fence without a language
    * HTML blocks are kept raw only for block-level tags and comments; other
      tags (``<script>``, ``<span>``, ...) become paragraph text
    * inline HTML is text
    """

    def __init__(self, max_depth: int = 20) -> None:
        self._md = MarkdownIt("commonmark", {"html": True, "maxNesting": max_depth})

    def parse(self, text: str) -> Document:
        text = text.replace("\r\n", "\n").replace("\r", "\n")
        body = text.rstrip("\n")
        if not body.strip():
            return Document(())
        if _is_plain(body):
            return Document((Paragraph((Text(body),)),))
        try:
            root = SyntaxTreeNode(self._md.parse(text))
            return Document(self._blocks(root.children, text.split("\n")))
        except Exception:
            logger.exception("Markdown tokenizer failed; showing source as text")
            return Document((Paragraph((Text(body),)),))

    # ---- blocks ----

    def _blocks(self, nodes: Sequence[SyntaxTreeNode], lines: list[str]) -> tuple[Block, ...]:
        out: list[Block] = []
        for node in nodes:
            block = self._block(node, lines)
            if block is not None:
                out.append(block)
        return tuple(out)

    def _block(self, node: SyntaxTreeNode, lines: list[str]) -> Block | None:
        kind = node.type
        if kind == "paragraph":
            return Paragraph(self._inline_children(node))
        if kind == "heading":
            return Heading(int(node.tag[1]), self._inline_children(node))
        if kind == "fence":
            return CodeFence(self._fence_language(node, lines), _strip_newline(node.content))
        if kind == "code_block":
            return CodeFence(None, _strip_newline(node.content))
        if kind in ("bullet_list", "ordered_list"):
            items = tuple(self._blocks(item.children, lines) for item in node.children)
            start = int(node.attrs.get("start", 1)) if kind == "ordered_list" else 1
            return ListBlock(kind == "ordered_list", items, start)
        if kind == "blockquote":
            return Quote(self._blocks(node.children, lines))
        if kind == "hr":
            return ThematicBreak()
        if kind == "html_block":
            return self._html_block(node.content.rstrip("\n"))
        logger.debug("Unhandled block token %s kept as text", kind)
        content = node.content.rstrip("\n")
        return Paragraph((Text(content),)) if content else None

    @staticmethod
    def _fence_language(node: SyntaxTreeNode, lines: list[str]) -> str | None:
        info = node.info.strip()
        if not info:
            return None
        if node.map is not None:
            line = lines[node.map[0]]
            at = line.find(node.markup)
            if at >= 0:
                after = line[at + len(node.markup): at + len(node.markup) + 1]
                if after.isspace():
                    return None
        return info.split()[0]

    @staticmethod
    def _html_block(html: str) -> Block:
        m = _HTML_OPEN_RE.match(html)
        if m and (m.group("tag") is None or m.group("tag").lower() in _BLOCK_TAGS):
            return RawHTML(html)
        return Paragraph((Text(html),))

    # ---- inlines ----

    def _inline_children(self, node: SyntaxTreeNode) -> tuple[Inline, ...]:
        nodes: list[Inline] = []
        for child in node.children:
            # paragraph/heading hold a single "inline" node
            nodes.extend(self._inlines(child.children) if child.type == "inline" else ())
        return _merge_text(nodes)

    def _inlines(self, nodes: Sequence[SyntaxTreeNode]) -> list[Inline]:
        return [self._inline(n) for n in nodes]

    def _inline(self, node: SyntaxTreeNode) -> Inline:
        kind = node.type
        if kind in ("softbreak", "hardbreak"):
            return Text("\n")
        if kind == "em":
            return Emphasis(_merge_text(self._inlines(node.children)))
        if kind == "strong":
            return Strong(_merge_text(self._inlines(node.children)))
        if kind == "code_inline":
            return Code(node.content)
        if kind == "link":
            return Link(
                str(node.attrs.get("href", "")),
                str(node.attrs.get("title", "") or ""),
                _merge_text(self._inlines(node.children)),
            )
        if kind == "image":
            alt = plain_text(_merge_text(self._inlines(node.children)))
            return Image(
                str(node.attrs.get("src", "")),
                alt,
                str(node.attrs.get("title", "") or ""),
            )
        # text, text_special (escapes, entities), html_inline
        return Text(node.content)


_default_parser = MarkdownParser()


def parse(text: str) -> Document:
    """Parse ``text`` with a shared default parser."""
    return _default_parser.parse(text)
