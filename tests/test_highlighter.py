import pytest

from mdpreview.domain.models import Fragment
from mdpreview.services.highlighter import NEUTRAL_STYLE, PlainHighlighter, PygmentsHighlighter


def test_known_language_produces_styled_fragments(highlighter: PygmentsHighlighter):
    code = "def f():\n    return 1\n"
    frags = highlighter.highlight(code, "python")
    assert "".join(f.text for f in frags) == code
    assert Fragment("def", "k") in frags
    assert any(f.style not in (NEUTRAL_STYLE, "k") for f in frags)


def test_language_tag_is_case_insensitive(highlighter: PygmentsHighlighter):
    assert highlighter.highlight("def f(): pass", "Python") == highlighter.highlight(
        "def f(): pass", "python"
    )


def test_js_alias(highlighter: PygmentsHighlighter):
    frags = highlighter.highlight("console.log(1)", "js")
    assert "".join(f.text for f in frags) == "console.log(1)"
    assert any(f.style for f in frags)


@pytest.mark.parametrize("language", [None, "", "plain", "PLAIN", "no-such-language-xyz"])
def test_plain_and_unknown_languages_fall_back(highlighter: PygmentsHighlighter, language):
    code = "x = <1> & y"
    assert tuple(highlighter.highlight(code, language)) == (Fragment(code, NEUTRAL_STYLE),)


def test_adjacent_fragments_with_same_style_are_merged(highlighter: PygmentsHighlighter):
    frags = highlighter.highlight("a b c", "text")
    assert tuple(frags) == (Fragment("a b c", NEUTRAL_STYLE),)


def test_empty_code(highlighter: PygmentsHighlighter):
    assert tuple(highlighter.highlight("", "python")) == (Fragment("", NEUTRAL_STYLE),)


def test_trailing_newlines_are_preserved(highlighter: PygmentsHighlighter):
    code = "x = 1\n\n"
    assert "".join(f.text for f in highlighter.highlight(code, "python")) == code


def test_css_contains_style_rules(highlighter: PygmentsHighlighter):
    css = highlighter.css()
    assert ".highlight .k" in css


def test_plain_highlighter_is_passthrough():
    h = PlainHighlighter()
    assert tuple(h.highlight("def f(): pass", "python")) == (Fragment("def f(): pass", ""),)
    assert h.css() == ""
