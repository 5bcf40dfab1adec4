import pytest

from mdpreview.domain.errors import EncodingError
from mdpreview.domain.models import ExportFormat
from mdpreview.services.exporters import HtmlEncoder, MarkdownEncoder, TextEncoder
from mdpreview.services.highlighter import PlainHighlighter

SOURCE = "# Title\n\nSome *text* with <b>tags</b> & ünïcödé\n"


@pytest.mark.parametrize(
    "encoder, filename, mime",
    [
        (MarkdownEncoder(), "markdown_preview.md", "text/markdown"),
        (TextEncoder(), "markdown_preview.txt", "text/plain"),
    ],
)
def test_text_encoders_return_source_bytes(encoder, filename, mime):
    art = encoder.encode(SOURCE)
    assert art.data == SOURCE.encode("utf-8")
    assert art.filename == filename
    assert art.mime_type == mime


@pytest.mark.parametrize("encoder", [MarkdownEncoder(), TextEncoder()])
def test_text_encoders_empty_input(encoder):
    assert encoder.encode("").data == b""


def test_text_encoder_keeps_markdown_syntax():
    assert TextEncoder().encode("**bold**").data == b"**bold**"


def test_unencodable_text_raises_encoding_error():
    with pytest.raises(EncodingError) as ei:
        MarkdownEncoder().encode("bad \ud800 surrogate")
    assert ei.value.format == "markdown"


# ------------------------------
# HTML
# ------------------------------


def test_html_envelope_and_metadata():
    art = HtmlEncoder().encode(SOURCE)
    assert art.filename == "markdown_preview.html"
    assert art.mime_type == "text/html"
    page = art.data.decode("utf-8")
    assert page.startswith("<html>")
    assert page.rstrip().endswith("</body>\n</html>")
    assert "<title>Title</title>" in page
    assert "<h1>Title</h1>" in page
    assert "<em>text</em>" in page
    assert "&lt;b&gt;tags&lt;/b&gt; &amp; ünïcödé" in page


def test_html_escapes_script():
    page = HtmlEncoder().encode("<script>alert(1)</script>").data.decode("utf-8")
    assert "<script>" not in page
    assert "&lt;script&gt;" in page


def test_html_title_falls_back_and_is_escaped():
    assert b"<title>Markdown Preview</title>" in HtmlEncoder().encode("no heading").data
    assert b"<title>a &lt; b</title>" in HtmlEncoder().encode("## a < b").data


def test_html_highlights_code_and_embeds_css():
    page = HtmlEncoder().encode("```python\ndef f(): pass\n```").data.decode("utf-8")
    assert '<code class="language-python">' in page
    assert '<span class="k">def</span>' in page
    assert ".highlight .k" in page


def test_html_with_plain_highlighter_has_no_spans():
    page = HtmlEncoder(highlighter=PlainHighlighter()).encode("```python\ndef f(): pass\n```")
    text = page.data.decode("utf-8")
    assert "<span" not in text
    assert "def f(): pass" in text


def test_html_empty_document():
    page = HtmlEncoder().encode("").data.decode("utf-8")
    assert "<body>\n\n</body>" in page


def test_encoder_metadata():
    assert MarkdownEncoder.format is ExportFormat.MARKDOWN
    assert HtmlEncoder.format is ExportFormat.HTML
    assert TextEncoder.format is ExportFormat.TEXT
    assert all(e.label.startswith("Export") for e in (MarkdownEncoder, HtmlEncoder, TextEncoder))
