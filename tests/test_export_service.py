import logging

import pytest

from mdpreview.domain.errors import EncodingError
from mdpreview.domain.interfaces import IEncoder
from mdpreview.domain.models import Artifact, EncodingFailure, ExportFormat, ExportRequest
from mdpreview.services.export_service import (
    build_default_registry,
    encode,
    export_document,
    get_export_format_choices,
)
from mdpreview.services.exporters import EncoderRegistry, MarkdownEncoder


class BrokenEncoder(IEncoder):
    format = ExportFormat.TEXT
    label = "Export Broken…"

    def encode(self, source_text: str) -> Artifact:
        raise EncodingError("text", "nope")


def test_default_registry_has_all_formats():
    assert get_export_format_choices() == ["html", "markdown", "pdf", "text"]
    labels = [e.label for e in build_default_registry().all()]
    assert len(labels) == 4


@pytest.mark.parametrize(
    "fmt, filename",
    [
        ("markdown", "markdown_preview.md"),
        ("md", "markdown_preview.md"),
        ("text", "markdown_preview.txt"),
        (".txt", "markdown_preview.txt"),
        (ExportFormat.HTML, "markdown_preview.html"),
        ("HTM", "markdown_preview.html"),
    ],
)
def test_export_document_formats_and_aliases(fmt, filename):
    art = export_document("# hi", fmt)
    assert isinstance(art, Artifact)
    assert art.filename == filename


def test_markdown_and_text_exports_are_verbatim():
    src = "line 1\r\nline *2*\n"
    assert export_document(src, "markdown").data == src.encode("utf-8")
    assert export_document(src, "text").data == src.encode("utf-8")


def test_unknown_format_is_a_failure_value(caplog):
    with caplog.at_level(logging.WARNING):
        result = export_document("x", "docx")
    assert result == EncodingFailure("docx", "Unknown export format: docx.")
    assert "docx" in caplog.text


def test_unregistered_format_lists_available():
    reg = EncoderRegistry()
    reg.register(MarkdownEncoder())
    result = encode(ExportRequest(ExportFormat.PDF, "x"), reg)
    assert isinstance(result, EncodingFailure)
    assert result.format == "pdf"
    assert "Available: markdown" in result.message


def test_encoding_error_becomes_failure(caplog):
    reg = EncoderRegistry()
    reg.register(BrokenEncoder())
    with caplog.at_level(logging.ERROR):
        result = export_document("x", "text", reg)
    assert result == EncodingFailure("text", "nope")
    assert str(result) == "text export failed: nope"
    assert "nope" in caplog.text


def test_unencodable_source_is_a_failure():
    result = export_document("\ud800", "markdown")
    assert isinstance(result, EncodingFailure)
    assert result.format == "markdown"


def test_export_does_not_mutate_source():
    src = "# A\n\n- b"
    before = str(src)
    export_document(src, "html")
    assert src == before


def test_title_and_code_fence_through_every_text_format():
    source = "# Title\n\n```js\nconsole.log(1)\n```"

    page = export_document(source, "html")
    assert isinstance(page, Artifact)
    body = page.data.decode("utf-8")
    assert "<title>Title</title>" in body
    assert "<h1>Title</h1>" in body
    assert '<pre class="highlight"><code class="language-js"><span class="' in body
    assert "console" in body and "</span>" in body
    assert "```" not in body

    for fmt in ("markdown", "text"):
        artifact = export_document(source, fmt)
        assert isinstance(artifact, Artifact)
        assert artifact.data == source.encode("utf-8")


def test_script_text_is_escaped_in_html_export():
    page = export_document("# <script>alert(1)</script>\n\n<script>x</script>", "html")
    body = page.data.decode("utf-8")
    assert "<script>" not in body
    assert "<h1>&lt;script&gt;alert(1)&lt;/script&gt;</h1>" in body
