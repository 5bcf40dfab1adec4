import math
import os
import re
import subprocess
import sys
from pathlib import Path

import pytest

from mdpreview.domain.errors import EncodingError
from mdpreview.domain.models import Artifact, EncodingFailure
from mdpreview.services.export_service import build_default_registry, export_document
from mdpreview.services.exporters import EncoderRegistry, PdfEncoder, PdfPageSetup, paginate

_ROOT = Path(__file__).resolve().parents[1]
_PAGE_RE = re.compile(rb"/Type\s*/Page(?![a-zA-Z])")


def _lines(n: int) -> str:
    return "\n".join(f"line {i}" for i in range(n))


# ------------------------------
# Pagination (pure)
# ------------------------------


def test_default_geometry():
    s = PdfPageSetup()
    assert s.page_width == pytest.approx(595.28, abs=0.01)
    assert s.page_height == pytest.approx(841.89, abs=0.01)
    assert s.line_height == pytest.approx(18.4)
    assert s.lines_per_page == 42


@pytest.mark.parametrize("n", [1, 41, 42, 43, 84, 85, 100])
def test_page_count_is_ceiling(n):
    s = PdfPageSetup()
    pages = paginate(_lines(n), s)
    assert len(pages) == math.ceil(n / s.lines_per_page)
    assert all(len(p) == s.lines_per_page for p in pages[:-1])
    assert sum(len(p) for p in pages) == n


def test_empty_text_is_one_blank_page():
    assert paginate("", PdfPageSetup()) == [[""]]


def test_crlf_and_trailing_newline():
    pages = paginate("a\r\nb\n", PdfPageSetup())
    assert pages == [["a", "b", ""]]


def test_long_lines_are_not_wrapped():
    long = "x" * 1000
    assert paginate(long, PdfPageSetup()) == [[long]]


def test_custom_geometry():
    s = PdfPageSetup(page_height=100, margin_top=10, margin_bottom=10, font_size=10, line_height_factor=2)
    assert s.lines_per_page == 4
    assert [len(p) for p in paginate(_lines(9), s)] == [4, 4, 1]


def test_tiny_page_still_holds_one_line():
    s = PdfPageSetup(page_height=20, margin_top=10, margin_bottom=10)
    assert s.lines_per_page == 1


# ------------------------------
# Rendering
# ------------------------------


def test_pdf_bytes_and_page_count(qapp):
    art = PdfEncoder().encode(_lines(100))
    assert art.filename == "document.pdf"
    assert art.mime_type == "application/pdf"
    assert art.data.startswith(b"%PDF")
    assert len(_PAGE_RE.findall(art.data)) == 3


def test_empty_pdf_has_one_page(qapp):
    art = PdfEncoder().encode("")
    assert len(_PAGE_RE.findall(art.data)) == 1


def test_pdf_is_literal_text_layout(qapp):
    # markdown is not interpreted: a heading line is just a line
    a = PdfEncoder().encode("# not a heading")
    assert a.data.startswith(b"%PDF")


def test_render_failure_is_wrapped(qapp, monkeypatch):
    def boom(self, pages):
        raise RuntimeError("painter exploded")

    monkeypatch.setattr(PdfEncoder, "_render", boom)
    with pytest.raises(EncodingError) as ei:
        PdfEncoder().encode("x")
    assert ei.value.format == "pdf"
    assert "painter exploded" in ei.value.message

    reg = EncoderRegistry()
    reg.register(PdfEncoder())
    result = export_document("x", "pdf", reg)
    assert isinstance(result, EncodingFailure)
    assert result.format == "pdf"


def test_offscreen_application_started_when_none_running(monkeypatch):
    started = []

    class NoApp:
        @staticmethod
        def instance():
            return None

        def __init__(self, argv):
            started.append(argv)

    monkeypatch.setattr("mdpreview.services.exporters.pdf_encoder.QGuiApplication", NoApp)
    monkeypatch.setattr("mdpreview.services.exporters.pdf_encoder._headless_app", None)
    monkeypatch.setattr(PdfEncoder, "_render", lambda self, pages: b"%PDF-1.4 stub")

    result = export_document("hello", "pdf", build_default_registry())

    assert isinstance(result, Artifact)
    assert result.data.startswith(b"%PDF")
    assert len(started) == 1
    assert started[0][-2:] == ["-platform", "offscreen"]


def test_pdf_export_in_fresh_process_without_application():
    # a new interpreter has no QGuiApplication; export_document must still produce a PDF
    script = (
        "import sys\n"
        "from mdpreview.services.export_service import export_document\n"
        "result = export_document('hello\\nworld', 'pdf')\n"
        "sys.stdout.write(type(result).__name__ + ' ' + repr(result.data[:5]))\n"
    )
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(_ROOT), env.get("PYTHONPATH")]))
    env.pop("QT_QPA_PLATFORM", None)
    proc = subprocess.run(
        [sys.executable, "-c", script],
        capture_output=True,
        text=True,
        timeout=120,
        env=env,
        cwd=str(_ROOT),
    )
    assert proc.returncode == 0, proc.stderr
    assert proc.stdout == "Artifact b'%PDF-'"
