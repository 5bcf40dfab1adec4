from __future__ import annotations

import argparse
import logging
from collections.abc import Sequence
from pathlib import Path

from PyQt6.QtWidgets import QApplication

from mdpreview.domain.models import EncodingFailure
from mdpreview.services.config.app_config import build_app_config
from mdpreview.services.export_service import build_default_registry, export_document
from mdpreview.services.file_service import FileService
from mdpreview.services.highlighter import PygmentsHighlighter
from mdpreview.utils.constants import APP_NAME, APP_ORG

logger = logging.getLogger(__name__)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mdpreview", description="Markdown editor with live preview and export."
    )
    parser.add_argument("path", nargs="?", type=Path, help="Markdown file to open or export")
    parser.add_argument(
        "--export",
        metavar="FORMAT",
        help="export PATH headlessly (markdown, html, text or pdf) instead of opening the editor",
    )
    parser.add_argument("-o", "--output", type=Path, help="export destination (default: suggested name)")
    parser.add_argument("--config", type=Path, help="explicit config.ini")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def run_export(args: argparse.Namespace) -> int:
    """Headless export: read PATH, write the artifact, exit non-zero on failure."""
    if args.path is None:
        logger.error("--export needs a source file")
        return 2

    files = FileService()
    try:
        source = files.read_text(args.path)
    except OSError as e:
        logger.error("Cannot read %s: %s", args.path, e)
        return 1

    config = build_app_config(explicit_ini=args.config)
    registry = build_default_registry(
        highlighter=PygmentsHighlighter(config.preview_settings().style),
        pdf_setup=config.pdf_setup(),
    )

    result = export_document(source, args.export, registry)
    if isinstance(result, EncodingFailure):
        logger.error("%s", result)
        return 1

    out = args.output or args.path.with_name(result.filename)
    try:
        files.write_bytes_atomic(out, result.data)
    except OSError as e:
        logger.error("Cannot write %s: %s", out, e)
        return 1
    logger.info("Exported %s", out)
    return 0


def run_app(argv: Sequence[str]) -> int:
    """
    Bootstraps Qt, composes the application via the DI container,
    and launches the main window (or runs a headless export).
    """
    args = build_arg_parser().parse_args(list(argv[1:]))
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.export:
        return run_export(args)

    # Imported here so headless export does not pull in the widget stack.
    from mdpreview.di.container import Container

    QApplication.setOrganizationName(APP_ORG)
    QApplication.setApplicationName(APP_NAME)
    app = QApplication(list(argv))

    container = Container.default(explicit_ini=args.config)
    win = container.build_main_window(start_path=args.path, app_title=APP_NAME)
    win.show()

    return app.exec()
