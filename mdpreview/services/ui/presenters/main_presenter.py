from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol, runtime_checkable

from mdpreview.domain.interfaces import IEncoderRegistry, IFileService
from mdpreview.domain.models import BufferState, EncodingFailure, ExportFormat
from mdpreview.services.export_service import export_document
from mdpreview.services.markdown_renderer import MarkdownRenderer
from mdpreview.services.source_buffer import DraftSession
from mdpreview.services.ui.ports.dialogs import IFileDialogService
from mdpreview.services.ui.ports.messages import IMessageService

logger = logging.getLogger(__name__)

_FILTERS = {
    "md": "Markdown (*.md)",
    "txt": "Text (*.txt)",
    "html": "HTML (*.html)",
    "pdf": "PDF (*.pdf)",
}


@runtime_checkable
class IMainView(Protocol):
    """Very small surface for a passive view (implemented by the Qt MainWindow)."""

    def get_editor_text(self) -> str: ...
    def set_editor_text(self, text: str) -> None: ...
    def set_preview_html(self, html: str) -> None: ...
    def set_title(self, title: str) -> None: ...
    def show_status(self, text: str, msec: int = 3000) -> None: ...


class MainPresenter:
    """
    Coordinates the editing session, live preview and export for a passive view.

    Edits are persisted through the DraftSession on every change and the preview
    is rebuilt from the latest text only.
    """

    def __init__(
        self,
        view: IMainView,
        session: DraftSession,
        renderer: MarkdownRenderer,
        files: IFileService,
        registry: IEncoderRegistry,
        messages: IMessageService,
        dialogs: IFileDialogService,
        app_title: str = "Markdown Previewer",
    ) -> None:
        self.view = view
        self.session = session
        self.renderer = renderer
        self.files = files
        self.registry = registry
        self.messages = messages
        self.dialogs = dialogs
        self.app_title = app_title

    # ---------- session ----------

    def start(self, start_path: Path | None = None) -> None:
        failure = self.session.start()
        if failure is not None:
            self.view.show_status(f"Could not load draft: {failure.message}", 5000)
        if start_path is not None:
            try:
                text = self.files.read_text(start_path)
            except OSError as e:
                self.messages.error(None, "Open Error", f"Failed to open file:\n{e}")
            else:
                self.session.edit(text)
        self.view.set_editor_text(self.session.text)
        self.render_preview()
        self._update_title()

    def on_text_changed(self, text: str) -> None:
        failure = self.session.edit(text)
        if failure is not None:
            self.view.show_status(f"Draft not saved: {failure.message}", 5000)
        self.render_preview()
        self._update_title()

    def retry_save(self) -> None:
        failure = self.session.retry_save()
        if failure is not None:
            self.view.show_status(f"Draft not saved: {failure.message}", 5000)
        self._update_title()

    # ---------- preview ----------

    def render_preview(self) -> None:
        self.view.set_preview_html(self.renderer.to_html(self.session.text))

    def change_font_size(self, delta: int) -> None:
        self.renderer.settings = self.renderer.settings.with_font_delta(delta)
        self.render_preview()

    def toggle_dark_mode(self) -> None:
        self.renderer.settings = self.renderer.settings.toggled_dark_mode()
        self.render_preview()

    # ---------- export ----------

    def export(self, fmt: ExportFormat | str, out_path: Path | None = None) -> bool:
        result = export_document(self.session.text, fmt, self.registry)
        if isinstance(result, EncodingFailure):
            self.messages.error(
                None, "Export Error", f"Failed to export {result.format.upper()}:\n{result.message}"
            )
            return False

        if out_path is None:
            out_path = self.dialogs.get_save_file(
                None,
                "Export",
                result.filename,
                _FILTERS.get(result.extension, "All files (*)"),
            )
            if out_path is None:
                return False

        try:
            self.files.write_bytes_atomic(out_path, result.data)
        except OSError as e:
            logger.error("Writing %s failed: %s", out_path, e)
            self.messages.error(None, "Export Error", f"Failed to write {out_path}:\n{e}")
            return False

        self.view.show_status(f"Exported {result.extension.upper()}: {out_path}", 3000)
        return True

    def _update_title(self) -> None:
        star = " •" if self.session.state is BufferState.DIRTY else ""
        self.view.set_title(f"{self.app_title}{star}")
