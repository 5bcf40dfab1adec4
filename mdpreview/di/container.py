from __future__ import annotations

from pathlib import Path

from PyQt6.QtCore import QSettings

from mdpreview.domain.interfaces import IEncoderRegistry, IFileService, IPersistenceAdapter
from mdpreview.services.config.app_config import AppConfig, build_app_config
from mdpreview.services.draft_store import SettingsDraftStore
from mdpreview.services.export_service import build_default_registry
from mdpreview.services.file_service import FileService
from mdpreview.services.highlighter import PygmentsHighlighter
from mdpreview.services.markdown_renderer import MarkdownRenderer
from mdpreview.services.source_buffer import DraftSession
from mdpreview.services.ui.adapters import QtFileDialogService, QtMessageService
from mdpreview.services.ui.main_window import MainWindow
from mdpreview.utils.constants import APP_NAME, APP_ORG


class Container:
    """
    Lightweight DI container:
      - Wires default services if not provided
      - Registers the built-in encoders (markdown, html, text, pdf)
      - Builds the main window around a DraftSession
    """

    def __init__(
        self,
        config: AppConfig | None = None,
        files: IFileService | None = None,
        store: IPersistenceAdapter | None = None,
        qsettings: QSettings | None = None,
        registry: IEncoderRegistry | None = None,
        dialogs: object | None = None,
        messages: object | None = None,
    ) -> None:
        self.config = config or build_app_config()
        preview = self.config.preview_settings()

        self.highlighter = PygmentsHighlighter(preview.style)
        self.renderer = MarkdownRenderer(highlighter=self.highlighter, settings=preview)
        self.file_service: IFileService = files or FileService()
        self.draft_store: IPersistenceAdapter = store or SettingsDraftStore(
            qsettings or QSettings(APP_ORG, APP_NAME)
        )
        self.registry: IEncoderRegistry = registry or build_default_registry(
            highlighter=self.highlighter, pdf_setup=self.config.pdf_setup()
        )
        self.dialogs = dialogs or QtFileDialogService()
        self.messages = messages or QtMessageService()

    @staticmethod
    def default(explicit_ini: Path | None = None) -> Container:
        return Container(config=build_app_config(explicit_ini=explicit_ini))

    def build_session(self) -> DraftSession:
        return DraftSession(self.draft_store)

    def build_main_window(
        self,
        *,
        start_path: Path | None = None,
        app_title: str = APP_NAME,
    ) -> MainWindow:
        return MainWindow(
            renderer=self.renderer,
            session=self.build_session(),
            file_service=self.file_service,
            registry=self.registry,
            messages=self.messages,
            dialogs=self.dialogs,
            start_path=start_path,
            app_title=app_title,
        )
