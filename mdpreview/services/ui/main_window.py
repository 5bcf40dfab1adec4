from __future__ import annotations

from pathlib import Path

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QAction, QKeySequence
from PyQt6.QtWidgets import (
    QMainWindow,
    QPlainTextEdit,
    QSplitter,
    QStatusBar,
    QTextBrowser,
    QToolBar,
)

from mdpreview.domain.interfaces import IEncoderRegistry, IFileService
from mdpreview.services.markdown_renderer import MarkdownRenderer
from mdpreview.services.source_buffer import DraftSession
from mdpreview.services.ui.ports.dialogs import IFileDialogService
from mdpreview.services.ui.ports.messages import IMessageService
from mdpreview.services.ui.presenters.main_presenter import MainPresenter


class MainWindow(QMainWindow):
    """Thin PyQt window: editor on the left, live preview on the right."""

    def __init__(
        self,
        renderer: MarkdownRenderer,
        session: DraftSession,
        file_service: IFileService,
        registry: IEncoderRegistry,
        messages: IMessageService,
        dialogs: IFileDialogService,
        *,
        start_path: Path | None = None,
        app_title: str = "Markdown Previewer",
    ) -> None:
        super().__init__()
        self.setWindowTitle(app_title)
        self.resize(1100, 700)

        self.editor = QPlainTextEdit(self)
        self.editor.setPlaceholderText("Enter your Markdown here...")
        self.editor.setTabStopDistance(4 * self.editor.fontMetrics().horizontalAdvance(" "))

        self.preview = QTextBrowser(self)
        self.preview.setOpenExternalLinks(True)

        self.splitter = QSplitter(self)
        self.splitter.setOrientation(Qt.Orientation.Horizontal)
        self.splitter.addWidget(self.editor)
        self.splitter.addWidget(self.preview)
        self.splitter.setStretchFactor(0, 1)
        self.splitter.setStretchFactor(1, 1)
        self.setCentralWidget(self.splitter)

        self.presenter = MainPresenter(
            view=self,
            session=session,
            renderer=renderer,
            files=file_service,
            registry=registry,
            messages=messages,
            dialogs=dialogs,
            app_title=app_title,
        )

        self._build_actions(registry)
        self._build_toolbar()
        self.setStatusBar(QStatusBar(self))

        self.editor.textChanged.connect(self._on_text_changed)
        self.presenter.start(start_path)

    # ---------- UI creation ----------
    def _build_actions(self, registry: IEncoderRegistry) -> None:
        self.export_actions: list[QAction] = []
        for encoder in registry.all():
            act = QAction(
                encoder.label,
                self,
                triggered=lambda chk=False, f=encoder.format: self.presenter.export(f),
            )
            self.export_actions.append(act)

        self.act_font_up = QAction(
            "A+",
            self,
            shortcut=QKeySequence.StandardKey.ZoomIn,
            triggered=lambda: self.presenter.change_font_size(2),
        )
        self.act_font_down = QAction(
            "A-",
            self,
            shortcut=QKeySequence.StandardKey.ZoomOut,
            triggered=lambda: self.presenter.change_font_size(-2),
        )
        self.act_dark_mode = QAction(
            "Dark Mode",
            self,
            checkable=True,
            checked=self.presenter.renderer.settings.dark_mode,
            triggered=lambda _on: self.presenter.toggle_dark_mode(),
        )
        self.act_retry_save = QAction(
            "Save Draft",
            self,
            shortcut=QKeySequence.StandardKey.Save,
            triggered=lambda: self.presenter.retry_save(),
        )

    def _build_toolbar(self) -> None:
        tb = QToolBar("Main", self)
        tb.setMovable(False)
        for a in self.export_actions:
            tb.addAction(a)
        tb.addSeparator()
        for a in (self.act_font_down, self.act_font_up, self.act_dark_mode, self.act_retry_save):
            tb.addAction(a)
        self.addToolBar(tb)

    # ---------- IMainView ----------
    def get_editor_text(self) -> str:
        return self.editor.toPlainText()

    def set_editor_text(self, text: str) -> None:
        self.editor.blockSignals(True)
        try:
            self.editor.setPlainText(text)
        finally:
            self.editor.blockSignals(False)

    def set_preview_html(self, html: str) -> None:
        self.preview.setHtml(html)

    def set_title(self, title: str) -> None:
        self.setWindowTitle(title)

    def show_status(self, text: str, msec: int = 3000) -> None:
        self.statusBar().showMessage(text, msec)

    # ---------- Signals ----------
    def _on_text_changed(self) -> None:
        self.presenter.on_text_changed(self.editor.toPlainText())
