from __future__ import annotations

import os
from pathlib import Path

import pytest

# Headless Qt for CI; must be set before the first QGuiApplication.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt6.QtCore import QSettings  # noqa: E402
from PyQt6.QtWidgets import QApplication  # noqa: E402

from mdpreview.services.draft_store import SettingsDraftStore  # noqa: E402
from mdpreview.services.file_service import FileService  # noqa: E402
from mdpreview.services.highlighter import PygmentsHighlighter  # noqa: E402
from mdpreview.services.markdown_parser import MarkdownParser  # noqa: E402


# --- Fallback QApplication fixture (works with or without pytest-qt) ---
@pytest.fixture(scope="session")
def qapp():
    """Provide a QApplication for tests that need Qt.
    Creates one if not present; reuses existing otherwise.
    """
    app = QApplication.instance()
    created = False
    if app is None:
        app = QApplication([])
        created = True
    try:
        yield app
    finally:
        if created:
            app.quit()


class MemoryStore:
    """In-memory persistence adapter with switchable failures."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(initial or {})
        self.fail_load = False
        self.fail_save = False
        self.saves = 0

    def load(self, key: str) -> str | None:
        if self.fail_load:
            raise OSError("store offline")
        return self.data.get(key)

    def save(self, key: str, value: str) -> None:
        if self.fail_save:
            raise OSError("disk full")
        self.saves += 1
        self.data[key] = value


@pytest.fixture()
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture()
def tmp_settings_path(tmp_path: Path) -> Path:
    return tmp_path / "settings.ini"


@pytest.fixture()
def qsettings(tmp_settings_path: Path) -> QSettings:
    # Use an INI file so we don't touch system registry / platform stores
    s = QSettings(str(tmp_settings_path), QSettings.Format.IniFormat)
    s.clear()
    return s


@pytest.fixture()
def draft_store(qsettings: QSettings) -> SettingsDraftStore:
    return SettingsDraftStore(qsettings)


@pytest.fixture()
def file_service() -> FileService:
    return FileService()


@pytest.fixture()
def parser() -> MarkdownParser:
    return MarkdownParser()


@pytest.fixture()
def highlighter() -> PygmentsHighlighter:
    return PygmentsHighlighter()
