from __future__ import annotations

from PyQt6.QtCore import QSettings

from mdpreview.domain.errors import PersistenceError
from mdpreview.domain.interfaces import IPersistenceAdapter

DRAFT_GROUP = "drafts"


class SettingsDraftStore(IPersistenceAdapter):
    """Persist draft text under ``drafts/<key>`` in QSettings."""

    def __init__(self, qsettings: QSettings) -> None:
        self._s = qsettings

    def load(self, key: str) -> str | None:
        v = self._s.value(f"{DRAFT_GROUP}/{key}")
        if v is None:
            return None
        return v if isinstance(v, str) else str(v)

    def save(self, key: str, value: str) -> None:
        self._s.setValue(f"{DRAFT_GROUP}/{key}", value)
        self._s.sync()
        if self._s.status() != QSettings.Status.NoError:
            raise PersistenceError(f"Cannot write settings for {key!r}: {self._s.status().name}")
