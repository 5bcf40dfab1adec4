from __future__ import annotations

import logging
from pathlib import Path

from PyQt6.QtCore import QIODevice, QSaveFile

from mdpreview.domain.interfaces import IFileService

logger = logging.getLogger(__name__)


class FileService(IFileService):
    """
    Source files in, export artifacts out.

    Writes go through QSaveFile: the destination is replaced only after every
    byte reached the temporary file, so a failed export never leaves a partial
    artifact behind.
    """

    def read_text(self, path: Path) -> str:
        raw = path.read_bytes()
        try:
            # utf-8-sig drops the BOM some Windows editors prepend
            return raw.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise OSError(f"{path} is not UTF-8 text: {e.reason}") from e

    def write_text_atomic(self, path: Path, text: str) -> None:
        self.write_bytes_atomic(path, text.encode("utf-8"))

    def write_bytes_atomic(self, path: Path, data: bytes) -> None:
        sf = QSaveFile(str(path))
        if not sf.open(QIODevice.OpenModeFlag.WriteOnly):
            raise OSError(f"Cannot open for write: {path}")
        written = sf.write(data)
        if written != len(data):
            sf.cancelWriting()
            sf.commit()
            raise OSError(f"Short write to {path}: {written} of {len(data)} bytes")
        if not sf.commit():
            raise OSError(f"Commit failed for: {path}")
        logger.debug("Wrote %d bytes to %s", len(data), path)
