from __future__ import annotations

import logging

from mdpreview.domain.interfaces import IPersistenceAdapter
from mdpreview.domain.models import BufferState, Document, PersistenceFailure
from mdpreview.services.markdown_parser import MarkdownParser
from mdpreview.utils.constants import DRAFT_KEY

logger = logging.getLogger(__name__)


class SourceBuffer:
    """The current document text plus the last value known to be persisted."""

    def __init__(self, text: str = "", persisted: str | None = None) -> None:
        self._text = text
        self._persisted = text if persisted is None else persisted

    @property
    def text(self) -> str:
        return self._text

    @property
    def state(self) -> BufferState:
        return BufferState.CLEAN if self._text == self._persisted else BufferState.DIRTY

    @property
    def is_dirty(self) -> bool:
        return self.state is BufferState.DIRTY

    def set_text(self, text: str) -> None:
        self._text = text

    def mark_persisted(self, text: str) -> None:
        self._persisted = text

    def snapshot(self) -> str:
        # str is immutable, so the value itself is the snapshot
        return self._text


class DraftSession:
    """
    Editing session: owns the SourceBuffer and keeps it persisted.

    Clean -> (edit) -> Dirty -> (successful save) -> Clean. Persistence errors
    are logged and returned as PersistenceFailure values; the in-memory buffer
    stays authoritative and editing continues.
    """

    def __init__(
        self,
        store: IPersistenceAdapter,
        key: str = DRAFT_KEY,
        parser: MarkdownParser | None = None,
    ) -> None:
        self.store = store
        self.key = key
        self.parser = parser or MarkdownParser()
        self.buffer = SourceBuffer()
        self._parsed: tuple[str, Document] | None = None

    @property
    def state(self) -> BufferState:
        return self.buffer.state

    @property
    def text(self) -> str:
        return self.buffer.text

    def start(self) -> PersistenceFailure | None:
        """Seed the buffer from the store; starts Clean either way."""
        try:
            loaded = self.store.load(self.key)
        except Exception as e:
            logger.warning("Could not load draft %r: %s", self.key, e)
            self.buffer = SourceBuffer("")
            return PersistenceFailure(self.key, "load", str(e))
        self.buffer = SourceBuffer(loaded or "")
        return None

    def edit(self, text: str) -> PersistenceFailure | None:
        self.buffer.set_text(text)
        return self._persist(text)

    def retry_save(self) -> PersistenceFailure | None:
        if not self.buffer.is_dirty:
            return None
        return self._persist(self.buffer.text)

    def _persist(self, text: str) -> PersistenceFailure | None:
        try:
            self.store.save(self.key, text)
        except Exception as e:
            logger.warning("Could not save draft %r: %s", self.key, e)
            return PersistenceFailure(self.key, "save", str(e))
        self.buffer.mark_persisted(text)
        return None

    def document(self) -> Document:
        """Parse of the latest snapshot; a superseded parse is never returned."""
        snapshot = self.buffer.snapshot()
        if self._parsed is None or self._parsed[0] != snapshot:
            self._parsed = (snapshot, self.parser.parse(snapshot))
        return self._parsed[1]
