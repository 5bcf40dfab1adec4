from __future__ import annotations

from dataclasses import dataclass, field

from mdpreview.domain.errors import EncodingError
from mdpreview.domain.interfaces import IEncoder, IEncoderRegistry
from mdpreview.domain.models import Artifact, ExportFormat


@dataclass
class EncoderRegistry(IEncoderRegistry):
    """
    Instance-based encoder registry (no globals, no side-effects).
    Keeps registry local to the DI container for testability and clarity.
    """

    _reg: dict[ExportFormat, IEncoder] = field(default_factory=dict)

    def register(self, e: IEncoder) -> None:
        self._reg[e.format] = e

    def get(self, fmt: ExportFormat | str) -> IEncoder:
        try:
            key = ExportFormat.parse(fmt)
        except ValueError:
            raise KeyError(fmt) from None
        return self._reg[key]

    def all(self) -> list[IEncoder]:
        return list(self._reg.values())


def encode_utf8(fmt: ExportFormat, text: str) -> bytes:
    try:
        return text.encode("utf-8")
    except UnicodeEncodeError as e:
        raise EncodingError(fmt.value, f"Text is not valid UTF-8: {e}") from e


def text_artifact(data: bytes, basename: str, ext: str, mime_type: str) -> Artifact:
    return Artifact(data=data, filename=f"{basename}.{ext}", mime_type=mime_type)
