"""
Event Models — Neutral records for paste and drop input.

Native editor events are translated into these records at the
interception boundary. The orchestrator only ever sees InputEvent,
which keeps replay logic independent of any particular host.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Literal, Optional, Protocol

EventKind = Literal["drop", "paste"]

# The transfer type a browser-like host reports for file drags
FILES_TRANSFER_TYPE = "Files"


@dataclass(frozen=True)
class FileBlob:
    """A file-like binary payload attached to an input event."""

    name: str
    mime_type: str
    data: bytes = field(repr=False)

    @property
    def is_image(self) -> bool:
        return self.mime_type.startswith("image/")

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass
class TransferData:
    """Transfer payload of a drop, or clipboard payload of a paste."""

    types: List[str] = field(default_factory=list)
    files: List[FileBlob] = field(default_factory=list)

    @classmethod
    def of_files(cls, files: List[FileBlob]) -> "TransferData":
        """Build a fresh transfer object holding exactly `files`."""
        return cls(
            types=[FILES_TRANSFER_TYPE] if files else [],
            files=list(files),
        )


@dataclass
class InputEvent:
    """A paste or drop event, as seen by the upload engine."""

    kind: EventKind
    transfer: TransferData
    client_x: Optional[float] = None
    client_y: Optional[float] = None

    @classmethod
    def drop(
        cls,
        files: List[FileBlob],
        client_x: Optional[float] = None,
        client_y: Optional[float] = None,
    ) -> "InputEvent":
        return cls("drop", TransferData.of_files(files), client_x, client_y)

    @classmethod
    def paste(cls, files: List[FileBlob]) -> "InputEvent":
        return cls("paste", TransferData.of_files(files))

    @property
    def files(self) -> List[FileBlob]:
        return self.transfer.files

    def with_files(self, files: List[FileBlob]) -> "InputEvent":
        """
        Synthesize a replay event carrying only `files`.

        Kind and pointer coordinates are preserved; the transfer object
        is freshly constructed so the original event is never shared.
        """
        return InputEvent(
            kind=self.kind,
            transfer=TransferData.of_files(files),
            client_x=self.client_x,
            client_y=self.client_y,
        )


class NativeEventCodec(Protocol):
    """Translates between a host's native event shape and InputEvent."""

    def to_domain(self, kind: EventKind, native: Any) -> InputEvent:
        ...

    def to_native(self, event: InputEvent, original: Any) -> Any:
        ...


class PassthroughCodec:
    """Codec for hosts whose native event shape already is InputEvent."""

    def to_domain(self, kind: EventKind, native: Any) -> InputEvent:
        if not isinstance(native, InputEvent):
            raise TypeError(f"Expected InputEvent, got {type(native).__name__}")
        return native

    def to_native(self, event: InputEvent, original: Any) -> Any:
        return event
