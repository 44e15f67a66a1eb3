"""
Upload Models — Per-file upload lifecycle and user decisions.

## PendingUpload states

    INSERTED ──start()──▶ UPLOADING ──succeed(url)──▶ SUCCEEDED
                              │
                              └──────fail(reason)───▶ FAILED

SUCCEEDED and FAILED are terminal; the placeholder marker is replaced
in both cases and the token is never reused.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from pydantic import BaseModel

from .events import FileBlob


class UploadState(str, Enum):
    """Lifecycle states of a single pending upload."""
    INSERTED = "inserted"
    UPLOADING = "uploading"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class InvalidTransition(RuntimeError):
    """Raised when a PendingUpload is moved out of order."""


@dataclass
class PendingUpload:
    """One file whose placeholder marker sits in the document."""

    token: str
    blob: FileBlob
    state: UploadState = UploadState.INSERTED
    url: Optional[str] = None
    reason: Optional[str] = None

    @property
    def is_terminal(self) -> bool:
        return self.state in (UploadState.SUCCEEDED, UploadState.FAILED)

    def start(self) -> None:
        self._expect(UploadState.INSERTED)
        self.state = UploadState.UPLOADING

    def succeed(self, url: str) -> None:
        self._expect(UploadState.UPLOADING)
        self.state = UploadState.SUCCEEDED
        self.url = url

    def fail(self, reason: str) -> None:
        self._expect(UploadState.UPLOADING)
        self.state = UploadState.FAILED
        self.reason = reason

    def _expect(self, expected: UploadState) -> None:
        if self.state != expected:
            raise InvalidTransition(
                f"Upload {self.token}: expected {expected.value}, "
                f"was {self.state.value}"
            )


class UserUploadDecision(BaseModel):
    """
    Answer to a remote upload confirmation prompt.

    should_upload is True (approved), False (declined) or None when the
    prompt was dismissed without an answer.
    """

    should_upload: Optional[bool] = None
    always_upload: bool = False

    @classmethod
    def approved(cls, remember: bool = False) -> "UserUploadDecision":
        return cls(should_upload=True, always_upload=remember)

    @classmethod
    def declined(cls) -> "UserUploadDecision":
        return cls(should_upload=False)

    @classmethod
    def cancelled(cls) -> "UserUploadDecision":
        return cls(should_upload=None)
