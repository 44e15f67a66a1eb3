"""
Local Host — A file-backed editor instance for the command line.

LocalEditorInstance plays the part of a live editor: it owns a
TextDocument and a mutable `handlers` table whose native drop/paste
handlers behave like a note-taking app's defaults. Each attached file
is saved into the attachments folder and embedded as `![[name]]`.
"""

from __future__ import annotations

import inspect
import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional
from uuid import uuid4

from .editor import Position, TextDocument
from .models.events import FileBlob, InputEvent

logger = logging.getLogger(__name__)


class LocalEditorInstance:
    """Editor instance over one markdown file on disk."""

    def __init__(
        self,
        editor: TextDocument,
        attachments_dir: Path,
        path: Optional[Path] = None,
    ):
        self.instance_id = f"local_{uuid4().hex[:8]}"
        self.editor = editor
        self.attachments_dir = attachments_dir
        self.path = path
        self.saved_attachments: List[Path] = []
        self.handlers: Dict[str, Callable[[Any, Any], Any]] = {
            "drop": self._native_drop,
            "paste": self._native_paste,
        }

    @classmethod
    def open(
        cls,
        path: Path,
        attachments_dir: Optional[Path] = None,
        cursor: Optional[Position] = None,
    ) -> "LocalEditorInstance":
        text = path.read_text(encoding="utf-8") if path.exists() else ""
        editor = TextDocument(text, cursor)
        return cls(editor, attachments_dir or path.parent, path)

    def save(self) -> None:
        if self.path is None:
            raise ValueError("Instance has no backing file")
        self.path.write_text(self.editor.get_value(), encoding="utf-8")
        logger.debug(f"Saved document → {self.path}")

    async def dispatch(self, event: InputEvent) -> None:
        """Deliver an event through whatever handler currently sits in its slot."""
        result = self.handlers[event.kind](self, event)
        if inspect.isawaitable(result):
            await result

    # ── native behavior ──────────────────────────────────────────

    def _native_drop(self, instance: Any, event: InputEvent) -> None:
        self._embed_attachments(event.files)

    def _native_paste(self, instance: Any, event: InputEvent) -> None:
        self._embed_attachments(event.files)

    def _embed_attachments(self, files: List[FileBlob]) -> None:
        for blob in files:
            saved = self._save_attachment(blob)
            self.editor.replace_selection(f"![[{saved.name}]]\n")

    def _save_attachment(self, blob: FileBlob) -> Path:
        self.attachments_dir.mkdir(parents=True, exist_ok=True)
        dest = self.attachments_dir / blob.name
        stem, suffix = Path(blob.name).stem, Path(blob.name).suffix
        counter = 1
        while dest.exists():
            dest = self.attachments_dir / f"{stem} {counter}{suffix}"
            counter += 1
        dest.write_bytes(blob.data)
        self.saved_attachments.append(dest)
        logger.info(f"Saved attachment {dest.name}")
        return dest
