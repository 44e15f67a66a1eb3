"""
Placeholder Reconciler — Progress markers for in-flight uploads.

Each pending upload gets a marker line in the document:

    ![Uploading file...<token>]()

When the upload settles the first remaining occurrence of that marker
is replaced with the final embed (`![](<url>)`) or an inline failure
annotation (`<!--<message>-->`). Replacement scans the whole document
line by line, so it finds the marker wherever the user's edits moved
it. A marker the user deleted is simply not found.

Tokens are a monotonic counter plus a random suffix, and a token is
regenerated if its marker already appears in the document or is still
pending, so the first occurrence is always the right one.
"""

from __future__ import annotations

import itertools
import logging
from typing import Optional, Set
from uuid import uuid4

from ..editor import EditorHandle, Position

logger = logging.getLogger(__name__)


def progress_text_for(token: str) -> str:
    return f"![Uploading file...{token}]()"


def embed_for(url: str) -> str:
    return f"![]({url})"


def annotation_for(message: str) -> str:
    return f"<!--{message}-->"


def replace_first_occurrence(
    editor: EditorHandle,
    target: str,
    replacement: str,
) -> bool:
    """
    Replace the first occurrence of `target` in the document.

    Returns False (and leaves the document untouched) if `target` no
    longer appears.
    """
    lines = editor.get_value().split("\n")
    for i, line in enumerate(lines):
        ch = line.find(target)
        if ch != -1:
            editor.replace_range(
                replacement,
                Position(i, ch),
                Position(i, ch + len(target)),
            )
            return True
    return False


class PlaceholderReconciler:
    """Inserts and resolves progress markers in one document."""

    def __init__(self, editor: EditorHandle):
        self.editor = editor
        self._counter = itertools.count(1)
        self._pending: Set[str] = set()

    @property
    def pending(self) -> Set[str]:
        return set(self._pending)

    def new_token(self) -> str:
        text = self.editor.get_value()
        while True:
            token = f"{uuid4().hex[:6]}{next(self._counter):x}"
            if token not in self._pending and progress_text_for(token) not in text:
                return token

    def insert_placeholder(self, token: Optional[str] = None) -> str:
        """Insert a marker line at the current selection and return its token."""
        token = token or self.new_token()
        self.editor.replace_selection(f"{progress_text_for(token)}\n")
        self._pending.add(token)
        logger.debug(f"Inserted placeholder {token}")
        return token

    def replace_with_placeholder(self, start: Position, end: Position) -> str:
        """Swap an exact range for a marker (no trailing newline)."""
        token = self.new_token()
        self.editor.replace_range(progress_text_for(token), start, end)
        self._pending.add(token)
        logger.debug(f"Replaced {start}–{end} with placeholder {token}")
        return token

    def resolve_success(self, token: str, url: str) -> bool:
        return self.resolve(token, embed_for(url))

    def resolve_failure(self, token: str, message: str) -> bool:
        return self.resolve(token, annotation_for(message))

    def resolve(self, token: str, replacement: str) -> bool:
        """Replace the token's marker; the token is retired either way."""
        self._pending.discard(token)
        replaced = replace_first_occurrence(
            self.editor, progress_text_for(token), replacement
        )
        if not replaced:
            logger.debug(f"Placeholder {token} no longer in document, skipping")
        return replaced
