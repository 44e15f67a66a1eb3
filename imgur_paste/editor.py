"""
Editor Boundary — The minimal read/write contract the engine needs.

The engine never owns an editor. It borrows an EditorHandle for the
duration of one operation and only reads the text, reads the cursor,
replaces the selection, or replaces an exact range.

TextDocument is an in-memory implementation used by the command-line
host and the tests.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Protocol


@dataclass(frozen=True, order=True)
class Position:
    """Zero-based line/column position in a document."""

    line: int
    ch: int


class EditorHandle(Protocol):
    """Capability over one document."""

    def get_value(self) -> str:
        ...

    def get_cursor(self) -> Position:
        ...

    def replace_selection(self, text: str) -> None:
        ...

    def replace_range(self, text: str, start: Position, end: Position) -> None:
        ...


class TextDocument:
    """
    In-memory editor over a plain string.

    Keeps a cursor and an optional selection anchor. Replacing a range
    maps the cursor the way a code editor does: positions after the
    range shift, positions inside it land at the end of the new text.
    """

    def __init__(self, text: str = "", cursor: Optional[Position] = None):
        self._text = text
        self._head = self._offset(cursor) if cursor else len(text)
        self._anchor: Optional[int] = None

    # ── reads ────────────────────────────────────────────────────

    def get_value(self) -> str:
        return self._text

    def get_cursor(self) -> Position:
        return self._position(self._head)

    def get_selection(self) -> str:
        start, end = self._selection_bounds()
        return self._text[start:end]

    def get_line(self, line: int) -> str:
        return self._lines()[line]

    def line_count(self) -> int:
        return len(self._lines())

    # ── cursor ───────────────────────────────────────────────────

    def set_cursor(self, pos: Position) -> None:
        self._head = self._offset(pos)
        self._anchor = None

    def set_selection(self, anchor: Position, head: Position) -> None:
        self._anchor = self._offset(anchor)
        self._head = self._offset(head)

    # ── writes ───────────────────────────────────────────────────

    def replace_selection(self, text: str) -> None:
        start, end = self._selection_bounds()
        self._text = self._text[:start] + text + self._text[end:]
        self._head = start + len(text)
        self._anchor = None

    def replace_range(self, text: str, start: Position, end: Position) -> None:
        start_off = self._offset(start)
        end_off = self._offset(end)
        if end_off < start_off:
            start_off, end_off = end_off, start_off

        self._text = self._text[:start_off] + text + self._text[end_off:]
        self._head = self._map(self._head, start_off, end_off, len(text))
        if self._anchor is not None:
            self._anchor = self._map(self._anchor, start_off, end_off, len(text))

    # ── helpers ──────────────────────────────────────────────────

    def _lines(self) -> List[str]:
        return self._text.split("\n")

    def _selection_bounds(self) -> tuple:
        if self._anchor is None:
            return self._head, self._head
        return min(self._anchor, self._head), max(self._anchor, self._head)

    def _offset(self, pos: Position) -> int:
        lines = self._lines()
        line = max(0, min(pos.line, len(lines) - 1))
        ch = max(0, min(pos.ch, len(lines[line])))
        return sum(len(l) + 1 for l in lines[:line]) + ch

    def _position(self, offset: int) -> Position:
        before = self._text[:offset]
        line = before.count("\n")
        return Position(line, offset - (before.rfind("\n") + 1))

    @staticmethod
    def _map(offset: int, start: int, end: int, inserted: int) -> int:
        if offset >= end:
            return offset - (end - start) + inserted
        if offset > start:
            return start + inserted
        return offset
