"""
Text buffer module.

In-memory document with line/column positions and multiple selections.
This is the editor surface the paste handler writes into.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True, order=True)
class Position:
    """Zero-based (line, ch) position in a document."""

    line: int
    ch: int


@dataclass(frozen=True)
class Selection:
    """A range between an anchor and a head; both may be in either order."""

    anchor: Position
    head: Position

    @property
    def from_(self) -> Position:
        return min(self.anchor, self.head)

    @property
    def to(self) -> Position:
        return max(self.anchor, self.head)

    @property
    def is_empty(self) -> bool:
        return self.anchor == self.head


class TextBuffer:
    """
    Editable text with a list of selections.
    Positions outside the document are clipped, so a stale range still maps
    to a valid span after the text has changed.
    """

    def __init__(self, text: str = "", selections: Optional[Sequence[Selection]] = None):
        self._lines: List[str] = text.split("\n")
        self._selections: List[Selection] = list(selections or [])
        if not self._selections:
            end = self.end_position()
            self._selections = [Selection(end, end)]
        # (origin, from, to, text) for each applied change
        self.history: List[Tuple[Optional[str], Position, Position, str]] = []

    def get_value(self) -> str:
        return "\n".join(self._lines)

    def set_value(self, text: str):
        self._lines = text.split("\n")
        self.set_cursor(self.end_position())

    def line_count(self) -> int:
        return len(self._lines)

    def end_position(self) -> Position:
        return Position(len(self._lines) - 1, len(self._lines[-1]))

    def clip(self, pos: Position) -> Position:
        """Clamp a position into the current document."""
        if pos.line < 0:
            return Position(0, 0)
        if pos.line >= len(self._lines):
            return self.end_position()
        return Position(pos.line, max(0, min(pos.ch, len(self._lines[pos.line]))))

    def offset_of(self, pos: Position) -> int:
        pos = self.clip(pos)
        return sum(len(line) + 1 for line in self._lines[: pos.line]) + pos.ch

    def position_of(self, offset: int) -> Position:
        offset = max(0, offset)
        for index, line in enumerate(self._lines):
            if offset <= len(line):
                return Position(index, offset)
            offset -= len(line) + 1
        return self.end_position()

    def list_selections(self) -> List[Selection]:
        return list(self._selections)

    def set_selections(self, selections: Sequence[Selection]):
        if not selections:
            raise ValueError("At least one selection is required")
        self._selections = [
            Selection(self.clip(sel.anchor), self.clip(sel.head)) for sel in selections
        ]

    def set_cursor(self, pos: Position):
        pos = self.clip(pos)
        self._selections = [Selection(pos, pos)]

    def get_range(self, from_: Position, to: Position) -> str:
        text = self.get_value()
        start, end = sorted((self.offset_of(from_), self.offset_of(to)))
        return text[start:end]

    def replace_range(
        self,
        text: str,
        from_: Position,
        to: Optional[Position] = None,
        origin: Optional[str] = None,
    ):
        """
        Replace the span between ``from_`` and ``to`` (an insertion when ``to``
        is omitted). ``origin`` tags the change in the history.
        """
        start = self.offset_of(from_)
        end = start if to is None else self.offset_of(to)
        start, end = sorted((start, end))

        value = self.get_value()
        self._lines = (value[:start] + text + value[end:]).split("\n")

        cursor = self.position_of(start + len(text))
        self.history.append((origin, self.position_of(start), cursor, text))
        logger.debug("Replaced range %d-%d (origin=%s)", start, end, origin)

    def replace_selection(self, text: str, origin: Optional[str] = None):
        """Replace every selection with ``text`` and leave a cursor after each."""
        spans = sorted(
            (self.offset_of(sel.from_), self.offset_of(sel.to))
            for sel in self._selections
        )
        for sel in sorted(self._selections, key=lambda sel: sel.from_, reverse=True):
            self.replace_range(text, sel.from_, sel.to, origin)

        cursors = []
        delta = 0
        for start, end in spans:
            cursors.append(start + delta + len(text))
            delta += len(text) - (end - start)
        self._selections = [
            Selection(self.position_of(offset), self.position_of(offset))
            for offset in cursors
        ]
