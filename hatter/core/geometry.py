"""
Geometry — Positions, ranges and selections inside a document

Zero-based line/character coordinates, mirroring what editors expose.
All types are immutable so snapshots can be shared across one allocation cycle.
"""

from dataclasses import dataclass
from functools import total_ordering
from typing import Optional


@total_ordering
@dataclass(frozen=True)
class Position:
    """A zero-based (line, character) location."""
    line: int
    character: int

    def __lt__(self, other: 'Position') -> bool:
        return (self.line, self.character) < (other.line, other.character)

    def translate(self, line_delta: int = 0, character_delta: int = 0) -> 'Position':
        """Return a position shifted by the given deltas."""
        return Position(self.line + line_delta, self.character + character_delta)

    def concise(self) -> str:
        return f"{self.line}:{self.character}"


@dataclass(frozen=True)
class Range:
    """A half-open span between two positions. start <= end always holds."""
    start: Position
    end: Position

    def __post_init__(self):
        if self.end < self.start:
            start, end = self.end, self.start
            object.__setattr__(self, "start", start)
            object.__setattr__(self, "end", end)

    @classmethod
    def from_coords(cls, start_line: int, start_char: int, end_line: int, end_char: int) -> 'Range':
        return cls(Position(start_line, start_char), Position(end_line, end_char))

    @property
    def is_empty(self) -> bool:
        return self.start == self.end

    @property
    def is_single_line(self) -> bool:
        return self.start.line == self.end.line

    def contains(self, position: Position) -> bool:
        return self.start <= position <= self.end

    def intersection(self, other: 'Range') -> Optional['Range']:
        """Overlap of two ranges, or None when they are disjoint."""
        start = max(self.start, other.start)
        end = min(self.end, other.end)
        if end < start:
            return None
        return Range(start, end)

    def concise(self) -> str:
        """Compact form used in error messages, e.g. '0:4-0:9'."""
        return f"{self.start.concise()}-{self.end.concise()}"


@dataclass(frozen=True)
class Selection:
    """
    A selection with direction.

    anchor is where the selection started, active is where the cursor is.
    An empty selection is a plain cursor.
    """
    anchor: Position
    active: Position

    @classmethod
    def cursor(cls, line: int, character: int) -> 'Selection':
        position = Position(line, character)
        return cls(position, position)

    @property
    def start(self) -> Position:
        return min(self.anchor, self.active)

    @property
    def end(self) -> Position:
        return max(self.anchor, self.active)

    @property
    def is_empty(self) -> bool:
        return self.anchor == self.active

    @property
    def range(self) -> Range:
        return Range(self.start, self.end)
