"""
Document — Editor and document views consumed by the hat engine

The engine never talks to a real editor. It reads through two small protocols:
- TextDocument: text plus line/offset conversions
- TextEditor: a document with selections and visible ranges

InMemoryTextDocument and InMemoryTextEditor implement both protocols over a
plain string. They back the CLI, the statistics tooling and the tests.
"""

import bisect
import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Protocol, Sequence, Tuple, Union

from .geometry import Position, Range, Selection


class TextDocument(Protocol):
    """Read-only document view."""

    @property
    def line_count(self) -> int: ...

    @property
    def range(self) -> Range: ...

    def line_at(self, line: Union[int, Position]) -> 'TextLine': ...

    def offset_at(self, position: Position) -> int: ...

    def position_at(self, offset: int) -> Position: ...

    def get_text(self, range: Optional[Range] = None) -> str: ...


class TextEditor(Protocol):
    """An editor showing one document."""

    @property
    def id(self) -> str: ...

    @property
    def document(self) -> TextDocument: ...

    @property
    def selections(self) -> Sequence[Selection]: ...

    @property
    def visible_ranges(self) -> Sequence[Range]: ...

    @property
    def is_active(self) -> bool: ...


@dataclass(frozen=True)
class TextLine:
    """One line of a document, without its line break."""
    line_number: int
    text: str
    eol: str = "\n"

    def __post_init__(self):
        if self.line_number < 0:
            raise ValueError("line_number must be non-negative")
        if self.eol not in ("\n", "\r\n", ""):
            raise ValueError("eol must be '\\n', '\\r\\n' or '' for the last line")

    @property
    def range(self) -> Range:
        return Range.from_coords(self.line_number, 0, self.line_number, len(self.text))

    @property
    def length_including_line_break(self) -> int:
        return len(self.text) + len(self.eol)

    @property
    def first_non_whitespace_character_index(self) -> int:
        """Index of the first non-whitespace char, or len(text) for blank lines."""
        match = re.search(r'\S', self.text)
        return match.start() if match else len(self.text)

    @property
    def is_empty_or_whitespace(self) -> bool:
        return self.first_non_whitespace_character_index == len(self.text)


class InMemoryTextDocument:
    """
    A document held entirely in memory.

    Only LF line endings are supported; CRLF content is rejected so that
    offsets and positions always agree.
    """

    def __init__(self, filename: str, contents: str):
        if "\r\n" in contents:
            raise ValueError("InMemoryTextDocument does not support CRLF line endings")

        self.filename = filename
        self._contents = contents

        raw_lines = contents.split("\n")
        last = len(raw_lines) - 1
        self._lines: List[TextLine] = [
            TextLine(i, text, "" if i == last else "\n")
            for i, text in enumerate(raw_lines)
        ]

        # Cumulative start offsets: O(1) offset_at, bisected by position_at
        self._line_offsets: List[int] = []
        offset = 0
        for line in self._lines:
            self._line_offsets.append(offset)
            offset += line.length_including_line_break

    @classmethod
    def from_path(cls, path: Path) -> 'InMemoryTextDocument':
        path = Path(path)
        return cls(str(path), path.read_text(encoding="utf-8"))

    @property
    def line_count(self) -> int:
        return len(self._lines)

    @property
    def range(self) -> Range:
        last = self._lines[-1]
        return Range.from_coords(0, 0, last.line_number, len(last.text))

    def line_at(self, line: Union[int, Position]) -> TextLine:
        index = line.line if isinstance(line, Position) else line
        if not 0 <= index < len(self._lines):
            raise ValueError(f"Line {index} out of range (0-{len(self._lines) - 1})")
        return self._lines[index]

    def offset_at(self, position: Position) -> int:
        line = self.line_at(position.line)
        if not 0 <= position.character <= len(line.text):
            raise ValueError(
                f"Character {position.character} out of range for line {position.line}"
            )
        return self._line_offsets[position.line] + position.character

    def position_at(self, offset: int) -> Position:
        if not 0 <= offset <= len(self._contents):
            raise ValueError(f"Offset {offset} out of range (0-{len(self._contents)})")
        line_number = bisect.bisect_right(self._line_offsets, offset) - 1
        line = self._lines[line_number]
        return Position(line_number, min(offset - self._line_offsets[line_number], len(line.text)))

    def get_text(self, range: Optional[Range] = None) -> str:
        if range is None:
            return self._contents
        return self._contents[self.offset_at(range.start):self.offset_at(range.end)]


class InMemoryTextEditor:
    """
    Editor over an in-memory document.

    The whole document counts as visible unless visible_ranges is given.
    primary_selection is mutable so tests and tools can move the cursor.
    """

    def __init__(
        self,
        document: InMemoryTextDocument,
        active: bool = True,
        editor_id: Optional[str] = None,
        selections: Optional[Sequence[Selection]] = None,
        visible_ranges: Optional[Sequence[Range]] = None,
    ):
        self._id = editor_id or f"file://{document.filename}"
        self._document = document
        self._is_active = active
        selections = list(selections) if selections else [Selection.cursor(0, 0)]
        self.primary_selection = selections[0]
        self._secondary_selections = selections[1:]
        self._visible_ranges = list(visible_ranges) if visible_ranges else None

    @property
    def id(self) -> str:
        return self._id

    @property
    def document(self) -> InMemoryTextDocument:
        return self._document

    @property
    def is_active(self) -> bool:
        return self._is_active

    @property
    def selections(self) -> List[Selection]:
        return [self.primary_selection, *self._secondary_selections]

    @selections.setter
    def selections(self, value: Sequence[Selection]) -> None:
        value = list(value)
        if not value:
            raise ValueError("An editor needs at least one selection")
        self.primary_selection = value[0]
        self._secondary_selections = value[1:]

    @property
    def visible_ranges(self) -> List[Range]:
        if self._visible_ranges is None:
            return [self._document.range]
        return list(self._visible_ranges)

    def is_equal(self, other: TextEditor) -> bool:
        return self.id == other.id


@dataclass(frozen=True)
class EditorSnapshot:
    """
    Frozen copy of an editor's state for one allocation cycle.

    Documents are treated as immutable; selections and visible ranges are
    copied so later cursor moves do not leak into a pending allocation.
    """
    id: str
    document: TextDocument
    selections: Tuple[Selection, ...]
    visible_ranges: Tuple[Range, ...]
    is_active: bool

    @classmethod
    def of(cls, editor: TextEditor) -> 'EditorSnapshot':
        return cls(
            id=editor.id,
            document=editor.document,
            selections=tuple(editor.selections),
            visible_ranges=tuple(editor.visible_ranges),
            is_active=editor.is_active,
        )
