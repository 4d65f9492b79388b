"""
Tokens — Addressable spans of text in an editor

A Token is a read-only snapshot of one span of text: which editor it lives in,
where it sits, and what it says. The engine treats token boundaries as given;
scan_editor_tokens() is the default lexical scanner that produces them:
- Fixed multi-character operators: ==, =>, ->, &&, ...
- Decimal numbers: 3.14
- Words: identifiers, integers, unicode letters (\\w+)
- Any other single non-whitespace character

Tokens are single-line by contract. A multi-line token is a caller error and
is reported with MultiLineTokenError rather than silently mis-ranked.
"""

import re
from dataclasses import dataclass
from typing import Dict, Iterator, List, Tuple

from .document import TextEditor
from .geometry import Position, Range


class MultiLineTokenError(ValueError):
    """Raised when a token range spans more than one line."""

    def __init__(self, token: 'Token'):
        self.token = token
        super().__init__(
            f"multi-line tokens not supported, have {token.range.concise()} "
            f"in editor {token.editor_id}"
        )


@dataclass(frozen=True)
class Token:
    """A contiguous span of text in one editor."""
    editor_id: str
    range: Range
    text: str

    @property
    def key(self) -> Tuple[str, Range]:
        """Identity across allocation cycles: (editor_id, range)."""
        return (self.editor_id, self.range)

    def check_single_line(self) -> 'Token':
        """Return self, or raise MultiLineTokenError."""
        if not self.range.is_single_line:
            raise MultiLineTokenError(self)
        return self


# Longest first so that '===' wins over '=='
FIXED_TOKENS = sorted([
    "!==", "===", "...", "**=", "<<=", ">>=", "<=>",
    "!=", "==", "<=", ">=", "=>", "->", "::", ":=",
    "**", "++", "--", "+=", "-=", "*=", "/=", "%=", "&=", "|=", "^=",
    "&&", "||", "<<", ">>", "//", "/*", "*/",
], key=len, reverse=True)

TOKEN_PATTERN = re.compile(
    "|".join([
        "|".join(re.escape(t) for t in FIXED_TOKENS),
        r"\d+\.\d+",
        r"\w+",
        r"\S",
    ])
)


def match_line_tokens(text: str) -> Iterator[Tuple[int, int, str]]:
    """
    Yield (start, end, text) for each token in a single line of text.

    Examples:
        >>> list(match_line_tokens("a)"))
        [(0, 1, 'a'), (1, 2, ')')]
        >>> [t for _, _, t in match_line_tokens("x => y.z3 === 3.14")]
        ['x', '=>', 'y', '.', 'z3', '===', '3.14']
    """
    for match in TOKEN_PATTERN.finditer(text):
        yield match.start(), match.end(), match.group()


def scan_editor_tokens(editor: TextEditor) -> List[Token]:
    """
    Scan every token inside the editor's visible ranges, in document order.

    A token is included when it starts inside a visible range. Overlapping
    visible ranges do not produce duplicates.
    """
    document = editor.document
    seen: Dict[Tuple[str, Range], Token] = {}

    for visible in editor.visible_ranges:
        for line_number in range(visible.start.line, visible.end.line + 1):
            line = document.line_at(line_number)
            for start, end, text in match_line_tokens(line.text):
                token_range = Range(Position(line_number, start), Position(line_number, end))
                if not visible.contains(token_range.start):
                    continue
                token = Token(editor.id, token_range, text)
                seen.setdefault(token.key, token)

    return sorted(seen.values(), key=lambda t: t.range.start)
