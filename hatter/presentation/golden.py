"""
Golden — Plain-text picture of where hats landed

For each non-empty line of a document, prints up to four rows:

    v       x            <- shape row (only hats with a non-default shape)
    *  b    g            <- color row
    foo bar baz          <- the line itself
    [-] [-] [-]          <- token extents ('#' one char, '[]' two, '[--]' more)

Used by `hatter show` and for golden-file comparisons.
"""

from typing import Dict, List, Sequence, Tuple

from ..core.allocator import TokenHat
from ..core.document import TextDocument
from ..core.geometry import Range
from ..core.styles import color_shape_for, DEFAULT_SHAPE
from ..core.tokens import Token
from .symbols import SymbolSet, UNICODE


CHAR_FOR_SHAPE = {
    "ex": "x",
    "fox": "v",
    "wing": "w",
    "hole": "o",
    "frame": "#",
    "curve": "^",
    "eye": "0",
    "play": ">",
    "bolt": "~",
    "crosshairs": "+",
}

CHAR_FOR_COLOR = {
    "default": "*",
    "blue": "b",
    "green": "g",
    "red": "r",
    "pink": "p",
    "yellow": "y",
    "userColor1": "1",
    "userColor2": "2",
}


def _place(row: str, column: int, text: str) -> str:
    return row + " " * max(0, column - len(row)) + text


def extent_marker(token: Token) -> str:
    """'#' for one character, '[]' for two, '[-...-]' for longer tokens."""
    token.check_single_line()
    width = token.range.end.character - token.range.start.character
    if width == 1:
        return "#"
    if width == 2:
        return "[]"
    if width > 2:
        return "[" + "-" * (width - 2) + "]"
    raise ValueError(f"unexpected token width: {width} at {token.range.concise()}")


def render_golden(
    document: TextDocument,
    tokens: Sequence[Token],
    token_hats: Sequence[TokenHat],
    symbols: SymbolSet = UNICODE,
) -> str:
    """
    Render hats, text and token extents for every non-empty line.

    Args:
        document: Document the tokens came from
        tokens: All tokens to mark, any order
        token_hats: Allocation result for those tokens
        symbols: Symbol set (controls the tab glyph)

    Raises:
        MultiLineTokenError: A token spans several lines
    """
    hats: Dict[Tuple[str, Range], TokenHat] = {hat.token.key: hat for hat in token_hats}
    by_line: Dict[int, List[Token]] = {}
    for token in tokens:
        token.check_single_line()
        by_line.setdefault(token.range.start.line, []).append(token)

    out: List[str] = []
    for line_number in range(document.line_count):
        line = document.line_at(line_number).text
        if not line:
            continue

        shape_row = color_row = extent_row = ""
        for token in sorted(by_line.get(line_number, []), key=lambda t: t.range.start):
            hat = hats.get(token.key)
            if hat is not None:
                color, shape = color_shape_for(hat.hat_style)
                column = hat.hat_range.start.character
                if shape != DEFAULT_SHAPE:
                    shape_row = _place(shape_row, column, CHAR_FOR_SHAPE.get(shape, "?"))
                color_row = _place(color_row, column, CHAR_FOR_COLOR.get(color, "?"))
            extent_row = _place(extent_row, token.range.start.character, extent_marker(token))

        for row in (shape_row, color_row, line.replace("\t", symbols.tab), extent_row):
            if row:
                out.append(row)
        out.append("")

    return "\n".join(out) + ("\n" if out else "")
