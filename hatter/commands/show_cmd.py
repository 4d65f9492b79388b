"""
ShowCommand — Draw the hats for one file at one cursor position

Prints the golden picture (shape row, color row, text, token extents) and a
one-line summary. With --from, hats are first allocated at the earlier
cursor and then re-allocated at the new one, so the effect of the stability
mode is visible.
"""

from pathlib import Path
from typing import Optional

from ..commands.base import BaseCommand
from ..core.allocator import HatStability
from ..core.geometry import Position, Selection
from ..core.tokens import scan_editor_tokens
from ..presentation.golden import render_golden
from ..presentation.stats import moved_percent
from ..presentation.symbols import safe_print


def parse_position(text: str) -> Position:
    """Parse 'LINE:COLUMN' (zero-based) into a Position."""
    line, sep, column = text.partition(":")
    if not sep:
        raise ValueError(f"Expected LINE:COLUMN, got '{text}'")
    return Position(int(line), int(column))


class ShowCommand(BaseCommand):
    """Render hat placement for a file."""

    def show(
        self,
        path: Path,
        line: int = 0,
        column: int = 0,
        stability: Optional[str] = None,
        previous: Optional[Position] = None,
    ) -> int:
        symbols = self.symbols
        try:
            mode = self.resolve_stability(stability)
            editor = self.open_editor(path)
            document = editor.document

            old = []
            if previous is not None:
                document.offset_at(previous)  # raises ValueError outside the document
                editor.primary_selection = Selection(previous, previous)
                old = self.allocate(editor)

            cursor = Position(line, column)
            document.offset_at(cursor)
            editor.primary_selection = Selection(cursor, cursor)
            hats = self.allocate(editor, mode, old)
        except (OSError, ValueError) as e:
            print(f"{symbols.check_fail} Error: {e}")
            return 1

        tokens = scan_editor_tokens(editor)
        safe_print(render_golden(document, tokens, hats, symbols), end="")

        unhatted = 100 * (len(tokens) - len(hats)) / len(tokens) if tokens else 0.0
        print(f"{len(tokens)} tokens, {len(hats)} hats, {unhatted:.0f}% without a hat")
        if previous is not None:
            moved = moved_percent(old, hats)
            print(f"{symbols.arrow} {moved:.0f}% of hats moved from "
                  f"{previous.concise()} ({mode.value})")
        return 0


def register_parser(subparsers):
    """Register show command parser."""
    p = subparsers.add_parser('show', help='Draw hats for a file at a cursor position')
    p.add_argument('file', help='File to allocate hats for')
    p.add_argument('--line', '-l', type=int, default=0, help='Cursor line (zero-based)')
    p.add_argument('--column', '-c', type=int, default=0, help='Cursor column (zero-based)')
    p.add_argument('--stability', '-s', choices=[m.value for m in HatStability],
                   help='Override hats.stability for this run')
    p.add_argument('--from', dest='previous', metavar='LINE:COLUMN',
                   help='Allocate at this cursor first and show what moved')
    return p


def handle(cli, args):
    """Handle show command dispatch."""
    cmd = ShowCommand(cli)
    previous = None
    if args.previous:
        try:
            previous = parse_position(args.previous)
        except ValueError as e:
            print(f"{cli.symbols.check_fail} Error: {e}")
            return 1
    return cmd.show(Path(args.file), args.line, args.column, args.stability, previous)
