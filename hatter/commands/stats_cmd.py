"""
StatsCommand — Hat coverage statistics for files

For each file, samples cursor positions and reports how many tokens get hats,
how noisy those hats are, and how many move on a small cursor step.
With --write, saves <file>.stats and <file>.golden next to each input.
"""

from pathlib import Path
from typing import List, Optional

from ..commands.base import BaseCommand
from ..core.allocator import HatStability
from ..core.document import InMemoryTextEditor
from ..core.tokens import scan_editor_tokens
from ..presentation.golden import render_golden
from ..presentation.stats import DEFAULT_SAMPLES, collect_hat_stats
from ..presentation.symbols import safe_print


class StatsCommand(BaseCommand):
    """Compute and print hat statistics."""

    def stats(
        self,
        paths: List[Path],
        samples: int = DEFAULT_SAMPLES,
        stability: Optional[str] = None,
        write: bool = False,
    ) -> int:
        symbols = self.symbols
        mode = self.resolve_stability(stability)
        failures = 0

        for path in paths:
            try:
                editor = self.open_editor(path)
            except (OSError, ValueError) as e:
                print(f"{symbols.check_fail} {path}: {e}")
                failures += 1
                continue

            result = collect_hat_stats(editor.document, self.hat_style_map, self.splitter,
                                       samples=samples, stability=mode)
            report = result.describe(symbols)
            print(f"{symbols.bullet} {path}")
            safe_print(report)

            if write:
                Path(f"{path}.stats").write_text(report, encoding="utf-8")
                Path(f"{path}.golden").write_text(self._golden(editor), encoding="utf-8")
                print(f"{symbols.check_pass} Wrote {path}.stats and {path}.golden")

        return 1 if failures else 0

    def _golden(self, editor: InMemoryTextEditor) -> str:
        """Golden picture with the cursor at the start of the document."""
        hats = self.allocate(editor)
        return render_golden(editor.document, scan_editor_tokens(editor), hats, self.symbols)


def register_parser(subparsers):
    """Register stats command parser."""
    p = subparsers.add_parser('stats', help='Hat coverage statistics for files')
    p.add_argument('files', nargs='+', help='Files to analyze')
    p.add_argument('--samples', '-n', type=int, default=DEFAULT_SAMPLES,
                   help=f'Cursor positions to sample per file (default: {DEFAULT_SAMPLES})')
    p.add_argument('--stability', '-s', choices=[m.value for m in HatStability],
                   help='Stability mode for the moved-hats measurement')
    p.add_argument('--write', action='store_true',
                   help='Write <file>.stats and <file>.golden')
    return p


def handle(cli, args):
    """Handle stats command dispatch."""
    cmd = StatsCommand(cli)
    return cmd.stats([Path(f) for f in args.files], args.samples, args.stability, args.write)
