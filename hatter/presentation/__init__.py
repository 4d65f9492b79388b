"""
Presentation — Turning allocations into text

- Symbols: Unicode/ASCII symbol sets and safe printing
- Golden: per-line picture of hats and token extents
- Stats: coverage, penalty mix and stability across cursor positions
"""

from .symbols import SymbolSet, UNICODE, ASCII, get_symbols, safe_print
from .golden import render_golden, extent_marker
from .stats import HatStats, Distribution, collect_hat_stats, moved_percent, sparkline

__all__ = [
    "SymbolSet", "UNICODE", "ASCII", "get_symbols", "safe_print",
    "render_golden", "extent_marker",
    "HatStats", "Distribution", "collect_hat_stats", "moved_percent", "sparkline",
]
