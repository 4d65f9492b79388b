"""
Core — The hat allocation engine

Leaf-first:
- Geometry: positions, ranges, selections
- Document: editor/document views and in-memory implementations
- Tokens: token snapshots and the default scanner
- Graphemes: token text -> anchor candidates
- Styles: the hat catalog and penalties
- Ranking: token order by cursor distance
- Allocator: greedy, stable-aware hat assignment
- Debouncer: collapse event bursts into one allocation
"""

from .geometry import Position, Range, Selection
from .document import TextDocument, TextEditor, TextLine, InMemoryTextDocument, InMemoryTextEditor, EditorSnapshot
from .tokens import Token, MultiLineTokenError, scan_editor_tokens, match_line_tokens
from .graphemes import Grapheme, TokenGraphemeSplitter, TokenHatSplittingMode, reconstruct_token_text
from .styles import (
    HatStyle, HatStyleMap, build_hat_style_map, penalty_for, color_shape_for,
    HAT_COLORS, HAT_SHAPES, HAT_NON_DEFAULT_SHAPES, DEFAULT_COLOR, DEFAULT_SHAPE,
)
from .ranking import RankedToken, rank_tokens, get_ranked_tokens
from .allocator import (
    HatStability, TokenHat, allocate_hats, allocate_editor_hats,
    stability_from_string, BALANCED_PENALTY_TOLERANCE,
)
from .debouncer import Debouncer

__all__ = [
    # Geometry
    "Position", "Range", "Selection",
    # Document
    "TextDocument", "TextEditor", "TextLine", "InMemoryTextDocument", "InMemoryTextEditor", "EditorSnapshot",
    # Tokens
    "Token", "MultiLineTokenError", "scan_editor_tokens", "match_line_tokens",
    # Graphemes
    "Grapheme", "TokenGraphemeSplitter", "TokenHatSplittingMode", "reconstruct_token_text",
    # Styles
    "HatStyle", "HatStyleMap", "build_hat_style_map", "penalty_for", "color_shape_for",
    "HAT_COLORS", "HAT_SHAPES", "HAT_NON_DEFAULT_SHAPES", "DEFAULT_COLOR", "DEFAULT_SHAPE",
    # Ranking
    "RankedToken", "rank_tokens", "get_ranked_tokens",
    # Allocator
    "HatStability", "TokenHat", "allocate_hats", "allocate_editor_hats",
    "stability_from_string", "BALANCED_PENALTY_TOLERANCE",
    # Debouncer
    "Debouncer",
]
