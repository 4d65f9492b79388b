"""
Hatter — Hat allocation for voice-driven editing

Puts a small colored, shaped mark (a hat) on one letter of every visible
token so it can be addressed by name: "blue fox", "green hole".

Quick, deterministic, stable across edits.

Usage:
    hatter show app.py --line 10 --column 4
    hatter show app.py --line 10 --column 4 --from 9:0 --stability stable
    hatter stats src/*.py --samples 16
    hatter config
    hatter config --set hats.stability stable
"""

__version__ = "0.1.0"

# Core engine
from .core.geometry import Position, Range, Selection
from .core.document import InMemoryTextDocument, InMemoryTextEditor, EditorSnapshot
from .core.tokens import Token, MultiLineTokenError, scan_editor_tokens
from .core.graphemes import Grapheme, TokenGraphemeSplitter, TokenHatSplittingMode
from .core.styles import HatStyle, HatStyleMap, build_hat_style_map
from .core.ranking import RankedToken, rank_tokens, get_ranked_tokens
from .core.allocator import HatStability, TokenHat, allocate_hats, allocate_editor_hats
from .core.debouncer import Debouncer

# Services layer
from .services.hat_map import HatTokenMap, HatRenderer

# Presentation layer
from .presentation.symbols import get_symbols, SymbolSet, UNICODE, ASCII
from .presentation.golden import render_golden
from .presentation.stats import HatStats, collect_hat_stats

# Config (stays at root)
from .config import Config, ConfigManager, ConfigError, get_config

__all__ = [
    # Core
    'Position', 'Range', 'Selection',
    'InMemoryTextDocument', 'InMemoryTextEditor', 'EditorSnapshot',
    'Token', 'MultiLineTokenError', 'scan_editor_tokens',
    'Grapheme', 'TokenGraphemeSplitter', 'TokenHatSplittingMode',
    'HatStyle', 'HatStyleMap', 'build_hat_style_map',
    'RankedToken', 'rank_tokens', 'get_ranked_tokens',
    'HatStability', 'TokenHat', 'allocate_hats', 'allocate_editor_hats',
    'Debouncer',
    # Services
    'HatTokenMap', 'HatRenderer',
    # Presentation
    'get_symbols', 'SymbolSet', 'UNICODE', 'ASCII',
    'render_golden', 'HatStats', 'collect_hat_stats',
    # Config
    'Config', 'ConfigManager', 'ConfigError', 'get_config',
]
