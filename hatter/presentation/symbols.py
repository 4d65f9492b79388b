"""
Symbols — Glyphs for terminal output

Two interchangeable sets: UNICODE for capable terminals, ASCII everywhere else.
The display.symbols setting picks one explicitly; "auto" checks the terminal.

Document text is printed verbatim and can contain anything, so output goes
through safe_print(), which degrades instead of raising on narrow encodings.
"""

import os
import sys
from dataclasses import dataclass
from typing import Optional, TextIO, Tuple


# Glyph replacements tried before falling back to '?'
ASCII_FALLBACKS = {
    '→': '->',
    '•': '*',
    '✓': '[OK]',
    '✗': '[ERR]',
    '␉': '>',
    '▁': '.',
    '▂': ':',
    '▃': '-',
    '▄': '=',
    '▅': '+',
    '▆': '*',
    '▇': '%',
    '█': '#',
}


def to_ascii(text: str) -> str:
    """Replace known glyphs with their ASCII spelling."""
    for glyph, replacement in ASCII_FALLBACKS.items():
        text = text.replace(glyph, replacement)
    return text


def safe_print(text: str, end: str = '\n', file: Optional[TextIO] = None) -> None:
    """
    print() that survives streams unable to encode the text.

    Tries the text as is, then with ASCII_FALLBACKS applied, then with every
    remaining unencodable character replaced by '?'.
    """
    stream = file if file is not None else sys.stdout
    try:
        print(text, end=end, file=stream)
        return
    except UnicodeEncodeError:
        text = to_ascii(text)

    try:
        print(text, end=end, file=stream)
    except UnicodeEncodeError:
        encoding = getattr(stream, 'encoding', None) or 'utf-8'
        print(text.encode(encoding, errors='replace').decode(encoding), end=end, file=stream)


@dataclass(frozen=True)
class SymbolSet:
    """Glyphs used by commands and by the golden/stats renderers."""
    check_pass: str
    check_fail: str
    arrow: str
    bullet: str
    tab: str                      # drawn where a document has a tab
    spark_bars: Tuple[str, ...]   # histogram bars, shortest first


UNICODE = SymbolSet(
    check_pass='✓',
    check_fail='✗',
    arrow='→',
    bullet='•',
    tab='␉',
    spark_bars=('▁', '▂', '▃', '▄', '▅', '▆', '▇', '█'),
)

ASCII = SymbolSet(
    check_pass='[OK]',
    check_fail='[ERR]',
    arrow='->',
    bullet='*',
    tab='>',
    spark_bars=('.', ':', '-', '=', '+', '*', '%', '#'),
)


def _env_flag(name: str) -> bool:
    return os.environ.get(name, '').lower() in ('1', 'true', 'yes')


def supports_unicode() -> bool:
    """
    Guess whether stdout can show the UNICODE set.

    HATTER_ASCII_ONLY and HATTER_UNICODE override the guess. Otherwise the
    stream encoding decides, then the locale; unknown means ASCII.
    """
    if _env_flag('HATTER_ASCII_ONLY'):
        return False
    if _env_flag('HATTER_UNICODE'):
        return True

    encoding = (getattr(sys.stdout, 'encoding', None) or '').lower().replace('-', '').replace('_', '')
    if encoding.startswith('utf'):
        return True
    if encoding.startswith('cp') or encoding in ('ascii', 'latin1', 'iso88591'):
        return False

    locale = ' '.join(os.environ.get(var, '') for var in ('LC_ALL', 'LANG')).lower()
    return 'utf-8' in locale or 'utf8' in locale


def get_symbols(preference: Optional[str] = None) -> SymbolSet:
    """Symbol set for a display.symbols value ("unicode", "ascii", "auto" or None)."""
    if preference == 'unicode':
        return UNICODE
    if preference == 'ascii':
        return ASCII
    return UNICODE if supports_unicode() else ASCII
