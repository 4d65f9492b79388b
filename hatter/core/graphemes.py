"""
Graphemes — Splitting token text into hat anchor points

A hat sits on one character of a token. Not every character is a good anchor:
the first character is the natural one, and word boundaries inside a token
give useful fallbacks when the first character is crowded.

    myVariableName  -> m, v, n
    user_profile    -> u, p
    HTMLParser      -> h, p
    utf8Decode      -> u, 8, d

Normalization decides which anchors collide. By default case is folded and
accents are stripped, so "Fox" and "fox" share the identity "f". Characters
listed in letters_to_preserve / symbols_to_preserve are kept verbatim.
Characters that cannot be spoken (whitespace, control, unlisted non-ASCII
symbols) are excluded and never become anchors.
"""

import string
import unicodedata
from dataclasses import dataclass
from typing import FrozenSet, Iterable, List, Optional


ASCII_ADDRESSABLE = frozenset(string.ascii_letters + string.digits + string.punctuation)


def _as_frozenset(chars: Iterable[str]) -> FrozenSet[str]:
    # A plain string means "each of these characters"
    if isinstance(chars, str):
        return frozenset(chars)
    return frozenset(chars or ())


@dataclass(frozen=True)
class TokenHatSplittingMode:
    """How token text is turned into grapheme identities."""
    preserve_case: bool = False
    letters_to_preserve: FrozenSet[str] = frozenset()
    symbols_to_preserve: FrozenSet[str] = frozenset()

    def __post_init__(self):
        object.__setattr__(self, "letters_to_preserve", _as_frozenset(self.letters_to_preserve))
        object.__setattr__(self, "symbols_to_preserve", _as_frozenset(self.symbols_to_preserve))

    def validate(self) -> Optional[str]:
        """Validate mode. Returns error message or None if valid."""
        for name, chars in (("letters_to_preserve", self.letters_to_preserve),
                            ("symbols_to_preserve", self.symbols_to_preserve)):
            bad = sorted(c for c in chars if len(c) != 1)
            if bad:
                return f"{name} entries must be single characters, got: {', '.join(bad)}"

        both = sorted(self.letters_to_preserve & self.symbols_to_preserve)
        if both:
            return f"Characters listed as both letter and symbol: {' '.join(both)}"

        not_letters = sorted(c for c in self.letters_to_preserve if not c.isalpha())
        if not_letters:
            return f"letters_to_preserve contains non-letters: {' '.join(not_letters)}"

        letters = sorted(c for c in self.symbols_to_preserve if c.isalnum() or c.isspace())
        if letters:
            return f"symbols_to_preserve must not contain letters, digits or whitespace: {' '.join(letters)}"

        return None


@dataclass(frozen=True)
class Grapheme:
    """
    One anchor candidate inside a token.

    text is the normalized identity used for hat uniqueness, raw the original
    characters, offset the index of raw within the token text.
    """
    text: str
    raw: str
    offset: int

    @property
    def end(self) -> int:
        return self.offset + len(self.raw)


class TokenGraphemeSplitter:
    """
    Splits token text into addressable graphemes.

    Pure: holds only its immutable mode, so one instance can serve any
    number of tokens and threads.
    """

    def __init__(self, mode: Optional[TokenHatSplittingMode] = None):
        self.mode = mode or TokenHatSplittingMode()

    def normalize_grapheme(self, char: str) -> Optional[str]:
        """
        Map a raw character to its grapheme identity, or None if excluded.

        Examples (default mode):
            >>> TokenGraphemeSplitter().normalize_grapheme("É")
            'e'
            >>> TokenGraphemeSplitter().normalize_grapheme(" ") is None
            True
        """
        mode = self.mode
        if char in mode.symbols_to_preserve or char in mode.letters_to_preserve:
            return char

        if char.isalpha():
            folded = char if mode.preserve_case else char.lower()
            if folded in mode.letters_to_preserve:
                return folded
            decomposed = unicodedata.normalize("NFD", folded)
            stripped = "".join(c for c in decomposed if not unicodedata.combining(c))
            stripped = unicodedata.normalize("NFC", stripped)
            return stripped or None

        if char in ASCII_ADDRESSABLE:
            return char

        return None

    def get_token_graphemes(self, text: str) -> List[Grapheme]:
        """
        Split token text into graphemes, left to right.

        The first addressable character always anchors. Later characters
        anchor only at word boundaries. Each identity appears once, at its
        earliest position.
        """
        graphemes: List[Grapheme] = []
        seen = set()
        need_leading = True

        for index, char in enumerate(text):
            normalized = self.normalize_grapheme(char)
            if normalized is None:
                continue
            if not (need_leading or is_word_boundary(text, index)):
                continue
            need_leading = False
            if normalized in seen:
                continue
            seen.add(normalized)
            graphemes.append(Grapheme(text=normalized, raw=char, offset=index))

        return graphemes


def is_word_boundary(text: str, index: int) -> bool:
    """
    True if text[index] starts a new word inside an identifier.

    Boundaries: after a separator (_ - . etc.), lower->upper case change,
    digit<->letter change, and the last capital of an acronym run that is
    followed by lowercase (the P in HTMLParser).
    """
    if index == 0:
        return True
    char = text[index]
    prev = text[index - 1]
    if not char.isalnum():
        return False
    if not prev.isalnum():
        return True
    if prev.islower() and char.isupper():
        return True
    if prev.isdigit() != char.isdigit():
        return True
    if prev.isupper() and char.isupper():
        nxt = text[index + 1] if index + 1 < len(text) else ""
        return nxt.islower()
    return False


def reconstruct_token_text(text: str, graphemes: List[Grapheme]) -> str:
    """Rebuild token text from graphemes plus the gaps between them."""
    parts = []
    position = 0
    for grapheme in graphemes:
        parts.append(text[position:grapheme.offset])
        parts.append(grapheme.raw)
        position = grapheme.end
    parts.append(text[position:])
    return "".join(parts)
