"""
Allocator — Assigning hats to ranked tokens

Greedy single pass in rank order. Each token takes the best free
(grapheme, style) pair it can; the pair is then consumed for every
lower-ranked token. Uniqueness is keyed by (grapheme text, style), not by
token: two tokens may share a style as long as the hat sits on different
letters.

Choosing a pair for one token, best first:
  1. Its previous hat, when the stability mode says to keep it
  2. Lowest style penalty
  3. Earliest grapheme in the token
  4. Style declaration order

Stability modes:
- greedy:   previous hats are ignored
- stable:   a previous hat that is still free always wins
- balanced: a previous hat wins unless a free alternative is more than
            BALANCED_PENALTY_TOLERANCE cheaper

Outside greedy, previous hats are matched to current tokens by
match_old_hats(), which follows tokens shifted along their line by an edit.
A pair still held by another matched token is left to that token unless it
is the only free pair.

A token with no free pair gets no hat. That is expected when hats run out.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple, Union

from .document import TextEditor
from .geometry import Position, Range
from .graphemes import Grapheme, TokenGraphemeSplitter
from .ranking import RankedToken, get_ranked_tokens
from .styles import HatStyle, HatStyleMap
from .tokens import Token


LOGGER = logging.getLogger("hatter.allocator")

BALANCED_PENALTY_TOLERANCE = 1


class HatStability(Enum):
    """How strongly a new allocation keeps previous hats."""
    GREEDY = "greedy"
    BALANCED = "balanced"
    STABLE = "stable"


def stability_from_string(s: Optional[str]) -> HatStability:
    """Parse a stability mode name, defaulting to BALANCED."""
    if s is None:
        return HatStability.BALANCED
    try:
        return HatStability(s.lower())
    except ValueError:
        valid = ", ".join(m.value for m in HatStability)
        raise ValueError(f"Unknown hat stability '{s}'. Valid: {valid}") from None


@dataclass(frozen=True)
class TokenHat:
    """A hat placed on one grapheme of one token."""
    token: Token
    hat_style: str
    hat_range: Range
    grapheme_text: str

    @property
    def key(self) -> Tuple[str, str]:
        """Uniqueness key within one allocation."""
        return (self.grapheme_text, self.hat_style)


@dataclass(frozen=True)
class HatCandidate:
    grapheme: Grapheme
    grapheme_index: int
    style: HatStyle
    style_index: int

    @property
    def cost(self) -> Tuple[int, int, int]:
        return (self.style.penalty, self.grapheme_index, self.style_index)


def grapheme_range(token: Token, grapheme: Grapheme) -> Range:
    start = token.range.start
    return Range(
        Position(start.line, start.character + grapheme.offset),
        Position(start.line, start.character + grapheme.end),
    )


def _occurrence_keys(tokens: Iterable[Token]) -> Dict[Tuple[str, Range], Tuple[str, int, str, int]]:
    """(editor, line, text, n) where n counts earlier same-text tokens on the line."""
    counts: Dict[Tuple[str, int, str], int] = {}
    keys: Dict[Tuple[str, Range], Tuple[str, int, str, int]] = {}
    ordered = sorted(tokens, key=lambda t: (t.editor_id, t.range.start.line, t.range.start.character))
    for token in ordered:
        group = (token.editor_id, token.range.start.line, token.text)
        n = counts.get(group, 0)
        counts[group] = n + 1
        keys[token.key] = group + (n,)
    return keys


def match_old_hats(
    tokens: Sequence[Token],
    old_token_hats: Iterable[TokenHat],
) -> Dict[Tuple[str, Range], TokenHat]:
    """
    Pair current tokens with their hats from the previous allocation.

    An edit that changes a line's length shifts every later token on that
    line, so exact ranges alone lose those hats. Matches are tried in order,
    and each old hat is used at most once:
      1. Same range and same text
      2. Same line and text, and the same count of equal tokens before it
      3. Same range with edited text

    Returns:
        Old hat per current token key; unmatched tokens are absent
    """
    old_by_key: Dict[Tuple[str, Range], TokenHat] = {}
    for hat in old_token_hats:
        old_by_key.setdefault(hat.token.key, hat)

    old_occurrences = _occurrence_keys(hat.token for hat in old_by_key.values())
    old_by_occurrence = {old_occurrences[key]: hat for key, hat in old_by_key.items()}
    occurrences = _occurrence_keys(tokens)

    matched: Dict[Tuple[str, Range], TokenHat] = {}
    used: Set[Tuple[str, Range]] = set()

    def take(token: Token, hat: Optional[TokenHat]) -> None:
        if hat is not None and token.key not in matched and hat.token.key not in used:
            matched[token.key] = hat
            used.add(hat.token.key)

    for token in tokens:
        hat = old_by_key.get(token.key)
        if hat is not None and hat.token.text == token.text:
            take(token, hat)
    for token in tokens:
        take(token, old_by_occurrence.get(occurrences[token.key]))
    for token in tokens:
        take(token, old_by_key.get(token.key))
    return matched


class _Allocation:
    """State for one allocation pass. Discarded when the pass ends."""

    def __init__(
        self,
        splitter: TokenGraphemeSplitter,
        hat_style_map: HatStyleMap,
        tokens: Sequence[Token],
        old_token_hats: Iterable[TokenHat],
        hat_stability: HatStability,
    ):
        self.splitter = splitter
        self.styles = hat_style_map
        self.stability = hat_stability
        self.preferred = hat_style_map.by_preference()
        self.consumed: Set[Tuple[str, str]] = set()
        self.old_hats: Dict[Tuple[str, Range], TokenHat] = {}
        # Pairs still held by a surviving token's previous hat
        self.reserved: Dict[Tuple[str, str], Tuple[str, Range]] = {}
        if hat_stability is not HatStability.GREEDY:
            self.old_hats = match_old_hats(tokens, old_token_hats)
            for key, hat in self.old_hats.items():
                self.reserved.setdefault((hat.grapheme_text, hat.hat_style), key)

    def best_free(
        self,
        grapheme: Grapheme,
        index: int,
        owner: Optional[Tuple[str, Range]] = None,
        allow_reserved: bool = True,
    ) -> Optional[HatCandidate]:
        """Cheapest style still free on this grapheme."""
        for style in self.preferred:
            pair = (grapheme.text, style.name)
            if pair in self.consumed:
                continue
            holder = self.reserved.get(pair)
            if not allow_reserved and holder is not None and holder != owner:
                continue
            return HatCandidate(grapheme, index, style, self.styles.declaration_index(style.name))
        return None

    def cheapest(self, token: Token, graphemes: List[Grapheme], allow_reserved: bool) -> Optional[HatCandidate]:
        best: Optional[HatCandidate] = None
        for index, grapheme in enumerate(graphemes):
            candidate = self.best_free(grapheme, index, token.key, allow_reserved)
            if candidate is not None and (best is None or candidate.cost < best.cost):
                best = candidate
        return best

    def old_candidate(self, token: Token, graphemes: List[Grapheme]) -> Optional[HatCandidate]:
        """The token's previous hat, if it is still valid and free."""
        old = self.old_hats.get(token.key)
        if old is None or old.hat_style not in self.styles:
            return None
        if (old.grapheme_text, old.hat_style) in self.consumed:
            return None
        for index, grapheme in enumerate(graphemes):
            if grapheme.text == old.grapheme_text:
                style = self.styles[old.hat_style]
                return HatCandidate(grapheme, index, style, self.styles.declaration_index(style.name))
        return None

    def choose(self, token: Token) -> Optional[HatCandidate]:
        graphemes = self.splitter.get_token_graphemes(token.text)

        # Another token's previous hat is taken only when nothing else is free
        best = self.cheapest(token, graphemes, allow_reserved=False)
        if best is None:
            best = self.cheapest(token, graphemes, allow_reserved=True)
        if best is None:
            return None

        old = self.old_candidate(token, graphemes)
        if old is None:
            return best
        if self.stability is HatStability.STABLE:
            return old
        if old.style.penalty <= best.style.penalty + BALANCED_PENALTY_TOLERANCE:
            return old
        return best

    def allocate(self, token: Token) -> Optional[TokenHat]:
        token.check_single_line()
        chosen = self.choose(token)
        if chosen is None:
            LOGGER.debug("token_unhatted | editor=%s | range=%s | text=%r",
                         token.editor_id, token.range.concise(), token.text)
            return None
        self.consumed.add((chosen.grapheme.text, chosen.style.name))
        return TokenHat(
            token=token,
            hat_style=chosen.style.name,
            hat_range=grapheme_range(token, chosen.grapheme),
            grapheme_text=chosen.grapheme.text,
        )


def allocate_hats(
    splitter: TokenGraphemeSplitter,
    hat_style_map: HatStyleMap,
    old_token_hats: Iterable[TokenHat],
    hat_stability: HatStability,
    ranked_tokens: Sequence[Union[RankedToken, Token]],
) -> List[TokenHat]:
    """
    Assign hats to tokens in rank order.

    Args:
        splitter: Turns token text into grapheme candidates
        hat_style_map: Available hat styles
        old_token_hats: Previous allocation, used only for stability
        hat_stability: How strongly to keep previous hats
        ranked_tokens: Tokens in allocation order (RankedToken or bare Token)

    Returns:
        TokenHat list in rank order. Tokens without a free hat are omitted.

    Raises:
        MultiLineTokenError: A token spans several lines
    """
    tokens = [item.token if isinstance(item, RankedToken) else item for item in ranked_tokens]
    allocation = _Allocation(splitter, hat_style_map, tokens, old_token_hats, hat_stability)

    result: List[TokenHat] = []
    for token in tokens:
        hat = allocation.allocate(token)
        if hat is not None:
            result.append(hat)

    LOGGER.debug("hats_allocated | tokens=%d | hats=%d | stability=%s | styles=%d",
                 len(tokens), len(result), hat_stability.value, len(hat_style_map))
    return result


def allocate_editor_hats(
    splitter: TokenGraphemeSplitter,
    hat_style_map: HatStyleMap,
    old_token_hats: Iterable[TokenHat],
    hat_stability: HatStability,
    active_editor: TextEditor,
    visible_editors: Sequence[TextEditor],
) -> List[TokenHat]:
    """Scan, rank and allocate in one call: the engine's entry point."""
    ranked = get_ranked_tokens(active_editor, visible_editors)
    return allocate_hats(splitter, hat_style_map, old_token_hats, hat_stability, ranked)
