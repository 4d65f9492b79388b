"""
Stats — How well does allocation cover a document?

For a document, place the cursor at evenly spaced tokens, allocate at each
position, and measure:
- nHats:      % of tokens that received a hat
- nPenalty0-2: % of tokens whose hat has penalty 0, 1, 2
- nMoved:     % of hats that change when the cursor moves to the next token
              (measures the stability mode)

Each metric is summarized as mean/std/min/max plus a sparkline histogram.
"""

import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from ..core.allocator import HatStability, TokenHat, allocate_hats
from ..core.document import InMemoryTextDocument, InMemoryTextEditor
from ..core.geometry import Selection
from ..core.graphemes import TokenGraphemeSplitter
from ..core.ranking import RankedToken, get_ranked_tokens
from ..core.styles import HatStyleMap
from .symbols import SymbolSet, UNICODE


DEFAULT_SAMPLES = 16
MAX_PENALTY = 2
SPARK_BINS = 51


def as_percent(n: float) -> str:
    return f"{n:.0f}%"


def sparkline(counts: Sequence[int], symbols: SymbolSet = UNICODE) -> str:
    """
    Histogram of SPARK_BINS bin counts as four labelled quarters.

    Empty bins render as spaces; the fullest bin gets the tallest bar.
    """
    bars = symbols.spark_bars
    peak = max(counts) if counts else 0
    chars = []
    for count in counts:
        if count == 0 or peak == 0:
            chars.append(" ")
        else:
            chars.append(bars[math.ceil(count / peak * len(bars)) - 1])

    chunk = len(chars) / 4
    quarters = ["".join(chars[int(i * chunk):int((i + 1) * chunk)]) for i in range(4)]
    return f"0 {quarters[0]} 25 {quarters[1]} 50 {quarters[2]} 75 {quarters[3]} 100"


def histogram(percentages: Sequence[float]) -> List[int]:
    bins = [0] * SPARK_BINS
    for pct in percentages:
        index = int(math.floor(pct / 100 * (SPARK_BINS - 1)))
        bins[min(max(index, 0), SPARK_BINS - 1)] += 1
    return bins


@dataclass
class Distribution:
    """Summary of a list of percentages."""
    name: str
    values: List[float] = field(default_factory=list)

    @property
    def mean(self) -> float:
        return sum(self.values) / len(self.values) if self.values else 0.0

    @property
    def std(self) -> float:
        n = len(self.values)
        if n < 2:
            return 0.0
        mean = self.mean
        return math.sqrt(sum((x - mean) ** 2 for x in self.values) / (n - 1))

    @property
    def min(self) -> float:
        return min(self.values) if self.values else 0.0

    @property
    def max(self) -> float:
        return max(self.values) if self.values else 0.0

    def describe(self, symbols: SymbolSet = UNICODE) -> str:
        spark = sparkline(histogram(self.values), symbols)
        return (
            f"{self.name}:\n"
            f"\tmean: {as_percent(self.mean)}\n"
            f"\tstd: {as_percent(self.std)}\n"
            f"\tmin: {as_percent(self.min)}\n"
            f"\tmax: {as_percent(self.max)}\n"
            f"\tspark: {spark}\n"
        )


@dataclass
class HatStats:
    """Allocation statistics for one document."""
    n_tokens: int
    n_hats: Distribution = field(default_factory=lambda: Distribution("nHats"))
    n_penalty: Dict[int, Distribution] = field(default_factory=lambda: {
        p: Distribution(f"nPenalty{p}") for p in range(MAX_PENALTY + 1)
    })
    n_moved: Distribution = field(default_factory=lambda: Distribution("nMoved"))

    @property
    def unhatted_percent(self) -> float:
        """Mean % of tokens that got no hat."""
        if not self.n_hats.values:
            return 0.0
        return 100.0 - self.n_hats.mean

    def describe(self, symbols: SymbolSet = UNICODE) -> str:
        parts = [f"nTokens: {self.n_tokens}\n", self.n_hats.describe(symbols)]
        parts.extend(self.n_penalty[p].describe(symbols) for p in sorted(self.n_penalty))
        parts.append(self.n_moved.describe(symbols))
        return "\n".join(parts)


def record_allocation(stats: HatStats, token_hats: Sequence[TokenHat], hat_style_map: HatStyleMap) -> None:
    """Add one allocation's coverage and penalty mix to stats."""
    total = stats.n_tokens
    if total == 0:
        return
    stats.n_hats.values.append(100 * len(token_hats) / total)
    counts = {p: 0 for p in stats.n_penalty}
    for hat in token_hats:
        penalty = hat_style_map[hat.hat_style].penalty
        counts[penalty] = counts.get(penalty, 0) + 1
    for penalty, distribution in stats.n_penalty.items():
        distribution.values.append(100 * counts[penalty] / total)


def moved_percent(old: Sequence[TokenHat], new: Sequence[TokenHat]) -> float:
    """
    % of previously hatted tokens whose hat changed or vanished.

    Tokens are matched by (editor_id, range).
    """
    if not old:
        return 0.0
    new_by_token = {hat.token.key: hat for hat in new}
    moved = 0
    for hat in old:
        current = new_by_token.get(hat.token.key)
        if current is None or current.key != hat.key:
            moved += 1
    return 100 * moved / len(old)


def sample_tokens(ranked: Sequence[RankedToken], samples: int) -> List[RankedToken]:
    """Roughly `samples` tokens, evenly spaced through the document."""
    if not ranked:
        return []
    step = max(1, len(ranked) // max(1, samples))
    return [t for i, t in enumerate(ranked) if i % step == 0]


def collect_hat_stats(
    document: InMemoryTextDocument,
    hat_style_map: HatStyleMap,
    splitter: Optional[TokenGraphemeSplitter] = None,
    samples: int = DEFAULT_SAMPLES,
    stability: HatStability = HatStability.BALANCED,
) -> HatStats:
    """
    Sample cursor positions across a document and measure allocations.

    At each sampled token the cursor is placed at the token start and hats
    are allocated greedily from scratch. The cursor then moves to the
    following token and hats are allocated again with `stability`, passing
    the first result as old hats; the share of hats that changed feeds nMoved.
    """
    splitter = splitter or TokenGraphemeSplitter()
    editor = InMemoryTextEditor(document, active=True)

    # Cursor at 0:0, so this is plain document order
    all_tokens = get_ranked_tokens(editor, [editor])
    stats = HatStats(n_tokens=len(all_tokens))
    ordered = [t.token for t in all_tokens]
    index_of = {t.key: i for i, t in enumerate(ordered)}

    for sampled in sample_tokens(all_tokens, samples):
        token = sampled.token
        start = token.range.start
        editor.primary_selection = Selection(start, start)
        first = allocate_hats(splitter, hat_style_map, [], HatStability.GREEDY,
                              get_ranked_tokens(editor, [editor]))
        record_allocation(stats, first, hat_style_map)

        following = index_of[token.key] + 1
        if following < len(ordered):
            nxt = ordered[following].range.start
            editor.primary_selection = Selection(nxt, nxt)
            second = allocate_hats(splitter, hat_style_map, first, stability,
                                   get_ranked_tokens(editor, [editor]))
            stats.n_moved.values.append(moved_percent(first, second))

    return stats
