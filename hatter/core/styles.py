"""
Styles — The catalog of hats

A hat style is a (color, shape) pair. Its penalty is how visually noisy it is:
one point for a non-default color, one for a non-default shape.

    default        penalty 0   (plain dot)
    blue           penalty 1
    fox            penalty 1   (default color, fox shape)
    blue-fox       penalty 2

Style names follow the spoken form: "<color>" for the default shape and
"<color>-<shape>" otherwise. The default color with the default shape is
named "default".
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple


DEFAULT_COLOR = "default"
DEFAULT_SHAPE = "default"

HAT_COLORS = (
    "default",
    "blue",
    "green",
    "red",
    "pink",
    "yellow",
    "userColor1",
    "userColor2",
)

HAT_NON_DEFAULT_SHAPES = (
    "ex",
    "fox",
    "wing",
    "hole",
    "frame",
    "curve",
    "eye",
    "play",
    "bolt",
    "crosshairs",
)

HAT_SHAPES = (DEFAULT_SHAPE,) + HAT_NON_DEFAULT_SHAPES


def penalty_for(color: str, shape: str) -> int:
    """Visual cost of a color/shape combination."""
    return (0 if shape == DEFAULT_SHAPE else 1) + (0 if color == DEFAULT_COLOR else 1)


def style_name_for(color: str, shape: str) -> str:
    if shape == DEFAULT_SHAPE:
        return color
    return f"{color}-{shape}"


def color_shape_for(name: str) -> Tuple[str, str]:
    """
    Split a style name back into (color, shape).

    Examples:
        >>> color_shape_for("blue-fox")
        ('blue', 'fox')
        >>> color_shape_for("green")
        ('green', 'default')
    """
    color, _, shape = name.partition("-")
    return color, shape or DEFAULT_SHAPE


@dataclass(frozen=True)
class HatStyle:
    """One entry of the hat catalog."""
    name: str
    color: str
    shape: str
    penalty: int

    @classmethod
    def of(cls, color: str, shape: str) -> 'HatStyle':
        return cls(
            name=style_name_for(color, shape),
            color=color,
            shape=shape,
            penalty=penalty_for(color, shape),
        )


class HatStyleMap(Mapping):
    """
    Immutable, ordered mapping of style name to HatStyle.

    Iteration follows declaration order, which is also the final tie-break
    when the allocator picks between equally good styles.
    """

    def __init__(self, styles: Iterable[HatStyle]):
        self._styles: Dict[str, HatStyle] = {}
        for style in styles:
            if style.penalty < 0:
                raise ValueError(f"Hat style '{style.name}' has negative penalty")
            if style.name in self._styles:
                raise ValueError(f"Duplicate hat style '{style.name}'")
            self._styles[style.name] = style
        self._order: Dict[str, int] = {name: i for i, name in enumerate(self._styles)}

    def __getitem__(self, name: str) -> HatStyle:
        return self._styles[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._styles)

    def __len__(self) -> int:
        return len(self._styles)

    def __repr__(self) -> str:
        return f"HatStyleMap({list(self._styles)})"

    def declaration_index(self, name: str) -> int:
        return self._order[name]

    def by_preference(self) -> List[HatStyle]:
        """Styles sorted cheapest first, declaration order within a penalty."""
        return sorted(self._styles.values(), key=lambda s: (s.penalty, self._order[s.name]))

    def penalty_counts(self) -> Dict[int, int]:
        counts: Dict[int, int] = {}
        for style in self._styles.values():
            counts[style.penalty] = counts.get(style.penalty, 0) + 1
        return counts


def build_hat_style_map(
    colors: Optional[Sequence[str]] = None,
    shapes: Optional[Sequence[str]] = None,
) -> HatStyleMap:
    """
    Cross product of enabled colors and shapes, color-major.

    Args:
        colors: Enabled colors (default: all HAT_COLORS)
        shapes: Enabled shapes (default: all HAT_SHAPES)
    """
    colors = HAT_COLORS if colors is None else colors
    shapes = HAT_SHAPES if shapes is None else shapes
    return HatStyleMap(
        HatStyle.of(color, shape)
        for color in colors
        for shape in shapes
    )
