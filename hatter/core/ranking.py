"""
Ranking — Which tokens get first pick of hats

Tokens near the cursor matter most, so they are allocated first.

Order:
  1. Active editor before every other editor, regardless of distance
  2. Other editors in visibility order
  3. Within an editor: absolute offset distance from the token start to the
     nearest selection anchor or cursor, smallest first
  4. Ties: document order

Distance is purely textual (character offsets), never structural.
"""

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Sequence

from .document import TextEditor
from .tokens import Token, scan_editor_tokens


@dataclass(frozen=True)
class RankedToken:
    """A token and its position in allocation order (0 = first pick)."""
    token: Token
    rank: int


def selection_offsets(editor: TextEditor) -> List[int]:
    """Offsets of every selection anchor and cursor in an editor."""
    document = editor.document
    offsets = set()
    for selection in editor.selections:
        offsets.add(document.offset_at(selection.anchor))
        offsets.add(document.offset_at(selection.active))
    return sorted(offsets)


def distance_to_nearest(offset: int, anchors: Sequence[int]) -> int:
    """Absolute distance to the closest anchor, 0 when there are none."""
    if not anchors:
        return 0
    return min(abs(offset - anchor) for anchor in anchors)


def editor_order(active_editor: TextEditor, visible_editors: Sequence[TextEditor]) -> List[TextEditor]:
    """Active editor first, then the rest in visibility order, deduplicated by id."""
    ordered = [active_editor]
    seen = {active_editor.id}
    for editor in visible_editors:
        if editor.id not in seen:
            seen.add(editor.id)
            ordered.append(editor)
    return ordered


def rank_tokens(
    tokens: Iterable[Token],
    active_editor: TextEditor,
    visible_editors: Sequence[TextEditor],
) -> List[RankedToken]:
    """
    Order tokens from several editors for allocation.

    Args:
        tokens: Tokens from any of the given editors, in any order
        active_editor: Editor with focus; its tokens always rank first
        visible_editors: All visible editors, in visibility order

    Returns:
        RankedToken list; identical input always yields identical output

    Raises:
        MultiLineTokenError: A token spans several lines
        ValueError: A token belongs to none of the given editors
    """
    editors = editor_order(active_editor, visible_editors)
    editor_index: Dict[str, int] = {editor.id: i for i, editor in enumerate(editors)}
    editors_by_id = {editor.id: editor for editor in editors}
    anchors = {editor.id: selection_offsets(editor) for editor in editors}

    keyed = []
    for token in tokens:
        token.check_single_line()
        editor = editors_by_id.get(token.editor_id)
        if editor is None:
            raise ValueError(f"Token {token.text!r} belongs to unknown editor {token.editor_id}")
        offset = editor.document.offset_at(token.range.start)
        distance = distance_to_nearest(offset, anchors[editor.id])
        keyed.append(((editor_index[editor.id], distance, offset, token.range.end), token))

    keyed.sort(key=lambda item: item[0])
    return [RankedToken(token=token, rank=rank) for rank, (_, token) in enumerate(keyed)]


def get_ranked_tokens(
    active_editor: TextEditor,
    visible_editors: Sequence[TextEditor],
    scanner: Callable[[TextEditor], List[Token]] = scan_editor_tokens,
) -> List[RankedToken]:
    """Scan the visible tokens of every editor and rank them."""
    editors = editor_order(active_editor, visible_editors)
    tokens = [token for editor in editors for token in scanner(editor)]
    return rank_tokens(tokens, active_editor, visible_editors)
