"""
HatTokenMap — Keeps hats current as editors change

The allocation engine is stateless. This service is the caller that owns
continuity between cycles:
- remembers the last allocation and passes it back as old hats
- snapshots editor state when an event arrives
- debounces bursts of events so only the latest snapshot is allocated
- hands each result to a renderer

Configuration changes take effect on the next cycle via reload().
"""

import logging
import threading
from typing import List, Optional, Protocol, Sequence, Tuple

from ..config import Config
from ..core.allocator import HatStability, TokenHat, allocate_editor_hats
from ..core.debouncer import Debouncer
from ..core.document import EditorSnapshot, TextEditor
from ..core.graphemes import TokenGraphemeSplitter
from ..core.styles import HatStyleMap


LOGGER = logging.getLogger("hatter.hat_map")


class HatRenderer(Protocol):
    """Paints hats. Receives every new allocation, replacing the previous one."""

    def set_hats(self, token_hats: List[TokenHat]) -> None: ...


class HatTokenMap:
    """
    Owner of the previous allocation and the debounced refresh loop.

    Thread-safe: schedule() may be called from any thread; allocations are
    serialized.
    """

    def __init__(
        self,
        config: Config,
        renderer: Optional[HatRenderer] = None,
        delay: Optional[float] = None,
    ):
        self._lock = threading.RLock()
        self._renderer = renderer
        self._token_hats: List[TokenHat] = []
        self._pending: Optional[Tuple[EditorSnapshot, Tuple[EditorSnapshot, ...]]] = None
        self.cycles = 0
        self.reload(config)
        if delay is None:
            delay = config.debounce.delay_ms / 1000
        self._debouncer = Debouncer(self._run_pending, delay)

    # -------------------------------------------------------------------------
    # Configuration
    # -------------------------------------------------------------------------

    def reload(self, config: Config) -> None:
        """Swap in new configuration for the next cycle."""
        with self._lock:
            self._splitter = TokenGraphemeSplitter(config.splitting_mode())
            self._styles: HatStyleMap = config.hat_style_map()
            self._stability: HatStability = config.stability
        LOGGER.info("hat_map_reloaded | styles=%d | stability=%s",
                    len(self._styles), self._stability.value)

    @property
    def stability(self) -> HatStability:
        return self._stability

    @property
    def hat_style_map(self) -> HatStyleMap:
        return self._styles

    # -------------------------------------------------------------------------
    # Allocation
    # -------------------------------------------------------------------------

    @property
    def token_hats(self) -> List[TokenHat]:
        """Result of the latest cycle."""
        with self._lock:
            return list(self._token_hats)

    def refresh(self, active_editor: TextEditor, visible_editors: Sequence[TextEditor]) -> List[TokenHat]:
        """Allocate now, on the caller's thread."""
        active = EditorSnapshot.of(active_editor)
        visible = tuple(EditorSnapshot.of(e) for e in visible_editors)
        return self._allocate(active, visible)

    def schedule(self, active_editor: TextEditor, visible_editors: Sequence[TextEditor]) -> None:
        """
        Request an allocation after the debounce delay.

        The editor state is captured now. A later schedule() before the
        delay expires replaces this request.
        """
        snapshot = (
            EditorSnapshot.of(active_editor),
            tuple(EditorSnapshot.of(e) for e in visible_editors),
        )
        with self._lock:
            self._pending = snapshot
        self._debouncer.run()

    def flush(self) -> bool:
        """Run a pending scheduled allocation immediately."""
        return self._debouncer.flush()

    def dispose(self) -> None:
        self._debouncer.dispose()
        with self._lock:
            self._pending = None

    def _run_pending(self) -> None:
        with self._lock:
            snapshot, self._pending = self._pending, None
        if snapshot is not None:
            self._allocate(*snapshot)

    def _allocate(self, active: EditorSnapshot, visible: Tuple[EditorSnapshot, ...]) -> List[TokenHat]:
        with self._lock:
            token_hats = allocate_editor_hats(
                self._splitter,
                self._styles,
                self._token_hats,
                self._stability,
                active,
                visible,
            )
            self._token_hats = token_hats
            self.cycles += 1
            renderer = self._renderer

        LOGGER.debug("hat_map_cycle | cycle=%d | hats=%d", self.cycles, len(token_hats))
        if renderer is not None:
            renderer.set_hats(list(token_hats))
        return list(token_hats)
