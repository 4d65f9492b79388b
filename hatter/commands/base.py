"""
BaseCommand — Shared foundation for all CLI commands

Commands get the CLI instance and reach its resources through properties,
so config, style map and splitter are built once per process.
"""

from pathlib import Path
from typing import TYPE_CHECKING, List, Optional

from ..core.allocator import HatStability, TokenHat, allocate_editor_hats, stability_from_string
from ..core.document import InMemoryTextDocument, InMemoryTextEditor

if TYPE_CHECKING:
    from ..cli import HatterCLI


class BaseCommand:
    """Composition base: commands borrow resources, never rebuild them."""

    def __init__(self, cli: 'HatterCLI'):
        self._cli = cli

    @property
    def project_dir(self) -> Path:
        return self._cli.project_dir

    @property
    def config_manager(self):
        return self._cli.config_manager

    @property
    def config(self):
        return self._cli.config

    @property
    def symbols(self):
        """Unicode or ASCII glyphs, per display.symbols."""
        return self._cli.symbols

    @property
    def splitter(self):
        return self._cli.splitter

    @property
    def hat_style_map(self):
        return self._cli.hat_style_map

    # -------------------------------------------------------------------------
    # Engine helpers
    # -------------------------------------------------------------------------

    def resolve_stability(self, override: Optional[str]) -> HatStability:
        """A --stability flag wins over hats.stability."""
        return stability_from_string(override) if override else self.config.stability

    def allocate(
        self,
        editor: InMemoryTextEditor,
        stability: HatStability = HatStability.GREEDY,
        old: Optional[List[TokenHat]] = None,
    ) -> List[TokenHat]:
        """Allocate for a single editor with the configured catalog."""
        return allocate_editor_hats(self.splitter, self.hat_style_map, old or [],
                                    stability, editor, [editor])

    @staticmethod
    def open_editor(path: Path) -> InMemoryTextEditor:
        """Active editor over a file; raises OSError or ValueError."""
        return InMemoryTextEditor(InMemoryTextDocument.from_path(path), active=True)
