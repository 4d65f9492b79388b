"""
CLI -- Command interface

Inspect hat allocation on real files without an editor:
- show: draw hats for a file at a cursor position
- stats: coverage and stability statistics
- config: view or change settings
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from .config import ConfigManager, ConfigError
from .core.graphemes import TokenGraphemeSplitter
from .presentation.symbols import get_symbols
from . import __version__


class HatterCLI:
    """Resources shared by every command."""

    def __init__(self, project_dir: Path, config_manager: Optional[ConfigManager] = None):
        self.project_dir = Path(project_dir)
        self.config_manager = config_manager or ConfigManager(self.project_dir)
        self.config = self.config_manager.load()

        # Immutable engine inputs, built once from validated config
        self.hat_style_map = self.config.hat_style_map()
        self.splitter = TokenGraphemeSplitter(self.config.splitting_mode())

        self.symbols = get_symbols(self.config.display.symbols)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hatter",
        description="Hatter -- hat allocation for voice-driven editing",
    )

    parser.add_argument(
        '--project', '-p',
        default=os.environ.get("HATTER_PROJECT_PATH", "."),
        help='Project directory for .hatter/config.yaml (default: HATTER_PROJECT_PATH or current)'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Log allocation details to stderr'
    )

    parser.add_argument(
        '--version', '-V',
        action='version',
        version=f'hatter {__version__}'
    )

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # Register all commands from command modules (self-registration pattern)
    from .commands import register_all
    register_all(subparsers)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the hatter CLI.

    Returns:
        Process exit code
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if not args.command:
        parser.print_help()
        return 0

    try:
        cli = HatterCLI(Path(args.project))
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    from .commands import dispatch
    try:
        result = dispatch(args.command, cli, args)
    except KeyError as e:
        print(f"Error: {e}", file=sys.stderr)
        parser.print_help()
        return 2

    return result or 0


if __name__ == '__main__':
    sys.exit(main())
