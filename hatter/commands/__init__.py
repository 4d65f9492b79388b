"""
Commands — CLI subcommands that register themselves

A command module provides:
- register_parser(subparsers): adds its argparse subcommand
- handle(cli, args): runs it and returns an exit code

Adding a command means adding its module name to COMMAND_MODULES.
"""

import importlib
import logging
from typing import Any, Callable, Dict, List

from .base import BaseCommand


LOGGER = logging.getLogger("hatter.commands")

# Help lists commands in this order
COMMAND_MODULES = [
    'show_cmd',
    'stats_cmd',
    'config_cmd',
]

_handlers: Dict[str, Callable[[Any, Any], int]] = {}


def command_name(module_name: str) -> str:
    """'show_cmd' -> 'show'."""
    return module_name[:-len('_cmd')] if module_name.endswith('_cmd') else module_name


def register_all(subparsers) -> None:
    """Import every command module, add its parser and remember its handler."""
    _handlers.clear()
    for module_name in COMMAND_MODULES:
        module = importlib.import_module(f'.{module_name}', __package__)
        module.register_parser(subparsers)
        _handlers[command_name(module_name)] = module.handle
    LOGGER.debug("commands_registered | names=%s", ",".join(_handlers))


def dispatch(command: str, cli: Any, args: Any) -> int:
    """
    Run a registered command.

    Raises:
        KeyError: No command of that name was registered
    """
    handler = _handlers.get(command)
    if handler is None:
        raise KeyError(f"Unknown command: {command}. Available: {', '.join(_handlers)}")
    return handler(cli, args)


def get_registered_commands() -> List[str]:
    return list(_handlers)


__all__ = ['BaseCommand', 'register_all', 'dispatch', 'get_registered_commands', 'COMMAND_MODULES']
