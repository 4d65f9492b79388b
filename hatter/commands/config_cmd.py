"""
ConfigCommand — Display and change configuration
"""

from ..commands.base import BaseCommand


class ConfigCommand(BaseCommand):
    """Configuration display and modification."""

    def show_config(self) -> int:
        print(self.config_manager.display())
        return 0

    def get_config(self, key: str) -> int:
        value = self.config_manager.get(key)
        if value is None:
            print(f"{self.symbols.check_fail} Unknown key: {key}")
            return 1
        print(value)
        return 0

    def set_config(self, key: str, value: str, scope: str = "project") -> int:
        """Set a configuration value."""
        symbols = self.symbols
        error = self.config_manager.set(key, value, scope)

        if error:
            print(f"{symbols.check_fail} {error}")
            return 1

        path = (self.config_manager.project_config_path if scope == "project"
                else self.config_manager.user_config_path)
        print(f"{symbols.check_pass} Set {key} = {value}")
        print(f"  Saved to: {path}")
        return 0


def register_parser(subparsers):
    """Register config command parser."""
    p = subparsers.add_parser('config', help='View or set configuration')
    p.add_argument('--set', nargs=2, metavar=('KEY', 'VALUE'),
                   help='Set config value (e.g., --set hats.stability stable)')
    p.add_argument('--get', metavar='KEY', help='Print one config value')
    p.add_argument('--user', action='store_true',
                   help='Apply to user config instead of project')
    return p


def handle(cli, args):
    """Handle config command dispatch."""
    cmd = ConfigCommand(cli)
    if args.set:
        key, value = args.set
        return cmd.set_config(key, value, "user" if args.user else "project")
    if args.get:
        return cmd.get_config(args.get)
    return cmd.show_config()
