"""
Configuration — Centralized settings management

Config hierarchy (highest to lowest priority):
  1. Environment variables
  2. Project config (.hatter/config.yaml)
  3. User config (~/.hatter/config.yaml)
  4. Defaults

Configuration is validated once, at load time. The engine only ever sees the
immutable HatStyleMap and TokenHatSplittingMode built from a valid Config.
"""

import logging
import os
import yaml
from pathlib import Path
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Union

from .core.allocator import HatStability
from .core.graphemes import TokenHatSplittingMode
from .core.styles import HAT_COLORS, HAT_SHAPES, HatStyleMap, build_hat_style_map
from .presentation.symbols import get_symbols


LOGGER = logging.getLogger("hatter.config")

DEFAULT_STABILITY = HatStability.BALANCED.value
DEFAULT_DEBOUNCE_MS = 50


class ConfigError(ValueError):
    """Raised when loaded configuration is invalid."""


@dataclass
class HatsConfig:
    """Which hats exist and how stable they are."""
    colors: List[str] = field(default_factory=lambda: list(HAT_COLORS))
    shapes: List[str] = field(default_factory=lambda: list(HAT_SHAPES))
    stability: str = DEFAULT_STABILITY

    def validate(self) -> Optional[str]:
        """Validate config. Returns error message or None if valid."""
        unknown = [c for c in self.colors if c not in HAT_COLORS]
        if unknown:
            return f"Unknown colors: {', '.join(unknown)}. Valid: {', '.join(HAT_COLORS)}"

        unknown = [s for s in self.shapes if s not in HAT_SHAPES]
        if unknown:
            return f"Unknown shapes: {', '.join(unknown)}. Valid: {', '.join(HAT_SHAPES)}"

        if not self.colors or not self.shapes:
            return "At least one color and one shape must be enabled"

        if len(set(self.colors)) != len(self.colors) or len(set(self.shapes)) != len(self.shapes):
            return "Colors and shapes must not repeat"

        valid_stability = [m.value for m in HatStability]
        if self.stability not in valid_stability:
            return f"Unknown stability '{self.stability}'. Valid: {', '.join(valid_stability)}"
        return None


@dataclass
class SplittingConfig:
    """How token text is split into hat anchors."""
    preserve_case: bool = False
    # A string means each of its characters; a list keeps its entries as given
    letters_to_preserve: Union[str, List[str]] = ""
    symbols_to_preserve: Union[str, List[str]] = ""

    def to_mode(self) -> TokenHatSplittingMode:
        return TokenHatSplittingMode(
            preserve_case=self.preserve_case,
            letters_to_preserve=self.letters_to_preserve,
            symbols_to_preserve=self.symbols_to_preserve,
        )

    def validate(self) -> Optional[str]:
        """Validate config. Returns error message or None if valid."""
        return self.to_mode().validate()


@dataclass
class DisplayConfig:
    """Display preferences."""
    symbols: str = "auto"  # "unicode" | "ascii" | "auto"

    def validate(self) -> Optional[str]:
        """Validate config. Returns error message or None if valid."""
        valid_symbols = ("unicode", "ascii", "auto")
        if self.symbols not in valid_symbols:
            return f"Unknown symbols setting '{self.symbols}'. Valid: {', '.join(valid_symbols)}"
        return None


@dataclass
class DebounceConfig:
    """Delay before a burst of editor events triggers allocation."""
    delay_ms: int = DEFAULT_DEBOUNCE_MS

    def validate(self) -> Optional[str]:
        if self.delay_ms < 0:
            return f"debounce.delay_ms must be >= 0, got {self.delay_ms}"
        return None


@dataclass
class Config:
    """Application configuration."""
    hats: HatsConfig = field(default_factory=HatsConfig)
    splitting: SplittingConfig = field(default_factory=SplittingConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    debounce: DebounceConfig = field(default_factory=DebounceConfig)

    def validate(self) -> Optional[str]:
        """First validation error across all sections, or None."""
        for section in (self.hats, self.splitting, self.display, self.debounce):
            error = section.validate()
            if error:
                return error
        return None

    @property
    def stability(self) -> HatStability:
        return HatStability(self.hats.stability)

    def hat_style_map(self) -> HatStyleMap:
        """Immutable catalog of the enabled hat styles."""
        return build_hat_style_map(self.hats.colors, self.hats.shapes)

    def splitting_mode(self) -> TokenHatSplittingMode:
        return self.splitting.to_mode()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "hats": {
                "colors": list(self.hats.colors),
                "shapes": list(self.hats.shapes),
                "stability": self.hats.stability
            },
            "splitting": {
                "preserve_case": self.splitting.preserve_case,
                "letters_to_preserve": self.splitting.letters_to_preserve,
                "symbols_to_preserve": self.splitting.symbols_to_preserve
            },
            "display": {
                "symbols": self.display.symbols
            },
            "debounce": {
                "delay_ms": self.debounce.delay_ms
            }
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Config':
        """Create from dictionary."""
        hats_data = data.get("hats", {})
        splitting_data = data.get("splitting", {})
        display_data = data.get("display", {})
        debounce_data = data.get("debounce", {})

        return cls(
            hats=HatsConfig(
                colors=list(hats_data.get("colors", HAT_COLORS)),
                shapes=list(hats_data.get("shapes", HAT_SHAPES)),
                stability=str(hats_data.get("stability", DEFAULT_STABILITY)).lower()
            ),
            splitting=SplittingConfig(
                preserve_case=_as_bool(splitting_data.get("preserve_case", False)),
                letters_to_preserve=_as_chars(splitting_data.get("letters_to_preserve", "")),
                symbols_to_preserve=_as_chars(splitting_data.get("symbols_to_preserve", ""))
            ),
            display=DisplayConfig(
                symbols=display_data.get("symbols", "auto")
            ),
            debounce=DebounceConfig(
                delay_ms=int(debounce_data.get("delay_ms", DEFAULT_DEBOUNCE_MS))
            )
        )


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.lower() in ('true', '1', 'yes', 'on')
    return bool(value)


def _as_chars(value: Any) -> Union[str, List[str]]:
    # List entries stay separate so validation can reject multi-character ones
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value]
    return str(value)


def _chars_text(value: Union[str, List[str]]) -> str:
    if isinstance(value, list):
        return " ".join(value)
    return value


class ConfigManager:
    """
    Manages configuration loading and persistence.

    Hierarchy:
      1. Environment (HATTER_STABILITY, HATTER_PRESERVE_CASE, HATTER_DEBOUNCE_MS)
      2. Project config (.hatter/config.yaml)
      3. User config (~/.hatter/config.yaml)
      4. Defaults
    """

    USER_CONFIG_DIR = Path.home() / ".hatter"
    USER_CONFIG_FILE = USER_CONFIG_DIR / "config.yaml"
    PROJECT_CONFIG_DIR = ".hatter"
    PROJECT_CONFIG_FILE = "config.yaml"

    def __init__(self, project_dir: Optional[Path] = None, user_config_file: Optional[Path] = None):
        self.project_dir = Path(project_dir) if project_dir else Path.cwd()
        if user_config_file is not None:
            self.USER_CONFIG_FILE = Path(user_config_file)
        self._config: Optional[Config] = None

    @property
    def project_config_path(self) -> Path:
        return self.project_dir / self.PROJECT_CONFIG_DIR / self.PROJECT_CONFIG_FILE

    @property
    def user_config_path(self) -> Path:
        return self.USER_CONFIG_FILE

    def load(self) -> Config:
        """
        Load configuration from all sources.

        Raises:
            ConfigError: The merged configuration is invalid
        """
        if self._config is not None:
            return self._config

        # Start with defaults
        config_data: Dict[str, Any] = {}

        # Layer 1: User config
        config_data = self._merge(config_data, self._read_yaml(self.user_config_path))

        # Layer 2: Project config (higher priority)
        config_data = self._merge(config_data, self._read_yaml(self.project_config_path))

        # Layer 3: Environment overrides
        if os.environ.get("HATTER_STABILITY"):
            config_data.setdefault("hats", {})["stability"] = os.environ["HATTER_STABILITY"]
        if os.environ.get("HATTER_PRESERVE_CASE"):
            config_data.setdefault("splitting", {})["preserve_case"] = os.environ["HATTER_PRESERVE_CASE"]
        if os.environ.get("HATTER_DEBOUNCE_MS"):
            config_data.setdefault("debounce", {})["delay_ms"] = os.environ["HATTER_DEBOUNCE_MS"]

        try:
            config = Config.from_dict(config_data)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid configuration: {e}") from e

        error = config.validate()
        if error:
            raise ConfigError(error)

        LOGGER.debug("config_loaded | styles=%d | stability=%s",
                     len(config.hats.colors) * len(config.hats.shapes), config.hats.stability)
        self._config = config
        return self._config

    def reload(self) -> Config:
        """Drop the cached config and load again (after files change)."""
        self._config = None
        return self.load()

    def _read_yaml(self, path: Path) -> Dict[str, Any]:
        if not path.exists():
            return {}
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            LOGGER.warning("config_unreadable | path=%s | error=%s", path, e)
            return {}
        if not isinstance(data, dict):
            LOGGER.warning("config_not_a_mapping | path=%s", path)
            return {}
        return data

    def save_project(self, config: Config):
        """Write config to .hatter/config.yaml in the project."""
        self._write(self.project_config_path, config)

    def save_user(self, config: Config):
        """Write config to the user-level config file."""
        self._write(self.user_config_path, config)

    def _write(self, path: Path, config: Config):
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding="utf-8") as f:
            yaml.safe_dump(config.to_dict(), f, default_flow_style=False, allow_unicode=True)
        LOGGER.info("config_saved | path=%s", path)
        self._config = config

    def set(self, key: str, value: str, scope: str = "project") -> Optional[str]:
        """
        Set a configuration value and save it.

        Args:
            key: Dot-separated key (e.g., "hats.stability")
            value: Value as typed on the command line; lists are comma-separated
            scope: "project" or "user"

        Returns:
            Error message or None if successful
        """
        parts = key.split(".")
        if len(parts) != 2:
            return f"Invalid key format: {key}. Use 'section.setting' (e.g., 'hats.stability')"

        section, setting = parts
        if section not in SETTINGS:
            return f"Unknown section: {section}. Valid: {', '.join(SETTINGS)}"
        if setting not in SETTINGS[section]:
            return f"Unknown {section} setting: {setting}. Valid: {', '.join(SETTINGS[section])}"

        try:
            parsed = SETTINGS[section][setting](value)
        except ValueError:
            return f"{key} must be an integer, got '{value}'"

        config = Config.from_dict(self.load().to_dict())
        target = getattr(config, section)
        setattr(target, setting, parsed)
        error = target.validate()
        if error:
            return error

        if scope == "project":
            self.save_project(config)
        else:
            self.save_user(config)
        return None

    def get(self, key: str) -> Optional[str]:
        """Get a configuration value as display text."""
        data = self.load().to_dict()

        parts = key.split(".")
        if len(parts) != 2:
            return None

        section, setting = parts
        value = data.get(section, {}).get(setting)
        if value is None:
            return None
        if isinstance(value, list):
            return ",".join(value)
        if isinstance(value, bool):
            return str(value).lower()
        return str(value)

    def _merge(self, base: Dict, override: Dict) -> Dict:
        """Deep merge two dicts, override wins."""
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge(result[key], value)
            else:
                result[key] = value
        return result

    def display(self) -> str:
        """Format config for display."""
        config = self.load()
        symbols = get_symbols(config.display.symbols)
        styles = config.hat_style_map()
        penalties = styles.penalty_counts()
        penalty_text = ", ".join(f"{p}: {penalties[p]}" for p in sorted(penalties))

        lines = [
            "Configuration:",
            "",
            "Hats:",
            f"  Colors: {', '.join(config.hats.colors)}",
            f"  Shapes: {', '.join(config.hats.shapes)}",
            f"  Styles: {len(styles)} (by penalty {penalty_text})",
            f"  Stability: {config.hats.stability}",
            "",
            "Splitting:",
            f"  Preserve case: {config.splitting.preserve_case}",
            f"  Letters to preserve: {_chars_text(config.splitting.letters_to_preserve) or '(none)'}",
            f"  Symbols to preserve: {_chars_text(config.splitting.symbols_to_preserve) or '(none)'}",
            "",
            "Display:",
            f"  Symbols: {config.display.symbols}",
            "",
            "Debounce:",
            f"  Delay: {config.debounce.delay_ms} ms",
            "",
            "Config files:",
            f"  User: {self.user_config_path} {symbols.check_pass if self.user_config_path.exists() else symbols.bullet}",
            f"  Project: {self.project_config_path} {symbols.check_pass if self.project_config_path.exists() else symbols.bullet}",
        ]

        return "\n".join(lines)


def _split_list(value: str) -> List[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


# Settable keys: section -> setting -> parser for the command-line text
SETTINGS: Dict[str, Dict[str, Callable[[str], Any]]] = {
    "hats": {"colors": _split_list, "shapes": _split_list, "stability": str.lower},
    "splitting": {"preserve_case": _as_bool, "letters_to_preserve": str, "symbols_to_preserve": str},
    "display": {"symbols": str},
    "debounce": {"delay_ms": int},
}


# Convenience function
def get_config(project_dir: Optional[Path] = None) -> Config:
    """Load configuration for a project."""
    return ConfigManager(project_dir).load()
