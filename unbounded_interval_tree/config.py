"""
Configuration parser for the interval tree package.

Handles TOML file parsing and the process-wide debug output switch.
"""

import tomllib
import os
import random
import sys
from datetime import datetime
from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional

from .timezone_utils import set_timezone


# Debug output is off unless a config file (or the caller) turns it on
_debug_enabled: bool = False


def set_debug(enabled: bool):
    """Enable or disable debug output on stderr."""
    global _debug_enabled
    _debug_enabled = bool(enabled)


def is_debug_enabled() -> bool:
    return _debug_enabled


def _debug_print(msg: str) -> None:
    if not _debug_enabled:
        return
    timestamp = datetime.now().strftime("%H:%M:%S")
    print(f"[{timestamp}] CONFIG: {msg}", file=sys.stderr)


KEY_TYPES = ("plain", "datetime")


@dataclass
class TreeConfig:
    """Configuration for IntervalTree instances."""
    seed: Optional[int] = None  # Seed for remove_random_leaf (None = OS entropy)
    check_invariants: bool = False  # Run verify_integrity after each mutation

    def make_rng(self) -> random.Random:
        """Random source for leaf removal, seeded if a seed is configured."""
        return random.Random(self.seed)


@dataclass
class StorageConfig:
    """Configuration for on-disk tree storage."""
    storage_dir: Optional[Path] = None  # None = XDG default
    indent: int = 2
    key_type: str = "plain"  # "plain" (JSON-native keys) or "datetime"


@dataclass
class Config:
    """Main configuration container."""

    debug: bool = False
    timezone: Optional[str] = None  # None = system timezone
    tree: TreeConfig = field(default_factory=TreeConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)

    @classmethod
    def get_default_config_path(cls) -> Path:
        """Get the default configuration file path."""
        xdg_config = os.environ.get('XDG_CONFIG_HOME', os.path.expanduser('~/.config'))
        return Path(xdg_config) / 'unbounded-interval-tree' / 'config.toml'

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> 'Config':
        """Load configuration from TOML file and apply the global settings."""
        if config_path is None:
            config_path = cls.get_default_config_path()
        config_path = Path(config_path)

        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, 'rb') as f:
            data = tomllib.load(f)

        # Parse General section
        general = data.get('General', {})
        debug = general.get('debug', False)
        timezone = general.get('timezone', cls.timezone)

        # Parse Tree section
        tree_data = data.get('Tree', {})
        seed = tree_data.get('seed')
        if seed is not None and not isinstance(seed, int):
            raise ValueError(f"Tree.seed must be an integer, got {seed!r}")
        tree = TreeConfig(
            seed=seed,
            check_invariants=tree_data.get('check_invariants', TreeConfig.check_invariants),
        )

        # Parse Storage section
        storage_data = data.get('Storage', {})
        storage_dir = storage_data.get('storage_dir')
        key_type = storage_data.get('key_type', StorageConfig.key_type)
        if key_type not in KEY_TYPES:
            raise ValueError(f"Storage.key_type must be one of {KEY_TYPES}, got {key_type!r}")
        storage = StorageConfig(
            storage_dir=Path(os.path.expanduser(storage_dir)) if storage_dir else None,
            indent=storage_data.get('indent', StorageConfig.indent),
            key_type=key_type,
        )

        config = cls(
            debug=debug,
            timezone=timezone,
            tree=tree,
            storage=storage,
        )
        config.apply()
        _debug_print(f"Loaded configuration from {config_path}")
        return config

    def apply(self):
        """Push the process-wide settings (debug output, local timezone)."""
        set_debug(self.debug)
        set_timezone(self.timezone)
