"""Configuration file handling for keyrank."""

import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from .search import KeySpec

logger = logging.getLogger(__name__)

DEFAULT_KEYS = [KeySpec("name")]


@dataclass
class SearchConfig:
    """Search-related settings."""

    keys: list[KeySpec] = field(default_factory=lambda: list(DEFAULT_KEYS))
    limit: int = 0  # 0 = unlimited


@dataclass
class UIConfig:
    """UI-related settings."""

    show_score: bool = False
    max_results: int = 50
    placeholder: str = "Type to filter..."


@dataclass
class Config:
    """Main configuration container."""

    search: SearchConfig = field(default_factory=SearchConfig)
    ui: UIConfig = field(default_factory=UIConfig)


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Find config file in start dir or user config dir."""
    candidates = []

    if start_dir:
        candidates.append(start_dir / ".keyrankrc")
        candidates.append(start_dir / ".keyrankrc.toml")

    config_home = Path.home() / ".config" / "keyrank"
    candidates.append(config_home / "config.toml")

    for path in candidates:
        if path.exists():
            return path

    return None


def _get(section: dict, name: str, default, kind: type):
    """Read a typed setting, keeping default when the value has the wrong type."""
    value = section.get(name, default)
    valid = isinstance(value, kind) and not (kind is not bool and isinstance(value, bool))
    if valid and kind is int and value < 0:
        valid = False
    if not valid:
        logger.warning("Ignoring %s = %r, expected %s", name, value, kind.__name__)
        return default
    return value


def parse_keys(entries: list) -> list[KeySpec]:
    """Parse key entries given as 'PATH[:WEIGHT]' strings or tables."""
    keys = []
    for entry in entries:
        try:
            if isinstance(entry, dict):
                keys.append(KeySpec.from_dict(entry))
            else:
                keys.append(KeySpec.parse(str(entry)))
        except ValueError as e:
            logger.warning("Skipping key %r: %s", entry, e)
    return keys


def load_config(start_dir: Path | None = None) -> Config:
    """Load configuration from file or return defaults."""
    config_path = find_config_file(start_dir)

    if config_path is None:
        return Config()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning("Ignoring config %s: %s", config_path, e)
        return Config()

    logger.debug("Loaded config from %s", config_path)
    config = Config()

    if "search" in data:
        s = data["search"]
        keys = parse_keys(_get(s, "keys", [], list))
        config.search = SearchConfig(
            keys=keys or config.search.keys,
            limit=_get(s, "limit", config.search.limit, int),
        )

    if "ui" in data:
        ui = data["ui"]
        config.ui = UIConfig(
            show_score=_get(ui, "show_score", config.ui.show_score, bool),
            max_results=_get(ui, "max_results", config.ui.max_results, int),
            placeholder=_get(ui, "placeholder", config.ui.placeholder, str),
        )

    return config
