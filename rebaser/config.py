from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .errors import ConfigError
from .importers.base import DEFAULT_PACKAGE_PREFIXES
from .specifier import DEFAULT_MARKER

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1
DEFAULT_CFG_FILE = "rebaser.yaml"

# --------------------------------------------------------------------------- #
# Defaults
# --------------------------------------------------------------------------- #
_DEFAULT_CFG: Dict[str, Any] = {
    "schema_version": SCHEMA_VERSION,
    # gitwildmatch patterns selecting entry stylesheets; partials are never entries
    "sources": ["**/*.scss", "**/*.sass", "!**/_*"],
    "exclude": ["node_modules/", ".git/"],
    "load_paths": [],
    "package_prefixes": list(DEFAULT_PACKAGE_PREFIXES),
    "module_resolution": True,
    "source_maps": False,
    "marker": DEFAULT_MARKER,
}

_LIST_KEYS = ("sources", "exclude", "load_paths", "package_prefixes")
_BOOL_KEYS = ("module_resolution", "source_maps")

_yaml = YAML(typ="safe")


@dataclass(frozen=True)
class RebaserConfig:
    sources: Tuple[str, ...] = tuple(_DEFAULT_CFG["sources"])
    exclude: Tuple[str, ...] = tuple(_DEFAULT_CFG["exclude"])
    load_paths: Tuple[str, ...] = ()
    package_prefixes: Tuple[str, ...] = DEFAULT_PACKAGE_PREFIXES
    module_resolution: bool = True
    source_maps: bool = False
    marker: str = DEFAULT_MARKER
    # Directory the relative load paths are anchored to
    base_dir: Path = field(default_factory=Path.cwd)

    def resolve_load_paths(self, root: Optional[Path] = None) -> List[Path]:
        """Absolute load paths, in configured order."""
        base = root if root is not None else self.base_dir
        return [Path(os.path.abspath(base / p)) for p in self.load_paths]


# --------------------------------------------------------------------------- #
# Helpers
# --------------------------------------------------------------------------- #
def _merge_defaults(raw: Dict[str, Any]) -> Dict[str, Any]:
    """User values override the defaults key by key."""
    cfg = _DEFAULT_CFG.copy()
    cfg.update(raw)
    return cfg


def _validate(cfg: Dict[str, Any], path: Path) -> None:
    unknown = sorted(set(cfg) - set(_DEFAULT_CFG))
    if unknown:
        logger.warning("Ignoring unknown keys in %s: %s", path, ", ".join(unknown))

    for key in _LIST_KEYS:
        value = cfg[key]
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise ConfigError(f"{path}: '{key}' must be a list of strings")
    for key in _BOOL_KEYS:
        if not isinstance(cfg[key], bool):
            raise ConfigError(f"{path}: '{key}' must be true or false")
    if not isinstance(cfg["marker"], str) or not cfg["marker"] or ";" in cfg["marker"]:
        raise ConfigError(f"{path}: 'marker' must be a non-empty string without ';'")


# --------------------------------------------------------------------------- #
# Public API
# --------------------------------------------------------------------------- #
def load_config(path: Path) -> RebaserConfig:
    """
    Load rebaser.yaml.

    • Missing file: defaults, anchored to the file's directory.
    • Missing schema_version: the current version is assumed.
    • Incompatible schema or wrong value types raise ConfigError.
    """
    base_dir = path.parent.resolve()
    if not path.exists():
        return RebaserConfig(base_dir=base_dir)

    try:
        with path.open(encoding="utf-8") as f:
            raw = _yaml.load(f) or {}
    except YAMLError as e:
        raise ConfigError(f"{path}: invalid YAML: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigError(f"{path}: top level must be a mapping")

    if raw.get("schema_version", SCHEMA_VERSION) != SCHEMA_VERSION:
        raise ConfigError(
            f"Unsupported config schema {raw.get('schema_version')} "
            f"(tool expects {SCHEMA_VERSION})"
        )

    cfg = _merge_defaults(raw)
    _validate(cfg, path)

    return RebaserConfig(
        sources=tuple(cfg["sources"]),
        exclude=tuple(cfg["exclude"]),
        load_paths=tuple(cfg["load_paths"]),
        package_prefixes=tuple(cfg["package_prefixes"]),
        module_resolution=cfg["module_resolution"],
        source_maps=cfg["source_maps"],
        marker=cfg["marker"],
        base_dir=base_dir,
    )


def find_config(start: Path) -> Path:
    """rebaser.yaml in start or its nearest ancestor; start/rebaser.yaml if none exists."""
    current = start.resolve()
    for candidate in (current, *current.parents):
        cfg_path = candidate / DEFAULT_CFG_FILE
        if cfg_path.is_file():
            return cfg_path
    return current / DEFAULT_CFG_FILE


__all__ = [
    "SCHEMA_VERSION",
    "DEFAULT_CFG_FILE",
    "RebaserConfig",
    "load_config",
    "find_config",
]
