"""Settings loaded from archy.yml in the vault root."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

import yaml

from .errors import ConfigError
from .layout.force import ForceConfig

logger = logging.getLogger(__name__)

ViewMode = Literal["folio", "mindmap", "network"]

VIEW_MODES: tuple[str, ...] = ("folio", "mindmap", "network")
SETTINGS_FILENAMES = ("archy.yml", ".archy.yml")

CHILD_DEPTH_RANGE = (1, 8)
PARENT_DEPTH_RANGE = (1, 6)


@dataclass
class ArchySettings:
    max_depth: int = 4  # levels of leadsto/informedby children
    parent_depth: int = 2  # levels of ancestors above the root
    view_mode: ViewMode = "folio"
    force: ForceConfig = field(default_factory=ForceConfig)


def _int_in_range(data: dict, key: str, default: int, bounds: tuple[int, int]) -> int:
    raw = data.get(key, default)
    try:
        value = int(raw)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{key} must be an integer, got {raw!r}") from e
    lo, hi = bounds
    if not lo <= value <= hi:
        raise ConfigError(f"{key} must be between {lo} and {hi}, got {value}")
    return value


def settings_from_mapping(data: dict) -> ArchySettings:
    """Validate a parsed settings mapping."""
    if not isinstance(data, dict):
        raise ConfigError("Settings file must contain a mapping")

    defaults = ArchySettings()
    view_mode = str(data.get("view_mode", defaults.view_mode)).strip().lower()
    # "vault" was the old name of the network view
    if view_mode == "vault":
        view_mode = "network"
    if view_mode not in VIEW_MODES:
        raise ConfigError(f"view_mode must be one of {', '.join(VIEW_MODES)}, got {view_mode!r}")

    force = data.get("force") or {}
    if not isinstance(force, dict):
        raise ConfigError("force must be a mapping of layout options")

    return ArchySettings(
        max_depth=_int_in_range(data, "max_depth", defaults.max_depth, CHILD_DEPTH_RANGE),
        parent_depth=_int_in_range(data, "parent_depth", defaults.parent_depth, PARENT_DEPTH_RANGE),
        view_mode=view_mode,
        force=ForceConfig.from_mapping(force),
    )


def find_settings_file(vault_path: Path) -> Path | None:
    for filename in SETTINGS_FILENAMES:
        candidate = vault_path / filename
        if candidate.is_file():
            return candidate
    return None


def load_settings(vault_path: Path) -> ArchySettings:
    """Load settings for a vault, falling back to defaults when no file exists."""
    path = find_settings_file(vault_path)
    if path is None:
        return ArchySettings()

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Could not read settings from {path}: {e}") from e

    settings = settings_from_mapping(data)
    logger.debug("Loaded settings from %s", path)
    return settings
