from pathlib import Path

import pytest

from archy.config import ArchySettings, find_settings_file, load_settings, settings_from_mapping
from archy.errors import ConfigError


def test_defaults_without_settings_file(vault_path: Path) -> None:
    settings = load_settings(vault_path)

    assert settings == ArchySettings()
    assert (settings.max_depth, settings.parent_depth, settings.view_mode) == (4, 2, "folio")
    assert settings.force.max_ticks == 500


def test_load_settings_from_yaml(vault_path: Path) -> None:
    (vault_path / "archy.yml").write_text(
        "max_depth: 6\nparent_depth: 3\nview_mode: Mindmap\nforce:\n  spring_k: 0.05\n  max_ticks: 120\n",
        encoding="utf-8",
    )
    settings = load_settings(vault_path)

    assert settings.max_depth == 6
    assert settings.parent_depth == 3
    assert settings.view_mode == "mindmap"
    assert settings.force.spring_k == 0.05
    assert settings.force.max_ticks == 120
    assert settings.force.repulsion == 5500.0


def test_hidden_settings_file_is_found(vault_path: Path) -> None:
    (vault_path / ".archy.yml").write_text("view_mode: network\n", encoding="utf-8")

    assert find_settings_file(vault_path) == vault_path / ".archy.yml"
    assert load_settings(vault_path).view_mode == "network"


def test_empty_settings_file_uses_defaults(vault_path: Path) -> None:
    (vault_path / "archy.yml").write_text("", encoding="utf-8")

    assert load_settings(vault_path) == ArchySettings()


def test_legacy_vault_view_mode_maps_to_network() -> None:
    assert settings_from_mapping({"view_mode": "vault"}).view_mode == "network"


@pytest.mark.parametrize(
    "data",
    [
        {"max_depth": 0},
        {"max_depth": 9},
        {"parent_depth": 7},
        {"max_depth": "deep"},
        {"view_mode": "timeline"},
        {"force": ["not", "a", "mapping"]},
        {"force": {"damping": 0}},
    ],
)
def test_invalid_settings_are_rejected(data: dict) -> None:
    with pytest.raises(ConfigError):
        settings_from_mapping(data)


def test_unparseable_yaml_raises_config_error(vault_path: Path) -> None:
    (vault_path / "archy.yml").write_text("max_depth: [1, 2\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="Could not read settings"):
        load_settings(vault_path)


def test_non_mapping_yaml_is_rejected(vault_path: Path) -> None:
    (vault_path / "archy.yml").write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="mapping"):
        load_settings(vault_path)
