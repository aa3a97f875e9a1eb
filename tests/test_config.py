"""Tests for visinventory.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from visinventory.config import (
    DEFAULT_OWNERSHIP_GROUPS,
    STANDALONE_FOLDERS,
    InventoryConfig,
    load_config,
)
from visinventory.errors import ConfigError


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, InventoryConfig)
    assert config.root == tmp_path.resolve()
    assert config.source == "integration"
    assert config.workers == 1
    assert config.provenance is True
    assert config.folders == list(STANDALONE_FOLDERS)
    assert config.output.path == "result.json"
    assert config.output.index == "legacy_vis"
    assert config.output.chunk_size == 250
    assert config.legacy.limit is None
    assert config.ownership.groups == list(DEFAULT_OWNERSHIP_GROUPS)


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / ".visinventory.yml"
    config_file.write_text(
        """
source: beat
workers: 4
provenance: false
folders: [visualization, lens]
output:
  path: out/result.json
  index: legacy_vis_v2
  chunk_size: 100
legacy:
  limit: 296
ownership:
  groups:
    presentation: visualizations
    security: security
""",
        encoding="utf-8",
    )

    config = load_config(config_file)

    assert config.source == "beat"
    assert config.workers == 4
    assert config.provenance is False
    assert config.folders == ["visualization", "lens"]
    assert config.output.path == "out/result.json"
    assert config.output.index == "legacy_vis_v2"
    assert config.output.chunk_size == 100
    assert config.legacy.limit == 296
    assert config.ownership.groups == [
        ("presentation", "visualizations"),
        ("security", "security"),
    ]


def test_load_config_resolves_sibling_of_other_file(tmp_path: Path) -> None:
    (tmp_path / ".visinventory.yml").write_text("workers: 2\n", encoding="utf-8")

    config = load_config(tmp_path / "something-else.txt")

    assert config.workers == 2


def test_load_config_rejects_non_mapping_root(tmp_path: Path) -> None:
    (tmp_path / ".visinventory.yml").write_text("- a\n- b\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_load_config_rejects_invalid_yaml(tmp_path: Path) -> None:
    (tmp_path / ".visinventory.yml").write_text("output: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_load_config_rejects_unknown_folders_and_bad_workers(tmp_path: Path) -> None:
    config_file = tmp_path / ".visinventory.yml"
    config_file.write_text("folders: [visualization, canvas]\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(config_file)

    config_file.write_text("workers: 0\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(config_file)


def test_empty_config_file_uses_defaults(tmp_path: Path) -> None:
    (tmp_path / ".visinventory.yml").write_text("\n", encoding="utf-8")

    assert load_config(tmp_path).workers == 1


def test_load_config_rejects_non_positive_chunk_size(tmp_path: Path) -> None:
    config_file = tmp_path / ".visinventory.yml"
    config_file.write_text("output:\n  chunk_size: -5\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="chunk_size"):
        load_config(config_file)


def test_load_config_rejects_non_utf8_file(tmp_path: Path) -> None:
    (tmp_path / ".visinventory.yml").write_bytes(b"source: \xff\n")

    with pytest.raises(ConfigError):
        load_config(tmp_path)
