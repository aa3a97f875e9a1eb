"""Configuration loading for visinventory (.visinventory.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from .errors import ConfigError

CONFIG_FILENAME = ".visinventory.yml"

STANDALONE_FOLDERS: Tuple[str, ...] = ("visualization", "lens", "map", "search")

DEFAULT_OWNERSHIP_GROUPS: Tuple[Tuple[str, str], ...] = (
    ("security", "security"),
    ("observability", "observability"),
    ("obs", "observability"),
    ("stack-monitoring", "stack-monitoring"),
    ("fleet", "fleet"),
    ("ml", "machine-learning"),
)


@dataclass
class OutputConfig:
    """Where collected records are written."""

    path: str = "result.json"
    index: str = "legacy_vis"
    chunk_size: int = 250


@dataclass
class LegacyConfig:
    """Thresholds for the legacy visualization gate."""

    limit: Optional[int] = None


@dataclass
class OwnershipConfig:
    """Maps GitHub team slugs to owning groups by substring."""

    groups: List[Tuple[str, str]] = field(
        default_factory=lambda: list(DEFAULT_OWNERSHIP_GROUPS)
    )


@dataclass
class InventoryConfig:
    """Represents the settings defined in .visinventory.yml."""

    root: Path
    source: str = "integration"
    workers: int = 1
    provenance: bool = True
    folders: List[str] = field(default_factory=lambda: list(STANDALONE_FOLDERS))
    output: OutputConfig = field(default_factory=OutputConfig)
    legacy: LegacyConfig = field(default_factory=LegacyConfig)
    ownership: OwnershipConfig = field(default_factory=OwnershipConfig)


def load_config(config_path: Path) -> InventoryConfig:
    """Load configuration from disk."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return InventoryConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    config = InventoryConfig(root=root)

    source = _as_str(data.get("source"))
    if source:
        config.source = source

    workers = _as_int(data.get("workers"))
    if workers is not None:
        if workers < 1:
            raise ConfigError("workers must be a positive integer")
        config.workers = workers

    provenance = _as_bool(data.get("provenance"))
    if provenance is not None:
        config.provenance = provenance

    if "folders" in data:
        folders = _as_str_list(data.get("folders"))
        unknown = [name for name in folders if name not in STANDALONE_FOLDERS]
        if unknown:
            raise ConfigError(f"Unknown saved-object folders: {', '.join(unknown)}")
        config.folders = folders

    output_data = _as_dict(data.get("output"))
    if output_data:
        chunk_size = _as_int(output_data.get("chunk_size"))
        if chunk_size is not None and chunk_size < 1:
            raise ConfigError("output.chunk_size must be a positive integer")
        config.output = OutputConfig(
            path=_as_str(output_data.get("path")) or OutputConfig.path,
            index=_as_str(output_data.get("index")) or OutputConfig.index,
            chunk_size=chunk_size or OutputConfig.chunk_size,
        )

    legacy_data = _as_dict(data.get("legacy"))
    if legacy_data:
        config.legacy = LegacyConfig(limit=_as_int(legacy_data.get("limit")))

    ownership_data = _as_dict(data.get("ownership"))
    groups_data = _as_dict(ownership_data.get("groups")) if ownership_data else {}
    if groups_data:
        config.ownership = OwnershipConfig(
            groups=[
                (str(pattern), group)
                for pattern, value in groups_data.items()
                if (group := _as_str(value))
            ]
        )

    return config


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Cannot read {path.name}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return None


def _as_bool(value: Any) -> Optional[bool]:
    # YAML already maps yes/no/true/false onto booleans.
    return value if isinstance(value, bool) else None


def _as_str_list(value: Any) -> List[str]:
    if isinstance(value, str):
        return [value]
    if isinstance(value, list):
        return [item for item in value if isinstance(item, str)]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "DEFAULT_OWNERSHIP_GROUPS",
    "InventoryConfig",
    "LegacyConfig",
    "OutputConfig",
    "OwnershipConfig",
    "STANDALONE_FOLDERS",
    "load_config",
]
