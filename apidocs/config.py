"""Configuration loading for apidocs (.apidocs.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".apidocs.yml"

LINK_MATCHING_MODES = ("word", "substring")


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class DocsConfig:
    """Represents the settings defined in .apidocs.yml."""

    root: Path
    source_dir: Path
    source_root: Path
    output_dir: Path
    docs_path: str = "/docs/api"
    extension: str = "md"
    suffixes: List[str] = field(default_factory=lambda: [".ts"])
    exclude_paths: List[str] = field(default_factory=list)
    link_matching: str = "word"
    watch_interval: float = 1.0
    source_label: str = "TypeScript source"

    @classmethod
    def defaults(cls, root: Path) -> "DocsConfig":
        """Return a configuration rooted at ``root`` with every default applied."""
        root = root.resolve()
        return cls(
            root=root,
            source_dir=root / "src",
            source_root=root,
            output_dir=root / "docs" / "api",
        )


def load_config(config_path: Path) -> DocsConfig:
    """Load configuration from disk."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()
    config = DocsConfig.defaults(root)

    if not config_file.exists():
        return config

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    source_dir = _as_str(data.get("source_dir"))
    if source_dir:
        config.source_dir = root / source_dir
    source_root = _as_str(data.get("source_root"))
    if source_root:
        config.source_root = root / source_root
    output_dir = _as_str(data.get("output_dir"))
    if output_dir:
        config.output_dir = root / output_dir

    docs_path = _as_str(data.get("docs_path"))
    if docs_path is not None:
        config.docs_path = docs_path.rstrip("/")
    extension = _as_str(data.get("extension"))
    if extension:
        config.extension = extension.lstrip(".")

    suffixes = _as_str_list(data.get("suffixes"))
    if suffixes:
        config.suffixes = [s if s.startswith(".") else f".{s}" for s in suffixes]
    config.exclude_paths = _as_str_list(data.get("exclude_paths"))

    link_matching = _as_str(data.get("link_matching"))
    if link_matching is not None:
        link_matching = link_matching.strip().lower()
        if link_matching not in LINK_MATCHING_MODES:
            allowed = ", ".join(LINK_MATCHING_MODES)
            raise ConfigError(
                f"link_matching must be one of {allowed}; got {link_matching!r}"
            )
        config.link_matching = link_matching

    interval = _as_float(data.get("watch_interval"))
    if interval is not None:
        if interval <= 0:
            raise ConfigError("watch_interval must be a positive number of seconds")
        config.watch_interval = interval

    label = _as_str(data.get("source_label"))
    if label:
        config.source_label = label

    return config


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = ["CONFIG_FILENAME", "ConfigError", "DocsConfig", "LINK_MATCHING_MODES", "load_config"]
