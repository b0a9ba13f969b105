"""Configuration loading for headerfix (.headerfix.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .errors import ConfigError

CONFIG_FILENAME = ".headerfix.yml"

DEFAULT_HOLDER = "ACME"
DEFAULT_TEMPLATE = "apache2.0"
DEFAULT_CONCURRENCY = 6
DEFAULT_COMMENT_PREFIX = "//"
DEFAULT_SUFFIXES = (".go",)
DEFAULT_VENDOR_SEGMENTS = ("vendor/",)
DEFAULT_GENERATED_NAMES = ("doc.go",)


@dataclass
class HeaderFixConfig:
    """Represents the settings defined in .headerfix.yml."""

    root: Path
    holder: str = DEFAULT_HOLDER
    template: str = DEFAULT_TEMPLATE
    concurrency: int = DEFAULT_CONCURRENCY
    comment_prefix: str = DEFAULT_COMMENT_PREFIX
    suffixes: List[str] = field(default_factory=lambda: list(DEFAULT_SUFFIXES))
    vendor_segments: List[str] = field(default_factory=lambda: list(DEFAULT_VENDOR_SEGMENTS))
    generated_names: List[str] = field(default_factory=lambda: list(DEFAULT_GENERATED_NAMES))
    exclude_paths: List[str] = field(default_factory=list)


def load_config(config_path: Path) -> HeaderFixConfig:
    """Load configuration from disk, falling back to defaults when absent."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return HeaderFixConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    config = HeaderFixConfig(root=root)

    holder = _as_str(data.get("holder"))
    if holder:
        config.holder = holder

    template = _as_str(data.get("template"))
    if template:
        config.template = template

    if "concurrency" in data:
        concurrency = _as_int(data.get("concurrency"))
        if concurrency is None or concurrency < 1:
            raise ConfigError("concurrency must be a positive integer")
        config.concurrency = concurrency

    comment_prefix = _as_str(data.get("comment_prefix"))
    if comment_prefix:
        config.comment_prefix = comment_prefix

    for key in ("suffixes", "vendor_segments", "generated_names"):
        if key in data:
            setattr(config, key, _as_str_list(data.get(key)))

    config.exclude_paths = _as_str_list(data.get("exclude_paths"))
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


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
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


__all__ = ["CONFIG_FILENAME", "HeaderFixConfig", "load_config"]
