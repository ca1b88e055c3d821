"""Configuration loading for qmdtools (.qmdtools.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".qmdtools.yml"

DEFAULT_ALWAYS_REQUIRED = ("knitr",)
DEFAULT_WEAVE_ONLY = ("knitr",)
DEFAULT_EXCLUDED = (
    "base",
    "stats",
    "utils",
    "graphics",
    "grDevices",
    "methods",
    "datasets",
)


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class RPackagesConfig:
    """Settings for the R package detector."""

    output: str = "R.pkgs"
    document_glob: str = "*.qmd"
    always_required: List[str] = field(default_factory=lambda: list(DEFAULT_ALWAYS_REQUIRED))
    weave_only: List[str] = field(default_factory=lambda: list(DEFAULT_WEAVE_ONLY))
    exclude: List[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDED))


@dataclass
class FrontMatterConfig:
    """Settings for front-matter export."""

    output: str = "metadata_qmd.yaml"


@dataclass
class StatusConfig:
    """Settings for the scoped git status report."""

    pattern: str = "IPBES_*"


@dataclass
class QmdToolsConfig:
    """Represents the settings defined in .qmdtools.yml."""

    root: Path
    r_packages: RPackagesConfig = field(default_factory=RPackagesConfig)
    frontmatter: FrontMatterConfig = field(default_factory=FrontMatterConfig)
    status: StatusConfig = field(default_factory=StatusConfig)


def load_config(config_path: Path) -> QmdToolsConfig:
    """Load configuration from disk, falling back to defaults when absent."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return QmdToolsConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    r_packages = RPackagesConfig()
    r_data = _as_dict(data.get("r_packages"))
    if r_data:
        r_packages.output = _as_str(r_data.get("output")) or r_packages.output
        r_packages.document_glob = (
            _as_str(r_data.get("document_glob")) or r_packages.document_glob
        )
        if "always_required" in r_data:
            r_packages.always_required = _as_str_list(r_data.get("always_required"))
        if "weave_only" in r_data:
            r_packages.weave_only = _as_str_list(r_data.get("weave_only"))
        if "exclude" in r_data:
            r_packages.exclude = _as_str_list(r_data.get("exclude"))

    frontmatter = FrontMatterConfig()
    fm_data = _as_dict(data.get("frontmatter"))
    if fm_data:
        frontmatter.output = _as_str(fm_data.get("output")) or frontmatter.output

    status = StatusConfig()
    status_data = _as_dict(data.get("status"))
    if status_data:
        status.pattern = _as_str(status_data.get("pattern")) or status.pattern

    return QmdToolsConfig(
        root=root,
        r_packages=r_packages,
        frontmatter=frontmatter,
        status=status,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
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


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    # YAML booleans are never names
    if isinstance(value, bool):
        return None
    return str(value) if isinstance(value, (str, int, float)) else None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [
            str(item)
            for item in value
            if isinstance(item, (str, int, float)) and not isinstance(item, bool)
        ]
    return []
