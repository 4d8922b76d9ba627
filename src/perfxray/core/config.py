"""Configuration loading and normalization.

Settings live in a single YAML file (see ``configs/perfxray.yaml``).  This
module turns it into typed objects that the analysis, source and storage
layers can rely on.  Environment variables in YAML values are expanded so
deployment-specific paths stay out of the repo.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

from .errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_SKIP_DIRS = [
    "node_modules",
    "dist",
    "out",
    "build",
    ".git",
    ".vscode",
    "target",
    "coverage",
]


def _expand_env(text: str) -> str:
    """Expand ${VARS} inside YAML text."""
    return os.path.expandvars(text)


class FlameGraphConfig(BaseModel):
    # 0 disables the limit
    max_records: int = Field(default=100_000, ge=0)


class ComparisonConfig(BaseModel):
    threshold_percent: float = Field(default=5.0, ge=0, allow_inf_nan=False)


class LocatorConfig(BaseModel):
    extensions: list[str] = Field(default_factory=lambda: [".ts", ".tsx"])
    skip_dirs: list[str] = Field(default_factory=lambda: list(DEFAULT_SKIP_DIRS))


class CodecConfig(BaseModel):
    compression_level: int = Field(default=9, ge=0, le=9)


class AppConfig(BaseModel):
    flame_graph: FlameGraphConfig = FlameGraphConfig()
    comparison: ComparisonConfig = ComparisonConfig()
    locator: LocatorConfig = LocatorConfig()
    codec: CodecConfig = CodecConfig()
    log_level: str = "INFO"

    @classmethod
    def from_yaml(cls, path: str | Path) -> "AppConfig":
        raw = load_yaml(path)
        normalized = normalize_raw_config(raw)
        try:
            return cls(**normalized)
        except ValidationError as exc:
            raise ConfigError(f"Invalid config {path}: {exc}") from exc


def load_yaml(path: str | Path) -> dict[str, Any]:
    """Load YAML and expand environment variables."""
    p = Path(path)
    try:
        text = _expand_env(p.read_text(encoding="utf-8"))
        data = yaml.safe_load(text) or {}
    except OSError as exc:
        raise ConfigError(f"Cannot read config {p}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Cannot parse config {p}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Config {p} must be a mapping, got {type(data).__name__}")
    logger.debug("Loaded YAML: path=%s keys=%s", p, list(data.keys()))
    return data


def normalize_raw_config(raw: dict[str, Any]) -> dict[str, Any]:
    """Accept flat/legacy config shapes and map them to AppConfig fields."""
    normalized = dict(raw)

    comparison = dict(raw.get("comparison", {}) or {})
    # Flat key used by the editor integration settings
    if "regression_threshold" in raw:
        comparison.setdefault("threshold_percent", raw["regression_threshold"])
        normalized.pop("regression_threshold")
    if comparison:
        normalized["comparison"] = comparison

    flame_graph = dict(raw.get("flame_graph", {}) or {})
    if "max_records" in raw:
        flame_graph.setdefault("max_records", raw["max_records"])
        normalized.pop("max_records")
    if flame_graph:
        normalized["flame_graph"] = flame_graph

    logging_cfg = raw.get("logging", {}) or {}
    if "level" in logging_cfg:
        normalized["log_level"] = str(logging_cfg["level"]).upper()
        normalized.pop("logging")

    logger.debug("Normalized config keys=%s", list(normalized.keys()))
    return normalized


def load_config(path: Optional[str | Path] = None) -> AppConfig:
    """Load config from ``path``; defaults when no path is given or the file is absent."""
    if path is None:
        return AppConfig()
    p = Path(path)
    if not p.exists():
        logger.info("Config not found, using defaults: path=%s", p)
        return AppConfig()
    return AppConfig.from_yaml(p)
