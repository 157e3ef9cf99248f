"""Load and merge configuration from .qualitygate.toml and env vars."""

from __future__ import annotations

import dataclasses
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from qualitygate.config.schema import (
    AnalysisConfig,
    CacheConfig,
    QualityGateConfig,
    RulesConfig,
    ThresholdsConfig,
)

CONFIG_FILENAME = ".qualitygate.toml"


class ConfigError(Exception):
    """Raised when config is malformed or unreadable."""


def find_config_file(repo_root: Path, override: Optional[str] = None) -> Optional[Path]:
    """Locate the config file. *override* takes precedence."""
    if override:
        p = Path(override)
        if not p.is_file():
            raise ConfigError(f"Config file not found: {override}")
        return p
    candidate = repo_root / CONFIG_FILENAME
    return candidate if candidate.is_file() else None


def _parse_toml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc


def _build_section(data: Dict[str, Any], cls: type, section: str):
    """Build a dataclass from a TOML section dict, ignoring unknown keys."""
    raw = data.get(section, {})
    if not isinstance(raw, dict):
        raise ConfigError(f"[{section}] must be a table")
    valid_fields = {f.name for f in dataclasses.fields(cls)}
    filtered = {}
    for key, value in raw.items():
        if key not in valid_fields:
            continue
        # Lists become tuples so the config stays hashable and immutable
        filtered[key] = tuple(value) if isinstance(value, list) else value
    try:
        return cls(**filtered)
    except TypeError as exc:
        raise ConfigError(f"Invalid [{section}] section: {exc}") from exc


def _apply_env_overrides(cfg: QualityGateConfig) -> QualityGateConfig:
    """Return a copy of *cfg* with QUALITYGATE_* environment overrides applied."""
    analysis = cfg.analysis
    cache = cfg.cache
    thresholds = cfg.thresholds

    if val := os.environ.get("QUALITYGATE_JOBS"):
        try:
            analysis = dataclasses.replace(analysis, parallelism=max(1, int(val)))
        except ValueError:
            pass
    if val := os.environ.get("QUALITYGATE_TIMEOUT"):
        try:
            analysis = dataclasses.replace(analysis, timeout_seconds=float(val))
        except ValueError:
            pass
    if os.environ.get("QUALITYGATE_NO_CACHE") == "1":
        cache = dataclasses.replace(cache, enabled=False)
    if val := os.environ.get("QUALITYGATE_MIN_SCORE"):
        try:
            thresholds = dataclasses.replace(thresholds, min_score=int(val))
        except ValueError:
            pass

    return dataclasses.replace(
        cfg, analysis=analysis, cache=cache, thresholds=thresholds
    )


def load_config(
    repo_root: Path,
    config_override: Optional[str] = None,
) -> QualityGateConfig:
    """Load, validate, and return a QualityGateConfig."""
    config_path = find_config_file(repo_root, config_override)

    if config_path is None:
        cfg = QualityGateConfig()
    else:
        raw = _parse_toml(config_path)
        cfg = QualityGateConfig(
            version=str(raw.get("version", "1.0")),
            analysis=_build_section(raw, AnalysisConfig, "analysis"),
            cache=_build_section(raw, CacheConfig, "cache"),
            rules=_build_section(raw, RulesConfig, "rules"),
            thresholds=_build_section(raw, ThresholdsConfig, "thresholds"),
        )

    return _apply_env_overrides(cfg)
