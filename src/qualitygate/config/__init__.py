"""Configuration loading, schema, and defaults."""

from qualitygate.config.loader import ConfigError, load_config
from qualitygate.config.schema import Level, QualityGateConfig, level_at_or_above

__all__ = [
    "ConfigError",
    "Level",
    "QualityGateConfig",
    "level_at_or_above",
    "load_config",
]
