"""Configuration schema — frozen dataclasses for every config section."""

from __future__ import annotations

import hashlib
import json
from dataclasses import asdict, dataclass, field
from typing import Literal, Tuple

Level = Literal["low", "medium", "high"]

LEVEL_ORDER: dict[str, int] = {
    "low": 0,
    "medium": 1,
    "high": 2,
}


def level_at_or_above(level: str, threshold: str) -> bool:
    """Return True if *level* is at or above *threshold*."""
    return LEVEL_ORDER.get(level, 0) >= LEVEL_ORDER.get(threshold, 0)


@dataclass(frozen=True)
class AnalysisConfig:
    parallelism: int = 4
    timeout_seconds: float = 30.0  # one deadline for the whole batch
    max_file_size_kb: int = 512


@dataclass(frozen=True)
class CacheConfig:
    enabled: bool = True
    directory: str = ".qualitygate/cache"


@dataclass(frozen=True)
class RulesConfig:
    # Per-category enable lists: empty = all enabled
    markup: Tuple[str, ...] = ()
    stylesheet: Tuple[str, ...] = ()
    script: Tuple[str, ...] = ()
    disable: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ThresholdsConfig:
    max_selectors: int = 50
    max_complexity: int = 10
    min_score: int = 70


@dataclass(frozen=True)
class QualityGateConfig:
    version: str = "1.0"
    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    rules: RulesConfig = field(default_factory=RulesConfig)
    thresholds: ThresholdsConfig = field(default_factory=ThresholdsConfig)

    def fingerprint(self) -> str:
        """Short digest of the settings that influence analysis output.

        Parallelism, timeouts and cache placement do not change what a single
        file analysis produces, so they are left out.
        """
        relevant = {
            "max_file_size_kb": self.analysis.max_file_size_kb,
            "rules": asdict(self.rules),
            "thresholds": asdict(self.thresholds),
        }
        blob = json.dumps(relevant, sort_keys=True, default=list)
        return hashlib.sha256(blob.encode()).hexdigest()[:16]
