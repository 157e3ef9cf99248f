"""Finding data models — issues, suggestions, per-file results, batch summary."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Tuple

from qualitygate.config.schema import Level


class FileCategory(str, Enum):
    MARKUP = "markup"
    STYLESHEET = "stylesheet"
    SCRIPT = "script"
    UNSUPPORTED = "unsupported"

    @classmethod
    def from_path(cls, path: str | Path) -> "FileCategory":
        return _EXTENSIONS.get(Path(path).suffix.lower(), cls.UNSUPPORTED)


_EXTENSIONS: Dict[str, FileCategory] = {
    ".html": FileCategory.MARKUP,
    ".htm": FileCategory.MARKUP,
    ".css": FileCategory.STYLESHEET,
    ".scss": FileCategory.STYLESHEET,
    ".less": FileCategory.STYLESHEET,
    ".js": FileCategory.SCRIPT,
    ".mjs": FileCategory.SCRIPT,
    ".cjs": FileCategory.SCRIPT,
    ".jsx": FileCategory.SCRIPT,
    ".ts": FileCategory.SCRIPT,
    ".tsx": FileCategory.SCRIPT,
}

SUPPORTED_EXTENSIONS: Tuple[str, ...] = tuple(sorted(_EXTENSIONS))


class Status(str, Enum):
    PASS = "pass"
    REVIEW = "review"
    ERROR = "error"
    SKIP = "skip"


class OverallStatus(str, Enum):
    PRODUCTION_READY = "production_ready"
    APPROVED_WITH_SUGGESTIONS = "approved_with_suggestions"
    REQUIRES_FIXES = "requires_fixes"


@dataclass(frozen=True)
class Issue:
    """A defect that should block or strongly discourage the commit."""

    kind: str
    severity: Level
    message: str
    suggestion: str = ""
    rule_id: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "severity": self.severity,
            "message": self.message,
            "suggestion": self.suggestion,
            "rule_id": self.rule_id,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Issue":
        return cls(
            kind=data["kind"],
            severity=data["severity"],
            message=data["message"],
            suggestion=data.get("suggestion", ""),
            rule_id=data.get("rule_id", ""),
        )


@dataclass(frozen=True)
class Suggestion:
    """A non-blocking improvement."""

    kind: str
    impact: Level
    message: str
    suggestion: str = ""
    rule_id: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "impact": self.impact,
            "message": self.message,
            "suggestion": self.suggestion,
            "rule_id": self.rule_id,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Suggestion":
        return cls(
            kind=data["kind"],
            impact=data["impact"],
            message=data["message"],
            suggestion=data.get("suggestion", ""),
            rule_id=data.get("rule_id", ""),
        )


@dataclass(frozen=True)
class AnalysisResult:
    """Complete, immutable result of analysing one file.

    ``cached`` records whether the result was served from the result cache;
    it is excluded from equality so a fresh and a cached analysis of the same
    file compare equal.
    """

    file_path: str
    category: FileCategory
    metrics: Mapping[str, float] = field(default_factory=dict)
    issues: Tuple[Issue, ...] = ()
    suggestions: Tuple[Suggestion, ...] = ()
    score: int = 0
    status: Status = Status.REVIEW
    cached: bool = field(default=False, compare=False)

    def __post_init__(self) -> None:
        # Read-only view over a private copy
        object.__setattr__(self, "metrics", MappingProxyType(dict(self.metrics)))

    @property
    def high_issues(self) -> List[Issue]:
        return [i for i in self.issues if i.severity == "high"]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "file_path": self.file_path,
            "category": self.category.value,
            "metrics": dict(self.metrics),
            "issues": [i.to_dict() for i in self.issues],
            "suggestions": [s.to_dict() for s in self.suggestions],
            "score": self.score,
            "status": self.status.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], *, cached: bool = False) -> "AnalysisResult":
        return cls(
            file_path=data["file_path"],
            category=FileCategory(data["category"]),
            metrics=data.get("metrics", {}),
            issues=tuple(Issue.from_dict(i) for i in data.get("issues", [])),
            suggestions=tuple(Suggestion.from_dict(s) for s in data.get("suggestions", [])),
            score=int(data["score"]),
            status=Status(data["status"]),
            cached=cached,
        )


@dataclass(frozen=True)
class BatchSummary:
    """Aggregate statistics over every result of one batch."""

    total_files: int = 0
    total_errors: int = 0
    total_warnings: int = 0
    total_suggestions: int = 0
    average_score: float = 0.0
    overall_status: OverallStatus = OverallStatus.PRODUCTION_READY
    skipped_files: int = 0
    failed_files: int = 0

    @property
    def exit_code(self) -> int:
        """Exit code for the calling hook: any High-severity issue fails."""
        return 0 if self.total_errors == 0 else 1


@dataclass
class BatchOutcome:
    """What one orchestrator run produced.

    Files that missed the deadline are absent from ``results`` and listed in
    ``timed_out`` instead.
    """

    results: Dict[str, AnalysisResult] = field(default_factory=dict)
    timed_out: List[str] = field(default_factory=list)
    cache_hits: int = 0
    duration_ms: float = 0.0
