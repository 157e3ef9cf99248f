"""Per-file checker — applies the rule catalog to one file's content.

The checker never raises for a bad file: unreadable or empty content becomes
an Error result, and a rule that blows up becomes a ``rule-error`` issue while
the remaining rules still run. The only exception that escapes is
``AnalysisCancelled``, raised when the batch deadline has passed.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Dict, List, Optional

from qualitygate.config.schema import QualityGateConfig
from qualitygate.findings.models import (
    AnalysisResult,
    FileCategory,
    Issue,
    Status,
    Suggestion,
)
from qualitygate.rules.builtin import CATEGORY_METRICS
from qualitygate.rules.models import RuleEvaluationError
from qualitygate.rules.registry import RuleRegistry
from qualitygate.scanner.scorer import compute_score, status_for

logger = logging.getLogger(__name__)


class AnalysisCancelled(Exception):
    """Raised inside a worker once its batch has been cancelled."""


def error_result(
    file_path: str,
    category: FileCategory,
    message: str,
    *,
    kind: str = "read-error",
    suggestion: str = "Make sure the file exists, is UTF-8 text and is not empty.",
) -> AnalysisResult:
    """Zero-score Error result carrying a single High issue."""
    return AnalysisResult(
        file_path=file_path,
        category=category,
        metrics={},
        issues=(
            Issue(
                kind=kind,
                severity="high",
                message=message,
                suggestion=suggestion,
            ),
        ),
        suggestions=(),
        score=0,
        status=Status.ERROR,
    )


def skipped_result(file_path: str, category: FileCategory) -> AnalysisResult:
    return AnalysisResult(file_path=file_path, category=category, score=0, status=Status.SKIP)


def _base_metrics(content: str) -> Dict[str, float]:
    return {
        "lines": len(content.splitlines()),
        "size_kb": round(len(content.encode("utf-8")) / 1024, 2),
    }


def check_content(
    file_path: str,
    content: str,
    category: FileCategory,
    config: QualityGateConfig,
    registry: RuleRegistry,
    cancel: Optional[threading.Event] = None,
) -> AnalysisResult:
    """Run every enabled rule for *category* over *content* and score it."""
    if not content:
        return error_result(file_path, category, "Could not read file: file is empty")
    if category == FileCategory.UNSUPPORTED:
        return skipped_result(file_path, category)

    metrics = _base_metrics(content)
    metrics.update(CATEGORY_METRICS[category](content))

    issues: List[Issue] = []
    suggestions: List[Suggestion] = []

    for rule in registry.rules_for(category):
        if cancel is not None and cancel.is_set():
            raise AnalysisCancelled(file_path)
        try:
            findings = rule.evaluate(content, config.thresholds)
        except RuleEvaluationError as exc:
            logger.warning("%s: %s", file_path, exc)
            issues.append(
                Issue(
                    kind="rule-error",
                    severity="medium",
                    message=f"Rule {exc.rule_id} failed and was skipped: {exc.cause}",
                    suggestion="Report this file to the rule maintainers.",
                    rule_id=exc.rule_id,
                )
            )
            continue
        for finding in findings:
            if isinstance(finding, Issue):
                issues.append(finding)
            else:
                suggestions.append(finding)

    score = compute_score(issues, suggestions)
    return AnalysisResult(
        file_path=file_path,
        category=category,
        metrics=metrics,
        issues=tuple(issues),
        suggestions=tuple(suggestions),
        score=score,
        status=status_for(score, config.thresholds.min_score),
    )


def analyze_file(
    path: str | Path,
    config: QualityGateConfig,
    registry: RuleRegistry,
    cancel: Optional[threading.Event] = None,
) -> AnalysisResult:
    """Read *path* from disk and check it."""
    file_path = str(path)
    category = FileCategory.from_path(file_path)
    if category == FileCategory.UNSUPPORTED:
        return skipped_result(file_path, category)

    try:
        size = Path(file_path).stat().st_size
        if size > config.analysis.max_file_size_kb * 1024:
            logger.debug("Skipping %s: %d bytes exceeds size limit", file_path, size)
            return skipped_result(file_path, category)
        content = Path(file_path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.debug("Cannot read %s: %s", file_path, exc)
        return error_result(file_path, category, f"Could not read file: {exc}")

    return check_content(file_path, content, category, config, registry, cancel)
