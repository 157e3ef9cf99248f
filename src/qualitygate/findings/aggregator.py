"""Fold per-file results into one batch summary and verdict."""

from __future__ import annotations

from typing import Mapping

from qualitygate.config.schema import level_at_or_above
from qualitygate.findings.models import AnalysisResult, BatchSummary, OverallStatus, Status


def summarize(results: Mapping[str, AnalysisResult], min_score: int) -> BatchSummary:
    """Aggregate *results* (treated as unordered).

    Only High-severity issues count as errors; suggestions never do. Skipped
    files count towards ``total_files`` but not towards the average score.
    """
    errors = warnings = suggestions = 0
    scores: list[int] = []
    skipped = failed = 0

    for result in results.values():
        for issue in result.issues:
            if level_at_or_above(issue.severity, "high"):
                errors += 1
            else:
                warnings += 1
        suggestions += len(result.suggestions)

        if result.status == Status.SKIP:
            skipped += 1
            continue
        if result.status == Status.ERROR:
            failed += 1
        scores.append(result.score)

    mean = sum(scores) / len(scores) if scores else 0.0

    # The verdict uses the exact mean; rounding is for display only
    if errors:
        overall = OverallStatus.REQUIRES_FIXES
    elif mean >= min_score:
        overall = OverallStatus.PRODUCTION_READY
    else:
        overall = OverallStatus.APPROVED_WITH_SUGGESTIONS

    return BatchSummary(
        total_files=len(results),
        total_errors=errors,
        total_warnings=warnings,
        total_suggestions=suggestions,
        average_score=round(mean, 1),
        overall_status=overall,
        skipped_files=skipped,
        failed_files=failed,
    )
