"""Deduction-based quality score."""

from __future__ import annotations

from typing import Iterable

from qualitygate.findings.models import Issue, Status, Suggestion

ISSUE_WEIGHTS: dict[str, int] = {"high": 15, "medium": 8, "low": 3}
SUGGESTION_WEIGHTS: dict[str, int] = {"high": 5, "medium": 2, "low": 1}

MAX_SCORE = 100


def compute_score(issues: Iterable[Issue], suggestions: Iterable[Suggestion]) -> int:
    """Start at 100, deduct per issue and suggestion, clamp at 0."""
    deduction = sum(ISSUE_WEIGHTS.get(i.severity, 0) for i in issues)
    deduction += sum(SUGGESTION_WEIGHTS.get(s.impact, 0) for s in suggestions)
    return max(0, MAX_SCORE - deduction)


def status_for(score: int, min_score: int) -> Status:
    return Status.PASS if score >= min_score else Status.REVIEW
