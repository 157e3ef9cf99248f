"""Finding models and aggregation."""

from qualitygate.findings.aggregator import summarize
from qualitygate.findings.models import (
    AnalysisResult,
    BatchOutcome,
    BatchSummary,
    FileCategory,
    Issue,
    OverallStatus,
    Status,
    Suggestion,
)

__all__ = [
    "AnalysisResult",
    "BatchOutcome",
    "BatchSummary",
    "FileCategory",
    "Issue",
    "OverallStatus",
    "Status",
    "Suggestion",
    "summarize",
]
