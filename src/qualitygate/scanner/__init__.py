"""Scanner — checker, scorer, orchestrator."""

from qualitygate.scanner.checker import (
    AnalysisCancelled,
    analyze_file,
    check_content,
    error_result,
    skipped_result,
)
from qualitygate.scanner.orchestrator import Orchestrator, run_batch
from qualitygate.scanner.scorer import compute_score, status_for

__all__ = [
    "AnalysisCancelled",
    "Orchestrator",
    "analyze_file",
    "check_content",
    "compute_score",
    "error_result",
    "run_batch",
    "skipped_result",
    "status_for",
]
