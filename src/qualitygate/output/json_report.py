"""JSON reporter for CI pipelines and tooling."""

from __future__ import annotations

import json
from dataclasses import asdict
from typing import Any, Dict

from qualitygate import __version__
from qualitygate.findings.models import BatchOutcome, BatchSummary


def to_dict(outcome: BatchOutcome, summary: BatchSummary) -> Dict[str, Any]:
    """Convert a batch outcome and its summary to a JSON-serialisable dict."""
    summary_dict = asdict(summary)
    summary_dict["overall_status"] = summary.overall_status.value
    summary_dict["exit_code"] = summary.exit_code

    files = []
    for path in sorted(outcome.results):
        entry = outcome.results[path].to_dict()
        entry["cached"] = outcome.results[path].cached
        files.append(entry)

    return {
        "version": __version__,
        "summary": summary_dict,
        "files": files,
        "timed_out": list(outcome.timed_out),
        "cache_hits": outcome.cache_hits,
        "duration_ms": outcome.duration_ms,
    }


def render(outcome: BatchOutcome, summary: BatchSummary) -> str:
    """Return formatted JSON string."""
    return json.dumps(to_dict(outcome, summary), indent=2)
