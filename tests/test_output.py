"""Tests for the terminal and JSON reporters."""

import json

from rich.console import Console

from qualitygate.findings.aggregator import summarize
from qualitygate.findings.models import (
    AnalysisResult,
    BatchOutcome,
    FileCategory,
    Issue,
    Status,
    Suggestion,
)
from qualitygate.output import json_report, terminal


def _outcome() -> BatchOutcome:
    blocked = AnalysisResult(
        file_path="src/[bold]odd.html",
        category=FileCategory.MARKUP,
        metrics={"lines": 1, "size_kb": 0.02},
        issues=(Issue("unclosed-tag", "high", "Unclosed <p> tag: 1 opened, 0 closed",
                      "Close the tag.", "HTML_UNCLOSED_TAG"),),
        suggestions=(Suggestion("lazy-loading", "medium", "1 image(s) load eagerly", "", "HTML_IMG_LAZY"),),
        score=80,
        status=Status.PASS,
    )
    clean = AnalysisResult(
        file_path="src/site.css",
        category=FileCategory.STYLESHEET,
        score=100,
        status=Status.PASS,
        cached=True,
    )
    return BatchOutcome(
        results={blocked.file_path: blocked, clean.file_path: clean},
        timed_out=["src/slow.js"],
        cache_hits=1,
        duration_ms=12.5,
    )


def _recording_console() -> Console:
    return Console(record=True, width=160, color_system=None)


class TestTerminal:
    def test_renders_files_findings_and_verdict(self):
        outcome = _outcome()
        console = _recording_console()
        terminal.render(outcome, summarize(outcome.results, 70), console=console)
        text = console.export_text()

        assert "src/site.css" in text
        # Paths and messages are printed literally, not as markup
        assert "src/[bold]odd.html" in text
        assert "Unclosed <p> tag" in text
        assert "1 image(s) load eagerly" in text
        assert "src/slow.js" in text
        assert "REQUIRES FIXES" in text

    def test_hide_suggestions(self):
        outcome = _outcome()
        console = _recording_console()
        terminal.render(outcome, summarize(outcome.results, 70), show_suggestions=False, console=console)
        assert "load eagerly" not in console.export_text()

    def test_empty_outcome(self):
        console = _recording_console()
        terminal.render(BatchOutcome(), summarize({}, 70), console=console)
        assert "No files to check" in console.export_text()


class TestJsonReport:
    def test_structure(self):
        outcome = _outcome()
        data = json.loads(json_report.render(outcome, summarize(outcome.results, 70)))

        assert data["summary"]["overall_status"] == "requires_fixes"
        assert data["summary"]["exit_code"] == 1
        assert data["summary"]["total_errors"] == 1
        assert [f["file_path"] for f in data["files"]] == ["src/[bold]odd.html", "src/site.css"]
        assert [f["cached"] for f in data["files"]] == [False, True]
        assert data["files"][0]["issues"][0]["rule_id"] == "HTML_UNCLOSED_TAG"
        assert data["timed_out"] == ["src/slow.js"]
        assert data["cache_hits"] == 1
