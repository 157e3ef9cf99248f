"""Rich terminal reporter — per-file table, findings, verdict."""

from __future__ import annotations

from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from qualitygate.findings.models import (
    AnalysisResult,
    BatchOutcome,
    BatchSummary,
    OverallStatus,
    Status,
)

_LEVEL_STYLE = {
    "high": "bold white on red",
    "medium": "bold black on yellow",
    "low": "bold black on bright_cyan",
}

_STATUS_STYLE = {
    Status.PASS: "green",
    Status.REVIEW: "yellow",
    Status.ERROR: "bold red",
    Status.SKIP: "dim",
}

_VERDICT = {
    OverallStatus.PRODUCTION_READY: (
        "[bold green]✅ PRODUCTION READY — commit allowed.[/bold green]"
    ),
    OverallStatus.APPROVED_WITH_SUGGESTIONS: (
        "[bold yellow]⚠️  APPROVED WITH SUGGESTIONS — commit allowed, "
        "average score below threshold.[/bold yellow]"
    ),
    OverallStatus.REQUIRES_FIXES: (
        "[bold red]❌ REQUIRES FIXES — high-severity issues found. "
        "Commit will be rejected.[/bold red]"
    ),
}


def _level_pill(level: str) -> Text:
    return Text(f" {level.upper()} ", style=_LEVEL_STYLE.get(level, ""))


def _score_text(result: AnalysisResult) -> Text:
    if result.status == Status.SKIP:
        return Text("-", style="dim")
    style = "green" if result.status == Status.PASS else "yellow"
    if result.status == Status.ERROR:
        style = "red"
    return Text(str(result.score), style=style)


def render(
    outcome: BatchOutcome,
    summary: BatchSummary,
    *,
    show_suggestions: bool = True,
    console: Optional[Console] = None,
) -> None:
    """Print batch results to the terminal using Rich."""
    console = console or Console(stderr=True)

    if not outcome.results and not outcome.timed_out:
        console.print("[dim]No files to check.[/dim]")
        return

    table = Table(title="Quality Gate", show_lines=False, title_style="bold", border_style="dim")
    table.add_column("File", style="magenta")
    table.add_column("Type", style="cyan")
    table.add_column("Score", justify="right")
    table.add_column("Status", justify="center")
    table.add_column("Issues", justify="right")
    table.add_column("Suggestions", justify="right")

    for path in sorted(outcome.results):
        result = outcome.results[path]
        table.add_row(
            Text(path),
            result.category.value,
            _score_text(result),
            Text(result.status.value.upper(), style=_STATUS_STYLE[result.status]),
            str(len(result.issues)),
            str(len(result.suggestions)),
        )
    console.print()
    console.print(table)

    for path in sorted(outcome.results):
        result = outcome.results[path]
        if not result.issues and not (show_suggestions and result.suggestions):
            continue
        console.print()
        console.print(f"[bold magenta]{escape(path)}[/bold magenta]")
        for issue in result.issues:
            console.print(Text.assemble("  ", _level_pill(issue.severity), " ", issue.message))
            if issue.suggestion:
                console.print(f"      [dim]→ {escape(issue.suggestion)}[/dim]")
        if show_suggestions:
            for sug in result.suggestions:
                console.print(Text.assemble("  ", ("💡 ", ""), (sug.impact, "dim"), " ", sug.message))

    if outcome.timed_out:
        console.print()
        console.print(
            f"[yellow]⏱  {len(outcome.timed_out)} file(s) did not finish before the deadline "
            "and were not checked:[/yellow]"
        )
        for path in outcome.timed_out:
            console.print(f"  [dim]{escape(path)}[/dim]")

    _print_summary(console, outcome, summary)
    console.print()
    console.print(_VERDICT[summary.overall_status])


def _print_summary(console: Console, outcome: BatchOutcome, summary: BatchSummary) -> None:
    console.print()
    console.print(f"[dim]Files checked:[/dim]  {summary.total_files}")
    console.print(f"[dim]Errors:[/dim]         {summary.total_errors}")
    console.print(f"[dim]Warnings:[/dim]       {summary.total_warnings}")
    console.print(f"[dim]Suggestions:[/dim]    {summary.total_suggestions}")
    console.print(f"[dim]Average score:[/dim]  {summary.average_score:.1f}")
    console.print(f"[dim]Skipped:[/dim]        {summary.skipped_files}")
    console.print(f"[dim]Cache hits:[/dim]     {outcome.cache_hits}")
    console.print(f"[dim]Duration:[/dim]       {outcome.duration_ms:.0f}ms")
