"""qualitygate CLI — Typer application with check, install, init, and cache commands."""

from __future__ import annotations

import dataclasses
import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console

from qualitygate import __version__

app = typer.Typer(
    name="qualitygate",
    help="Score markup, stylesheets and scripts before they are committed.",
    add_completion=False,
    no_args_is_help=True,
)
cache_app = typer.Typer(help="Inspect and maintain the result cache.", no_args_is_help=True)
app.add_typer(cache_app, name="cache")

console = Console(stderr=True)
logger = logging.getLogger("qualitygate.cli")


def _resolve_repo_root() -> Path:
    """Find the git repo root, exit 2 on failure."""
    from qualitygate.git.adapter import GitError, get_repo_root

    try:
        return get_repo_root()
    except GitError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc


def _project_root() -> Path:
    """Repo root when inside a git repository, else the working directory."""
    from qualitygate.git.adapter import GitError, get_repo_root

    try:
        return get_repo_root()
    except GitError:
        return Path.cwd()


def _load_config_or_defaults(root: Path, override: Optional[str]):
    """Load config; a broken config falls back to defaults with a warning."""
    from qualitygate.config.loader import ConfigError, load_config
    from qualitygate.config.schema import QualityGateConfig

    try:
        return load_config(root, override)
    except ConfigError as exc:
        logger.warning("Config error, using defaults: %s", exc)
        return QualityGateConfig()


def _build_cache(cfg, root: Path):
    from qualitygate.cache.store import ResultCache

    directory = Path(cfg.cache.directory)
    if not directory.is_absolute():
        directory = root / directory
    return ResultCache(directory, fingerprint=cfg.fingerprint())


# ── check ─────────────────────────────────────────────────────────────────────


@app.command()
def check(
    paths: Optional[List[Path]] = typer.Argument(None, help="Files or directories to check"),
    staged: bool = typer.Option(False, "--staged", help="Check staged files (default when no paths given)"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .qualitygate.toml"),
    format: str = typer.Option("terminal", "--format", "-f", help="Output format: terminal | json"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Write JSON report to file"),
    no_cache: bool = typer.Option(False, "--no-cache", help="Ignore and do not write the result cache"),
    jobs: Optional[int] = typer.Option(None, "--jobs", "-j", help="Number of parallel workers"),
    timeout: Optional[float] = typer.Option(None, "--timeout", help="Batch deadline in seconds"),
    hide_suggestions: bool = typer.Option(False, "--hide-suggestions", help="Only list issues"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    debug: bool = typer.Option(False, "--debug", help="Debug output with timing"),
) -> None:
    """Check files and exit 1 if any high-severity issue is found."""
    from qualitygate.findings.aggregator import summarize
    from qualitygate.git.adapter import GitError, get_staged_files
    from qualitygate.git.files import collect_files, is_supported
    from qualitygate.logging_config import setup_logging
    from qualitygate.output import json_report, terminal
    from qualitygate.rules.registry import build_registry
    from qualitygate.scanner.orchestrator import Orchestrator

    setup_logging(verbose=verbose, debug=debug)

    if format not in ("terminal", "json"):
        console.print(f"[bold red]Invalid format:[/bold red] {format}")
        raise typer.Exit(code=2)

    use_staged = staged or not paths
    root = _resolve_repo_root() if use_staged else _project_root()
    cfg = _load_config_or_defaults(root, config)

    # --- CLI overrides ---
    analysis = cfg.analysis
    if jobs is not None:
        analysis = dataclasses.replace(analysis, parallelism=max(1, jobs))
    if timeout is not None:
        analysis = dataclasses.replace(analysis, timeout_seconds=timeout)
    cache_cfg = dataclasses.replace(cfg.cache, enabled=False) if no_cache else cfg.cache
    cfg = dataclasses.replace(cfg, analysis=analysis, cache=cache_cfg)

    # --- Collect files ---
    if use_staged:
        try:
            files = [p for p in get_staged_files(root) if is_supported(p)]
        except GitError as exc:
            console.print(f"[bold red]Git error:[/bold red] {exc}")
            raise typer.Exit(code=2) from exc
    else:
        files = collect_files(paths or [])

    if not files:
        if format == "terminal":
            console.print("[dim]No supported files to check.[/dim]")
        raise typer.Exit(code=0)

    registry = build_registry(cfg, root)
    cache = _build_cache(cfg, root) if cfg.cache.enabled else None

    logger.info("Rules loaded: %d", len(registry.enabled_rules()))
    logger.info("Files to check: %d", len(files))
    logger.debug("Project root: %s", root)

    # --- Run ---
    outcome = Orchestrator(cfg, registry, cache).run(str(p) for p in files)
    summary = summarize(outcome.results, cfg.thresholds.min_score)

    logger.debug("Batch duration: %.0fms", outcome.duration_ms)

    # --- Output ---
    if format == "terminal":
        terminal.render(outcome, summary, show_suggestions=not hide_suggestions)
    else:
        print(json_report.render(outcome, summary))

    if output:
        Path(output).write_text(json_report.render(outcome, summary), encoding="utf-8")
        logger.info("Report written to %s", output)

    raise typer.Exit(code=summary.exit_code)


# ── install ───────────────────────────────────────────────────────────────────


@app.command()
def install(
    force: bool = typer.Option(False, "--force", help="Overwrite existing pre-commit hook"),
) -> None:
    """Install qualitygate as a git pre-commit hook."""
    from qualitygate.hooks.installer import install_hook

    repo_root = _resolve_repo_root()
    success, msg = install_hook(repo_root, force=force)
    if success:
        console.print(f"[green]✓[/green] {msg}")
    else:
        console.print(f"[red]✗[/red] {msg}")
        raise typer.Exit(code=1)


# ── uninstall ─────────────────────────────────────────────────────────────────


@app.command()
def uninstall() -> None:
    """Remove the qualitygate pre-commit hook."""
    from qualitygate.hooks.installer import uninstall_hook

    repo_root = _resolve_repo_root()
    success, msg = uninstall_hook(repo_root)
    if success:
        console.print(f"[green]✓[/green] {msg}")
    else:
        console.print(f"[red]✗[/red] {msg}")
        raise typer.Exit(code=1)


# ── init ──────────────────────────────────────────────────────────────────────


@app.command()
def init() -> None:
    """Generate a starter .qualitygate.toml in the repo root."""
    from qualitygate.config.defaults import DEFAULT_TOML
    from qualitygate.config.loader import CONFIG_FILENAME

    repo_root = _resolve_repo_root()
    config_path = repo_root / CONFIG_FILENAME

    if config_path.exists():
        console.print(f"[yellow]⚠[/yellow]  {CONFIG_FILENAME} already exists at {config_path}")
        raise typer.Exit(code=1)

    config_path.write_text(DEFAULT_TOML, encoding="utf-8")
    console.print(f"[green]✓[/green] Created {config_path}")


# ── cache ─────────────────────────────────────────────────────────────────────


@cache_app.command("clear")
def cache_clear(
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .qualitygate.toml"),
) -> None:
    """Delete every cached result."""
    root = _project_root()
    cache = _build_cache(_load_config_or_defaults(root, config), root)
    removed = cache.clear()
    console.print(f"[green]✓[/green] Removed {removed} cache entr{'y' if removed == 1 else 'ies'}")


@cache_app.command("prune")
def cache_prune(
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .qualitygate.toml"),
) -> None:
    """Delete stale, corrupt and leftover temporary cache entries."""
    root = _project_root()
    cache = _build_cache(_load_config_or_defaults(root, config), root)
    removed = cache.prune()
    console.print(f"[green]✓[/green] Pruned {removed} cache entr{'y' if removed == 1 else 'ies'}")


# ── version ───────────────────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        print(f"qualitygate {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-V", callback=_version_callback,
        is_eager=True, help="Show version and exit",
    ),
) -> None:
    """qualitygate — score markup, stylesheets and scripts before they are committed."""
