"""Git subprocess wrapper: repository root, hooks directory, staged files."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import List, Optional


class GitError(Exception):
    """Raised when git is unavailable or returns an unexpected error."""


def _run_git(args: List[str], cwd: Path, timeout: int = 30) -> str:
    """Run ``git *args`` in *cwd* and return stdout. Raises GitError on failure."""
    command = ["git", *args]
    try:
        proc = subprocess.run(
            command,
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=timeout,
            encoding="utf-8",
            errors="replace",
        )
    except FileNotFoundError as exc:
        raise GitError("git is not installed or not on PATH") from exc
    except subprocess.TimeoutExpired as exc:
        raise GitError(f"{' '.join(command)} timed out after {timeout}s") from exc

    if proc.returncode != 0:
        detail = proc.stderr.strip() or f"exit status {proc.returncode}"
        raise GitError(f"{' '.join(command)} failed: {detail}")
    return proc.stdout


def get_repo_root(cwd: Optional[Path] = None) -> Path:
    """Top-level directory of the work tree containing *cwd*."""
    out = _run_git(["rev-parse", "--show-toplevel"], cwd=cwd or Path.cwd())
    return Path(out.strip())


def get_hooks_dir(repo_root: Path) -> Path:
    """Directory git runs hooks from.

    Honours ``core.hooksPath`` and linked worktrees, where ``.git`` is a file.
    """
    out = _run_git(["rev-parse", "--git-path", "hooks"], cwd=repo_root)
    hooks = Path(out.strip())
    return hooks if hooks.is_absolute() else repo_root / hooks


def get_staged_files(repo_root: Path) -> List[Path]:
    """Absolute paths of files staged as added, copied, modified or renamed.

    Deleted files are excluded; there is nothing left to check.
    """
    # -z: NUL-separated and unquoted, so odd file names survive
    out = _run_git(
        ["diff", "--cached", "--name-only", "--diff-filter=ACMR", "-z"],
        cwd=repo_root,
    )
    return [repo_root / name for name in out.split("\0") if name]
