"""Pre-commit hook management for ``qualitygate install`` / ``uninstall``.

A pre-existing hook that qualitygate did not write is only replaced with
``--force``; it is then kept next to ours as ``pre-commit.qualitygate-backup``
and put back on uninstall.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Tuple

from qualitygate.git.adapter import GitError, get_hooks_dir

HOOK_NAME = "pre-commit"
BACKUP_SUFFIX = ".qualitygate-backup"

_HOOK_MARKER = "# qualitygate-hook"
_HOOK_SCRIPT = f"""\
#!/bin/sh
{_HOOK_MARKER}
# Installed by qualitygate. Remove with: qualitygate uninstall
# Bypass once with: git commit --no-verify

if ! command -v qualitygate >/dev/null 2>&1; then
    echo "qualitygate: command not found, skipping quality checks" >&2
    exit 0
fi

exec qualitygate check --staged
"""


def _hook_path(repo_root: Path) -> Optional[Path]:
    try:
        return get_hooks_dir(repo_root) / HOOK_NAME
    except GitError:
        return None


def _is_ours(hook_path: Path) -> bool:
    return _HOOK_MARKER in hook_path.read_text(encoding="utf-8", errors="replace")


def install_hook(repo_root: Path, *, force: bool = False) -> Tuple[bool, str]:
    """Write the qualitygate pre-commit hook. Returns (success, message)."""
    hook_path = _hook_path(repo_root)
    if hook_path is None:
        return False, f"Not a git repository: {repo_root}"

    backup: Optional[Path] = None
    if hook_path.exists():
        if _is_ours(hook_path):
            return True, "qualitygate hook is already installed."
        if not force:
            return (
                False,
                f"A pre-commit hook already exists at {hook_path}. "
                "Use --force to replace it (a backup is kept), "
                "or add 'qualitygate check --staged' to it yourself.",
            )
        backup = hook_path.with_name(HOOK_NAME + BACKUP_SUFFIX)
        hook_path.replace(backup)

    hook_path.parent.mkdir(parents=True, exist_ok=True)
    hook_path.write_text(_HOOK_SCRIPT, encoding="utf-8")
    try:
        hook_path.chmod(0o755)
    except OSError:
        pass  # no exec bit on Windows

    msg = f"Installed qualitygate pre-commit hook at {hook_path}"
    if backup is not None:
        msg += f" (previous hook saved as {backup.name})"
    return True, msg


def uninstall_hook(repo_root: Path) -> Tuple[bool, str]:
    """Remove the qualitygate hook, restoring any backed-up hook."""
    hook_path = _hook_path(repo_root)
    if hook_path is None:
        return False, f"Not a git repository: {repo_root}"

    if not hook_path.exists():
        return True, "No pre-commit hook installed; nothing to remove."
    if not _is_ours(hook_path):
        return False, "The pre-commit hook was not installed by qualitygate; leaving it alone."

    backup = hook_path.with_name(HOOK_NAME + BACKUP_SUFFIX)
    if backup.exists():
        backup.replace(hook_path)
        return True, f"Removed qualitygate hook and restored the previous hook at {hook_path}"
    hook_path.unlink()
    return True, f"Removed qualitygate pre-commit hook from {hook_path}"
