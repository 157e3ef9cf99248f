"""Git interface layer — adapter and file discovery."""

from qualitygate.git.adapter import GitError, get_hooks_dir, get_repo_root, get_staged_files
from qualitygate.git.files import collect_files, is_supported, walk_directory

__all__ = [
    "GitError",
    "collect_files",
    "get_hooks_dir",
    "get_repo_root",
    "get_staged_files",
    "is_supported",
    "walk_directory",
]
