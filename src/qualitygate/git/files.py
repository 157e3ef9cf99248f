"""Turn CLI arguments or the staged set into the list of files to analyse."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, List

from qualitygate.findings.models import FileCategory

SKIP_DIRS = frozenset({".git", "node_modules", ".qualitygate", "__pycache__", ".venv"})


def is_supported(path: str | Path) -> bool:
    return FileCategory.from_path(path) != FileCategory.UNSUPPORTED


def walk_directory(root: Path, skip_dirs: Iterable[str] = SKIP_DIRS) -> List[Path]:
    """Supported files under *root*, sorted, skipping VCS/vendor/cache dirs."""
    skip = set(skip_dirs)
    found: List[Path] = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if d not in skip)
        for name in sorted(filenames):
            if is_supported(name):
                found.append(Path(dirpath) / name)
    return found


def collect_files(targets: Iterable[Path], skip_dirs: Iterable[str] = SKIP_DIRS) -> List[Path]:
    """Expand *targets* (files or directories) into supported files.

    Explicitly named files are kept even when unsupported so the report can
    show them as skipped.
    """
    files: List[Path] = []
    seen: set[Path] = set()
    for target in targets:
        candidates = walk_directory(target, skip_dirs) if target.is_dir() else [target]
        for path in candidates:
            if path not in seen:
                seen.add(path)
                files.append(path)
    return files
