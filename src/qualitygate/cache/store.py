"""Disk-backed result cache keyed by a cheap file fingerprint.

One JSON file per (file name, mtime, size). Entries are written to a temp file
in the cache directory and renamed into place, so a reader never sees a
half-written entry. Anything that cannot be parsed is treated as a miss and
deleted.

Entries are never expired by age. `prune` drops the ones that can no longer
hit: the source file changed or disappeared, or the config fingerprint or tool
version moved on.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from qualitygate import __version__
from qualitygate.findings.models import AnalysisResult

logger = logging.getLogger(__name__)

_ENTRY_SUFFIX = ".json"
_TEMP_SUFFIX = ".tmp"


@dataclass(frozen=True)
class CacheKey:
    """File identity: name, modification time and byte length.

    Not a content hash. Two edits that keep the size and land on the same
    mtime tick are indistinguishable.
    """

    path: str
    name: str
    mtime_ns: int
    size: int

    @classmethod
    def for_path(cls, path: str | Path) -> "CacheKey":
        """Fingerprint *path*. Raises OSError if it cannot be stat'ed."""
        p = Path(path)
        st = p.stat()
        return cls(path=str(path), name=p.name, mtime_ns=st.st_mtime_ns, size=st.st_size)

    @property
    def filename(self) -> str:
        return f"{self.name}-{self.mtime_ns}-{self.size}{_ENTRY_SUFFIX}"


class ResultCache:
    """Persistent store of AnalysisResults.

    ``fingerprint`` identifies the config the results were computed under; an
    entry written under a different fingerprint or tool version is a miss.
    """

    def __init__(
        self,
        directory: str | Path,
        *,
        fingerprint: str = "",
    ) -> None:
        self.directory = Path(directory)
        self.fingerprint = fingerprint

    def _entry_path(self, key: CacheKey) -> Path:
        return self.directory / key.filename

    def _discard(self, entry_path: Path) -> None:
        try:
            entry_path.unlink(missing_ok=True)
        except OSError as exc:
            logger.debug("Could not remove cache entry %s: %s", entry_path, exc)

    # ---- contract ----

    def lookup(self, key: CacheKey) -> Optional[AnalysisResult]:
        """Return the cached result for *key*, or None on a miss."""
        entry_path = self._entry_path(key)
        try:
            if not entry_path.is_file():
                return None
            raw = entry_path.read_text(encoding="utf-8")
        except OSError as exc:
            logger.debug("Cache read failed for %s: %s", entry_path, exc)
            return None

        try:
            entry = json.loads(raw)
            if entry.get("path") != key.path:
                return None
            if entry.get("fingerprint") != self.fingerprint or entry.get("version") != __version__:
                return None
            return AnalysisResult.from_dict(entry["result"], cached=True)
        except (ValueError, KeyError, TypeError, AttributeError) as exc:
            logger.debug("Discarding corrupt cache entry %s: %s", entry_path, exc)
            self._discard(entry_path)
            return None

    def store(self, key: CacheKey, result: AnalysisResult) -> bool:
        """Persist *result* under *key*. Best-effort: returns False on failure."""
        entry: Dict[str, Any] = {
            "path": key.path,
            "fingerprint": self.fingerprint,
            "version": __version__,
            "result": result.to_dict(),
        }
        tmp_name: Optional[str] = None
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.directory,
                prefix=f".{key.name}-",
                suffix=_TEMP_SUFFIX,
                delete=False,
            ) as tmp:
                tmp_name = tmp.name
                json.dump(entry, tmp)
            os.replace(tmp_name, self._entry_path(key))
            return True
        except (OSError, TypeError, ValueError) as exc:
            logger.warning("Could not write cache entry for %s: %s", key.path, exc)
            if tmp_name is not None:
                self._discard(Path(tmp_name))
            return False

    # ---- maintenance ----

    def clear(self) -> int:
        """Delete every entry. Returns the number of files removed."""
        if not self.directory.is_dir():
            return 0
        removed = 0
        for path in self.directory.iterdir():
            if path.is_file() and path.suffix in (_ENTRY_SUFFIX, _TEMP_SUFFIX):
                self._discard(path)
                removed += 1
        return removed

    def prune(self) -> int:
        """Delete entries that can no longer hit, plus corrupt and temp files."""
        if not self.directory.is_dir():
            return 0
        removed = 0
        for path in self.directory.iterdir():
            if not path.is_file() or path.suffix not in (_ENTRY_SUFFIX, _TEMP_SUFFIX):
                continue
            if path.suffix == _ENTRY_SUFFIX and self._is_live(path):
                continue
            self._discard(path)
            removed += 1
        return removed

    def _is_live(self, entry_path: Path) -> bool:
        """True if *entry_path* parses and still matches its source file and config."""
        try:
            entry = json.loads(entry_path.read_text(encoding="utf-8"))
            AnalysisResult.from_dict(entry["result"])
            if entry.get("fingerprint") != self.fingerprint or entry.get("version") != __version__:
                return False
            return CacheKey.for_path(entry["path"]).filename == entry_path.name
        except (OSError, ValueError, KeyError, TypeError, AttributeError):
            # Unreadable entry, or its source file is gone
            return False
