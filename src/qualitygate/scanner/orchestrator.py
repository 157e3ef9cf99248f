"""Batch orchestrator — cache lookups, bounded worker pool, one deadline.

Unsupported files are skipped without using a worker. Cache hits return at
once. Misses go to a fixed-size ``ThreadPoolExecutor``; the orchestrator joins
on all of them with a single batch deadline. Anything unfinished at the
deadline is cancelled through the batch's cancellation token and left out of
the result mapping. Compare ``len(outcome.results)`` with the input count, or
read ``outcome.timed_out``, to detect it.
"""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from qualitygate.cache.store import CacheKey, ResultCache
from qualitygate.config.schema import QualityGateConfig
from qualitygate.findings.models import AnalysisResult, BatchOutcome, FileCategory, Status
from qualitygate.rules.registry import RuleRegistry
from qualitygate.scanner.checker import (
    AnalysisCancelled,
    analyze_file,
    error_result,
    skipped_result,
)

logger = logging.getLogger(__name__)

AnalyzeFn = Callable[
    [str, QualityGateConfig, RuleRegistry, Optional[threading.Event]], AnalysisResult
]


class Orchestrator:
    """Runs one batch of file analyses."""

    def __init__(
        self,
        config: QualityGateConfig,
        registry: RuleRegistry,
        cache: Optional[ResultCache] = None,
        *,
        analyze: AnalyzeFn = analyze_file,
    ) -> None:
        self.config = config
        self.registry = registry
        self.cache = cache
        self._analyze = analyze

    def run(self, paths: Iterable[str]) -> BatchOutcome:
        """Analyse *paths* and return whatever finished before the deadline."""
        start = time.perf_counter()
        outcome = BatchOutcome()
        pending: List[Tuple[str, Optional[CacheKey]]] = []
        seen: set[str] = set()

        for raw in paths:
            path = str(raw)
            if path in seen:
                continue
            seen.add(path)

            if FileCategory.from_path(path) == FileCategory.UNSUPPORTED:
                outcome.results[path] = skipped_result(path, FileCategory.UNSUPPORTED)
                continue

            key = self._cache_key(path)
            if self.cache is not None and key is not None:
                hit = self.cache.lookup(key)
                if hit is not None:
                    logger.debug("Cache hit: %s", path)
                    outcome.results[path] = hit
                    outcome.cache_hits += 1
                    continue

            pending.append((path, key))

        if pending:
            self._dispatch(pending, outcome)

        outcome.duration_ms = round((time.perf_counter() - start) * 1000, 2)
        logger.debug(
            "Batch done: %d result(s), %d cache hit(s), %d timed out in %.0fms",
            len(outcome.results), outcome.cache_hits, len(outcome.timed_out),
            outcome.duration_ms,
        )
        return outcome

    # ---- internals ----

    def _cache_key(self, path: str) -> Optional[CacheKey]:
        if self.cache is None:
            return None
        try:
            return CacheKey.for_path(path)
        except OSError:
            # The checker reports the unreadable file itself
            return None

    def _work(
        self, path: str, key: Optional[CacheKey], cancel: threading.Event
    ) -> AnalysisResult:
        """Worker body: check one file and cache the result on success."""
        if cancel.is_set():
            raise AnalysisCancelled(path)
        result = self._analyze(path, self.config, self.registry, cancel)
        if cancel.is_set():
            raise AnalysisCancelled(path)
        # Error results are never cached; a read failure may be transient
        if self.cache is not None and key is not None and result.status != Status.ERROR:
            self.cache.store(key, result)
        return result

    def _dispatch(
        self, pending: List[Tuple[str, Optional[CacheKey]]], outcome: BatchOutcome
    ) -> None:
        timeout = self.config.analysis.timeout_seconds
        cancel = threading.Event()
        executor = ThreadPoolExecutor(
            max_workers=max(1, self.config.analysis.parallelism),
            thread_name_prefix="qualitygate",
        )
        futures: Dict[Future[AnalysisResult], str] = {}
        try:
            for path, key in pending:
                futures[executor.submit(self._work, path, key, cancel)] = path

            done, not_done = wait(futures, timeout=timeout if timeout > 0 else None)

            if not_done:
                for future in not_done:
                    future.cancel()
                outcome.timed_out = sorted(futures[f] for f in not_done)
                logger.warning(
                    "Deadline of %.1fs reached: %d file(s) dropped from the batch",
                    timeout, len(not_done),
                )

            for future in done:
                path = futures[future]
                try:
                    outcome.results[path] = future.result()
                except Exception as exc:
                    logger.error("Analysis of %s failed: %s", path, exc)
                    outcome.results[path] = error_result(
                        path,
                        FileCategory.from_path(path),
                        f"Analysis failed: {exc}",
                        kind="analysis-error",
                        suggestion="Re-run with --debug and report the failure.",
                    )
        finally:
            # Running workers see the token and stop at their next rule
            cancel.set()
            executor.shutdown(wait=False, cancel_futures=True)


def run_batch(
    paths: Iterable[str],
    config: QualityGateConfig,
    registry: RuleRegistry,
    cache: Optional[ResultCache] = None,
) -> BatchOutcome:
    """Convenience wrapper: one Orchestrator, one run."""
    return Orchestrator(config, registry, cache).run(paths)
