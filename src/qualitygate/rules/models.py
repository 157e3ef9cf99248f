"""Rule data model — one row of the declarative rule table."""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import cached_property
from typing import Any, Callable, Dict, List, Literal, Optional

from qualitygate.config.schema import Level, ThresholdsConfig
from qualitygate.findings.models import FileCategory, Issue, Suggestion

#: A detector returns one dict of message parameters per hit; no hits = [].
Detector = Callable[[str, ThresholdsConfig], List[Dict[str, Any]]]


class RuleEvaluationError(Exception):
    """Raised when a single rule fails on some input."""

    def __init__(self, rule_id: str, cause: BaseException) -> None:
        super().__init__(f"Rule {rule_id} failed: {type(cause).__name__}: {cause}")
        self.rule_id = rule_id
        self.cause = cause


@dataclass(frozen=True)
class Rule:
    """A single check.

    Built-in rules carry a ``detector`` function. Custom rules loaded from
    YAML carry a raw ``pattern`` instead and fire once when it matches at
    least ``min_count`` times; the compiled regex is built lazily.
    """

    id: str
    name: str
    category: FileCategory
    kind: str  # issue kind tag, e.g. "unclosed-tag"
    type: Literal["issue", "suggestion"]
    level: Level  # severity for issues, impact for suggestions
    message: str  # str.format template filled from detector output
    suggestion: str = ""
    detector: Optional[Detector] = None
    pattern: Optional[str] = None
    min_count: int = 1

    @cached_property
    def compiled_pattern(self) -> Optional[re.Pattern[str]]:
        if self.pattern is None:
            return None
        return re.compile(self.pattern, re.IGNORECASE | re.MULTILINE)

    def _detect(self, content: str, thresholds: ThresholdsConfig) -> List[Dict[str, Any]]:
        if self.detector is not None:
            return self.detector(content, thresholds)
        cp = self.compiled_pattern
        if cp is None:
            return []
        count = sum(1 for _ in cp.finditer(content))
        return [{"count": count}] if count >= self.min_count else []

    def evaluate(self, content: str, thresholds: ThresholdsConfig) -> List[Issue | Suggestion]:
        """Run the rule and build its findings. Raises RuleEvaluationError."""
        try:
            hits = self._detect(content, thresholds)
            messages = [self.message.format(**params) for params in hits]
        except Exception as exc:
            raise RuleEvaluationError(self.id, exc) from exc

        if self.type == "issue":
            return [
                Issue(self.kind, self.level, msg, self.suggestion, self.id)
                for msg in messages
            ]
        return [
            Suggestion(self.kind, self.level, msg, self.suggestion, self.id)
            for msg in messages
        ]
