"""Stylesheet (CSS/SCSS/LESS) rules."""

from __future__ import annotations

import re
from collections import Counter
from typing import Any, Dict, List

from qualitygate.config.schema import ThresholdsConfig
from qualitygate.findings.models import FileCategory
from qualitygate.rules.models import Rule

MAX_PROPERTY_REPEATS = 5
MIN_COMPOUND_SEGMENTS = 4

_COMMENT_RE = re.compile(r"/\*.*?\*/", re.DOTALL)
# Class/id tokens that sit in a selector, i.e. before the next rule body
_SELECTOR_RE = re.compile(r"[.#][A-Za-z_-][\w-]*(?=[^{}]*\{)")
_BODY_RE = re.compile(r"\{([^{}]*)\}")
_PROPERTY_RE = re.compile(r"(?:^|;)\s*([A-Za-z-]+)\s*:")
_PRELUDE_RE = re.compile(r"([^{};]+)\{")


def _strip_comments(content: str) -> str:
    return _COMMENT_RE.sub("", content)


def distinct_selectors(content: str) -> List[str]:
    return list(dict.fromkeys(_SELECTOR_RE.findall(_strip_comments(content))))


def _property_counts(content: str) -> Counter[str]:
    counts: Counter[str] = Counter()
    for body in _BODY_RE.finditer(_strip_comments(content)):
        for m in _PROPERTY_RE.finditer(body.group(1)):
            counts[m.group(1).lower()] += 1
    return counts


def _brace_balance(content: str, _t: ThresholdsConfig) -> List[Dict[str, Any]]:
    opened = content.count("{")
    closed = content.count("}")
    if opened == closed:
        return []
    return [{"opened": opened, "closed": closed}]


def _too_many_selectors(content: str, t: ThresholdsConfig) -> List[Dict[str, Any]]:
    count = len(distinct_selectors(content))
    if count <= t.max_selectors:
        return []
    return [{"count": count, "max": t.max_selectors}]


def _repeated_properties(content: str, _t: ThresholdsConfig) -> List[Dict[str, Any]]:
    return [
        {"property": prop, "count": count}
        for prop, count in _property_counts(content).items()
        if count > MAX_PROPERTY_REPEATS
    ]


def _deep_selectors(content: str, _t: ThresholdsConfig) -> List[Dict[str, Any]]:
    count = 0
    for m in _PRELUDE_RE.finditer(_strip_comments(content)):
        prelude = m.group(1).strip()
        if prelude.startswith("@"):
            continue
        count += sum(
            1 for selector in prelude.split(",")
            if len(selector.split()) >= MIN_COMPOUND_SEGMENTS
        )
    return [{"count": count}] if count else []


def stylesheet_metrics(content: str) -> Dict[str, float]:
    return {
        "rules": content.count("{"),
        "selectors": len(distinct_selectors(content)),
        "properties": sum(_property_counts(content).values()),
    }


CSS_BRACE_BALANCE = Rule(
    id="CSS_BRACE_BALANCE",
    name="Unbalanced Braces",
    category=FileCategory.STYLESHEET,
    kind="brace-mismatch",
    type="issue",
    level="high",
    message="Unbalanced braces: {opened} opening '{{' vs {closed} closing '}}'",
    suggestion="Check for a missing or extra brace.",
    detector=_brace_balance,
)

CSS_SELECTOR_COUNT = Rule(
    id="CSS_SELECTOR_COUNT",
    name="Too Many Selectors",
    category=FileCategory.STYLESHEET,
    kind="selector-count",
    type="suggestion",
    level="medium",
    message="{count} distinct class/id selectors (max {max})",
    suggestion="Split the stylesheet or consolidate selectors.",
    detector=_too_many_selectors,
)

CSS_PROPERTY_REPEAT = Rule(
    id="CSS_PROPERTY_REPEAT",
    name="Repeated Property",
    category=FileCategory.STYLESHEET,
    kind="property-repetition",
    type="suggestion",
    level="low",
    message="Property '{property}' is declared {count} times",
    suggestion="Extract repeated declarations into a shared class or variable.",
    detector=_repeated_properties,
)

CSS_DEEP_SELECTOR = Rule(
    id="CSS_DEEP_SELECTOR",
    name="Overly Specific Selector",
    category=FileCategory.STYLESHEET,
    kind="complex-selector",
    type="suggestion",
    level="medium",
    message="{count} selector(s) with four or more segments",
    suggestion="Prefer flat, class-based selectors.",
    detector=_deep_selectors,
)

ALL_STYLESHEET_RULES = [
    CSS_BRACE_BALANCE,
    CSS_SELECTOR_COUNT,
    CSS_PROPERTY_REPEAT,
    CSS_DEEP_SELECTOR,
]
