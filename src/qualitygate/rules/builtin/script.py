"""Script (JavaScript/TypeScript) rules."""

from __future__ import annotations

import re
from collections import Counter
from typing import Any, Dict, List

from qualitygate.config.schema import ThresholdsConfig
from qualitygate.findings.models import FileCategory
from qualitygate.rules.models import Rule

MAX_THEN_CHAINS = 3

# Decision points; "?" excludes the "?." and "??" tokens
_COMPLEXITY_RE = re.compile(
    r"\b(?:if|else|for|while|switch|case|catch)\b|&&|\|\||(?<![?.])\?(?![?.])",
    re.IGNORECASE,
)
_DECLARATION_RE = re.compile(r"\b(?:var|let|const)\s+([A-Za-z_$][\w$]*)")
_ASYNC_RE = re.compile(r"\b(?:async|await)\b")
_COUNTED_LOOP_RE = re.compile(r"\bfor\s*\(\s*(?:var|let)?\s*[A-Za-z_$][\w$]*\s*=[^;]*;")
_LOOP_BODY_RE = re.compile(r"\b(?:for|while)\s*\([^)]*\)\s*\{(.*?)\}", re.DOTALL)
_CONCAT_RE = re.compile(r"\+=")
_FUNCTION_RE = re.compile(r"\bfunction\b|=>")
_IDENTIFIER_RE = re.compile(r"(?<![\w$])[A-Za-z_$][\w$]*")


def cyclomatic_complexity(content: str) -> int:
    return 1 + len(_COMPLEXITY_RE.findall(content))


def _paren_balance(content: str, _t: ThresholdsConfig) -> List[Dict[str, Any]]:
    opened = content.count("(")
    closed = content.count(")")
    if opened == closed:
        return []
    return [{"opened": opened, "closed": closed}]


def _complexity(content: str, t: ThresholdsConfig) -> List[Dict[str, Any]]:
    complexity = cyclomatic_complexity(content)
    if complexity <= t.max_complexity:
        return []
    return [{"complexity": complexity, "max": t.max_complexity}]


def _unused_variables(content: str, _t: ThresholdsConfig) -> List[Dict[str, Any]]:
    occurrences = Counter(_IDENTIFIER_RE.findall(content))
    return [
        {"name": name}
        for name in dict.fromkeys(_DECLARATION_RE.findall(content))
        if occurrences[name] == 1
    ]


def _promise_chains(content: str, _t: ThresholdsConfig) -> List[Dict[str, Any]]:
    count = content.count(".then(")
    if count <= MAX_THEN_CHAINS or _ASYNC_RE.search(content):
        return []
    return [{"count": count}]


def _counted_loops(content: str, _t: ThresholdsConfig) -> List[Dict[str, Any]]:
    count = len(_COUNTED_LOOP_RE.findall(content))
    return [{"count": count}] if count else []


def _concat_in_loops(content: str, _t: ThresholdsConfig) -> List[Dict[str, Any]]:
    count = sum(1 for m in _LOOP_BODY_RE.finditer(content) if _CONCAT_RE.search(m.group(1)))
    return [{"count": count}] if count else []


def script_metrics(content: str) -> Dict[str, float]:
    return {
        "functions": len(_FUNCTION_RE.findall(content)),
        "complexity": cyclomatic_complexity(content),
    }


JS_PAREN_BALANCE = Rule(
    id="JS_PAREN_BALANCE",
    name="Unbalanced Parentheses",
    category=FileCategory.SCRIPT,
    kind="paren-mismatch",
    type="issue",
    level="high",
    message="Unbalanced parentheses: {opened} opening '(' vs {closed} closing ')'",
    suggestion="Check for a missing or extra parenthesis.",
    detector=_paren_balance,
)

JS_COMPLEXITY = Rule(
    id="JS_COMPLEXITY",
    name="High Cyclomatic Complexity",
    category=FileCategory.SCRIPT,
    kind="complexity",
    type="suggestion",
    level="high",
    message="Cyclomatic complexity {complexity} exceeds {max}",
    suggestion="Split large functions and flatten nested conditionals.",
    detector=_complexity,
)

JS_UNUSED_VARIABLE = Rule(
    id="JS_UNUSED_VARIABLE",
    name="Unused Variable",
    category=FileCategory.SCRIPT,
    kind="unused-variable",
    type="suggestion",
    level="low",
    message="Variable '{name}' is declared but never used",
    suggestion="Remove the unused declaration.",
    detector=_unused_variables,
)

JS_PROMISE_CHAIN = Rule(
    id="JS_PROMISE_CHAIN",
    name="Promise Chain",
    category=FileCategory.SCRIPT,
    kind="promise-chain",
    type="suggestion",
    level="medium",
    message="{count} .then() calls and no async/await",
    suggestion="Rewrite long promise chains with async/await.",
    detector=_promise_chains,
)

JS_COUNTED_LOOP = Rule(
    id="JS_COUNTED_LOOP",
    name="Counted Loop",
    category=FileCategory.SCRIPT,
    kind="traditional-loop",
    type="suggestion",
    level="medium",
    message="{count} traditional for(;;) loop(s)",
    suggestion="Prefer for...of or array methods such as map/filter/forEach.",
    detector=_counted_loops,
)

JS_LOOP_CONCAT = Rule(
    id="JS_LOOP_CONCAT",
    name="String Concatenation In Loop",
    category=FileCategory.SCRIPT,
    kind="loop-concatenation",
    type="suggestion",
    level="high",
    message="{count} loop body(ies) accumulate with +=",
    suggestion="Collect parts in an array and join() once after the loop.",
    detector=_concat_in_loops,
)

ALL_SCRIPT_RULES = [
    JS_PAREN_BALANCE,
    JS_COMPLEXITY,
    JS_UNUSED_VARIABLE,
    JS_PROMISE_CHAIN,
    JS_COUNTED_LOOP,
    JS_LOOP_CONCAT,
]
