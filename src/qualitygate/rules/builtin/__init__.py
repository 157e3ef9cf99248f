"""Built-in rules — aggregate all categories."""

from typing import Callable, Dict

from qualitygate.findings.models import FileCategory
from qualitygate.rules.builtin.markup import ALL_MARKUP_RULES, markup_metrics
from qualitygate.rules.builtin.script import ALL_SCRIPT_RULES, script_metrics
from qualitygate.rules.builtin.stylesheet import ALL_STYLESHEET_RULES, stylesheet_metrics
from qualitygate.rules.models import Rule

ALL_BUILTIN_RULES: list[Rule] = [
    *ALL_MARKUP_RULES,
    *ALL_STYLESHEET_RULES,
    *ALL_SCRIPT_RULES,
]

CATEGORY_METRICS: Dict[FileCategory, Callable[[str], Dict[str, float]]] = {
    FileCategory.MARKUP: markup_metrics,
    FileCategory.STYLESHEET: stylesheet_metrics,
    FileCategory.SCRIPT: script_metrics,
}

__all__ = ["ALL_BUILTIN_RULES", "CATEGORY_METRICS"]
