"""Rule engine — models, registry, and built-in rules."""

from qualitygate.rules.models import Rule, RuleEvaluationError
from qualitygate.rules.registry import RuleRegistry, build_registry

__all__ = ["Rule", "RuleEvaluationError", "RuleRegistry", "build_registry"]
