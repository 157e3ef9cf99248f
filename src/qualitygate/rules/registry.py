"""Rule registry — loads built-in and custom rules, applies config filters."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Dict, List, Optional, Set

import yaml

from qualitygate.config.schema import LEVEL_ORDER, QualityGateConfig
from qualitygate.findings.models import FileCategory
from qualitygate.rules.models import Rule

logger = logging.getLogger(__name__)

CUSTOM_RULES_DIR = ".qualitygate-rules"


class RuleRegistry:
    """Central store for all detection rules.

    Rules themselves are immutable and shared; enable/disable state lives in
    the registry so that filtering one registry never affects another.
    """

    def __init__(self) -> None:
        self._rules: Dict[str, Rule] = {}
        self._disabled: Set[str] = set()

    # ---- registration ----

    def register(self, rule: Rule) -> None:
        self._rules[rule.id] = rule

    def register_many(self, rules: list[Rule]) -> None:
        for r in rules:
            self.register(r)

    # ---- queries ----

    @property
    def all_rules(self) -> List[Rule]:
        return list(self._rules.values())

    def get(self, rule_id: str) -> Optional[Rule]:
        return self._rules.get(rule_id)

    def is_enabled(self, rule_id: str) -> bool:
        return rule_id in self._rules and rule_id not in self._disabled

    def enabled_rules(self) -> List[Rule]:
        return [r for r in self._rules.values() if self.is_enabled(r.id)]

    def rules_for(self, category: FileCategory) -> List[Rule]:
        """Enabled rules for one file category, in registration order."""
        return [r for r in self.enabled_rules() if r.category == category]

    # ---- config filtering ----

    def apply_config(self, config: QualityGateConfig) -> None:
        """Enable / disable rules based on config.rules."""
        enable_lists = {
            FileCategory.MARKUP: config.rules.markup,
            FileCategory.STYLESHEET: config.rules.stylesheet,
            FileCategory.SCRIPT: config.rules.script,
        }
        disabled: Set[str] = set()
        for rule in self._rules.values():
            # If an explicit enable-list exists for the category, only those run
            enable_list = enable_lists.get(rule.category, ())
            if enable_list and rule.id not in enable_list:
                disabled.add(rule.id)
            # Disable list always takes precedence
            if rule.id in config.rules.disable:
                disabled.add(rule.id)
        named = set(config.rules.markup) | set(config.rules.stylesheet) | set(config.rules.script)
        for rule_id in sorted(named | set(config.rules.disable)):
            if self.get(rule_id) is None:
                logger.warning("Config names unknown rule %s; ignoring it", rule_id)
        self._disabled = disabled

    # ---- custom rule loading ----

    def load_custom_rules(self, directory: Path) -> int:
        """Load YAML rule files from *directory*. Returns count loaded."""
        count = 0
        if not directory.is_dir():
            return 0
        for path in sorted(directory.iterdir()):
            if path.suffix in (".yaml", ".yml"):
                count += self._load_yaml_rules(path)
        return count

    def _load_yaml_rules(self, path: Path) -> int:
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as exc:
            logger.warning("Skipping unreadable rule file %s: %s", path, exc)
            return 0
        if data is None:
            return 0
        if not isinstance(data, list):
            data = [data]
        count = 0
        for entry in data:
            try:
                category = FileCategory(entry["category"])
                rule = Rule(
                    id=entry["id"],
                    name=entry.get("name", entry["id"]),
                    category=category,
                    kind=entry.get("kind", "custom"),
                    type=entry.get("type", "suggestion"),
                    level=entry.get("level", "medium"),
                    message=entry.get("message", entry["id"] + " matched {count} time(s)"),
                    suggestion=entry.get("suggestion", ""),
                    pattern=entry["pattern"],
                    min_count=int(entry.get("min_count", 1)),
                )
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning("Skipping invalid custom rule in %s: %s", path, exc)
                continue
            if rule.type not in ("issue", "suggestion") or rule.level not in LEVEL_ORDER:
                logger.warning("Skipping custom rule %s: bad type or level", rule.id)
                continue
            if category == FileCategory.UNSUPPORTED:
                logger.warning("Custom rule %s targets an unsupported category", rule.id)
                continue
            try:
                _ = rule.compiled_pattern
            except (re.error, TypeError) as exc:
                logger.warning("Skipping custom rule %s: bad pattern: %s", rule.id, exc)
                continue
            self.register(rule)
            count += 1
        return count


def build_registry(config: QualityGateConfig, repo_root: Path) -> RuleRegistry:
    """Create a fully populated, config-filtered rule registry."""
    from qualitygate.rules.builtin import ALL_BUILTIN_RULES

    registry = RuleRegistry()
    registry.register_many(ALL_BUILTIN_RULES)

    # Custom rules from .qualitygate-rules/
    loaded = registry.load_custom_rules(repo_root / CUSTOM_RULES_DIR)
    if loaded:
        logger.debug("Loaded %d custom rule(s)", loaded)

    # Apply enable/disable from config
    registry.apply_config(config)

    # Force-compile patterns now (not inside the worker threads)
    for rule in registry.enabled_rules():
        _ = rule.compiled_pattern

    return registry
