"""Lint rules shipped with componentlint."""

from typing import Dict, List, Optional, Type

from componentlint.config import ComponentLintConfig
from componentlint.rules.base import LintRule
from componentlint.rules.prefer_stateless_function import PreferStatelessFunctionRule
from componentlint.rules.sort_default_props import SortDefaultPropsRule

RULES: Dict[str, Type[LintRule]] = {
    PreferStatelessFunctionRule.rule_id: PreferStatelessFunctionRule,
    SortDefaultPropsRule.rule_id: SortDefaultPropsRule,
}


def enabled_rules(config: Optional[ComponentLintConfig] = None) -> List[LintRule]:
    """Instances of every rule the configuration enables, in registry order."""
    config = config or ComponentLintConfig.default()
    return [rule_class(config) for rule_id, rule_class in RULES.items() if config.rule_enabled(rule_id)]


__all__ = ["LintRule", "PreferStatelessFunctionRule", "SortDefaultPropsRule", "RULES", "enabled_rules"]
