"""Reports class and legacy factory components that could be plain functions."""

from __future__ import annotations

import logging
from typing import List

from componentlint.analysis.models import ComponentDescriptor, Diagnostic
from componentlint.analysis.usage_classifier import is_rewrite_eligible, should_be_function
from componentlint.config import RULE_PREFER_STATELESS
from componentlint.errors import PatchConflictError, RewriteUnavailable
from componentlint.parsing.source_unit import SourceUnit
from componentlint.refactoring.class_to_function import ClassToFunctionTransformer
from componentlint.rules.base import LintRule

logger = logging.getLogger(__name__)


class PreferStatelessFunctionRule(LintRule):
    rule_id = RULE_PREFER_STATELESS
    messages = {"componentShouldBePure": "Component should be written as a pure function"}

    def check(self, unit: SourceUnit, components: List[ComponentDescriptor]) -> List[Diagnostic]:
        options = self.config.prefer_stateless
        settings = self.config.settings
        transformer = ClassToFunctionTransformer(unit, settings)

        diagnostics = []
        for component in components:
            if not should_be_function(component, options, settings):
                continue
            fix = None
            if is_rewrite_eligible(component, options, settings):
                try:
                    fix = transformer.transform(component)
                except (RewriteUnavailable, PatchConflictError) as e:
                    logger.debug("No automatic fix for %s: %s", component.identity, e)
            diagnostics.append(
                self.diagnostic(unit, "componentShouldBePure", component.node,
                                data={"component": component.identity}, fix=fix)
            )
        return diagnostics
