"""Reports defaults declarations whose keys are not in ascending order."""

from __future__ import annotations

from typing import List

from componentlint.analysis.models import ComponentDescriptor, Diagnostic, MetadataKind
from componentlint.analysis.ordering_validator import find_misordered_keys
from componentlint.config import RULE_SORT_DEFAULT_PROPS
from componentlint.parsing.source_unit import SourceUnit
from componentlint.rules.base import LintRule


class SortDefaultPropsRule(LintRule):
    rule_id = RULE_SORT_DEFAULT_PROPS
    messages = {"propsNotSorted": "Default prop types declarations should be sorted alphabetically"}

    def check(self, unit: SourceUnit, components: List[ComponentDescriptor]) -> List[Diagnostic]:
        ignore_case = self.config.sort_default_props.ignore_case
        diagnostics = []
        for component in components:
            properties = component.metadata(MetadataKind.PROPERTIES)
            defaults = component.metadata(MetadataKind.DEFAULTS)
            for violation in find_misordered_keys(properties, defaults, ignore_case):
                diagnostics.append(
                    self.diagnostic(unit, "propsNotSorted", violation.entry.node,
                                    data={"key": violation.key, "component": component.identity})
                )
        return diagnostics
