"""
Base interface for lint rules.

A rule receives a parsed unit and the components detected in it and returns
diagnostics; it never mutates the unit. Fixes travel on the diagnostics as
RewritePatches.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from tree_sitter import Node

from componentlint.analysis.models import ComponentDescriptor, Diagnostic, RewritePatch, Severity
from componentlint.config import ComponentLintConfig
from componentlint.parsing.source_unit import SourceUnit


class LintRule(ABC):
    """A named check over detected components."""

    rule_id: str = ""
    messages: Dict[str, str] = {}
    severity: Severity = Severity.WARNING

    def __init__(self, config: Optional[ComponentLintConfig] = None):
        self.config = config or ComponentLintConfig.default()

    @abstractmethod
    def check(self, unit: SourceUnit, components: List[ComponentDescriptor]) -> List[Diagnostic]:
        """Diagnostics for one unit."""

    def diagnostic(
        self,
        unit: SourceUnit,
        message_id: str,
        node: Node,
        data: Optional[Dict[str, str]] = None,
        fix: Optional[RewritePatch] = None,
    ) -> Diagnostic:
        line, column = unit.location(node)
        return Diagnostic(
            rule_id=self.rule_id,
            message_id=message_id,
            message=self.messages[message_id],
            start_byte=node.start_byte,
            end_byte=node.end_byte,
            line=line,
            column=column,
            severity=self.severity,
            data=data or {},
            fix=fix,
            filename=unit.filename,
        )
