"""
Parameter planning and reference substitution for class-to-function rewrites.

`this.props.foo` becomes a destructured binding `foo` when every props use
is a plain key read; otherwise every `this.props` becomes a bare `props`
parameter. The same applies to `this.context`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Set, Tuple

from tree_sitter import Node

from componentlint.analysis.models import TextEdit
from componentlint.analysis.usage_classifier import (
    CONTAINERS,
    ContainerUsage,
    InstanceReferences,
    UsageClassifier,
)
from componentlint.parsing.ast_utils import collect_identifier_names, is_bindable_name
from componentlint.parsing.source_unit import SourceUnit

logger = logging.getLogger(__name__)


class NameAllocator:
    """Hands out local names that collide with nothing already in scope."""

    def __init__(self, taken: Set[str]):
        self.taken = set(taken)

    def allocate(self, preferred: str) -> str:
        if is_bindable_name(preferred) and preferred not in self.taken:
            self.taken.add(preferred)
            return preferred
        suffix = 1
        while f"{preferred}_{suffix}" in self.taken:
            suffix += 1
        name = f"{preferred}_{suffix}"
        self.taken.add(name)
        return name


@dataclass(frozen=True)
class ParameterPlan:
    """How one container (props or context) is received by the function."""

    container: str
    used: bool
    whole: bool
    name: Optional[str] = None
    bindings: Tuple[Tuple[str, str], ...] = ()

    def binding_for(self, key: str) -> str:
        for candidate, local in self.bindings:
            if candidate == key:
                return local
        raise KeyError(key)

    def pattern(self) -> str:
        if self.whole:
            return self.name or self.container
        if not self.bindings:
            return "{}"
        parts = [key if key == local else f"{key}: {local}" for key, local in self.bindings]
        return "{ " + ", ".join(parts) + " }"


class ReferenceRewriter:
    """Plans parameters and produces substitution edits for a render body."""

    def __init__(self, unit: SourceUnit, classifier: UsageClassifier):
        self.unit = unit
        self.classifier = classifier

    def plan(self, render: Node, component_name: str) -> Tuple[ParameterPlan, ParameterPlan, InstanceReferences]:
        body = render.child_by_field_name("body")
        references = self.classifier.collect_instance_references([body])
        taken = collect_identifier_names(self.unit, body) if body is not None else set()
        taken.add(component_name)
        allocator = NameAllocator(taken)
        props_plan = self._plan_container(references.props, allocator)
        context_plan = self._plan_container(references.context, allocator)
        logger.debug("Parameters for %s: props=%s context=%s", component_name,
                     props_plan.pattern() if props_plan.used else "-",
                     context_plan.pattern() if context_plan.used else "-")
        return props_plan, context_plan, references

    @staticmethod
    def _plan_container(usage: ContainerUsage, allocator: NameAllocator) -> ParameterPlan:
        if usage.whole:
            return ParameterPlan(usage.container, used=True, whole=True, name=allocator.allocate(usage.container))
        bindings = tuple((key, allocator.allocate(key)) for key in usage.keys)
        return ParameterPlan(usage.container, used=bool(bindings), whole=False, bindings=bindings)

    @staticmethod
    def parameter_list(props_plan: ParameterPlan, context_plan: ParameterPlan) -> str:
        if not context_plan.used:
            return props_plan.pattern() if props_plan.used else ""
        return f"{props_plan.pattern()}, {context_plan.pattern()}"

    def substitution_edits(self, references: InstanceReferences,
                           props_plan: ParameterPlan, context_plan: ParameterPlan) -> List[TextEdit]:
        edits: List[TextEdit] = []
        for plan in (props_plan, context_plan):
            usage = references.container(plan.container)
            if plan.whole:
                for access in usage.container_sites:
                    edits.append(TextEdit(access.start_byte, access.end_byte, plan.name))
            else:
                for site, key in usage.key_sites:
                    edits.append(TextEdit(site.start_byte, site.end_byte, plan.binding_for(key)))

        plans = {"props": props_plan, "context": context_plan}
        for this_node, taken in references.this_destructures:
            parts = []
            for container in CONTAINERS:
                if container not in taken:
                    continue
                name = plans[container].name
                parts.append(container if name == container else f"{container}: {name}")
            edits.append(TextEdit(this_node.start_byte, this_node.end_byte, "{ " + ", ".join(parts) + " }"))
        return edits
