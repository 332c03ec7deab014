"""
Usage classification for component definitions.

Walks a definition and records every instance-bound reference
(`this.props`, `this.context`, `this.state`, `this.refs`, other `this`
uses) plus the constructs that make a class unfit for a function rewrite.
The same reference report feeds the class-to-function transformer.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

from tree_sitter import Node

from componentlint.analysis.metadata_extractor import MetadataExtractor
from componentlint.analysis.models import (
    CapabilityFlags,
    ComponentDescriptor,
    DeclarationKind,
    MetadataKind,
)
from componentlint.config import PreferStatelessConfig, SettingsConfig
from componentlint.parsing.ast_utils import (
    FUNCTION_TYPES,
    accessed_member_name,
    accessor_kind,
    decorators_of,
    is_async_or_generator,
    is_identifier_name,
    is_optional_access,
    is_static_member,
    iter_descendants,
    member_key,
    parent_skipping_parens,
    property_key_name,
    return_expressions,
    significant_children,
    unwrap_parens,
    within_this_scope,
)
from componentlint.parsing.source_unit import SourceUnit

logger = logging.getLogger(__name__)

CONTAINERS = ("props", "context")
LOCAL_STATE_MEMBERS = frozenset({"state", "setState", "replaceState"})
LEGACY_ALLOWED_OPTIONS = frozenset({"render", "displayName", "propTypes", "contextTypes", "getDefaultProps"})


@dataclass
class ContainerUsage:
    """
    How a body uses `this.props` or `this.context`.

    Either a finite, first-use ordered key set, or `whole` when the container
    itself escapes (alias, destructuring, computed key, spread, ...).
    """

    container: str
    keys: List[str] = field(default_factory=list)
    key_sites: List[Tuple[Node, str]] = field(default_factory=list)
    container_sites: List[Node] = field(default_factory=list)
    whole: bool = False

    @property
    def used(self) -> bool:
        return self.whole or bool(self.keys)

    def add_key(self, key: str, site: Node, access: Node) -> None:
        if key not in self.keys:
            self.keys.append(key)
        self.key_sites.append((site, key))
        self.container_sites.append(access)

    def mark_whole(self, access: Optional[Node] = None) -> None:
        self.whole = True
        if access is not None:
            self.container_sites.append(access)


@dataclass
class InstanceReferences:
    """Everything a body does with `this`."""

    props: ContainerUsage = field(default_factory=lambda: ContainerUsage("props"))
    context: ContainerUsage = field(default_factory=lambda: ContainerUsage("context"))
    # `this` nodes destructured as `{ props, context } = this`, with the names taken
    this_destructures: List[Tuple[Node, Tuple[str, ...]]] = field(default_factory=list)
    uses_local_state: bool = False
    uses_refs: bool = False
    uses_this_binding: bool = False

    def container(self, name: str) -> ContainerUsage:
        return self.props if name == "props" else self.context


def find_render_method(unit: SourceUnit, class_body: Node) -> Optional[Node]:
    """The plain instance `render()` method of a class body, if any."""
    for member in significant_children(class_body):
        if member.type != "method_definition" or is_static_member(member):
            continue
        if accessor_kind(member) is not None or is_async_or_generator(member):
            continue
        if property_key_name(unit, member_key(member)) == "render":
            return member
    return None


class UsageClassifier:
    """Computes CapabilityFlags for component descriptors."""

    def __init__(self, unit: SourceUnit, settings: Optional[SettingsConfig] = None):
        self.unit = unit
        self.settings = settings or SettingsConfig()
        self.extractor = MetadataExtractor(unit)

    def classify(self, descriptor: ComponentDescriptor) -> CapabilityFlags:
        if descriptor.kind == DeclarationKind.CLASS:
            return self._classify_class(descriptor)
        if descriptor.kind == DeclarationKind.LEGACY_FACTORY:
            return self._classify_legacy(descriptor)
        return CapabilityFlags(is_anonymous_binding=descriptor.identity == "anonymous")

    # ------------------------------------------------------------------
    # reference collection
    # ------------------------------------------------------------------

    def collect_instance_references(self, roots: Iterable[Optional[Node]]) -> InstanceReferences:
        """
        Record instance-bound references under `roots`.

        `this` inside nested non-arrow functions or classes is a different
        binding and is not looked at.
        """
        references = InstanceReferences()
        for root in roots:
            if root is None:
                continue
            nodes = [root] if root.type == "this" else []
            nodes.extend(iter_descendants(root, prune=within_this_scope))
            for node in nodes:
                if node.type == "this":
                    self._record_this(node, references)
        return references

    def has_ref_attribute(self, root: Optional[Node]) -> bool:
        """Any JSX `ref` attribute under `root`, nested functions included."""
        if root is None:
            return False
        return any(
            node.type == "jsx_attribute" and self._attribute_name(node) == "ref"
            for node in iter_descendants(root)
        )

    def _record_this(self, node: Node, references: InstanceReferences) -> None:
        parent = parent_skipping_parens(node)
        if parent is None:
            references.uses_this_binding = True
            return

        if parent.type in ("member_expression", "subscript_expression") and \
                unwrap_parens(parent.child_by_field_name("object")) == node:
            name = accessed_member_name(self.unit, parent)
            if name in CONTAINERS:
                self._record_container(references.container(name), parent)
            elif name in LOCAL_STATE_MEMBERS:
                references.uses_local_state = True
            elif name == "refs":
                references.uses_refs = True
            else:
                references.uses_this_binding = True
            return

        if parent.type == "variable_declarator" and \
                unwrap_parens(parent.child_by_field_name("value")) == node:
            pattern = parent.child_by_field_name("name")
            if pattern is not None and pattern.type == "object_pattern":
                self._record_this_destructure(node, pattern, references)
                return

        references.uses_this_binding = True

    def _record_this_destructure(self, node: Node, pattern: Node, references: InstanceReferences) -> None:
        taken: List[str] = []
        for element in significant_children(pattern):
            if element.type == "pair_pattern":
                key = property_key_name(self.unit, element.child_by_field_name("key"))
            elif element.type == "shorthand_property_identifier_pattern":
                key = self.unit.text_of(element)
            elif element.type == "object_assignment_pattern":
                left = element.child_by_field_name("left")
                key = self.unit.text_of(left) if left is not None else None
            else:
                key = None

            if key in CONTAINERS:
                references.container(key).mark_whole()
                if key not in taken:
                    taken.append(key)
            elif key in LOCAL_STATE_MEMBERS:
                references.uses_local_state = True
            elif key == "refs":
                references.uses_refs = True
            else:
                references.uses_this_binding = True
        if taken:
            references.this_destructures.append((node, tuple(taken)))

    def _record_container(self, usage: ContainerUsage, access: Node) -> None:
        outer = parent_skipping_parens(access)
        if outer is not None and outer.type in ("member_expression", "subscript_expression") \
                and unwrap_parens(outer.child_by_field_name("object")) == access \
                and not is_optional_access(outer):
            key = accessed_member_name(self.unit, outer)
            if key is not None and is_identifier_name(key) and not self._is_write_target(outer):
                usage.add_key(key, outer, access)
                return
        usage.mark_whole(access)

    @staticmethod
    def _is_write_target(node: Node) -> bool:
        parent = parent_skipping_parens(node)
        if parent is None:
            return False
        if parent.type in ("assignment_expression", "augmented_assignment_expression"):
            return unwrap_parens(parent.child_by_field_name("left")) == node
        if parent.type == "update_expression":
            return True
        if parent.type == "unary_expression":
            operator = parent.child_by_field_name("operator")
            return operator is not None and operator.type == "delete"
        return False

    def _attribute_name(self, attribute: Node) -> Optional[str]:
        names = significant_children(attribute)
        if names and names[0].type in ("property_identifier", "identifier"):
            return self.unit.text_of(names[0])
        return None

    # ------------------------------------------------------------------
    # class components
    # ------------------------------------------------------------------

    def _classify_class(self, descriptor: ComponentDescriptor) -> CapabilityFlags:
        body = descriptor.body
        render = find_render_method(self.unit, body) if body is not None else None

        uses_local_state = False
        has_lifecycle = False
        non_trivial_constructor = False
        uses_decorators = bool(self._class_decorators(descriptor.node))
        roots: List[Optional[Node]] = []

        for member in significant_children(body) if body is not None else []:
            if member.type == "class_static_block":
                has_lifecycle = True
                continue
            if member.type not in ("method_definition", "field_definition"):
                continue
            if decorators_of(member):
                uses_decorators = True
            if is_static_member(member):
                continue

            name = property_key_name(self.unit, member_key(member))
            if member.type == "field_definition":
                if name == "state":
                    uses_local_state = True
                else:
                    has_lifecycle = True
                roots.append(member.child_by_field_name("value"))
            elif member == render:
                roots.append(render.child_by_field_name("body"))
            elif name == "constructor" and accessor_kind(member) is None:
                if not self._is_trivial_constructor(member):
                    non_trivial_constructor = True
            else:
                has_lifecycle = True
                roots.append(member.child_by_field_name("body"))

        references = self.collect_instance_references(roots)
        base = descriptor.base or ""
        flags = CapabilityFlags(
            uses_local_state=uses_local_state or references.uses_local_state,
            uses_refs=references.uses_refs or self.has_ref_attribute(descriptor.body),
            has_non_trivial_constructor=non_trivial_constructor,
            has_disallowed_lifecycle=has_lifecycle,
            uses_decorators=uses_decorators,
            is_anonymous_binding=descriptor.name is None,
            extends_pure_base=base in self.settings.pure_bases,
            uses_this_binding=references.uses_this_binding,
            declares_child_context=self.extractor.locate(descriptor, MetadataKind.CHILD_CONTEXT) is not None,
            returns_null_or_false=render is not None and self._returns_null_or_false(render),
            extends_unrecognized_base=base not in self.settings.component_bases,
        )
        logger.debug("Classified class %s: %s", descriptor.identity, flags.blocking() or "no blocking flags")
        return flags

    def _class_decorators(self, class_node: Node) -> List[Node]:
        found = decorators_of(class_node)
        parent = class_node.parent
        if parent is not None and parent.type == "export_statement":
            found.extend(decorators_of(parent))
        return found

    def _is_trivial_constructor(self, constructor: Node) -> bool:
        """Only `super(...)` forwarding the constructor's own parameters."""
        body = constructor.child_by_field_name("body")
        if body is None:
            return False
        statements = significant_children(body)
        if len(statements) != 1 or statements[0].type != "expression_statement":
            return False
        expressions = significant_children(statements[0])
        call = unwrap_parens(expressions[0]) if expressions else None
        if call is None or call.type != "call_expression":
            return False
        callee = call.child_by_field_name("function")
        if callee is None or callee.type != "super":
            return False

        params = set()
        parameters = constructor.child_by_field_name("parameters")
        for param in significant_children(parameters) if parameters is not None else []:
            if param.type == "identifier":
                params.add(self.unit.text_of(param))
            elif param.type == "rest_pattern":
                params.add("..." + self.unit.text_of(param).lstrip(".").strip())
            else:
                return False

        arguments = call.child_by_field_name("arguments")
        for arg in significant_children(arguments) if arguments is not None else []:
            if arg.type == "identifier":
                text = self.unit.text_of(arg)
            elif arg.type == "spread_element":
                text = "..." + self.unit.text_of(arg).lstrip(".").strip()
            else:
                return False
            if text not in params:
                return False
        return True

    def _returns_null_or_false(self, function_node: Node) -> bool:
        return any(self._may_yield_null_or_false(expr) for expr in return_expressions(function_node))

    def _may_yield_null_or_false(self, expr: Optional[Node]) -> bool:
        expr = unwrap_parens(expr)
        if expr is None:
            return False
        if expr.type in ("null", "false"):
            return True
        if expr.type == "ternary_expression":
            return self._may_yield_null_or_false(expr.child_by_field_name("consequence")) or \
                self._may_yield_null_or_false(expr.child_by_field_name("alternative"))
        if expr.type == "binary_expression":
            operator = expr.child_by_field_name("operator")
            if operator is not None and operator.type in ("&&", "||", "??"):
                return self._may_yield_null_or_false(expr.child_by_field_name("left")) or \
                    self._may_yield_null_or_false(expr.child_by_field_name("right"))
        return False

    # ------------------------------------------------------------------
    # legacy factory components
    # ------------------------------------------------------------------

    def _classify_legacy(self, descriptor: ComponentDescriptor) -> CapabilityFlags:
        uses_local_state = False
        has_lifecycle = False
        render_function: Optional[Node] = None
        roots: List[Optional[Node]] = []

        for prop in significant_children(descriptor.body) if descriptor.body is not None else []:
            if prop.type == "spread_element":
                has_lifecycle = True
                continue
            if prop.type == "pair":
                name = property_key_name(self.unit, prop.child_by_field_name("key"))
                value = unwrap_parens(prop.child_by_field_name("value"))
                function = value if value is not None and value.type in FUNCTION_TYPES else None
            elif prop.type == "method_definition":
                name = property_key_name(self.unit, prop.child_by_field_name("name"))
                function = prop
            elif prop.type == "shorthand_property_identifier":
                name = self.unit.text_of(prop)
                function = None
            else:
                continue

            if name == "render":
                render_function = function
                if function is not None:
                    roots.append(function.child_by_field_name("body"))
            elif name == "getInitialState":
                uses_local_state = True
            elif name not in LEGACY_ALLOWED_OPTIONS and name != "childContextTypes":
                has_lifecycle = True
                if function is not None:
                    roots.append(function.child_by_field_name("body"))

        references = self.collect_instance_references(roots)
        return CapabilityFlags(
            uses_local_state=uses_local_state or references.uses_local_state,
            uses_refs=references.uses_refs or self.has_ref_attribute(descriptor.body),
            has_disallowed_lifecycle=has_lifecycle,
            is_anonymous_binding=descriptor.identity == "anonymous",
            uses_this_binding=references.uses_this_binding,
            declares_child_context=self.extractor.locate(descriptor, MetadataKind.CHILD_CONTEXT) is not None,
            returns_null_or_false=render_function is not None and self._returns_null_or_false(render_function),
        )


def should_be_function(
    descriptor: ComponentDescriptor,
    options: Optional[PreferStatelessConfig] = None,
    settings: Optional[SettingsConfig] = None,
) -> bool:
    """
    Does this component qualify to be written as a plain function?

    Function and arrow components already are; class and legacy factory
    components qualify when no capability flag blocks it.
    """
    options = options or PreferStatelessConfig()
    settings = settings or SettingsConfig()
    if descriptor.kind not in (DeclarationKind.CLASS, DeclarationKind.LEGACY_FACTORY):
        return False
    flags = descriptor.capabilities
    if flags.blocking():
        return False
    if flags.extends_pure_base and options.ignore_pure_components:
        return False
    if flags.returns_null_or_false and not settings.supports_null_return:
        return False
    return True


def is_rewrite_eligible(
    descriptor: ComponentDescriptor,
    options: Optional[PreferStatelessConfig] = None,
    settings: Optional[SettingsConfig] = None,
) -> bool:
    """Qualifies and can be rewritten automatically: a named class."""
    return (
        descriptor.kind == DeclarationKind.CLASS
        and not descriptor.capabilities.is_anonymous_binding
        and should_be_function(descriptor, options, settings)
    )
