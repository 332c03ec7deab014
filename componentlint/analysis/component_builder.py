"""
Component detection and normalization.

Turns class definitions, function definitions and legacy factory calls into
ComponentDescriptors carrying their metadata groups and capability flags.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import List, Optional, Tuple

from tree_sitter import Node

from componentlint.analysis.metadata_extractor import MetadataExtractor
from componentlint.analysis.models import ComponentDescriptor, DeclarationKind, MetadataKind
from componentlint.analysis.usage_classifier import UsageClassifier
from componentlint.config import SettingsConfig
from componentlint.parsing.ast_utils import (
    CLASS_TYPES,
    FUNCTION_TYPES,
    MARKUP_TYPES,
    binding_name_of,
    class_heritage,
    enclosing_statement,
    iter_descendants,
    parent_skipping_parens,
    return_expressions,
    significant_children,
    unwrap_parens,
)
from componentlint.parsing.source_unit import SourceUnit

logger = logging.getLogger(__name__)

# Parents that put a function in a definition position.
DEFINITION_PARENTS = frozenset({"variable_declarator", "assignment_expression", "export_statement"})


class ComponentModelBuilder:
    """Builds ComponentDescriptors for one source unit."""

    def __init__(self, unit: SourceUnit, settings: Optional[SettingsConfig] = None):
        self.unit = unit
        self.settings = settings or SettingsConfig()
        self.extractor = MetadataExtractor(unit)
        self.classifier = UsageClassifier(unit, self.settings)

    def detect(self) -> List[ComponentDescriptor]:
        """All components in the unit, in source order."""
        components: List[ComponentDescriptor] = []
        for node in iter_descendants(self.unit.root):
            if node.type in CLASS_TYPES or node.type in FUNCTION_TYPES or node.type == "call_expression":
                descriptor = self.build(node)
                if descriptor is not None:
                    components.append(descriptor)
        logger.debug("Detected %d component(s) in %s", len(components), self.unit.filename)
        return components

    def build(self, node: Node) -> Optional[ComponentDescriptor]:
        """Descriptor for `node`, or None when it is not a component definition."""
        if node.has_error:
            logger.debug("Skipping %s with syntax errors at byte %d", node.type, node.start_byte)
            return None

        if node.type in CLASS_TYPES:
            descriptor = self._build_class(node)
        elif node.type in FUNCTION_TYPES:
            descriptor = self._build_function(node)
        elif node.type == "call_expression":
            descriptor = self._build_legacy(node)
        else:
            descriptor = None
        if descriptor is None:
            return None

        metadata = self.extractor.extract_all(descriptor)
        descriptor = replace(
            descriptor,
            properties=metadata[MetadataKind.PROPERTIES],
            defaults=metadata[MetadataKind.DEFAULTS],
            context=metadata[MetadataKind.CONTEXT],
        )
        return replace(descriptor, capabilities=self.classifier.classify(descriptor))

    # ------------------------------------------------------------------
    # per kind
    # ------------------------------------------------------------------

    def _build_class(self, node: Node) -> Optional[ComponentDescriptor]:
        heritage = class_heritage(node)
        if heritage is None:
            return None
        wrappers, outer = self._wrapping(node)
        name_node = node.child_by_field_name("name")
        return ComponentDescriptor(
            kind=DeclarationKind.CLASS,
            node=node,
            body=node.child_by_field_name("body"),
            name=self.unit.text_of(name_node) if name_node is not None else None,
            binding_name=binding_name_of(self.unit, outer),
            base="".join(self.unit.text_of(heritage).split()),
            wrappers=wrappers,
            statement=enclosing_statement(outer),
            start_byte=node.start_byte,
            end_byte=node.end_byte,
        )

    def _build_function(self, node: Node) -> Optional[ComponentDescriptor]:
        wrappers, outer = self._wrapping(node)
        if node.type not in ("function_declaration", "generator_function_declaration"):
            parent = parent_skipping_parens(outer)
            if parent is None or parent.type not in DEFINITION_PARENTS:
                return None
            if parent.type == "assignment_expression" and \
                    unwrap_parens(parent.child_by_field_name("right")) != outer:
                return None

        name_node = node.child_by_field_name("name")
        name = self.unit.text_of(name_node) if name_node is not None else None
        binding_name = binding_name_of(self.unit, outer)
        capitalized = any(candidate[:1].isupper() for candidate in (name, binding_name) if candidate)
        if wrappers and not capitalized:
            return None

        returned = return_expressions(node)
        if not any(self._contains_markup(expr) for expr in returned):
            only_null = bool(returned) and all(
                (unwrap_parens(expr) is not None and unwrap_parens(expr).type == "null") for expr in returned
            )
            if not (only_null and capitalized):
                return None

        return ComponentDescriptor(
            kind=DeclarationKind.ARROW if node.type == "arrow_function" else DeclarationKind.FUNCTION,
            node=node,
            body=node.child_by_field_name("body"),
            name=name,
            binding_name=binding_name,
            wrappers=wrappers,
            statement=enclosing_statement(outer),
            start_byte=node.start_byte,
            end_byte=node.end_byte,
        )

    def _build_legacy(self, node: Node) -> Optional[ComponentDescriptor]:
        callee = node.child_by_field_name("function")
        if callee is None or "".join(self.unit.text_of(callee).split()) not in self.settings.legacy_factories:
            return None
        arguments = node.child_by_field_name("arguments")
        args = significant_children(arguments) if arguments is not None else []
        options = unwrap_parens(args[0]) if args else None
        if options is None or options.type != "object":
            return None
        wrappers, outer = self._wrapping(node)
        return ComponentDescriptor(
            kind=DeclarationKind.LEGACY_FACTORY,
            node=node,
            body=options,
            binding_name=binding_name_of(self.unit, outer),
            wrappers=wrappers,
            statement=enclosing_statement(outer),
            start_byte=node.start_byte,
            end_byte=node.end_byte,
        )

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------

    def _wrapping(self, node: Node) -> Tuple[Tuple[str, ...], Node]:
        """
        Callees of the calls wrapping `node` as an argument, innermost first,
        and the outermost such call (or `node` itself).
        """
        wrappers: List[str] = []
        current = node
        while True:
            parent = parent_skipping_parens(current)
            if parent is None or parent.type != "arguments":
                break
            call = parent.parent
            if call is None or call.type != "call_expression":
                break
            callee = call.child_by_field_name("function")
            wrappers.append(self.unit.text_of(callee) if callee is not None else "")
            current = call
        return tuple(wrappers), current

    def _contains_markup(self, expr: Optional[Node]) -> bool:
        expr = unwrap_parens(expr)
        if expr is None:
            return False
        if expr.type in MARKUP_TYPES:
            return True
        if expr.type == "call_expression":
            callee = expr.child_by_field_name("function")
            text = "".join(self.unit.text_of(callee).split()) if callee is not None else ""
            return text in (f"{self.settings.pragma}.createElement", "createElement")
        if expr.type == "ternary_expression":
            return self._contains_markup(expr.child_by_field_name("consequence")) or \
                self._contains_markup(expr.child_by_field_name("alternative"))
        if expr.type == "binary_expression":
            operator = expr.child_by_field_name("operator")
            if operator is not None and operator.type in ("&&", "||", "??"):
                return self._contains_markup(expr.child_by_field_name("left")) or \
                    self._contains_markup(expr.child_by_field_name("right"))
        return False


def detect_components(unit: SourceUnit, settings: Optional[SettingsConfig] = None) -> List[ComponentDescriptor]:
    """Convenience wrapper around ComponentModelBuilder.detect()."""
    return ComponentModelBuilder(unit, settings).detect()
