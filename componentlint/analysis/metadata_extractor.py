"""
Metadata extraction for component definitions.

Finds propTypes / defaultProps / contextTypes / childContextTypes
declarations wherever they live and parses them into MetadataGroups:

- inline: `static propTypes = {...}` or a legacy options property
- getter: `static get defaultProps() { return {...}; }` or `getDefaultProps`
- assignment: `Foo.defaultProps = {...}` after the definition
- reference: `Foo.defaultProps = defaults` with `const defaults = {...}`

A declaration that cannot be read statically is reported as absent.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from tree_sitter import Node

from componentlint.analysis.models import (
    ComponentDescriptor,
    DeclarationKind,
    DeclarationSource,
    MetadataDeclaration,
    MetadataEntry,
    MetadataGroup,
    MetadataItem,
    MetadataKind,
    SpreadMarker,
)
from componentlint.parsing.ast_utils import (
    FUNCTION_TYPES,
    accessor_kind,
    find_module_binding,
    is_static_member,
    iter_descendants,
    member_key,
    property_key_name,
    significant_children,
    single_returned_expression,
    unwrap_parens,
)
from componentlint.parsing.source_unit import SourceUnit

logger = logging.getLogger(__name__)

# Identifier hops followed when a declaration names another binding.
MAX_REFERENCE_DEPTH = 4


class MetadataExtractor:
    """Locates and parses metadata declarations within one source unit."""

    def __init__(self, unit: SourceUnit):
        self.unit = unit

    def extract(self, descriptor: ComponentDescriptor, kind: MetadataKind) -> Optional[MetadataGroup]:
        """Parsed group for `kind`, or None when absent or not statically readable."""
        declaration = self.locate(descriptor, kind)
        if declaration is None:
            return None
        return self.parse_declaration(declaration)

    def extract_all(self, descriptor: ComponentDescriptor) -> Dict[MetadataKind, Optional[MetadataGroup]]:
        return {
            kind: self.extract(descriptor, kind)
            for kind in (MetadataKind.PROPERTIES, MetadataKind.DEFAULTS, MetadataKind.CONTEXT)
        }

    def locate(self, descriptor: ComponentDescriptor, kind: MetadataKind) -> Optional[MetadataDeclaration]:
        """
        Find the effective declaration of `kind` for a component.

        A later `Name.kind = ...` assignment overrides an inline declaration,
        as it does at runtime.
        """
        assigned = self._find_assignment(descriptor, kind)
        if assigned is not None:
            return assigned
        if descriptor.kind == DeclarationKind.CLASS and descriptor.body is not None:
            return self._find_class_member(descriptor.body, kind)
        if descriptor.kind == DeclarationKind.LEGACY_FACTORY and descriptor.body is not None:
            return self._find_legacy_option(descriptor.body, kind)
        return None

    def parse_declaration(self, declaration: MetadataDeclaration) -> Optional[MetadataGroup]:
        if declaration.source == DeclarationSource.GETTER:
            body = declaration.value
            if body is not None and body.type != "statement_block":
                # Arrow with an expression body.
                returned = unwrap_parens(body)
            else:
                returned = single_returned_expression(body)
            if returned is None:
                logger.debug("Opaque %s getter at byte %d", declaration.kind.value,
                             declaration.anchor.start_byte)
                return None
            return self._group_from_value(declaration.kind, DeclarationSource.GETTER, returned)
        return self._group_from_value(declaration.kind, declaration.source, declaration.value)

    # ------------------------------------------------------------------
    # locating
    # ------------------------------------------------------------------

    def _find_assignment(self, descriptor: ComponentDescriptor, kind: MetadataKind) -> Optional[MetadataDeclaration]:
        names = descriptor.lookup_names
        if not names:
            return None
        found: Optional[MetadataDeclaration] = None
        for node in iter_descendants(self.unit.root):
            if node.type != "assignment_expression":
                continue
            if node.parent is None or node.parent.type != "expression_statement":
                continue
            left = node.child_by_field_name("left")
            right = node.child_by_field_name("right")
            if left is None or right is None or left.type != "member_expression":
                continue
            target = left.child_by_field_name("object")
            prop = left.child_by_field_name("property")
            if target is None or prop is None or target.type != "identifier":
                continue
            if self.unit.text_of(target) in names and self.unit.text_of(prop) == kind.member_name:
                found = MetadataDeclaration(kind, DeclarationSource.ASSIGNMENT, right, node)
        return found

    def _find_class_member(self, class_body: Node, kind: MetadataKind) -> Optional[MetadataDeclaration]:
        for member in significant_children(class_body):
            if member.type not in ("field_definition", "method_definition"):
                continue
            if not is_static_member(member):
                continue
            if property_key_name(self.unit, member_key(member)) != kind.member_name:
                continue
            if member.type == "field_definition":
                value = member.child_by_field_name("value")
                if value is None:
                    return None
                return MetadataDeclaration(kind, DeclarationSource.INLINE_LITERAL, value, member)
            if accessor_kind(member) == "get":
                return MetadataDeclaration(kind, DeclarationSource.GETTER,
                                           member.child_by_field_name("body"), member)
        return None

    def _find_legacy_option(self, options: Node, kind: MetadataKind) -> Optional[MetadataDeclaration]:
        for prop in significant_children(options):
            if prop.type == "pair":
                if property_key_name(self.unit, prop.child_by_field_name("key")) != kind.legacy_name:
                    continue
                value = unwrap_parens(prop.child_by_field_name("value"))
                if kind == MetadataKind.DEFAULTS:
                    if value is None or value.type not in FUNCTION_TYPES:
                        return None
                    return MetadataDeclaration(kind, DeclarationSource.GETTER,
                                               value.child_by_field_name("body"), prop)
                return MetadataDeclaration(kind, DeclarationSource.INLINE_LITERAL, value, prop)
            if prop.type == "method_definition" and kind == MetadataKind.DEFAULTS:
                if property_key_name(self.unit, prop.child_by_field_name("name")) == kind.legacy_name:
                    return MetadataDeclaration(kind, DeclarationSource.GETTER,
                                               prop.child_by_field_name("body"), prop)
        return None

    # ------------------------------------------------------------------
    # parsing
    # ------------------------------------------------------------------

    def _group_from_value(self, kind: MetadataKind, source: DeclarationSource,
                          value: Optional[Node]) -> Optional[MetadataGroup]:
        value = unwrap_parens(value)
        seen = set()
        depth = 0
        while value is not None and value.type == "identifier":
            name = self.unit.text_of(value)
            if name in seen or depth >= MAX_REFERENCE_DEPTH:
                return None
            seen.add(name)
            depth += 1
            value = unwrap_parens(find_module_binding(self.unit, name))
            source = DeclarationSource.REFERENCE
        if value is None or value.type != "object":
            return None
        return MetadataGroup(kind=kind, source=source, items=tuple(self._parse_object(value)))

    def _parse_object(self, obj: Node) -> List[MetadataItem]:
        items: List[MetadataItem] = []
        run_index: Dict[str, int] = {}
        for prop in significant_children(obj):
            if prop.type == "spread_element":
                items.append(SpreadMarker(self.unit.text_of(prop), prop.start_byte, prop.end_byte))
                run_index = {}
                continue

            if prop.type == "pair":
                key_node = prop.child_by_field_name("key")
                value = prop.child_by_field_name("value")
            elif prop.type == "method_definition":
                key_node = prop.child_by_field_name("name")
                value = prop
            elif prop.type == "shorthand_property_identifier":
                key_node = prop
                value = prop
            else:
                continue

            key = property_key_name(self.unit, key_node)
            if key is None:
                # computed key: its place in the order is unknowable
                items.append(SpreadMarker(self.unit.text_of(prop), prop.start_byte, prop.end_byte))
                run_index = {}
                continue

            line, column = self.unit.location(prop)
            entry = MetadataEntry(key, prop.start_byte, prop.end_byte, line, column, prop, value)
            if key in run_index:
                # same run: first position, last value
                first = items[run_index[key]]
                items[run_index[key]] = MetadataEntry(
                    key, first.start_byte, first.end_byte, first.line, first.column, first.node, value
                )
                continue
            run_index[key] = len(items)
            items.append(entry)
        return items
