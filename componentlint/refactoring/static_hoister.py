"""
Static member hoisting.

Each static class member becomes a `Name.member = ...;` statement placed
after the converted function, in declaration order, with the member's
value text copied unchanged.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from tree_sitter import Node

from componentlint.errors import RewriteUnavailable
from componentlint.parsing.ast_utils import (
    accessor_kind,
    iter_descendants,
    member_key,
    is_static_member,
    significant_children,
    single_returned_expression,
    within_this_scope,
)
from componentlint.parsing.source_unit import SourceUnit

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HoistedStatic:
    """One static member rendered as an assignment statement."""

    key: str
    start_byte: int
    end_byte: int
    text: str


class StaticHoister:
    """Renders the static members of a class body as assignments to `target`."""

    def __init__(self, unit: SourceUnit):
        self.unit = unit

    def has_statics(self, class_body: Node) -> bool:
        return any(self._is_static(member) for member in significant_children(class_body))

    def collect(self, class_body: Node, target: str) -> List[HoistedStatic]:
        hoisted = []
        for member in significant_children(class_body):
            if member.type == "class_static_block":
                raise RewriteUnavailable(target, "static initialization blocks cannot be hoisted")
            if not self._is_static(member):
                continue
            hoisted.append(self._hoist(member, target))
        return hoisted

    @staticmethod
    def render(statics: List[HoistedStatic], indent: str) -> str:
        return "".join(f"\n{indent}{static.text}" for static in statics)

    @staticmethod
    def _is_static(member: Node) -> bool:
        return member.type in ("field_definition", "method_definition") and is_static_member(member)

    def _hoist(self, member: Node, target: str) -> HoistedStatic:
        key = member_key(member)
        assignee = self._assignee(key, target)
        key_text = self.unit.text_of(key)

        if member.type == "field_definition":
            value = member.child_by_field_name("value")
            if value is None:
                text = f"{assignee} = undefined;"
            else:
                self._reject_instance_references(value, target, key_text)
                text = assignee + self.unit.slice(key.end_byte, value.end_byte) + ";"
            return HoistedStatic(key_text, member.start_byte, member.end_byte, text)

        kind = accessor_kind(member)
        body = member.child_by_field_name("body")
        if kind == "set":
            raise RewriteUnavailable(target, f"static setter {key_text} has no assignment form")
        if kind == "get":
            returned = single_returned_expression(body)
            if returned is None:
                raise RewriteUnavailable(target, f"static getter {key_text} does more than return a value")
            self._reject_instance_references(returned, target, key_text)
            return HoistedStatic(key_text, member.start_byte, member.end_byte,
                                 f"{assignee} = {self.unit.text_of(returned)};")

        parameters = member.child_by_field_name("parameters")
        if any(node.type == "super" for node in iter_descendants(member)):
            raise RewriteUnavailable(target, f"static method {key_text} uses super")
        prefix = "async " if any(child.type == "async" for child in member.children) else ""
        star = "*" if any(child.type == "*" for child in member.children) else ""
        function_text = self.unit.slice(parameters.start_byte, body.end_byte)
        return HoistedStatic(key_text, member.start_byte, member.end_byte,
                             f"{assignee} = {prefix}function{star}{function_text};")

    def _assignee(self, key: Optional[Node], target: str) -> str:
        if key is None:
            raise RewriteUnavailable(target, "static member without a key")
        if key.type == "property_identifier":
            return f"{target}.{self.unit.text_of(key)}"
        if key.type in ("string", "number"):
            return f"{target}[{self.unit.text_of(key)}]"
        if key.type == "computed_property_name":
            return target + self.unit.text_of(key)
        raise RewriteUnavailable(target, f"static member {self.unit.text_of(key)} cannot be assigned from outside")

    def _reject_instance_references(self, node: Node, target: str, key_text: str) -> None:
        nodes = [node] + list(iter_descendants(node, prune=within_this_scope))
        if any(candidate.type in ("this", "super") for candidate in nodes):
            raise RewriteUnavailable(target, f"static {key_text} refers to the class through this/super")
