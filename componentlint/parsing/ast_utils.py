"""Node helpers for the tree-sitter JavaScript grammar.

Small, pure functions used by the extractor, the builder, the classifier and
the transformer. None of them mutate the tree.
"""

from __future__ import annotations

import re
from typing import Callable, Iterator, List, Optional

from tree_sitter import Node

from componentlint.parsing.source_unit import SourceUnit

# "function" is the pre-0.21 grammar name of function_expression.
FUNCTION_TYPES = frozenset(
    {
        "function_declaration",
        "function_expression",
        "function",
        "generator_function_declaration",
        "generator_function",
        "arrow_function",
    }
)

CLASS_TYPES = frozenset({"class_declaration", "class"})

# Constructs that rebind `this` (arrow functions do not).
THIS_SCOPE_TYPES = frozenset(
    {
        "function_declaration",
        "function_expression",
        "function",
        "generator_function_declaration",
        "generator_function",
        "method_definition",
        "class_declaration",
        "class",
    }
)

MARKUP_TYPES = frozenset({"jsx_element", "jsx_self_closing_element", "jsx_fragment"})

STATEMENT_CONTAINERS = frozenset({"program", "statement_block", "switch_case", "switch_default"})

RESERVED_WORDS = frozenset(
    {
        "arguments", "await", "break", "case", "catch", "class", "const", "continue",
        "debugger", "default", "delete", "do", "else", "enum", "eval", "export",
        "extends", "false", "finally", "for", "function", "if", "implements",
        "import", "in", "instanceof", "interface", "let", "new", "null", "package",
        "private", "protected", "public", "return", "static", "super", "switch",
        "this", "throw", "true", "try", "typeof", "undefined", "var", "void",
        "while", "with", "yield",
    }
)

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


def is_identifier_name(name: str) -> bool:
    return bool(_IDENTIFIER_RE.match(name))


def is_bindable_name(name: str) -> bool:
    """Can `name` be declared as a local binding as-is?"""
    return is_identifier_name(name) and name not in RESERVED_WORDS


def significant_children(node: Node) -> List[Node]:
    """Named children without comments."""
    return [child for child in node.named_children if child.type != "comment"]


def unwrap_parens(node: Optional[Node]) -> Optional[Node]:
    while node is not None and node.type == "parenthesized_expression":
        inner = significant_children(node)
        if not inner:
            return node
        node = inner[0]
    return node


def parent_skipping_parens(node: Node) -> Optional[Node]:
    parent = node.parent
    while parent is not None and parent.type == "parenthesized_expression":
        parent = parent.parent
    return parent


def iter_descendants(root: Node, prune: Optional[Callable[[Node], bool]] = None) -> Iterator[Node]:
    """
    Pre-order walk over the descendants of `root` in source order.

    Nodes for which `prune` returns True are yielded but not entered.
    """
    stack = list(reversed(root.children))
    while stack:
        node = stack.pop()
        yield node
        if prune is not None and prune(node):
            continue
        stack.extend(reversed(node.children))


def within_this_scope(node: Node) -> bool:
    """Prune predicate: stop at constructs that rebind `this`."""
    return node.type in THIS_SCOPE_TYPES


def string_value(unit: SourceUnit, node: Node) -> str:
    """Raw content of a string literal, quotes stripped, escapes untouched."""
    return unit.text_of(node)[1:-1]


def property_key_name(unit: SourceUnit, key: Optional[Node]) -> Optional[str]:
    """
    Static name of an object/class property key, or None if it is computed
    from a non-literal expression or private.
    """
    if key is None:
        return None
    if key.type in ("property_identifier", "identifier", "shorthand_property_identifier",
                    "shorthand_property_identifier_pattern"):
        return unit.text_of(key)
    if key.type == "string":
        return string_value(unit, key)
    if key.type == "number":
        return unit.text_of(key)
    if key.type == "computed_property_name":
        inner = significant_children(key)
        if len(inner) == 1 and inner[0].type == "string":
            return string_value(unit, inner[0])
    return None


def accessed_member_name(unit: SourceUnit, access: Node) -> Optional[str]:
    """
    Name read by `obj.name`, `obj['name']` or `obj["name"]`; None for
    computed non-literal indexes and private names.
    """
    if access.type == "member_expression":
        prop = access.child_by_field_name("property")
        if prop is not None and prop.type == "property_identifier":
            return unit.text_of(prop)
        return None
    if access.type == "subscript_expression":
        index = unwrap_parens(access.child_by_field_name("index"))
        if index is not None and index.type == "string":
            return string_value(unit, index)
    return None


def is_optional_access(access: Node) -> bool:
    if access.child_by_field_name("optional_chain") is not None:
        return True
    return any(child.type == "optional_chain" for child in access.children)


def is_static_member(member: Node) -> bool:
    return any(child.type in ("static", "static get") for child in member.children)


def accessor_kind(member: Node) -> Optional[str]:
    """'get' / 'set' for accessor methods, None otherwise."""
    for child in member.children:
        if child.type in ("get", "static get"):
            return "get"
        if child.type == "set":
            return "set"
    return None


def is_async_or_generator(member: Node) -> bool:
    return any(child.type in ("async", "*") for child in member.children)


def member_key(member: Node) -> Optional[Node]:
    """Key node of a method_definition or field_definition."""
    if member.type == "field_definition":
        return member.child_by_field_name("property")
    return member.child_by_field_name("name")


def decorators_of(node: Node) -> List[Node]:
    return [child for child in node.children if child.type == "decorator"]


def class_heritage(class_node: Node) -> Optional[Node]:
    """The expression after `extends`, if any."""
    for child in class_node.children:
        if child.type == "class_heritage":
            expressions = significant_children(child)
            return expressions[0] if expressions else None
    return None


def enclosing_statement(node: Node) -> Optional[Node]:
    """The statement (direct child of a program or block) containing `node`."""
    current = node
    while current.parent is not None:
        if current.parent.type in STATEMENT_CONTAINERS:
            return current
        current = current.parent
    return None


def single_returned_expression(block: Optional[Node]) -> Optional[Node]:
    """
    For a statement block consisting of exactly `return <expr>;` (comments
    allowed), the returned expression. None otherwise.
    """
    if block is None or block.type != "statement_block":
        return None
    statements = significant_children(block)
    if len(statements) != 1 or statements[0].type != "return_statement":
        return None
    returned = significant_children(statements[0])
    return returned[0] if returned else None


def return_expressions(function_node: Node) -> List[Node]:
    """
    Expressions returned by a function, not counting nested functions or
    classes. An arrow function with an expression body returns that body.
    """
    body = function_node.child_by_field_name("body")
    if body is None:
        return []
    if body.type != "statement_block":
        return [body]
    results: List[Node] = []
    for node in iter_descendants(body, prune=lambda n: n.type in FUNCTION_TYPES or n.type in CLASS_TYPES):
        if node.type == "return_statement":
            returned = significant_children(node)
            if returned:
                results.append(returned[0])
    return results


def find_module_binding(unit: SourceUnit, name: str) -> Optional[Node]:
    """
    Value of a top-level `const`/`let`/`var` declarator named `name`
    (exported or not). Imports and function parameters are not followed.
    """
    for statement in significant_children(unit.root):
        declaration = statement
        if statement.type == "export_statement":
            declaration = statement.child_by_field_name("declaration")
            if declaration is None:
                continue
        if declaration.type not in ("lexical_declaration", "variable_declaration"):
            continue
        for declarator in significant_children(declaration):
            if declarator.type != "variable_declarator":
                continue
            target = declarator.child_by_field_name("name")
            if target is not None and target.type == "identifier" and unit.text_of(target) == name:
                return declarator.child_by_field_name("value")
    return None


def binding_name_of(unit: SourceUnit, node: Node) -> Optional[str]:
    """
    Identifier `node` is bound to when it is the value of a variable
    declarator or the right side of a plain assignment to an identifier.
    """
    parent = parent_skipping_parens(node)
    if parent is None:
        return None
    if parent.type == "variable_declarator":
        target = parent.child_by_field_name("name")
        value = unwrap_parens(parent.child_by_field_name("value"))
        if value == node and target is not None and target.type == "identifier":
            return unit.text_of(target)
    if parent.type == "assignment_expression":
        target = parent.child_by_field_name("left")
        value = unwrap_parens(parent.child_by_field_name("right"))
        if value == node and target is not None and target.type == "identifier":
            return unit.text_of(target)
    return None


def collect_identifier_names(unit: SourceUnit, root: Node) -> set:
    """Every identifier-like name appearing under `root` (bindings and references)."""
    names = set()
    for node in iter_descendants(root):
        if node.type in ("identifier", "shorthand_property_identifier",
                         "shorthand_property_identifier_pattern"):
            names.add(unit.text_of(node))
    return names
