"""
Tests for the parsing layer (SourceUnit and node helpers).
"""

import pytest

from componentlint.errors import SourceParseError
from componentlint.parsing.ast_utils import (
    accessed_member_name,
    find_module_binding,
    is_bindable_name,
    iter_descendants,
    property_key_name,
    single_returned_expression,
    unwrap_parens,
)
from componentlint.parsing.source_unit import SourceUnit


def first(unit, node_type):
    return next(n for n in iter_descendants(unit.root) if n.type == node_type)


class TestSourceUnit:
    """Tests for SourceUnit."""

    def test_parses_jsx_and_class_fields(self, parse):
        """Test that JSX and static fields parse without errors."""
        unit = parse("""
            class Foo extends React.Component {
              static propTypes = {};
              render() { return <div />; }
            }
        """)
        assert not unit.has_errors

    def test_reports_syntax_errors(self, parse):
        """Test that broken input is flagged."""
        assert parse("class Foo extends {").has_errors

    def test_rejects_non_text(self):
        """Test that bytes are refused."""
        with pytest.raises(SourceParseError):
            SourceUnit.parse(b"const a = 1;")

    def test_location_is_one_based_in_characters(self, parse):
        """Test line/column computation after multi-byte text."""
        unit = parse('const s = "é"; const t = 1;\nconst u = 2;', dedent=False)
        declarator = [n for n in iter_descendants(unit.root) if n.type == "lexical_declaration"]
        assert unit.location(declarator[1]) == (1, 16)
        assert unit.location(declarator[2]) == (2, 1)

    def test_text_of_uses_byte_offsets(self, parse):
        """Test that text_of slices the UTF-8 buffer correctly."""
        unit = parse('const s = "héllo";', dedent=False)
        assert unit.text_of(first(unit, "string")) == '"héllo"'

    def test_line_helpers(self, parse):
        """Test line_start, line_indent and starts_line."""
        unit = parse("a;\n    b;\n", dedent=False)
        offset = unit.buffer.index(b"b")
        assert unit.line_start(offset) == 3
        assert unit.line_indent(offset) == "    "
        assert unit.starts_line(offset)
        assert not unit.starts_line(unit.buffer.index(b";", offset))


class TestNodeHelpers:
    """Tests for ast_utils helpers."""

    def test_property_key_names(self, parse):
        """Test identifier, string, number and computed keys."""
        unit = parse('x = { a: 1, "b-c": 2, 3: 3, ["d"]: 4, [e]: 5 };', dedent=False)
        keys = [property_key_name(unit, pair.child_by_field_name("key"))
                for pair in iter_descendants(unit.root) if pair.type == "pair"]
        assert keys == ["a", "b-c", "3", "d", None]

    def test_accessed_member_name(self, parse):
        """Test dotted and string-subscript access."""
        unit = parse("a.b; a['c']; a[d];", dedent=False)
        accesses = [n for n in iter_descendants(unit.root)
                    if n.type in ("member_expression", "subscript_expression")]
        assert [accessed_member_name(unit, n) for n in accesses] == ["b", "c", None]

    def test_unwrap_parens(self, parse):
        """Test that nested parentheses are removed."""
        unit = parse("x = ((1));", dedent=False)
        assignment = first(unit, "assignment_expression")
        assert unwrap_parens(assignment.child_by_field_name("right")).type == "number"

    def test_single_returned_expression(self, parse):
        """Test single-return blocks versus longer bodies."""
        unit = parse("""
            function a() { return { x: 1 }; }
            function b() { const y = 1; return { x: y }; }
        """)
        blocks = [n for n in iter_descendants(unit.root) if n.type == "statement_block"]
        assert single_returned_expression(blocks[0]).type == "object"
        assert single_returned_expression(blocks[1]) is None

    def test_find_module_binding(self, parse):
        """Test lookup of top-level and exported bindings."""
        unit = parse("""
            const a = { x: 1 };
            export const b = a;
            function f() { const c = 2; }
        """)
        assert find_module_binding(unit, "a").type == "object"
        assert find_module_binding(unit, "b").type == "identifier"
        assert find_module_binding(unit, "c") is None

    def test_bindable_names(self):
        """Test reserved words and invalid identifiers."""
        assert is_bindable_name("foo")
        assert is_bindable_name("$el")
        assert not is_bindable_name("default")
        assert not is_bindable_name("aria-label")
