"""
Tests for ordering_validator module.
"""

from componentlint.analysis.models import (
    DeclarationSource,
    MetadataEntry,
    MetadataGroup,
    MetadataKind,
    SpreadMarker,
)
from componentlint.analysis.ordering_validator import collation_key, find_misordered_keys


def group(*keys, kind=MetadataKind.DEFAULTS):
    """Build a group from keys; '...x' strings become spread markers."""
    items = []
    for index, key in enumerate(keys):
        if key.startswith("..."):
            items.append(SpreadMarker(key, index * 10, index * 10 + len(key)))
        else:
            items.append(MetadataEntry(key, index * 10, index * 10 + len(key), 1, index * 10 + 1))
    return MetadataGroup(kind=kind, source=DeclarationSource.INLINE_LITERAL, items=tuple(items))


def reported(defaults, ignore_case=False):
    return [v.key for v in find_misordered_keys(group("a"), defaults, ignore_case)]


class TestCollation:
    """Tests for collation_key."""

    def test_codepoint_order(self):
        """Test that uppercase sorts before lowercase by default."""
        assert collation_key("Z") < collation_key("a")

    def test_case_folded_order(self):
        """Test case-insensitive order with exact tie-break."""
        assert collation_key("a", True) < collation_key("Z", True)
        assert collation_key("A", True) < collation_key("a", True)
        assert collation_key("A", True) != collation_key("a", True)


class TestFindMisorderedKeys:
    """Tests for find_misordered_keys."""

    def test_sorted_case_sensitive(self):
        """Test {A, Z, a, z} is valid under codepoint order."""
        assert reported(group("A", "Z", "a", "z")) == []

    def test_interleaved_case_sensitive(self):
        """Test {A, a, Z, z} is reported at the first break."""
        assert reported(group("A", "a", "Z", "z")) == ["Z"]

    def test_interleaved_ignore_case(self):
        """Test {A, a, Z, z} is valid under case-folded order."""
        assert reported(group("A", "a", "Z", "z"), ignore_case=True) == []

    def test_ignore_case_ties_are_not_equal(self):
        """Test that keys differing only in case still need exact order."""
        assert reported(group("a", "A"), ignore_case=True) == ["A"]

    def test_uppercase_after_lowercase_ignore_case(self):
        """Test {Z, a} under ignore_case."""
        assert reported(group("Z", "a"), ignore_case=True) == ["a"]

    def test_uppercase_after_lowercase_case_sensitive(self):
        """Test {a, Z} without ignore_case."""
        assert reported(group("a", "Z")) == ["Z"]

    def test_each_violation_reported(self):
        """Test {c, b, a} reports two keys."""
        violations = find_misordered_keys(None, group("c", "b", "a"))
        assert [v.key for v in violations] == ["b", "a"]
        assert all(v.preceding.key == "c" for v in violations)

    def test_violation_carries_location(self):
        """Test that the violation points at the offending entry."""
        violation = find_misordered_keys(None, group("b", "a"))[0]
        assert violation.entry.start_byte == 10
        assert violation.entry.column == 11

    def test_spread_separates_runs(self):
        """Test {b, ...c, a} is clean."""
        assert reported(group("b", "...c", "a")) == []

    def test_violation_before_spread(self):
        """Test {b, a, ...c} yields one violation."""
        assert reported(group("b", "a", "...c")) == ["a"]

    def test_violation_in_later_run(self):
        """Test a misordering after the last spread."""
        assert reported(group("a", "b", "...c", "f", "e", "...d")) == ["e"]

    def test_absent_groups(self):
        """Test that absent groups produce nothing."""
        assert find_misordered_keys(None, None) == []
        assert find_misordered_keys(group("b", "a", kind=MetadataKind.PROPERTIES), None) == []

    def test_properties_order_is_not_required(self):
        """Test that defaults are only checked against themselves."""
        properties = group("z", "a", kind=MetadataKind.PROPERTIES)
        assert find_misordered_keys(properties, group("a", "z")) == []
