"""
Tests for patch building and application.
"""

import pytest

from componentlint.analysis.models import RewritePatch, TextEdit
from componentlint.errors import PatchConflictError
from componentlint.refactoring.patch import apply_edits, apply_patch, build_patch, patches_overlap


class TestBuildPatch:
    """Tests for build_patch and patches_overlap."""

    def test_sorts_edits(self):
        """Test that edits come back ordered by start offset."""
        patch = build_patch([TextEdit(5, 6, "b"), TextEdit(0, 1, "a")])
        assert [edit.start for edit in patch] == [0, 5]

    def test_overlap_raises(self):
        """Test that overlapping ranges are refused."""
        with pytest.raises(PatchConflictError):
            build_patch([TextEdit(0, 4, "a"), TextEdit(3, 6, "b")])

    def test_touching_ranges_are_disjoint(self):
        """Test that an edit may start where another ends."""
        assert len(build_patch([TextEdit(0, 3, "a"), TextEdit(3, 6, "b")])) == 2

    def test_patches_overlap(self):
        """Test overlap detection between patches."""
        first = RewritePatch((TextEdit(0, 5, ""),))
        assert patches_overlap(first, RewritePatch((TextEdit(4, 8, ""),)))
        assert not patches_overlap(first, RewritePatch((TextEdit(5, 8, ""),)))

    def test_invalid_range(self):
        """Test that reversed ranges are rejected on construction."""
        with pytest.raises(ValueError):
            TextEdit(4, 2, "")


class TestApplyPatch:
    """Tests for apply_patch and apply_edits."""

    def test_replacement_and_insertion(self):
        """Test replacing and inserting in one pass."""
        patch = build_patch([TextEdit(0, 5, "const"), TextEdit(9, 9, " = 1")])
        assert apply_patch("var   a b;", patch) == "const a b = 1;"

    def test_utf8_offsets(self):
        """Test that offsets address the UTF-8 buffer."""
        source = 'x = "é"; y;'
        start = source.encode("utf-8").index(b"y")
        assert apply_edits(source, [TextEdit(start, start + 1, "z")]) == 'x = "é"; z;'

    def test_split_character_raises(self):
        """Test that an edit inside a multi-byte character is refused."""
        with pytest.raises(PatchConflictError):
            apply_edits("é", [TextEdit(1, 2, "")])

    def test_past_end_raises(self):
        """Test that edits beyond the buffer are refused."""
        with pytest.raises(PatchConflictError):
            apply_edits("abc", [TextEdit(2, 10, "")])

    def test_empty_patch(self):
        """Test that an empty patch is the identity."""
        assert apply_patch("abc", RewritePatch()) == "abc"
