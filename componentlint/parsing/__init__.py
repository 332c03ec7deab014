"""Parsing layer: source units over the tree-sitter JavaScript grammar."""

from componentlint.parsing.source_unit import JAVASCRIPT, SourceUnit

__all__ = ["JAVASCRIPT", "SourceUnit"]
