"""
Parsed JavaScript/JSX source units.

A SourceUnit is what the lint host hands to the analysis layer: the
tree-sitter tree, the UTF-8 buffer all node offsets refer to, and helpers to
read verbatim text and human locations back out of it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Tuple, Union

import tree_sitter_javascript
from tree_sitter import Language, Node, Parser, Tree

from componentlint.errors import SourceParseError

logger = logging.getLogger(__name__)

JAVASCRIPT = Language(tree_sitter_javascript.language())


@dataclass(frozen=True)
class SourceUnit:
    """One parsed module. Nodes handed out are borrowed views into `tree`."""

    text: str
    buffer: bytes = field(repr=False)
    tree: Tree = field(repr=False, compare=False)
    filename: str = "<input>"

    @classmethod
    def parse(cls, text: str, filename: str = "<input>") -> "SourceUnit":
        """
        Parse JavaScript (with JSX, class fields and decorators).

        Raises:
            SourceParseError: if `text` is not a string.
        """
        if not isinstance(text, str):
            raise SourceParseError(f"{filename}: expected str source, got {type(text).__name__}")

        buffer = text.encode("utf-8")
        tree = Parser(JAVASCRIPT).parse(buffer)
        if tree.root_node.has_error:
            logger.debug("%s: parsed with syntax errors", filename)
        return cls(text=text, buffer=buffer, tree=tree, filename=filename)

    @property
    def root(self) -> Node:
        return self.tree.root_node

    @property
    def has_errors(self) -> bool:
        return self.root.has_error

    def text_of(self, node: Node) -> str:
        """Exact source text of a node."""
        return self.slice(node.start_byte, node.end_byte)

    def slice(self, start: int, end: int) -> str:
        return self.buffer[start:end].decode("utf-8")

    def location(self, target: Union[Node, int]) -> Tuple[int, int]:
        """1-based (line, column) of a node start or byte offset; column counts characters."""
        offset = target if isinstance(target, int) else target.start_byte
        line = self.buffer.count(b"\n", 0, offset) + 1
        line_start = self.buffer.rfind(b"\n", 0, offset) + 1
        column = len(self.buffer[line_start:offset].decode("utf-8")) + 1
        return line, column

    def line_start(self, offset: int) -> int:
        return self.buffer.rfind(b"\n", 0, offset) + 1

    def line_indent(self, offset: int) -> str:
        """Leading whitespace of the line containing `offset`."""
        start = self.line_start(offset)
        end = start
        while end < len(self.buffer) and self.buffer[end:end + 1] in (b" ", b"\t"):
            end += 1
        return self.slice(start, end)

    def starts_line(self, offset: int) -> bool:
        """True when only whitespace precedes `offset` on its line."""
        return self.buffer[self.line_start(offset):offset].strip(b" \t") == b""
