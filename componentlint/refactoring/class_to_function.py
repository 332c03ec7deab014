"""
Class-to-function transformation.

Produces a minimal-diff RewritePatch turning a named class component into a
function component:

    class Foo extends React.Component {          function Foo({ name }) {
      static propTypes = {...};          ->        return <div>{name}</div>;
      render() {                                 }
        return <div>{this.props.name}</div>;     Foo.propTypes = {...};
      }
    }

Only the class header up to the render body's opening brace, the `this`
references inside render, and the tail after render are edited; the render
body text is otherwise kept byte for byte.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from tree_sitter import Node

from componentlint.analysis.models import ComponentDescriptor, DeclarationKind, RewritePatch, TextEdit
from componentlint.analysis.usage_classifier import UsageClassifier, find_render_method
from componentlint.config import SettingsConfig
from componentlint.errors import RewriteUnavailable
from componentlint.parsing.source_unit import SourceUnit
from componentlint.refactoring.patch import build_patch
from componentlint.refactoring.reference_rewriter import ReferenceRewriter
from componentlint.refactoring.static_hoister import StaticHoister

logger = logging.getLogger(__name__)


class ClassToFunctionTransformer:
    """Builds RewritePatches for eligible class components of one unit."""

    def __init__(self, unit: SourceUnit, settings: Optional[SettingsConfig] = None):
        self.unit = unit
        self.classifier = UsageClassifier(unit, settings)
        self.rewriter = ReferenceRewriter(unit, self.classifier)
        self.hoister = StaticHoister(unit)

    def transform(self, descriptor: ComponentDescriptor) -> RewritePatch:
        """
        Rewrite patch for `descriptor`.

        Raises RewriteUnavailable when no safe rewrite exists; callers keep
        the diagnostic and drop the fix.
        """
        if descriptor.kind != DeclarationKind.CLASS:
            raise RewriteUnavailable(descriptor.identity, "only class components are rewritten")
        if descriptor.name is None or descriptor.body is None:
            raise RewriteUnavailable(descriptor.identity, "anonymous classes have no stable name")

        class_node = descriptor.node
        body = descriptor.body
        name = descriptor.name
        target, statement = self._hoist_target(descriptor)
        statics = self.hoister.collect(body, target) if target is not None else []
        class_indent = self.unit.line_indent(class_node.start_byte)
        trailing = self.hoister.render(statics, class_indent) if statement is None else ""

        edits: List[TextEdit] = []
        render = find_render_method(self.unit, body)
        if render is None:
            edits.append(TextEdit(class_node.start_byte, body.end_byte, f"function {name}(props) {{}}" + trailing))
        else:
            edits.extend(self._render_edits(class_node, body, render, name, class_indent, trailing))

        if statement is not None and statics:
            indent = self.unit.line_indent(statement.start_byte)
            edits.append(TextEdit(statement.end_byte, statement.end_byte, self.hoister.render(statics, indent)))

        patch = build_patch(edits)
        logger.debug("Rewrite of %s: %d edit(s), %d static(s) hoisted", name, len(patch), len(statics))
        return patch

    def _render_edits(self, class_node: Node, body: Node, render: Node, name: str,
                      class_indent: str, trailing: str) -> List[TextEdit]:
        render_body = render.child_by_field_name("body")
        props_plan, context_plan, references = self.rewriter.plan(render, name)
        params = self.rewriter.parameter_list(props_plan, context_plan)

        edits = [TextEdit(class_node.start_byte, render_body.start_byte + 1, f"function {name}({params}) {{")]
        edits.extend(self.rewriter.substitution_edits(references, props_plan, context_plan))

        closing = render_body.end_byte - 1
        if self.unit.starts_line(closing):
            edits.append(TextEdit(self.unit.line_start(closing), body.end_byte, class_indent + "}" + trailing))
        else:
            edits.append(TextEdit(closing, body.end_byte, "}" + trailing))
        return edits

    def _hoist_target(self, descriptor: ComponentDescriptor) -> Tuple[Optional[str], Optional[Node]]:
        """
        Name the statics are assigned to, and the statement to place them
        after (None when they go right after the function itself).
        """
        if not self.hoister.has_statics(descriptor.body):
            return None, None
        if descriptor.node.type == "class_declaration":
            return descriptor.name, None
        if descriptor.wrappers or descriptor.binding_name is None or descriptor.statement is None:
            raise RewriteUnavailable(descriptor.identity, "class expression statics need a plain binding to attach to")
        return descriptor.binding_name, descriptor.statement

