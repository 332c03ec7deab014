"""
Building and applying RewritePatches.

Edits address the UTF-8 encoded source buffer; applying a patch encodes,
splices and decodes again so multi-byte text is never split.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Sequence

from componentlint.analysis.models import RewritePatch, TextEdit
from componentlint.errors import PatchConflictError

logger = logging.getLogger(__name__)


def _check_disjoint(edits: Sequence[TextEdit]) -> None:
    for previous, current in zip(edits, edits[1:]):
        if previous.end > current.start:
            raise PatchConflictError(
                f"edits overlap: {previous.start}..{previous.end} and {current.start}..{current.end}"
            )


def build_patch(edits: Iterable[TextEdit]) -> RewritePatch:
    """Sort edits by range and check that no two overlap."""
    ordered = sorted(edits, key=lambda edit: (edit.start, edit.end))
    _check_disjoint(ordered)
    return RewritePatch(tuple(ordered))


def patches_overlap(first: RewritePatch, second: RewritePatch) -> bool:
    try:
        build_patch(list(first) + list(second))
    except PatchConflictError:
        return True
    return False


def apply_patch(source: str, patch: RewritePatch) -> str:
    """Apply a patch to `source`, returning the new text."""
    return apply_edits(source, list(patch))


def apply_edits(source: str, edits: List[TextEdit]) -> str:
    buffer = source.encode("utf-8")
    ordered = sorted(edits, key=lambda edit: (edit.start, edit.end))
    _check_disjoint(ordered)
    if ordered and ordered[-1].end > len(buffer):
        raise PatchConflictError(f"edit ends at {ordered[-1].end}, past end of buffer ({len(buffer)})")

    pieces: List[bytes] = []
    cursor = 0
    for edit in ordered:
        pieces.append(buffer[cursor:edit.start])
        pieces.append(edit.text.encode("utf-8"))
        cursor = edit.end
    pieces.append(buffer[cursor:])
    try:
        return b"".join(pieces).decode("utf-8")
    except UnicodeDecodeError as e:
        raise PatchConflictError(f"edit boundaries split a multi-byte character: {e}") from e
