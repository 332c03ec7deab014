"""
Exception types shared across componentlint.

None of these are fatal to a lint pass: the rules catch them and degrade to
"no patch" or "no extra diagnostic".
"""

from __future__ import annotations


class ComponentLintError(Exception):
    """Base class for componentlint errors."""


class SourceParseError(ComponentLintError):
    """Raised when a source unit cannot be handed to the parser at all."""


class RewriteUnavailable(ComponentLintError):
    """
    Raised by the class-to-function transformer when a descriptor has no
    safe rewrite (no stable binding for hoisted statics, a static member that
    cannot be expressed as an assignment, ...).
    """

    def __init__(self, component: str, reason: str):
        super().__init__(f"{component}: {reason}")
        self.component = component
        self.reason = reason


class PatchConflictError(ComponentLintError):
    """Raised when text edits overlap or fall outside the source buffer."""
