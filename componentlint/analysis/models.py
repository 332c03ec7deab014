"""
Core data models for component analysis.

These are the contract between the extractor, the builder, the classifier,
the transformer and the rules:

- ComponentDescriptor: one normalized component definition
- MetadataGroup: ordered metadata keys with spread break markers
- CapabilityFlags: what a definition does that matters for conversion
- TextEdit / RewritePatch: byte-range replacements over the source buffer
- Diagnostic: what the rules report back to the host

Nodes stored on these models are borrowed tree-sitter views and are excluded
from equality, so two extractions of the same unit compare equal.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from tree_sitter import Node


class DeclarationKind(str, Enum):
    """How a component is declared."""
    FUNCTION = "function"
    ARROW = "arrow"
    CLASS = "class"
    LEGACY_FACTORY = "legacy-factory"


class MetadataKind(str, Enum):
    """Static metadata a component can declare."""
    PROPERTIES = "properties"
    DEFAULTS = "defaults"
    CONTEXT = "context"
    CHILD_CONTEXT = "child_context"

    @property
    def member_name(self) -> str:
        """Property name used on the component (`Foo.propTypes`, ...)."""
        return _MEMBER_NAMES[self]

    @property
    def legacy_name(self) -> str:
        """Key used inside legacy factory options."""
        return "getDefaultProps" if self is MetadataKind.DEFAULTS else _MEMBER_NAMES[self]


_MEMBER_NAMES = {
    MetadataKind.PROPERTIES: "propTypes",
    MetadataKind.DEFAULTS: "defaultProps",
    MetadataKind.CONTEXT: "contextTypes",
    MetadataKind.CHILD_CONTEXT: "childContextTypes",
}


class DeclarationSource(str, Enum):
    """Where a metadata declaration was found."""
    INLINE_LITERAL = "inline_literal"
    GETTER = "getter"
    ASSIGNMENT = "assignment"
    REFERENCE = "reference"


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass(frozen=True)
class MetadataEntry:
    """A `key: value` pair inside a metadata object literal."""

    key: str
    start_byte: int
    end_byte: int
    line: int
    column: int
    node: Optional[Node] = field(default=None, repr=False, compare=False)
    value: Optional[Node] = field(default=None, repr=False, compare=False)


@dataclass(frozen=True)
class SpreadMarker:
    """A `...source` element; ends the current ordering run."""

    source_text: str
    start_byte: int
    end_byte: int


MetadataItem = Union[MetadataEntry, SpreadMarker]


@dataclass(frozen=True)
class MetadataGroup:
    """
    Ordered metadata keys of one declaration, with break markers.

    Keys are unique inside a run; duplicates across runs are kept.
    """

    kind: MetadataKind
    source: DeclarationSource
    items: Tuple[MetadataItem, ...] = ()

    def runs(self) -> List[Tuple[MetadataEntry, ...]]:
        """Contiguous entry sequences between spread markers (empty runs dropped)."""
        result: List[Tuple[MetadataEntry, ...]] = []
        current: List[MetadataEntry] = []
        for item in self.items:
            if isinstance(item, SpreadMarker):
                if current:
                    result.append(tuple(current))
                current = []
            else:
                current.append(item)
        if current:
            result.append(tuple(current))
        return result

    @property
    def entries(self) -> Tuple[MetadataEntry, ...]:
        return tuple(item for item in self.items if isinstance(item, MetadataEntry))

    @property
    def keys(self) -> Tuple[str, ...]:
        return tuple(entry.key for entry in self.entries)

    @property
    def has_spread(self) -> bool:
        return any(isinstance(item, SpreadMarker) for item in self.items)


@dataclass(frozen=True)
class MetadataDeclaration:
    """A located declaration, before its value is parsed into a group."""

    kind: MetadataKind
    source: DeclarationSource
    value: Node = field(repr=False, compare=False)
    anchor: Node = field(repr=False, compare=False)


@dataclass(frozen=True)
class CapabilityFlags:
    """Features detected in a definition that bear on conversion."""

    uses_local_state: bool = False
    uses_refs: bool = False
    has_non_trivial_constructor: bool = False
    has_disallowed_lifecycle: bool = False
    uses_decorators: bool = False
    is_anonymous_binding: bool = False
    extends_pure_base: bool = False
    uses_this_binding: bool = False
    declares_child_context: bool = False
    returns_null_or_false: bool = False
    extends_unrecognized_base: bool = False

    BLOCKING = (
        "uses_local_state",
        "uses_refs",
        "has_non_trivial_constructor",
        "has_disallowed_lifecycle",
        "uses_decorators",
        "uses_this_binding",
        "declares_child_context",
        "extends_unrecognized_base",
    )

    def blocking(self) -> Tuple[str, ...]:
        """Names of the set flags that forbid a function rewrite."""
        return tuple(name for name in self.BLOCKING if getattr(self, name))

    def as_dict(self) -> Dict[str, bool]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass(frozen=True)
class ComponentDescriptor:
    """
    Normalized view of one component definition.

    `node` is the definition itself (class, function or factory call);
    `body` is the class body, function body or factory options object.
    """

    kind: DeclarationKind
    node: Node = field(repr=False, compare=False)
    body: Optional[Node] = field(repr=False, compare=False)
    name: Optional[str] = None
    binding_name: Optional[str] = None
    base: Optional[str] = None
    wrappers: Tuple[str, ...] = ()
    statement: Optional[Node] = field(default=None, repr=False, compare=False)
    start_byte: int = 0
    end_byte: int = 0
    capabilities: CapabilityFlags = field(default_factory=CapabilityFlags)
    properties: Optional[MetadataGroup] = None
    defaults: Optional[MetadataGroup] = None
    context: Optional[MetadataGroup] = None

    @property
    def identity(self) -> str:
        return self.name or self.binding_name or "anonymous"

    @property
    def lookup_names(self) -> Tuple[str, ...]:
        """Names under which post-definition assignments may target this component."""
        names = []
        for candidate in (self.binding_name, self.name):
            if candidate and candidate not in names:
                names.append(candidate)
        return tuple(names)

    def metadata(self, kind: MetadataKind) -> Optional[MetadataGroup]:
        return {
            MetadataKind.PROPERTIES: self.properties,
            MetadataKind.DEFAULTS: self.defaults,
            MetadataKind.CONTEXT: self.context,
        }.get(kind)


@dataclass(frozen=True)
class TextEdit:
    """Replace buffer[start:end] with `text` (byte offsets)."""

    start: int
    end: int
    text: str

    def __post_init__(self) -> None:
        if self.start < 0 or self.end < self.start:
            raise ValueError(f"invalid edit range {self.start}..{self.end}")


@dataclass(frozen=True)
class RewritePatch:
    """Range-disjoint edits sorted by start offset."""

    edits: Tuple[TextEdit, ...] = ()

    def __iter__(self) -> Iterator[TextEdit]:
        return iter(self.edits)

    def __len__(self) -> int:
        return len(self.edits)

    def to_dict(self) -> Dict[str, Any]:
        return {"edits": [{"start": e.start, "end": e.end, "text": e.text} for e in self.edits]}


@dataclass(frozen=True)
class Diagnostic:
    """A finding bound to a source range and a machine-stable message id."""

    rule_id: str
    message_id: str
    message: str
    start_byte: int
    end_byte: int
    line: int
    column: int
    severity: Severity = Severity.WARNING
    data: Dict[str, str] = field(default_factory=dict, compare=False)
    fix: Optional[RewritePatch] = field(default=None, compare=False)
    filename: str = "<input>"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rule": self.rule_id,
            "message_id": self.message_id,
            "message": self.message,
            "file": self.filename,
            "line": self.line,
            "column": self.column,
            "range": [self.start_byte, self.end_byte],
            "severity": self.severity.value,
            "data": dict(self.data),
            "fix": self.fix.to_dict() if self.fix is not None else None,
        }
