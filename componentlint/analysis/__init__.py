"""
Component analysis: metadata extraction, ordering checks, component
detection and usage classification.
"""

from componentlint.analysis.component_builder import ComponentModelBuilder, detect_components
from componentlint.analysis.metadata_extractor import MetadataExtractor
from componentlint.analysis.models import (
    CapabilityFlags,
    ComponentDescriptor,
    DeclarationKind,
    DeclarationSource,
    Diagnostic,
    MetadataEntry,
    MetadataGroup,
    MetadataKind,
    RewritePatch,
    Severity,
    SpreadMarker,
    TextEdit,
)
from componentlint.analysis.ordering_validator import OrderingViolation, find_misordered_keys
from componentlint.analysis.usage_classifier import (
    UsageClassifier,
    is_rewrite_eligible,
    should_be_function,
)

__all__ = [
    "CapabilityFlags",
    "ComponentDescriptor",
    "ComponentModelBuilder",
    "DeclarationKind",
    "DeclarationSource",
    "Diagnostic",
    "MetadataEntry",
    "MetadataExtractor",
    "MetadataGroup",
    "MetadataKind",
    "OrderingViolation",
    "RewritePatch",
    "Severity",
    "SpreadMarker",
    "TextEdit",
    "UsageClassifier",
    "detect_components",
    "find_misordered_keys",
    "is_rewrite_eligible",
    "should_be_function",
]
