"""Class-to-function rewriting and patch application."""

from componentlint.refactoring.class_to_function import ClassToFunctionTransformer
from componentlint.refactoring.patch import apply_patch, build_patch
from componentlint.refactoring.reference_rewriter import NameAllocator, ReferenceRewriter
from componentlint.refactoring.static_hoister import StaticHoister

__all__ = [
    "ClassToFunctionTransformer",
    "NameAllocator",
    "ReferenceRewriter",
    "StaticHoister",
    "apply_patch",
    "build_patch",
]
