"""
componentlint - static analysis and rewriting for React component definitions

Finds class and legacy factory components that could be plain functions,
rewrites eligible classes into function components with a minimal text
diff, and checks that default property declarations are sorted.
"""

__version__ = "0.1.0"

# Only expose version by default - everything else is lazy loaded
__all__ = ["__version__"]


def __getattr__(name):
    """Lazy loading of main API classes to keep the parser out of light imports."""
    if name in {"ComponentLinter", "LintResult", "FixResult"}:
        from .api import ComponentLinter, FixResult, LintResult
        return {
            "ComponentLinter": ComponentLinter,
            "LintResult": LintResult,
            "FixResult": FixResult,
        }[name]

    if name in {"ComponentLintConfig", "load_config"}:
        from .config import ComponentLintConfig, load_config
        return {
            "ComponentLintConfig": ComponentLintConfig,
            "load_config": load_config,
        }[name]

    if name in {"SourceUnit"}:
        from .parsing.source_unit import SourceUnit
        return SourceUnit

    if name in {"ComponentModelBuilder", "MetadataExtractor", "UsageClassifier", "find_misordered_keys"}:
        from .analysis import (
            ComponentModelBuilder,
            MetadataExtractor,
            UsageClassifier,
            find_misordered_keys,
        )
        return {
            "ComponentModelBuilder": ComponentModelBuilder,
            "MetadataExtractor": MetadataExtractor,
            "UsageClassifier": UsageClassifier,
            "find_misordered_keys": find_misordered_keys,
        }[name]

    if name in {"ClassToFunctionTransformer", "apply_patch"}:
        from .refactoring import ClassToFunctionTransformer, apply_patch
        return {
            "ClassToFunctionTransformer": ClassToFunctionTransformer,
            "apply_patch": apply_patch,
        }[name]

    raise AttributeError(f"module 'componentlint' has no attribute '{name}'")
