"""
Main API interface for componentlint

Provides a single facade over parsing, component detection, the rules and
fix application, for sources held in memory and for files on disk.
"""

import difflib
import glob
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set, Tuple, Union

from .analysis.component_builder import ComponentModelBuilder
from .analysis.models import ComponentDescriptor, Diagnostic, RewritePatch, TextEdit
from .config import ComponentLintConfig
from .errors import PatchConflictError
from .parsing.source_unit import SourceUnit
from .refactoring.patch import apply_edits, build_patch
from .rules import enabled_rules

logger = logging.getLogger(__name__)

# Fix passes per source; each pass re-lints the previous output.
MAX_FIX_PASSES = 10


@dataclass
class LintResult:
    """Outcome of linting one source unit."""

    filename: str
    diagnostics: List[Diagnostic]
    components: List[ComponentDescriptor] = field(default_factory=list)
    has_syntax_errors: bool = False

    @property
    def fixable(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.fix is not None]

    def to_dict(self) -> Dict[str, object]:
        return {
            "file": self.filename,
            "has_syntax_errors": self.has_syntax_errors,
            "components": [
                {"name": c.identity, "kind": c.kind.value, "capabilities": c.capabilities.as_dict()}
                for c in self.components
            ],
            "diagnostics": [d.to_dict() for d in self.diagnostics],
        }


@dataclass
class FixResult:
    """Outcome of applying automatic fixes to one source unit."""

    filename: str
    original: str
    output: str
    applied: int = 0
    remaining: List[Diagnostic] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return self.output != self.original

    def unified_diff(self) -> str:
        diff = difflib.unified_diff(
            self.original.splitlines(True),
            self.output.splitlines(True),
            fromfile=f"{self.filename}.orig",
            tofile=f"{self.filename}",
        )
        return "".join(diff)


class ComponentLinter:
    """
    Main API class for componentlint.

    One instance holds a configuration and the rules it enables; every call
    parses its input afresh, so an instance can be shared between files.
    """

    def __init__(self, config: Optional[ComponentLintConfig] = None):
        self.config = config or ComponentLintConfig.default()
        self.rules = enabled_rules(self.config)
        logger.debug("ComponentLinter initialized with rules: %s", [r.rule_id for r in self.rules])

    def lint_source(self, source: str, filename: str = "<input>") -> LintResult:
        """Run every enabled rule over `source`."""
        unit = SourceUnit.parse(source, filename)
        if unit.has_errors:
            logger.warning("%s has syntax errors; affected definitions are skipped", filename)

        components = ComponentModelBuilder(unit, self.config.settings).detect()
        diagnostics: List[Diagnostic] = []
        seen: Set[Tuple[str, str, int, int]] = set()
        for rule in self.rules:
            for diagnostic in rule.check(unit, components):
                identity = (diagnostic.rule_id, diagnostic.message_id, diagnostic.start_byte, diagnostic.end_byte)
                if identity in seen:
                    continue
                seen.add(identity)
                diagnostics.append(diagnostic)

        diagnostics.sort(key=lambda d: (d.start_byte, d.rule_id))
        return LintResult(filename, diagnostics, components, unit.has_errors)

    def fix_source(self, source: str, filename: str = "<input>") -> FixResult:
        """
        Apply every available fix to `source`.

        Overlapping patches are deferred to the next pass. A pass whose
        output introduces syntax errors is discarded.
        """
        output = source
        applied = 0
        for pass_number in range(1, MAX_FIX_PASSES + 1):
            result = self.lint_source(output, filename)
            patches = [d.fix for d in result.fixable]
            if not patches:
                break

            accepted = self._select_disjoint(patches)
            edits: List[TextEdit] = [edit for patch in accepted for edit in patch]
            candidate = apply_edits(output, edits)
            if SourceUnit.parse(candidate, filename).has_errors and not result.has_syntax_errors:
                logger.warning("Fix pass %d for %s produced invalid syntax; discarded", pass_number, filename)
                break

            output = candidate
            applied += len(accepted)
            logger.debug("Fix pass %d for %s applied %d patch(es)", pass_number, filename, len(accepted))

        remaining = self.lint_source(output, filename).diagnostics
        return FixResult(filename, source, output, applied, remaining)

    @staticmethod
    def _select_disjoint(patches: List[RewritePatch]) -> List[RewritePatch]:
        accepted: List[RewritePatch] = []
        merged: List[TextEdit] = []
        for patch in patches:
            try:
                build_patch(merged + list(patch))
            except PatchConflictError:
                continue
            accepted.append(patch)
            merged.extend(patch)
        return accepted

    # ------------------------------------------------------------------
    # files
    # ------------------------------------------------------------------

    def lint_file(self, path: Union[str, Path]) -> LintResult:
        path = Path(path)
        return self.lint_source(self._read(path), str(path))

    def fix_file(self, path: Union[str, Path], write: bool = False) -> FixResult:
        path = Path(path)
        result = self.fix_source(self._read(path), str(path))
        if write and result.changed:
            path.write_text(result.output, encoding="utf-8")
            logger.info("Rewrote %s (%d fix(es))", path, result.applied)
        return result

    def discover_files(self, paths: Iterable[Union[str, Path]]) -> List[Path]:
        """
        Expand files and directories into the source files to check.

        Directories are searched with the configured include patterns; the
        exclude patterns and the size limit apply to everything found there.
        Explicitly named files are always kept.
        """
        settings = self.config.analysis_settings
        found: List[Path] = []
        for raw in paths:
            path = Path(raw)
            if path.is_file():
                found.append(path)
                continue
            if not path.is_dir():
                logger.warning("Skipping %s: no such file or directory", path)
                continue

            candidates: Set[str] = set()
            for pattern in settings.include_patterns:
                candidates.update(glob.glob(str(path / pattern), recursive=True))
            for exclude_pattern in settings.exclude_patterns:
                candidates -= set(glob.glob(str(path / exclude_pattern), recursive=True))

            for candidate in sorted(candidates):
                candidate_path = Path(candidate)
                if not candidate_path.is_file():
                    continue
                if candidate_path.stat().st_size > settings.max_file_size:
                    logger.info("Skipping %s: larger than %d bytes", candidate_path, settings.max_file_size)
                    continue
                found.append(candidate_path)
        return found

    @staticmethod
    def _read(path: Path) -> str:
        with open(path, "r", encoding="utf-8") as f:
            return f.read()
