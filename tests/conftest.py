"""
Shared fixtures for componentlint tests.
"""

import textwrap

import pytest

from componentlint.analysis.component_builder import ComponentModelBuilder
from componentlint.config import SettingsConfig
from componentlint.parsing.source_unit import SourceUnit


def js(code: str) -> str:
    """Dedent a JavaScript snippet and drop the leading newline."""
    return textwrap.dedent(code).lstrip("\n")


@pytest.fixture
def parse():
    """Parse a (dedented) snippet into a SourceUnit."""
    def _parse(code: str, dedent: bool = True) -> SourceUnit:
        return SourceUnit.parse(js(code) if dedent else code, "test.jsx")
    return _parse


@pytest.fixture
def detect(parse):
    """Parse a snippet and return (unit, descriptors)."""
    def _detect(code: str, settings: SettingsConfig = None, dedent: bool = True):
        unit = parse(code, dedent=dedent)
        return unit, ComponentModelBuilder(unit, settings).detect()
    return _detect


@pytest.fixture
def component(detect):
    """Parse a snippet holding one component and return (unit, descriptor)."""
    def _component(code: str, settings: SettingsConfig = None, dedent: bool = True):
        unit, found = detect(code, settings, dedent)
        assert len(found) == 1, [d.identity for d in found]
        return unit, found[0]
    return _component
