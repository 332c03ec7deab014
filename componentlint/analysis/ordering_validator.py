"""
Ordering checks for defaults declarations.

Within each run of a defaults group (runs are split by spreads, which are
never moved relative to their neighbours) keys must be strictly ascending.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from componentlint.analysis.models import MetadataEntry, MetadataGroup


@dataclass(frozen=True)
class OrderingViolation:
    """`entry` sorts before `preceding`, the greatest key seen earlier in its run."""

    entry: MetadataEntry
    preceding: MetadataEntry

    @property
    def key(self) -> str:
        return self.entry.key


def collation_key(key: str, ignore_case: bool = False) -> Tuple[str, ...]:
    """
    Sort key for a metadata key.

    With `ignore_case`, keys equal after case folding fall back to exact
    codepoint order, so two distinct keys never compare equal.
    """
    if ignore_case:
        return (key.lower(), key)
    return (key,)


def find_misordered_keys(
    properties: Optional[MetadataGroup],
    defaults: Optional[MetadataGroup],
    ignore_case: bool = False,
) -> List[OrderingViolation]:
    """
    Report defaults keys that break ascending order within their run.

    `properties` is accepted so both groups come from the same extraction,
    but the reference order is the defaults run itself.
    """
    if defaults is None:
        return []

    violations: List[OrderingViolation] = []
    for run in defaults.runs():
        greatest = run[0]
        for entry in run[1:]:
            if collation_key(entry.key, ignore_case) < collation_key(greatest.key, ignore_case):
                violations.append(OrderingViolation(entry=entry, preceding=greatest))
            else:
                greatest = entry
    return violations
