"""
Output formatters for CLI commands.

JSON reports for lint results; text and JSON for fix results.
"""

import json
from typing import List

from componentlint.api import FixResult, LintResult


def format_lint_results(results: List[LintResult]) -> str:
    """Format lint results as a JSON report (text output goes through RichOutputManager)."""
    return json.dumps(
        {
            "files": [r.to_dict() for r in results],
            "summary": {
                "files": len(results),
                "problems": sum(len(r.diagnostics) for r in results),
                "fixable": sum(len(r.fixable) for r in results),
            },
        },
        indent=2,
    )


def format_fix_results(results: List[FixResult], format_type: str) -> str:
    """Format fix results for output."""
    if format_type == "json":
        return json.dumps(
            {
                "files": [
                    {
                        "file": r.filename,
                        "changed": r.changed,
                        "applied": r.applied,
                        "remaining": [d.to_dict() for d in r.remaining],
                    }
                    for r in results
                ]
            },
            indent=2,
        )

    lines = []
    for r in results:
        status = f"{r.applied} fix(es) applied" if r.changed else "unchanged"
        lines.append(f"{r.filename}: {status}, {len(r.remaining)} problem(s) remaining")
    return "\n".join(lines)
