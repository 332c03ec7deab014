"""
Rich terminal output utilities for the componentlint CLI.

Tables for findings, highlighted diffs for fixes, and plain-text rendering
when rich formatting is switched off (pipes, --no-rich).
"""

from typing import List, Optional

from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table

from componentlint.analysis.models import Diagnostic, Severity

_SEVERITY_STYLES = {
    Severity.ERROR: "red",
    Severity.WARNING: "yellow",
    Severity.INFO: "blue",
}


class RichOutputManager:
    """Manages terminal output, with a plain-text mode."""

    def __init__(self, use_rich: bool = True, console: Optional[Console] = None):
        self.use_rich = use_rich
        self.console = console or Console(highlight=use_rich, no_color=not use_rich)

    def print_success(self, message: str) -> None:
        if self.use_rich:
            self.console.print(f"[green]✓[/green] {message}")
        else:
            self.console.print(f"✓ {message}", markup=False)

    def print_warning(self, message: str) -> None:
        if self.use_rich:
            self.console.print(f"[yellow]⚠[/yellow] {message}")
        else:
            self.console.print(f"⚠ {message}", markup=False)

    def print_error(self, message: str) -> None:
        if self.use_rich:
            self.console.print(f"[red]✗[/red] {message}")
        else:
            self.console.print(f"✗ {message}", markup=False)

    def print_diagnostics(self, filename: str, diagnostics: List[Diagnostic]) -> None:
        """Findings of one file, as a table or as `file:line:col` lines."""
        if not diagnostics:
            return
        if not self.use_rich:
            for d in diagnostics:
                fixable = " (fixable)" if d.fix is not None else ""
                self.console.print(
                    f"{filename}:{d.line}:{d.column}: {d.severity.value} {d.message} [{d.rule_id}]{fixable}",
                    markup=False,
                )
            return

        table = Table(title=filename, show_header=True, header_style="bold blue", title_justify="left")
        table.add_column("Line", justify="right")
        table.add_column("Col", justify="right")
        table.add_column("Severity")
        table.add_column("Message")
        table.add_column("Rule", style="dim")
        table.add_column("Fix", justify="center")
        for d in diagnostics:
            style = _SEVERITY_STYLES.get(d.severity, "white")
            table.add_row(
                str(d.line),
                str(d.column),
                f"[{style}]{d.severity.value}[/{style}]",
                d.message,
                d.rule_id,
                "✓" if d.fix is not None else "",
            )
        self.console.print(table)

    def print_diff(self, diff_text: str) -> None:
        if not diff_text:
            return
        if self.use_rich:
            self.console.print(Syntax(diff_text, "diff", theme="monokai"))
        else:
            self.console.print(diff_text, markup=False, end="")


# Global instance
rich_output = RichOutputManager()


def set_rich_enabled(enabled: bool) -> None:
    """Enable or disable rich output globally."""
    global rich_output
    rich_output = RichOutputManager(use_rich=enabled)


def get_rich_output() -> RichOutputManager:
    """Get the global rich output manager."""
    return rich_output
