"""
Command-line interface for componentlint

    componentlint check src/                  report findings
    componentlint fix src/ --diff             show the automatic fixes
    componentlint fix src/ --write            apply them in place
    componentlint config show                 print the effective configuration

`check` exits with status 1 when any problem is found, `fix` when problems
remain after fixing; configuration errors exit with status 2.
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from componentlint import __version__
from componentlint.api import ComponentLinter
from componentlint.cli.formatters import format_fix_results, format_lint_results
from componentlint.cli.rich_output import get_rich_output, set_rich_enabled
from componentlint.config import ComponentLintConfig, ConfigurationError, load_config
from componentlint.errors import ComponentLintError

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="componentlint",
        description="componentlint - static checks and rewrites for React component definitions",
        epilog='Use "componentlint <command> --help" for detailed command help.',
    )
    parser.add_argument("--config", "-c", type=str, help="Path to configuration file")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    parser.add_argument("--no-rich", action="store_true", help="Disable rich terminal output (use plain text)")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    check_parser = subparsers.add_parser("check", help="Report problems in source files")
    check_parser.add_argument("paths", nargs="+", help="Files or directories to check")
    check_parser.add_argument(
        "--format", choices=["text", "json"], default="text", help="Output format (default: text)"
    )

    fix_parser = subparsers.add_parser("fix", help="Apply automatic fixes")
    fix_parser.add_argument("paths", nargs="+", help="Files or directories to fix")
    fix_parser.add_argument("--write", action="store_true", help="Write fixed sources back to disk")
    fix_parser.add_argument("--diff", action="store_true", help="Show a unified diff of every change")
    fix_parser.add_argument(
        "--format", choices=["text", "json"], default="text", help="Output format (default: text)"
    )

    config_parser = subparsers.add_parser("config", help="Configuration management")
    config_subparsers = config_parser.add_subparsers(dest="config_action")
    config_subparsers.add_parser("show", help="Print the effective configuration as JSON")
    init_parser = config_subparsers.add_parser("init", help="Write a default configuration file")
    init_parser.add_argument("path", nargs="?", default="componentlint.yaml", help="Destination file")

    return parser


def cmd_check(args: argparse.Namespace, linter: ComponentLinter) -> int:
    files = linter.discover_files(args.paths)
    results = [linter.lint_file(path) for path in files]

    if args.format == "json":
        print(format_lint_results(results))
    else:
        ui = get_rich_output()
        for result in results:
            ui.print_diagnostics(result.filename, result.diagnostics)
        problems = sum(len(r.diagnostics) for r in results)
        fixable = sum(len(r.fixable) for r in results)
        if problems:
            ui.print_warning(f"{problems} problem(s) in {len(files)} file(s), {fixable} fixable with `componentlint fix`")
        else:
            ui.print_success(f"No problems found in {len(files)} file(s)")

    return 1 if any(r.diagnostics for r in results) else 0


def cmd_fix(args: argparse.Namespace, linter: ComponentLinter) -> int:
    files = linter.discover_files(args.paths)
    results = [linter.fix_file(path, write=args.write) for path in files]

    if args.format == "json":
        print(format_fix_results(results, "json"))
    else:
        ui = get_rich_output()
        if args.diff:
            for result in results:
                ui.print_diff(result.unified_diff())
        print(format_fix_results(results, "text"))
        if not args.write and any(r.changed for r in results):
            ui.print_warning("Dry run: pass --write to apply the fixes")

    return 1 if any(r.remaining for r in results) else 0


def cmd_config(args: argparse.Namespace, config: ComponentLintConfig) -> int:
    if args.config_action == "init":
        ComponentLintConfig.default().save(args.path)
        get_rich_output().print_success(f"Wrote default configuration to {args.path}")
        return 0
    print(json.dumps(config.to_dict(), indent=2))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    setup_logging(args.verbose)
    set_rich_enabled(not args.no_rich and sys.stdout.isatty())

    try:
        config = load_config(args.config)
    except (ConfigurationError, OSError, ValueError) as e:
        get_rich_output().print_error(f"Invalid configuration: {e}")
        return 2

    if args.command == "config":
        return cmd_config(args, config)

    linter = ComponentLinter(config)
    try:
        if args.command == "check":
            return cmd_check(args, linter)
        if args.command == "fix":
            return cmd_fix(args, linter)
    except (ComponentLintError, OSError, UnicodeDecodeError) as e:
        logger.debug("Command %s failed", args.command, exc_info=True)
        get_rich_output().print_error(str(e))
        return 2

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
