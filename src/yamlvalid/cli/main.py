#!/usr/bin/env python3
"""
YAMLVALID CLI
-------------
Command-line front end for the Pod manifest validator.

Prints every diagnostic on its own line and exits non-zero when any file
is invalid or unreadable; prints 'YAML is valid!' and exits zero otherwise.

Author: yamlvalid Team
Date: 2026-10-19
"""

import argparse
import logging
import sys
from typing import List, Optional

from rich.panel import Panel
from rich.progress import (
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
    BarColumn,
    TaskProgressColumn
)

from yamlvalid.cli.formatter import ReportFormatter, console
from yamlvalid.core.config import ValidatorConfig
from yamlvalid.core.engine import ValidationEngine

VERSION = "1.0.0"

logger = logging.getLogger("yamlvalid.cli")


class YamlValidCLI:
    """
    Translates command-line arguments into engine runs and maps the
    result to an exit status.
    """

    def __init__(self):
        self.parser = argparse.ArgumentParser(
            prog="yamlvalid",
            usage="yamlvalid <path-to-yaml-file> [<path> ...]",
            description="yamlvalid - Pod manifest validator",
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )
        self.formatter = ReportFormatter()
        self._setup_args()

    def _setup_args(self):
        self.parser.add_argument("-v", "--version", action="version", version=f"yamlvalid v{VERSION}")
        self.parser.add_argument("paths", nargs="*", help="YAML files or directories to validate")
        self.parser.add_argument("--fail-fast", action="store_true",
                                 help="Report only the first violation of each file")
        self.parser.add_argument("--ext", default=".yaml",
                                 help="File extension to look for in directories (default: .yaml)")
        self.parser.add_argument("--max-depth", type=int, default=10,
                                 help="Maximum directory depth to scan (default: 10)")
        self.parser.add_argument("--report", action="store_true",
                                 help="Show a summary table after the diagnostics")
        self.parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    def _configure_logging(self, verbose: bool):
        logging.basicConfig(
            level=logging.DEBUG if verbose else logging.WARNING,
            format="%(levelname)s %(name)s: %(message)s",
            stream=sys.stderr,
        )

    def run(self, argv: Optional[List[str]] = None) -> int:
        """Primary routing entry point. Returns the process exit status."""
        args = self.parser.parse_args(argv)
        if not args.paths:
            self.parser.print_usage(sys.stdout)
            return 1

        self._configure_logging(args.verbose)
        logger.debug(f"Validating {len(args.paths)} path(s), fail_fast={args.fail_fast}")
        engine = ValidationEngine(
            ValidatorConfig(stop_on_first_error=args.fail_fast),
            extension=args.ext,
            max_depth=args.max_depth,
        )

        if args.report:
            reports = self._run_with_progress(engine, args.paths)
        else:
            reports = engine.scan_paths(args.paths)

        if not reports:
            console.print("[bold yellow]⚠️  No valid YAML files found.[/bold yellow]")
            return 1

        self.formatter.print_diagnostics(reports)
        if args.report:
            self.formatter.print_final_table(reports)
            self.formatter.print_summary(engine.generate_summary(reports))

        if all(r.get("success") for r in reports):
            self.formatter.print_success()
            return 0
        return 1

    def _run_with_progress(self, engine: ValidationEngine, paths: List[str]):
        console.print(Panel.fit(
            f"[bold cyan]yamlvalid v{VERSION}[/bold cyan]",
            title="[bold white]Pod Manifest Validation[/bold white]",
            border_style="cyan"
        ))
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(bar_width=40),
            TaskProgressColumn(),
            TimeElapsedColumn(),
            console=console,
            transient=True,
        ) as progress:
            task_id = progress.add_task("Validating manifests...", total=None)

            def advance(done: int, total: int):
                progress.update(task_id, completed=done, total=total)

            return engine.scan_paths(paths, progress_callback=advance)


def main():
    """Application entry point with interrupt handling."""
    try:
        sys.exit(YamlValidCLI().run())
    except KeyboardInterrupt:
        console.print("\n[bold red]Terminated by user.[/bold red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
