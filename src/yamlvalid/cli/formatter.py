# src/yamlvalid/cli/formatter.py
from typing import Any, Dict, List

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

# Shared console so every part of the CLI writes to the same stream
console = Console()


class ReportFormatter:
    """
    ReportFormatter: renders engine reports for the terminal.
    Diagnostics are printed verbatim, one per line, so that their output
    stays greppable; the table and summary are opt-in.
    """

    def print_diagnostics(self, reports: List[Dict[str, Any]]):
        for r in reports:
            if r.get("status") == "READ_ERROR":
                console.print(f"Error reading file: {escape(str(r.get('error')))}",
                              highlight=False, emoji=False, soft_wrap=True)
                continue
            for line in r.get("diagnostics", []):
                # field paths contain brackets that rich would read as markup
                console.print(escape(line), highlight=False, emoji=False, soft_wrap=True)

    def print_success(self):
        console.print("YAML is valid!", highlight=False)

    def print_final_table(self, reports: List[Dict[str, Any]]):
        table = Table(title="yamlvalid Report", show_lines=True, header_style="bold magenta")
        table.add_column("File Path", style="cyan")
        table.add_column("Status", style="bold")
        table.add_column("Diagnostics", justify="right")
        table.add_column("Result", justify="center")

        for r in reports:
            status = r.get("status", "READ_ERROR")
            status_color = "green" if status == "VALID" else "yellow" if status == "INVALID" else "red"
            result_icon = "✅" if r.get("success") else "❌"
            table.add_row(
                escape(str(r.get("file_path"))),
                f"[{status_color}]{status}[/{status_color}]",
                str(len(r.get("diagnostics", []))),
                result_icon,
            )

        console.print(table)

    def print_summary(self, summary: Dict[str, Any]):
        console.print(Panel(
            f"[bold white]Summary Report[/bold white]\n"
            f"════════════════════════════════════════\n"
            f"Total Files:    {summary['total_files']}\n"
            f"Valid:          [green]{summary['valid']}[/green]\n"
            f"Invalid:        [yellow]{summary['invalid']}[/yellow]\n"
            f"Read Errors:    [red]{summary['read_errors']}[/red]\n"
            f"Diagnostics:    {summary['diagnostics']}",
            border_style="dim"
        ))
