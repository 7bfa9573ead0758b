"""Rich terminal formatter for SourceScope."""

from collections import Counter
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ..models import AnalysisResult, FileAnalysisResult, Severity
from .base import BaseFormatter

_SEVERITY_STYLE = {
    Severity.ERROR: "red bold",
    Severity.WARNING: "yellow",
    Severity.INFO: "blue",
}


def _maintainability_label(index: float) -> str:
    if index >= 65:
        return "[green]good[/green]"
    elif index >= 35:
        return "[yellow]moderate[/yellow]"
    else:
        return "[red]poor[/red]"


class RichFormatter(BaseFormatter):
    """Summary panel, worst-files table and per-issue listing.

    Args:
        console: Target console (stdout by default)
        top_n: Files shown in the worst-files table
        max_issues: Issues listed per file before truncating
    """

    def __init__(self, console: Optional[Console] = None, top_n: int = 15, max_issues: int = 20):
        self.console = console or Console()
        self.top_n = top_n
        self.max_issues = max_issues

    def render(self, result: AnalysisResult) -> None:
        self._print_summary(result)
        self._print_files(result)
        self._print_issues(result)

    def format(self, result: AnalysisResult) -> str:
        # Rich output goes directly to console; return empty string
        self.render(result)
        return ""

    # -- private helpers --

    def _print_summary(self, result: AnalysisResult) -> None:
        metrics = result.metrics
        breakdown = metrics.issue_breakdown
        summary_text = (
            f"Framework [cyan]{escape(result.framework)}[/cyan]  |  "
            f"Analyzed [bold]{result.analyzed_files}[/bold] of {result.total_files} files  |  "
            f"{metrics.total_lines_of_code} lines  |  {result.duration} ms\n"
            f"Issues: [red]{breakdown['error']} errors[/red], "
            f"[yellow]{breakdown['warning']} warnings[/yellow], "
            f"[blue]{breakdown['info']} info[/blue]\n"
            f"Average complexity [bold]{metrics.average_complexity:.2f}[/bold]  |  "
            f"Maintainability [bold]{metrics.maintainability_index:.2f}[/bold] "
            f"({_maintainability_label(metrics.maintainability_index)})  |  "
            f"{metrics.total_functions} functions, {metrics.total_classes} classes"
        )
        self.console.print(
            Panel(summary_text, title=f"[bold cyan]{escape(result.project_path)}[/bold cyan]", expand=False)
        )
        self.console.print()

        for warning in result.warnings:
            self.console.print(f"[dim]scan: {escape(warning)}[/dim]")
        if result.warnings:
            self.console.print()

    def _print_files(self, result: AnalysisResult) -> None:
        ranked = sorted(
            (fa for fa in result.file_analyses if fa.issues),
            key=lambda fa: (-self._weight(fa), fa.file_path),
        )
        if not ranked:
            self.console.print("[green]No issues found.[/green]")
            return

        table = Table(title=f"Top {min(self.top_n, len(ranked))} Files by Issues", expand=True)
        table.add_column("#", style="dim", width=4)
        table.add_column("File", style="yellow", no_wrap=False, ratio=3)
        table.add_column("Errors", justify="right", width=8)
        table.add_column("Warnings", justify="right", width=9)
        table.add_column("Info", justify="right", width=6)
        table.add_column("Complexity", justify="right", width=11)
        table.add_column("LOC", justify="right", width=7)

        for i, fa in enumerate(ranked[: self.top_n], 1):
            counts = Counter(issue.severity for issue in fa.issues)
            complexity = fa.metrics.complexity
            table.add_row(
                str(i),
                escape(fa.file_path),
                f"[red]{counts[Severity.ERROR]}[/red]",
                f"[yellow]{counts[Severity.WARNING]}[/yellow]",
                f"[blue]{counts[Severity.INFO]}[/blue]",
                "-" if complexity is None else str(complexity),
                str(fa.metrics.lines_of_code),
            )

        self.console.print(table)
        self.console.print()

    def _print_issues(self, result: AnalysisResult) -> None:
        for fa in result.file_analyses:
            if not fa.issues:
                continue
            self.console.print(f"[bold]{escape(fa.file_path)}[/bold]")
            for issue in fa.issues[: self.max_issues]:
                style = _SEVERITY_STYLE[issue.severity]
                self.console.print(
                    f"  {issue.line}:{issue.column}  [{style}]{issue.severity.value:7s}[/{style}]"
                    f"  {escape(issue.message)}  [dim]{escape(issue.code)}[/dim]",
                    highlight=False,
                )
            hidden = len(fa.issues) - self.max_issues
            if hidden > 0:
                self.console.print(f"  [dim]... {hidden} more[/dim]")
            self.console.print()

    @staticmethod
    def _weight(fa: FileAnalysisResult) -> int:
        weights = {Severity.ERROR: 100, Severity.WARNING: 10, Severity.INFO: 1}
        return sum(weights[issue.severity] for issue in fa.issues)
