"""Analyze command: run the engine over a project and render the result."""

from enum import Enum
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from ..analysis import AnalysisEngine
from ..exceptions import SourceScopeError
from ..formatters import RichFormatter, get_formatter
from ..logging_config import setup_logging
from ..models import AnalysisResult
from . import app
from ._common import console, resolve_config
from .progress import AnalysisProgress


class OutputFormat(str, Enum):
    rich = "rich"
    json = "json"
    csv = "csv"
    github = "github"
    quiet = "quiet"


class FailLevel(str, Enum):
    error = "error"
    warning = "warning"
    none = "none"


# --fail-on level -> severities that trip it
FAIL_LEVELS = {
    "error": ("error",),
    "warning": ("error", "warning"),
    "none": (),
}


@app.command()
def analyze(
    path: Path = typer.Argument(
        Path("."),
        help="Project root to analyze",
        exists=True,
        file_okay=False,
        dir_okay=True,
        readable=True,
    ),
    output_format: OutputFormat = typer.Option(
        OutputFormat.rich,
        "-f",
        "--format",
        help="Output format",
        case_sensitive=False,
    ),
    output: Optional[Path] = typer.Option(
        None,
        "-o",
        "--output",
        help="Write the report to a file instead of stdout",
        dir_okay=False,
    ),
    workers: Optional[int] = typer.Option(
        None,
        "-w",
        "--workers",
        help="Parallel file workers (default: sequential)",
        min=1,
        max=64,
    ),
    config: Optional[Path] = typer.Option(
        None,
        "-c",
        "--config",
        help="Configuration file (TOML)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    no_lint: bool = typer.Option(
        False,
        "--no-lint",
        help="Skip the ESLint pass",
    ),
    fail_on: FailLevel = typer.Option(
        FailLevel.none,
        "--fail-on",
        help="Exit 1 if any issue reaches this severity: error | warning | none",
        case_sensitive=False,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Only log errors and hide the progress bar",
    ),
):
    """
    Analyze a JavaScript/TypeScript project for syntax, logic, performance and security issues.

    Detects the framework and source root, lints with a matching ESLint profile
    (when ESLint is installed), runs the built-in detectors and reports project
    metrics including a maintainability index.

    [bold cyan]Examples:[/bold cyan]

      sourcescope analyze ./my-app

      sourcescope analyze ./my-app --format json -o report.json

      sourcescope analyze . --workers 4 --fail-on error
    """
    logger = setup_logging(verbose=verbose, quiet=quiet)
    output_format = output_format.value

    try:
        settings = resolve_config(
            config=config, workers=workers, no_lint=no_lint, verbose=verbose, quiet=quiet
        )

        show_progress = output_format == "rich" and output is None and not quiet
        with AnalysisEngine(settings) as engine, AnalysisProgress(enabled=show_progress) as bar:
            result = engine.analyze_codebase(path, on_progress=bar.update)

        _emit(result, output_format, output)

        if _should_fail(fail_on.value, result):
            raise typer.Exit(1)

    except typer.Exit:
        raise

    except SourceScopeError as e:
        logger.error(f"{e.__class__.__name__}: {e}")
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    except KeyboardInterrupt:
        logger.info("Analysis interrupted by user")
        console.print("\n[yellow]Analysis interrupted[/yellow]")
        raise typer.Exit(130)

    except Exception as e:
        logger.exception("Unexpected error during analysis")
        console.print(f"[red]Unexpected error:[/red] {e}")
        raise typer.Exit(1)


def _emit(result: AnalysisResult, output_format: str, output: Optional[Path]) -> None:
    if output is None:
        get_formatter(output_format).render(result)
        return

    if output_format == "rich":
        with open(output, "w", encoding="utf-8") as f:
            RichFormatter(console=Console(file=f, width=120)).render(result)
    else:
        text = get_formatter(output_format).format(result)
        output.write_text(text if text.endswith("\n") else text + "\n", encoding="utf-8")
    console.print(f"[green]Report written to[/green] {output}")


def _should_fail(fail_on: str, result: AnalysisResult) -> bool:
    levels = FAIL_LEVELS.get(fail_on, ())
    hits = sum(result.metrics.issue_breakdown.get(level, 0) for level in levels)
    if hits:
        console.print(f"[red]--fail-on {fail_on}:[/red] {hits} issue(s) at or above {fail_on}")
        return True
    return False
