"""CLI entry point: registers all subcommands."""

import typer

from ._common import console

app = typer.Typer(
    name="sourcescope",
    help="SourceScope - static analysis and quality metrics for JavaScript/TypeScript projects",
    add_completion=False,
    rich_markup_mode="rich",
)


# Import subcommands to register them
from .analyze import analyze as _analyze  # noqa: F401, E402
from .version import version as _version  # noqa: F401, E402


def main() -> None:
    app()


__all__ = ["app", "console", "main"]
