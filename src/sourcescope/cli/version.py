"""Version command."""

from . import app
from ._common import console


@app.command()
def version():
    """Show version and exit."""
    from .. import __version__

    console.print(f"[bold cyan]SourceScope[/bold cyan] version [green]{__version__}[/green]")
