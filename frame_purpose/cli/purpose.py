import typer
from .commands.core import filter_buffers, sidebar, modes

app = typer.Typer(help="Frame Purpose - purpose-specific editor frames")

@app.command()
def hello() -> None:
    """Sanity check command."""
    typer.echo("Frame Purpose is alive.")

# Register core commands
app.command(name="filter")(filter_buffers)  # "filter" is a Python builtin, so use name mapping
app.command()(sidebar)
app.command()(modes)

# Entry point function for the CLI script
def cli() -> None:
    app()
