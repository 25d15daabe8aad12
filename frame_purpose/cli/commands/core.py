"""Core commands for frame-purpose."""

from collections import Counter
from pathlib import Path
from typing import List, Optional, Tuple

import typer
from rich.console import Console
from rich.table import Table

from frame_purpose.core.purpose_core.config import load_settings
from frame_purpose.core.purpose_core.errors import FramePurposeError
from frame_purpose.core.purpose_core.frames import FramePurposeManager
from frame_purpose.core.purpose_core.host import Frame, HostSnapshot, load_snapshot

console = Console()


def _fail(error: Exception) -> None:
    console.print(f"❌ {error}", style="red")
    raise typer.Exit(code=1)


def _open_frame(
    snapshot_path: Path,
    modes: Optional[List[str]],
    filenames: Optional[List[str]],
    **options,
) -> Tuple[HostSnapshot, FramePurposeManager, Frame]:
    """Load a snapshot and make a purpose frame over it."""
    snapshot = load_snapshot(snapshot_path)
    manager = FramePurposeManager(snapshot.to_host(), load_settings())
    manager.enable()
    frame = manager.make_frame(modes=modes or [], filenames=filenames or [], **options)
    snapshot.apply_layout(manager.host, frame)
    return snapshot, manager, frame


def filter_buffers(
    snapshot: Path = typer.Argument(help="JSON snapshot of the editor's buffers"),
    mode: Optional[List[str]] = typer.Option(None, "--mode", "-m", help="Major mode name"),
    filename: Optional[List[str]] = typer.Option(None, "--filename", "-f", help="Filename regex"),
    require_mode: Optional[str] = typer.Option(None, "--require-mode", help="Mode every buffer must have"),
) -> None:
    """List the buffers a purpose frame would consider.

    Examples:
      frame-purpose filter buffers.json --mode python-mode
      frame-purpose filter buffers.json --filename '^/proj/'
    """
    try:
        _, manager, frame = _open_frame(snapshot, mode, filename, require_mode=require_mode)
    except FramePurposeError as e:
        _fail(e)

    buffers = manager.buffer_list(frame)
    if not buffers:
        console.print(f"No buffers match {frame.purpose.describe()}", style="yellow")
        return

    table = Table(show_header=True, header_style="bold cyan", title=f"🪟 {frame.purpose.title}")
    table.add_column("Buffer", style="white")
    table.add_column("Mode", style="cyan")
    table.add_column("File", style="dim")
    table.add_column("Modified", justify="center")

    for buffer in buffers:
        table.add_row(
            buffer.name,
            buffer.major_mode,
            buffer.file_name or "",
            "*" if buffer.modified else "",
        )

    console.print(table)
    console.print(f"{len(buffers)} of {len(manager.host.buffer_list())} buffers", style="dim")


def sidebar(
    snapshot: Path = typer.Argument(help="JSON snapshot of the editor's buffers"),
    mode: Optional[List[str]] = typer.Option(None, "--mode", "-m", help="Major mode name"),
    filename: Optional[List[str]] = typer.Option(None, "--filename", "-f", help="Filename regex"),
    sort: Optional[List[str]] = typer.Option(None, "--sort", "-s", help="Sort key: name, modified, recency, mode, filename"),
    title: Optional[str] = typer.Option(None, "--title", "-t", help="Frame title"),
    header: Optional[str] = typer.Option(None, "--header", help="Sidebar header line"),
    plain: bool = typer.Option(False, "--plain", help="Print the sidebar buffer text without styling"),
) -> None:
    """Render the sidebar a purpose frame would show."""
    try:
        _, manager, frame = _open_frame(
            snapshot,
            mode,
            filename,
            title=title,
            sidebar_sort=sort or None,
            sidebar_header=header,
        )
        content = manager.show_sidebar(frame)
    except FramePurposeError as e:
        _fail(e)

    if plain:
        typer.echo(content.plain)
    else:
        console.print(content.to_text())


def modes(
    snapshot: Path = typer.Argument(help="JSON snapshot of the editor's buffers"),
) -> None:
    """Show the major modes in a snapshot with their buffer counts."""
    try:
        loaded = load_snapshot(snapshot)
    except FramePurposeError as e:
        _fail(e)

    counts = Counter(buffer.major_mode for buffer in loaded.buffers)
    if not counts:
        console.print("Snapshot has no buffers", style="yellow")
        return

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Mode", style="cyan")
    table.add_column("Buffers", justify="right", style="bold")
    for mode_name, count in sorted(counts.items(), key=lambda item: (-item[1], item[0])):
        table.add_row(mode_name, str(count))
    console.print(table)
