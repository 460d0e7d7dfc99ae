"""Display command: run a full display pass against an in-memory surface."""

from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from adocmedia.cli.utils import config
from adocmedia.engine import AnnotationRegistry, RecordingSurface, RemoteAssetCache
from adocmedia.exceptions import ConfigError, MediaError

console = Console()


def main(
    path: str = typer.Argument(..., help="AsciiDoc document to display"),
    remote: Optional[bool] = typer.Option(
        None, "--remote/--no-remote", help="Fetch remote images"
    ),
    protocol: Optional[List[str]] = typer.Option(
        None, "--protocol", help="Allowed URL scheme (repeatable)"
    ),
    max_size: Optional[str] = typer.Option(
        None, "--max-size", help="Maximum image size as WIDTHxHEIGHT"
    ),
    cache_dir: Optional[str] = typer.Option(
        None, "--cache-dir", help="Directory for downloaded images"
    ),
    config_file: Optional[str] = typer.Option(
        None, "--config", help="Settings file to use"
    ),
):
    """Create one annotation per resolvable reference and print them."""
    document = config.load_document(path)
    try:
        display_config = config.build_config(
            remote=remote,
            protocols=protocol,
            max_size=max_size,
            config_file=config_file,
        )
    except ConfigError as e:
        console.print(f"[bold red]Error:[/bold red] {str(e)}")
        raise typer.Exit(1)

    registry = AnnotationRegistry(
        RecordingSurface(),
        cache=RemoteAssetCache(directory=cache_dir),
        config=display_config,
    )
    try:
        annotations = registry.display_all(document)
    except MediaError as e:
        console.print(f"[bold red]Error:[/bold red] {str(e)}")
        raise typer.Exit(1)

    if not annotations:
        console.print("No images displayed")
        return

    table = Table("Span", "Path", "Source")
    for ann in annotations:
        table.add_row(
            f"{ann.span.begin}-{ann.span.end}",
            escape(ann.path),
            escape(ann.source_url or ""),
        )
    console.print(table)
    console.print(f"Displayed {len(annotations)} image(s)")
