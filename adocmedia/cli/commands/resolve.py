"""Resolve command: show where each reference's locator points."""

import os
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from adocmedia.cli.utils import config
from adocmedia.engine import build_attribute_table, resolve_locator, scan_references
from adocmedia.engine.registry import local_candidate
from adocmedia.exceptions import ConfigError

console = Console()


def main(
    path: str = typer.Argument(..., help="AsciiDoc document to read"),
    remote: Optional[bool] = typer.Option(
        None, "--remote/--no-remote", help="Allow fetching remote images"
    ),
    protocol: Optional[List[str]] = typer.Option(
        None, "--protocol", help="Allowed URL scheme (repeatable)"
    ),
    config_file: Optional[str] = typer.Option(
        None, "--config", help="Settings file to use"
    ),
):
    """Print each locator, its resolved form and its status."""
    document = config.load_document(path)
    try:
        display_config = config.build_config(
            remote=remote, protocols=protocol, config_file=config_file
        )
    except ConfigError as e:
        console.print(f"[bold red]Error:[/bold red] {str(e)}")
        raise typer.Exit(1)

    refs = scan_references(document.text)
    if not refs:
        console.print("No media references found")
        return

    attrs = build_attribute_table(document.text)
    table = Table("Locator", "Resolved", "Status")
    for ref in refs:
        raw = ref.locator(document.text)
        resolved = resolve_locator(raw, attrs)
        if os.path.isfile(local_candidate(resolved, document.directory)):
            status = "[green]local[/green]"
        elif display_config.may_fetch(resolved):
            status = "[cyan]remote[/cyan]"
        elif display_config.scheme_allowed(resolved):
            status = "[yellow]remote (disabled)[/yellow]"
        else:
            status = "[red]missing[/red]"
        table.add_row(escape(raw), escape(resolved), status)
    console.print(table)
