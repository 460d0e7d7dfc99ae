"""At command: point query for the reference around an offset."""

import typer
from rich.console import Console
from rich.markup import escape

from adocmedia.cli.utils import config
from adocmedia.engine import reference_at

console = Console()


def main(
    path: str = typer.Argument(..., help="AsciiDoc document to read"),
    offset: int = typer.Argument(..., help="Character offset in the document"),
):
    """Show the reference found from OFFSET and its sub-spans."""
    document = config.load_document(path)
    ref = reference_at(document.text, offset)
    if ref is None:
        console.print(f"No media reference at offset {offset}")
        raise typer.Exit(1)

    text = document.text
    console.print(f"Reference: {ref.span.begin}-{ref.span.end}")
    console.print(
        f"Locator: {ref.locator_span.begin}-{ref.locator_span.end} "
        f"[bold]{escape(ref.locator(text))}[/bold]",
        highlight=False,
    )
    console.print(
        f"Attributes: {ref.attributes_span.begin}-{ref.attributes_span.end} "
        f"[bold]{escape(ref.attributes(text))}[/bold]",
        highlight=False,
    )
