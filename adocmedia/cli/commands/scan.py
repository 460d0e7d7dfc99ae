"""Scan command: list the media references of a document."""

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from adocmedia.cli.utils import config
from adocmedia.engine import scan_references

console = Console()


def main(path: str = typer.Argument(..., help="AsciiDoc document to scan")):
    """List every image reference with its spans."""
    document = config.load_document(path)
    refs = scan_references(document.text)
    if not refs:
        console.print("No media references found")
        return

    table = Table("Span", "Kind", "Locator", "Attributes")
    for ref in refs:
        table.add_row(
            f"{ref.span.begin}-{ref.span.end}",
            "block" if ref.block else "inline",
            escape(ref.locator(document.text)),
            escape(ref.attributes(document.text)),
        )
    console.print(table)
