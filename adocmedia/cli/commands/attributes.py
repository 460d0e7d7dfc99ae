"""Attributes command: show the document's attribute definitions."""

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from adocmedia.cli.utils import config
from adocmedia.engine import build_attribute_table

console = Console()


def main(path: str = typer.Argument(..., help="AsciiDoc document to read")):
    """Show the effective attribute table (last definition wins)."""
    document = config.load_document(path)
    table_data = build_attribute_table(document.text)
    if not table_data:
        console.print("No attribute definitions found")
        return

    table = Table("Name", "Value")
    for name, value in table_data.items():
        table.add_row(escape(name), escape(value))
    console.print(table)
