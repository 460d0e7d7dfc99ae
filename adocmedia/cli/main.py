#!/usr/bin/env python
"""Command line interface for adocmedia."""

import typer

from adocmedia.cli.commands import at, attributes, display, resolve, scan
from adocmedia.cli.utils import config

app = typer.Typer(help="Inline media annotations for AsciiDoc documents")

# Register commands
app.command("scan", help="List media references")(scan.main)
app.command("attributes", help="List attribute definitions")(attributes.main)
app.command("resolve", help="Resolve reference locators")(resolve.main)
app.command("display", help="Display images and list the annotations")(display.main)
app.command("at", help="Find the media reference at an offset")(at.main)


@app.callback()
def callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logs"),
):
    """Inspect and display the image references of AsciiDoc documents."""
    config.setup_logging(verbose)


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
