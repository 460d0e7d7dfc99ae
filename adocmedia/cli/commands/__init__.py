"""Command modules for the adocmedia CLI."""

from adocmedia.cli.commands import at, attributes, display, resolve, scan

__all__ = ["at", "attributes", "display", "resolve", "scan"]
