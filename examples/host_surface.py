"""Example: wiring the annotation registry into a host surface.

Run: python examples/host_surface.py path/to/doc.adoc [--remote] [--toggle]

The surface below prints what a real editor would draw, and a post-creation
hook stands in for attaching a context menu to every new annotation.
"""

from __future__ import annotations

import argparse
import logging
from typing import Dict

from rich.console import Console
from rich.logging import RichHandler

from adocmedia.engine import (
    Annotation,
    AnnotationPayload,
    AnnotationRegistry,
    DisplayConfig,
    Document,
)
from adocmedia.exceptions import DisplayUnsupported

console = Console()

logger = logging.getLogger("adocmedia.example")


class ConsoleSurface:
    """Prints spans instead of drawing images."""

    supports_max_size = True

    def __init__(self) -> None:
        self._spans: Dict[int, AnnotationPayload] = {}
        self._next = 0

    def create(self, begin: int, end: int, payload: AnnotationPayload) -> int:
        self._next += 1
        self._spans[self._next] = payload
        console.print(f"[green]+[/green] [{begin}, {end}) {payload.path}")
        return self._next

    def destroy(self, handle: int) -> None:
        payload = self._spans.pop(handle)
        console.print(f"[red]-[/red] {payload.path}")

    def flush(self, handle: int) -> None:
        console.print(f"[yellow]flush[/yellow] {self._spans[handle].path}")


def attach_menu(annotation: Annotation) -> None:
    logger.info("Menu attached to annotation at %d", annotation.span.begin)


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Display inline images of a document")
    p.add_argument("path", help="AsciiDoc document")
    p.add_argument(
        "--remote",
        action="store_true",
        default=False,
        help="Fetch https images",
    )
    p.add_argument(
        "--toggle",
        action="store_true",
        default=False,
        help="Toggle twice to show removal and redisplay",
    )
    return p.parse_args()


def main():
    """Main function."""
    logging.basicConfig(level=logging.INFO, handlers=[RichHandler()])
    args = parse_args()

    document = Document.from_file(args.path)
    config = DisplayConfig.from_env(
        base=DisplayConfig(display_remote_images=args.remote)
    )
    registry = AnnotationRegistry(ConsoleSurface(), config=config, hooks=[attach_menu])

    try:
        registry.display_all(document)
    except DisplayUnsupported:
        logger.error("This surface cannot display images.")
        return

    if args.toggle:
        console.rule("toggle")
        registry.toggle(document)
        console.rule("toggle")
        registry.toggle(document)

    if registry.annotations:
        console.rule("refresh first")
        registry.refresh_at(document, registry.annotations[0].span.begin)

    registry.close()


if __name__ == "__main__":
    main()
