"""
Event adapters for hosts that deliver pointer/menu events.

The registry only speaks in document offsets. These helpers translate a host
event into an offset and forward the call. An event is anything with an
integer ``position`` attribute (or a ``position()`` method), or a plain int.
"""

from __future__ import annotations

from typing import Any, Optional

from .domain import Annotation, Document, MediaReference
from .registry import AnnotationRegistry
from .scanner import reference_at


def event_offset(event: Any) -> int:
    if isinstance(event, int):
        return event
    pos = getattr(event, "position", None)
    if callable(pos):
        pos = pos()
    if not isinstance(pos, int):
        raise TypeError(f"Event {event!r} carries no document position")
    return pos


def reference_at_event(document: Document, event: Any) -> Optional[MediaReference]:
    return reference_at(document.text, event_offset(event))


def annotation_at_event(
    registry: AnnotationRegistry, event: Any
) -> Optional[Annotation]:
    return registry.annotation_at(event_offset(event))


def remove_at_event(
    registry: AnnotationRegistry, event: Any, *, flush: bool = False
) -> bool:
    return registry.remove_at(event_offset(event), flush=flush)


def display_at_event(
    registry: AnnotationRegistry, document: Document, event: Any
) -> Optional[Annotation]:
    return registry.display_at(document, event_offset(event))
