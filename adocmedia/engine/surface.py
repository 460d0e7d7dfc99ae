"""
Annotation surface seam.

The registry never draws anything itself. A host supplies an object matching
``AnnotationSurface`` that creates and destroys visual spans. Optional
capabilities are probed with ``getattr``:

  - can_display_images: bool (assumed True when absent)
  - supports_max_size: bool (assumed False when absent)
  - flush(handle): drop any cached rendering for a span
  - range_of(handle): current (begin, end) of a span after host edits
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, Tuple

from .domain import AnnotationPayload, Span

LOGGER = logging.getLogger(__name__)


class AnnotationSurface(Protocol):
    """Minimal host capability required by the registry."""

    def create(self, begin: int, end: int, payload: AnnotationPayload) -> Any: ...

    def destroy(self, handle: Any) -> None: ...


def can_display_images(surface: AnnotationSurface) -> bool:
    return bool(getattr(surface, "can_display_images", True))


def supports_max_size(surface: AnnotationSurface) -> bool:
    return bool(getattr(surface, "supports_max_size", False))


def current_span(surface: AnnotationSurface, handle: Any, fallback: Span) -> Span:
    range_of = getattr(surface, "range_of", None)
    if range_of is None:
        return fallback
    rng = range_of(handle)
    if rng is None:
        return fallback
    return Span(rng[0], rng[1])


@dataclass
class RecordingSurface(AnnotationSurface):
    """In-memory surface that records what it was asked to show.

    Used by the CLI and by tests; also a reference for host adapters.
    """

    can_display_images: bool = True
    supports_max_size: bool = True
    _spans: Dict[int, Tuple[Span, AnnotationPayload]] = field(default_factory=dict)
    _next_handle: int = 1
    flushed: List[AnnotationPayload] = field(default_factory=list)
    destroyed: List[int] = field(default_factory=list)

    def create(self, begin: int, end: int, payload: AnnotationPayload) -> int:
        handle = self._next_handle
        self._next_handle += 1
        self._spans[handle] = (Span(begin, end), payload)
        LOGGER.debug("Surface span %d created at [%d, %d)", handle, begin, end)
        return handle

    def destroy(self, handle: int) -> None:
        if self._spans.pop(handle, None) is not None:
            self.destroyed.append(handle)

    def flush(self, handle: int) -> None:
        entry = self._spans.get(handle)
        if entry is not None:
            self.flushed.append(entry[1])

    def range_of(self, handle: int) -> Optional[Tuple[int, int]]:
        entry = self._spans.get(handle)
        if entry is None:
            return None
        return entry[0].begin, entry[0].end

    def move(self, handle: int, begin: int, end: int) -> None:
        """Simulate a host edit relocating a span."""
        span, payload = self._spans[handle]
        self._spans[handle] = (Span(begin, end), payload)

    @property
    def live(self) -> List[Tuple[Span, AnnotationPayload]]:
        return [self._spans[h] for h in sorted(self._spans)]
