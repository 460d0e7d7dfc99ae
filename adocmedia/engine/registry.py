"""
Per-document annotation registry.

Public API:
  - AnnotationRegistry.display_all(document)
  - AnnotationRegistry.create_at(reference, document) -> Optional[Annotation]
  - AnnotationRegistry.display_at(document, offset) -> Optional[Annotation]
  - AnnotationRegistry.refresh_at(document, offset) -> Optional[Annotation]
  - AnnotationRegistry.list_in(begin, end) -> List[Annotation]
  - AnnotationRegistry.annotation_at(offset) -> Optional[Annotation]
  - AnnotationRegistry.remove_at(offset, flush=False) -> bool
  - AnnotationRegistry.remove_all() -> bool
  - AnnotationRegistry.toggle(document) -> bool
  - AnnotationRegistry.save_at(offset, destination) -> str
  - AnnotationRegistry.close()

Offsets are document character offsets; ranges are half-open. The registry is
owned by one document session and is not thread-safe; the remote cache it
uses may be shared.
"""

from __future__ import annotations

import logging
import os
import posixpath
import shutil
from typing import Callable, Iterable, List, Optional, Tuple
from urllib.parse import urlparse
from urllib.request import url2pathname

from adocmedia.exceptions import (
    AnnotationNotFound,
    DisplayUnsupported,
    FetchError,
    RegistryClosed,
)

from .attributes import build_attribute_table, resolve_locator
from .cache import RemoteAssetCache, default_cache
from .domain import Annotation, AnnotationPayload, Document, MediaReference, Span
from .options import DisplayConfig
from .scanner import match_at, reference_at, scan_references
from .surface import (
    AnnotationSurface,
    can_display_images,
    current_span,
    supports_max_size,
)

LOGGER = logging.getLogger(__name__)

AnnotationHook = Callable[[Annotation], None]


def local_candidate(locator: str, directory: str) -> str:
    """Map a resolved locator to the local path it would denote."""
    parsed = urlparse(locator)
    if parsed.scheme == "file":
        return url2pathname(parsed.path)
    path = os.path.expanduser(locator)
    if not os.path.isabs(path):
        path = os.path.join(directory, path)
    return os.path.normpath(path)


class AnnotationRegistry:
    """
    Live annotations for one document, in creation order.
    """

    def __init__(
        self,
        surface: AnnotationSurface,
        *,
        cache: Optional[RemoteAssetCache] = None,
        config: Optional[DisplayConfig] = None,
        hooks: Iterable[AnnotationHook] = (),
    ):
        self._surface = surface
        self._cache = cache if cache is not None else default_cache()
        self._config = config or DisplayConfig()
        self._hooks: List[AnnotationHook] = list(hooks)
        self._annotations: List[Annotation] = []
        self._closed = False

    @property
    def config(self) -> DisplayConfig:
        return self._config

    @property
    def annotations(self) -> List[Annotation]:
        return list(self._annotations)

    def __len__(self) -> int:
        return len(self._annotations)

    def add_hook(self, hook: AnnotationHook) -> None:
        self._hooks.append(hook)

    # ----------------------------- Display -----------------------------------

    def display_all(self, document: Document) -> List[Annotation]:
        """Replace every annotation with a fresh one per resolvable reference."""
        self._ensure_open()
        if not can_display_images(self._surface):
            raise DisplayUnsupported("Annotation surface cannot display images")
        self.remove_all()
        refs = scan_references(document.text)
        LOGGER.info("Displaying %d media references", len(refs))
        created: List[Annotation] = []
        for ref in refs:
            ann = self.create_at(ref, document)
            if ann is not None:
                created.append(ann)
        LOGGER.info("Created %d annotations", len(created))
        return created

    def create_at(
        self, reference: MediaReference, document: Document
    ) -> Optional[Annotation]:
        self._ensure_open()
        path, source_url = self._resolve_path(reference, document)
        if path is None:
            return None

        max_size = self._config.max_image_size
        if not supports_max_size(self._surface):
            max_size = None
        payload = AnnotationPayload(path=path, max_size=max_size)
        span = reference.span
        handle = self._surface.create(span.begin, span.end, payload)
        ann = Annotation(
            span=span,
            path=path,
            reference=reference,
            handle=handle,
            source_url=source_url,
        )
        self._annotations.append(ann)
        LOGGER.debug(
            "Annotation created at [%d, %d) for %s", span.begin, span.end, path
        )
        for hook in self._hooks:
            hook(ann)
        return ann

    def _resolve_path(
        self, reference: MediaReference, document: Document
    ) -> Tuple[Optional[str], Optional[str]]:
        locator = reference.locator(document.text)
        if "{" in locator:
            locator = resolve_locator(locator, build_attribute_table(document.text))

        path = local_candidate(locator, document.directory)
        source_url: Optional[str] = None
        if not os.path.isfile(path) and self._config.may_fetch(locator):
            try:
                path = self._cache.get(locator)
                source_url = locator
            except FetchError as e:
                LOGGER.warning("Skipping %s: %s", locator, e)
                return None, None

        if not os.path.isfile(path):
            LOGGER.debug("Skipping %s: no local file", locator)
            return None, None
        return path, source_url

    def display_at(self, document: Document, offset: int) -> Optional[Annotation]:
        """Display only the reference at ``offset``."""
        self._ensure_open()
        if not can_display_images(self._surface):
            raise DisplayUnsupported("Annotation surface cannot display images")
        # an offset sitting on a marker wins over the backward search
        ref = match_at(document.text, offset) or reference_at(document.text, offset)
        if ref is None:
            return None
        for ann in self.list_in(ref.span.begin, ref.span.end):
            self._destroy(ann)
        return self.create_at(ref, document)

    def refresh_at(self, document: Document, offset: int) -> Optional[Annotation]:
        """Flush and redisplay the annotation at ``offset``."""
        ann = self.annotation_at(offset)
        begin = offset
        if ann is not None:
            begin = self._span_of(ann).begin
            self.remove_at(offset, flush=True)
        return self.display_at(document, begin)

    # ----------------------------- Queries -----------------------------------

    def _span_of(self, ann: Annotation) -> Span:
        return current_span(self._surface, ann.handle, ann.span)

    def list_in(self, begin: int, end: int) -> List[Annotation]:
        """Annotations intersecting ``[begin, end)``; narrowing is ignored."""
        return [a for a in self._annotations if self._span_of(a).intersects(begin, end)]

    def annotation_at(self, offset: int) -> Optional[Annotation]:
        found = self.list_in(offset, offset + 1)
        return found[0] if found else None

    # ----------------------------- Removal -----------------------------------

    def _destroy(self, ann: Annotation, *, flush: bool = False) -> None:
        if flush:
            flush_fn = getattr(self._surface, "flush", None)
            if flush_fn is not None:
                flush_fn(ann.handle)
        self._surface.destroy(ann.handle)
        self._annotations.remove(ann)

    def remove_at(self, offset: int, flush: bool = False) -> bool:
        ann = self.annotation_at(offset)
        if ann is None:
            return False
        self._destroy(ann, flush=flush)
        LOGGER.debug("Annotation removed at offset %d (flush=%s)", offset, flush)
        return True

    def remove_all(self) -> bool:
        if not self._annotations:
            return False
        count = len(self._annotations)
        for ann in list(self._annotations):
            self._destroy(ann)
        LOGGER.info("Removed %d annotations", count)
        return True

    def toggle(self, document: Document) -> bool:
        """Remove annotations if any are shown, else display them.

        Returns True when annotations are displayed afterwards.
        """
        if self.remove_all():
            return False
        self.display_all(document)
        return True

    # ----------------------------- Misc --------------------------------------

    def save_at(self, offset: int, destination: str) -> str:
        """Copy the file behind the annotation at ``offset`` to ``destination``."""
        ann = self.annotation_at(offset)
        if ann is None:
            raise AnnotationNotFound(offset)
        target = destination
        if os.path.isdir(destination):
            name = ""
            if ann.source_url:
                name = posixpath.basename(urlparse(ann.source_url).path)
            target = os.path.join(destination, name or os.path.basename(ann.path))
        shutil.copyfile(ann.path, target)
        LOGGER.info("Saved %s to %s", ann.path, target)
        return target

    def close(self) -> None:
        """End the document session: drop every annotation."""
        if self._closed:
            return
        self.remove_all()
        self._closed = True

    def _ensure_open(self) -> None:
        if self._closed:
            raise RegistryClosed("Document session is closed")
