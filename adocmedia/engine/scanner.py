"""
Media reference scanner.

Recognizes the narrow macro form used to embed media::

    image:locator[attributes]      inline
    image::locator[attributes]     block

The locator is one or more characters other than ``]``; the attribute list
holds no ``]``. The marker only counts at the start of a word. Matching is
done by hand rather than with a regex so the boundary between locator and
attribute list is explicit: the locator runs up to the last ``[`` that
precedes the first ``]``.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from .domain import MediaReference, Span

LOGGER = logging.getLogger(__name__)

MARKER = "image:"


def _match_tail(
    text: str, start: int, loc_start: int, block: bool
) -> Optional[MediaReference]:
    close = text.find("]", loc_start)
    if close < 0:
        return None
    opening = text.rfind("[", loc_start, close)
    # locator must hold at least one character
    if opening <= loc_start:
        return None
    return MediaReference(
        span=Span(start, close + 1),
        locator_span=Span(loc_start, opening),
        attributes_span=Span(opening + 1, close),
        block=block,
    )


def match_at(text: str, start: int) -> Optional[MediaReference]:
    """Match a reference anchored exactly at ``start``."""
    if start < 0 or not text.startswith(MARKER, start):
        return None
    # the marker must start a word
    if start > 0 and text[start - 1].isalnum():
        return None
    after = start + len(MARKER)
    if text.startswith(":", after):
        ref = _match_tail(text, start, after + 1, block=True)
        if ref is not None:
            return ref
        # "image::[...]" still matches the inline form with ":" as locator
    return _match_tail(text, start, after, block=False)


def scan_references(text: str) -> List[MediaReference]:
    """Return every non-overlapping reference in document order."""
    refs: List[MediaReference] = []
    pos = 0
    while True:
        idx = text.find(MARKER, pos)
        if idx < 0:
            break
        ref = match_at(text, idx)
        if ref is None:
            pos = idx + 1
            continue
        refs.append(ref)
        pos = ref.span.end
    LOGGER.debug("Scanned %d media references", len(refs))
    return refs


def reference_at(text: str, offset: int) -> Optional[MediaReference]:
    """Return the reference starting around ``offset``, or None.

    When the character before ``offset`` is alphabetic the alphabetic run is
    skipped backward (landing on the start of the marker word). Otherwise the
    marker is searched backward within the current line only. The full form
    is then matched anchored at the resulting position.
    """
    offset = max(0, min(offset, len(text)))
    pos = offset
    if pos > 0 and text[pos - 1].isalpha():
        while pos > 0 and text[pos - 1].isalpha():
            pos -= 1
    else:
        line_start = text.rfind("\n", 0, offset) + 1
        found = text.rfind(MARKER, line_start, offset)
        if found >= 0:
            pos = found
    return match_at(text, pos)
