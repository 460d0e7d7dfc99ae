# adocmedia/engine/domain.py
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

AttributeTable = Dict[str, str]


@dataclass(frozen=True)
class Span:
    """Half-open ``[begin, end)`` range of document offsets."""

    begin: int
    end: int

    def __len__(self) -> int:
        return self.end - self.begin

    def contains(self, offset: int) -> bool:
        return self.begin <= offset < self.end

    def intersects(self, begin: int, end: int) -> bool:
        return self.begin < end and begin < self.end

    def slice(self, text: str) -> str:
        return text[self.begin : self.end]


@dataclass(frozen=True)
class MediaReference:
    """One ``image:locator[attributes]`` occurrence found by the scanner."""

    span: Span
    locator_span: Span
    attributes_span: Span
    block: bool = False

    def locator(self, text: str) -> str:
        return self.locator_span.slice(text)

    def attributes(self, text: str) -> str:
        return self.attributes_span.slice(text)


@dataclass(frozen=True)
class Document:
    text: str
    path: Optional[str] = None

    @property
    def directory(self) -> str:
        if self.path:
            return os.path.dirname(os.path.abspath(self.path))
        return os.getcwd()

    @classmethod
    def from_file(cls, path: str, encoding: str = "utf-8") -> "Document":
        with open(path, "r", encoding=encoding) as f:
            return cls(text=f.read(), path=path)


@dataclass(frozen=True)
class AnnotationPayload:
    """What the surface is asked to render."""

    path: str
    max_size: Optional[Tuple[int, int]] = None


@dataclass(eq=False)
class Annotation:
    """A live annotation. ``handle`` belongs to the surface; we only look it up."""

    span: Span
    path: str
    reference: MediaReference
    handle: Any = field(default=None, repr=False)
    # Remote URL the local copy was fetched from, if any
    source_url: Optional[str] = None
