"""Inline media annotation engine.

Contains:
- attributes: attribute table builder and locator placeholder resolver
- scanner: media reference scanner and point query
- cache/client: remote asset cache and its download transports
- surface: the host annotation surface seam and an in-memory implementation
- registry: the per-document annotation registry
- events: adapters from host events to registry offsets
"""

from .attributes import build_attribute_table, resolve_locator
from .cache import RemoteAssetCache, default_cache
from .client import HttpTransport, Transport
from .domain import (
    Annotation,
    AnnotationPayload,
    AttributeTable,
    Document,
    MediaReference,
    Span,
)
from .options import DisplayConfig
from .registry import AnnotationRegistry
from .scanner import reference_at, scan_references
from .surface import AnnotationSurface, RecordingSurface

__all__ = [
    "Annotation",
    "AnnotationPayload",
    "AnnotationRegistry",
    "AnnotationSurface",
    "AttributeTable",
    "DisplayConfig",
    "Document",
    "HttpTransport",
    "MediaReference",
    "RecordingSurface",
    "RemoteAssetCache",
    "Span",
    "Transport",
    "build_attribute_table",
    "default_cache",
    "reference_at",
    "resolve_locator",
    "scan_references",
]
