"""Inline media annotations for AsciiDoc documents."""

from adocmedia.engine import (
    Annotation,
    AnnotationRegistry,
    DisplayConfig,
    Document,
    MediaReference,
    RemoteAssetCache,
    build_attribute_table,
    reference_at,
    resolve_locator,
    scan_references,
)

__all__ = [
    "Annotation",
    "AnnotationRegistry",
    "DisplayConfig",
    "Document",
    "MediaReference",
    "RemoteAssetCache",
    "build_attribute_table",
    "reference_at",
    "resolve_locator",
    "scan_references",
]
