"""Public exports for adocmedia data models."""

from __future__ import annotations

from .settings import DisplaySettings

__all__ = ["DisplaySettings"]
