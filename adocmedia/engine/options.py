"""
Display configuration for inline media annotations.

Centralizes the policy flags consulted by the registry. Defaults keep remote
images off; ``from_env()`` lets a host or the CLI flip them without code
changes:

  ADOCMEDIA_DISPLAY_REMOTE    true/false
  ADOCMEDIA_REMOTE_PROTOCOLS  comma separated schemes, e.g. "https,http"
  ADOCMEDIA_MAX_IMAGE_SIZE    "WIDTHxHEIGHT", e.g. "800x600"
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import FrozenSet, Iterable, Optional, Tuple
from urllib.parse import urlparse

from adocmedia.exceptions import ConfigError

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


def parse_size(raw: str) -> Tuple[int, int]:
    """Parse ``"WxH"`` into a positive ``(width, height)`` pair."""
    parts = raw.lower().replace(" ", "").split("x")
    if len(parts) != 2:
        raise ConfigError(f"Invalid size {raw!r}, expected WIDTHxHEIGHT")
    try:
        width, height = int(parts[0]), int(parts[1])
    except ValueError:
        raise ConfigError(f"Invalid size {raw!r}, expected WIDTHxHEIGHT")
    if width <= 0 or height <= 0:
        raise ConfigError(f"Invalid size {raw!r}, dimensions must be positive")
    return width, height


def normalize_protocols(protocols: Iterable[str]) -> FrozenSet[str]:
    return frozenset(p.strip().lower().rstrip(":") for p in protocols if p.strip())


@dataclass(frozen=True)
class DisplayConfig:
    # Remote images are only fetched when explicitly enabled
    display_remote_images: bool = False
    remote_image_protocols: FrozenSet[str] = frozenset({"https"})
    # (width, height) cap passed to surfaces that can scale
    max_image_size: Optional[Tuple[int, int]] = None

    def scheme_allowed(self, locator: str) -> bool:
        scheme = urlparse(locator).scheme.lower()
        return bool(scheme) and scheme in self.remote_image_protocols

    def may_fetch(self, locator: str) -> bool:
        return self.display_remote_images and self.scheme_allowed(locator)

    @classmethod
    def from_env(
        cls, environ=None, base: Optional["DisplayConfig"] = None
    ) -> "DisplayConfig":
        """Build a config from ADOCMEDIA_* variables layered over ``base``."""
        env = os.environ if environ is None else environ
        kwargs = {}

        raw = env.get("ADOCMEDIA_DISPLAY_REMOTE")
        if raw is not None:
            flag = raw.strip().lower()
            if flag in _TRUE:
                kwargs["display_remote_images"] = True
            elif flag in _FALSE:
                kwargs["display_remote_images"] = False
            else:
                raise ConfigError(f"Invalid ADOCMEDIA_DISPLAY_REMOTE value {raw!r}")

        raw = env.get("ADOCMEDIA_REMOTE_PROTOCOLS")
        if raw is not None:
            kwargs["remote_image_protocols"] = normalize_protocols(raw.split(","))

        raw = env.get("ADOCMEDIA_MAX_IMAGE_SIZE")
        if raw:
            kwargs["max_image_size"] = parse_size(raw)

        return replace(base, **kwargs) if base is not None else cls(**kwargs)
