"""
Pydantic model for the on-disk display settings file.

The CLI keeps its settings in ``~/.config/adocmedia/config.json``::

    {
      "displayRemoteImages": true,
      "remoteImageProtocols": ["https", "http"],
      "maxImageSize": "800x600"
    }
"""

from __future__ import annotations

from typing import List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from adocmedia.engine.options import DisplayConfig, normalize_protocols, parse_size
from adocmedia.exceptions import ConfigError


# ─── Base and Shared Config ──────────────────────────────────────────────────
class ConfigModel(BaseModel):
    """Base class providing camel-case aliases and population by name."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )


class DisplaySettings(ConfigModel):
    """Display policy as stored in the settings file."""

    display_remote_images: bool = False
    """Fetch and show remote images at all."""

    remote_image_protocols: List[str] = Field(default_factory=lambda: ["https"])
    """URL schemes that may be fetched."""

    max_image_size: Optional[Tuple[int, int]] = None
    """Cap as (width, height); also accepts "WxH"."""

    model_config = ConfigModel.model_config | ConfigDict(
        json_schema_extra={
            "example": {
                "displayRemoteImages": True,
                "remoteImageProtocols": ["https"],
                "maxImageSize": "800x600",
            }
        }
    )

    @field_validator("remote_image_protocols")
    @classmethod
    def _lower_protocols(cls, v: List[str]) -> List[str]:
        return sorted(normalize_protocols(v))

    @field_validator("max_image_size", mode="before")
    @classmethod
    def _parse_size(
        cls, v: Union[str, List[int], Tuple[int, int], None]
    ) -> Optional[Tuple[int, int]]:
        if isinstance(v, str):
            try:
                return parse_size(v)
            except ConfigError as e:
                raise ValueError(str(e)) from e
        return v

    @field_validator("max_image_size")
    @classmethod
    def _positive_size(
        cls, v: Optional[Tuple[int, int]]
    ) -> Optional[Tuple[int, int]]:
        if v is not None and (v[0] <= 0 or v[1] <= 0):
            raise ValueError("maxImageSize dimensions must be positive")
        return v

    def to_config(self) -> DisplayConfig:
        return DisplayConfig(
            display_remote_images=self.display_remote_images,
            remote_image_protocols=frozenset(self.remote_image_protocols),
            max_image_size=self.max_image_size,
        )
