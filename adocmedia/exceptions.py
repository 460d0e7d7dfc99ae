"""Library exceptions."""

from typing import Optional


class MediaError(Exception):
    """Base adocmedia error."""


class DisplayUnsupported(MediaError):
    """The annotation surface cannot render images at all."""


class FetchError(MediaError):
    """A remote asset could not be downloaded."""

    def __init__(
        self, message: str, url: str, status_code: Optional[int] = None
    ) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class AnnotationNotFound(MediaError):
    """No annotation covers the requested offset."""

    def __init__(self, offset: int) -> None:
        super().__init__(f"No annotation at offset {offset}")
        self.offset = offset


class RegistryClosed(MediaError):
    """The registry's document session has been closed."""


class ConfigError(MediaError):
    """Invalid configuration value (environment or config file)."""
