"""
Transports used by the remote asset cache.

A transport copies the resource at ``url`` into an existing local file path,
overwriting it. ``HttpTransport`` streams over a ``requests`` session and also
understands ``file:`` URLs so an allow-listed ``file`` scheme behaves like any
other remote source.
"""

from __future__ import annotations

import logging
import os
import shutil
from typing import Iterator, Optional, Protocol
from urllib.parse import urlparse
from urllib.request import url2pathname

import requests

from adocmedia.exceptions import FetchError

LOGGER = logging.getLogger(__name__)


class Transport(Protocol):
    """Minimal download seam required by the cache."""

    def download(self, url: str, path: str) -> None: ...


class HttpTransport:
    """
    Blocking streaming downloader:
      - GET with ``stream=True`` and a per-request timeout
      - status >= 400 and any ``requests`` failure raise FetchError
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        *,
        timeout: float = 30.0,
        chunk_size: int = 65536,
    ):
        self._session = session or requests.Session()
        self._timeout = timeout
        self._chunk_size = chunk_size
        LOGGER.debug("Initialized HttpTransport with timeout: %s", timeout)

    def get_stream(self, url: str) -> Iterator[bytes]:
        LOGGER.info("GET stream from %s", url)
        try:
            resp = self._session.get(url, stream=True, timeout=self._timeout)
        except requests.RequestException as e:
            LOGGER.error("GET stream from %s failed: %s", url, e)
            raise FetchError(f"Request failed: {e}", url=url) from e
        code = getattr(resp, "status_code", 0)
        if code >= 400:
            LOGGER.error("GET stream from %s failed with code %d", url, code)
            raise FetchError(f"HTTP {code} on asset GET", url=url, status_code=code)
        try:
            for chunk in resp.iter_content(chunk_size=self._chunk_size):
                if chunk:
                    yield chunk
        except requests.RequestException as e:
            LOGGER.error("Reading stream from %s failed: %s", url, e)
            raise FetchError(f"Transfer interrupted: {e}", url=url) from e

    def download(self, url: str, path: str) -> None:
        if urlparse(url).scheme == "file":
            self._copy_file_url(url, path)
            return
        with open(path, "wb") as f:
            for chunk in self.get_stream(url):
                f.write(chunk)
        LOGGER.info("Finished downloading %s to %s", url, path)

    @staticmethod
    def _copy_file_url(url: str, path: str) -> None:
        source = url2pathname(urlparse(url).path)
        if not os.path.isfile(source):
            raise FetchError(f"No such file: {source}", url=url)
        try:
            shutil.copyfile(source, path)
        except OSError as e:
            raise FetchError(f"Copy failed: {e}", url=url) from e
        LOGGER.info("Copied %s to %s", source, path)
