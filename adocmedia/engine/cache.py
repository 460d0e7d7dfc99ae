"""
Remote asset cache.

Maps a URL to a local temporary file holding its content. A URL is fetched at
most once per cache instance; failed fetches are not recorded, so the next
call retries. ``default_cache()`` returns the process-wide instance used when
a registry is built without an explicit cache.
"""

from __future__ import annotations

import logging
import os
import posixpath
import tempfile
import threading
from typing import Dict, Optional
from urllib.parse import urlparse

from adocmedia.exceptions import FetchError

from .client import HttpTransport, Transport

LOGGER = logging.getLogger(__name__)


def _suffix_for(url: str) -> str:
    ext = posixpath.splitext(urlparse(url).path)[1]
    # keep extensions that look like file types; image viewers key off them
    if ext and len(ext) <= 6 and ext[1:].isalnum():
        return ext.lower()
    return ""


class _PendingFetch:
    """Per-URL download lock plus the number of callers using it."""

    __slots__ = ("lock", "users")

    def __init__(self):
        self.lock = threading.Lock()
        self.users = 0


class RemoteAssetCache:
    def __init__(
        self,
        transport: Optional[Transport] = None,
        *,
        directory: Optional[str] = None,
    ):
        self._transport = transport or HttpTransport()
        self._directory = directory
        self._paths: Dict[str, str] = {}
        self._lock = threading.Lock()
        self._pending: Dict[str, _PendingFetch] = {}

    def __contains__(self, url: str) -> bool:
        with self._lock:
            return url in self._paths

    def __len__(self) -> int:
        with self._lock:
            return len(self._paths)

    def lookup(self, url: str) -> Optional[str]:
        """Return the cached path for ``url`` without fetching."""
        with self._lock:
            return self._paths.get(url)

    def get(self, url: str) -> str:
        """Return a local path for ``url``, downloading it on first use.

        Raises FetchError when the download fails; nothing is cached then.
        """
        with self._lock:
            path = self._paths.get(url)
            if path is not None:
                LOGGER.debug("Cache hit for %s", url)
                return path
            pending = self._pending.get(url)
            if pending is None:
                pending = self._pending[url] = _PendingFetch()
            pending.users += 1

        try:
            # one download per URL; other callers wait here and then see the entry
            with pending.lock:
                with self._lock:
                    path = self._paths.get(url)
                if path is not None:
                    return path
                path = self._fetch(url)
                with self._lock:
                    self._paths[url] = path
                return path
        finally:
            with self._lock:
                pending.users -= 1
                if pending.users == 0:
                    del self._pending[url]

    def _fetch(self, url: str) -> str:
        if self._directory:
            os.makedirs(self._directory, exist_ok=True)
        fd, path = tempfile.mkstemp(
            prefix="adocmedia-", suffix=_suffix_for(url), dir=self._directory
        )
        os.close(fd)
        LOGGER.info("Fetching %s into %s", url, path)
        try:
            self._transport.download(url, path)
        except FetchError:
            self._discard(path)
            raise
        except OSError as e:
            self._discard(path)
            raise FetchError(f"Could not write local copy: {e}", url=url) from e
        return path

    @staticmethod
    def _discard(path: str) -> None:
        try:
            os.remove(path)
        except OSError:
            LOGGER.debug("Could not remove partial download %s", path)

    def reset(self) -> None:
        """Forget every entry. Local files are left in place.

        Downloads already in flight still record their result.
        """
        with self._lock:
            self._paths.clear()


_DEFAULT_CACHE: Optional[RemoteAssetCache] = None
_DEFAULT_LOCK = threading.Lock()


def default_cache() -> RemoteAssetCache:
    global _DEFAULT_CACHE
    with _DEFAULT_LOCK:
        if _DEFAULT_CACHE is None:
            _DEFAULT_CACHE = RemoteAssetCache()
        return _DEFAULT_CACHE
