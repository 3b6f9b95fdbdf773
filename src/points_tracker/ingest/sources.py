"""File retrieval backends.

A `FileSource` answers two questions for a catalog path: does it exist, and
what are its bytes. `LocalFileSource` reads from disk; `HttpFileSource` reads
from a static web server (the deployed dashboard serves the folder publicly).
Both report I/O problems as `FileUnavailableError`.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Protocol
from urllib.parse import quote

from points_tracker.errors import FileUnavailableError

log = logging.getLogger(__name__)


class FileSource(Protocol):
    def exists(self, path: str) -> bool: ...

    def read_bytes(self, path: str) -> bytes: ...


class LocalFileSource:
    """Read catalog paths relative to a local data root."""

    def __init__(self, root: Path) -> None:
        self.root = root

    def _resolve(self, path: str) -> Path:
        return self.root.joinpath(*path.split("/"))

    def exists(self, path: str) -> bool:
        try:
            return self._resolve(path).is_file()
        except OSError as e:
            raise FileUnavailableError(path, str(e)) from e

    def read_bytes(self, path: str) -> bytes:
        try:
            return self._resolve(path).read_bytes()
        except OSError as e:
            raise FileUnavailableError(path, str(e)) from e


class HttpFileSource:
    """Fetch catalog paths from `base_url` over HTTP.

    Existence is checked with HEAD and content fetched with GET; path
    segments are URL-quoted since file names carry spaces and accents.
    """

    def __init__(self, base_url: str, session: Any = None, timeout: float = 30.0) -> None:
        import requests  # type: ignore[import-untyped]  # local import to avoid requiring type stubs at module import

        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout
        self._request_error = requests.RequestException

    def url_for(self, path: str) -> str:
        return f"{self.base_url}/" + "/".join(quote(part) for part in path.split("/"))

    def exists(self, path: str) -> bool:
        url = self.url_for(path)
        try:
            r = self.session.head(url, timeout=self.timeout, allow_redirects=True)
        except self._request_error as e:
            raise FileUnavailableError(path, str(e)) from e
        return bool(r.ok)

    def read_bytes(self, path: str) -> bytes:
        url = self.url_for(path)
        log.debug("Downloading %s", url)
        try:
            r = self.session.get(url, timeout=self.timeout)
            r.raise_for_status()
        except self._request_error as e:
            raise FileUnavailableError(path, str(e)) from e
        return r.content
