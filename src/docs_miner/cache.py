from __future__ import annotations

import os
import tempfile
import threading
from collections import Counter
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from .errors import FetchUnavailable
from .http_client import FetchResult
from .manifest import CrawlEvent, CrawlManifest
from .urls import path_segments

CACHE_FILENAME = "index.html"


class Transport(Protocol):
    def get(self, url: str) -> FetchResult: ...


@dataclass(frozen=True)
class CacheEntry:
    dir_path: Path
    body_path: Path


def cache_paths(cache_dir: Path, *, url: str) -> CacheEntry:
    """Mirror the URL path under cache_dir: <cache_dir>/<url path>/index.html."""
    dir_path = cache_dir.joinpath(*path_segments(url))
    return CacheEntry(dir_path=dir_path, body_path=dir_path / CACHE_FILENAME)


def read_cached(entry: CacheEntry) -> bytes | None:
    try:
        return entry.body_path.read_bytes()
    except OSError:
        return None


def write_cached(entry: CacheEntry, body: bytes) -> None:
    # Concurrent writers may race on one path; os.replace keeps the file whole.
    entry.dir_path.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=entry.dir_path, prefix=".", suffix=".part")
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(body)
        os.replace(tmp_name, entry.body_path)
    except OSError:
        try:
            os.unlink(tmp_name)
        except OSError:
            pass
        raise


class ContentStore:
    """Get-or-fetch byte store keyed by URL.

    A cached copy is returned unconditionally; there is no expiry. Network
    payloads are written through to the cache on a best-effort basis.
    """

    def __init__(
        self,
        transport: Transport,
        *,
        cache_dir: Path | None = None,
        manifest: CrawlManifest | None = None,
    ) -> None:
        self.transport = transport
        self.cache_dir = cache_dir if cache_dir is not None else Path(tempfile.gettempdir())
        self.manifest = manifest
        self.stats: Counter[str] = Counter()
        self._lock = threading.Lock()

    def _note(self, event: CrawlEvent, url: str, **detail: object) -> None:
        with self._lock:
            self.stats[event.value] += 1
        if self.manifest is not None:
            self.manifest.record(event, url, **detail)

    def fetch(self, url: str) -> bytes:
        entry = cache_paths(self.cache_dir, url=url)
        cached = read_cached(entry)
        if cached is not None:
            self._note(CrawlEvent.CACHED, url)
            return cached

        try:
            res = self.transport.get(url)
        except FetchUnavailable as e:
            self._note(CrawlEvent.UNAVAILABLE, url, error=str(e))
            raise

        try:
            write_cached(entry, res.body)
        except OSError as e:
            self._note(CrawlEvent.CACHE_WRITE_FAILED, url, error=str(e))
        self._note(
            CrawlEvent.FETCHED, url, status_code=res.status_code, bytes=len(res.body)
        )
        return res.body
