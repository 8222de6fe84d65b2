from __future__ import annotations

import json
import threading
import time
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any


def utc_iso() -> str:
    return time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime())


class CrawlEvent(str, Enum):
    """Per-page outcomes; the values double as stats counter keys."""

    FETCHED = "fetched"
    CACHED = "cached"
    UNAVAILABLE = "unavailable"
    CACHE_WRITE_FAILED = "cache_write_failed"
    PARSE_FAILED = "parse_failed"
    REJECTED = "rejected"
    UNRESOLVED_LINK = "unresolved_link"
    ALREADY_VISITED = "already_visited"
    RECORDED = "recorded"
    DEADLINE_DROPPED = "deadline_dropped"


@dataclass
class CrawlManifest:
    """JSONL log of page outcomes (manifest.jsonl) and a run summary
    (manifest.json). Safe to call from crawl worker threads."""

    out_dir: Path
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    def __post_init__(self) -> None:
        self.jsonl_path = self.out_dir / "manifest.jsonl"
        self.json_path = self.out_dir / "manifest.json"

    def record(self, event: CrawlEvent, url: str, **detail: Any) -> None:
        line = json.dumps(
            {"kind": event.value, "url": url, "at": utc_iso(), **detail},
            ensure_ascii=False,
        )
        with self._lock:
            self.jsonl_path.parent.mkdir(parents=True, exist_ok=True)
            with self.jsonl_path.open("a", encoding="utf-8", newline="\n") as f:
                f.write(line + "\n")

    def write_summary(
        self,
        *,
        root_url: str,
        started_at: str,
        visited_urls: int,
        stats: Counter[str],
    ) -> None:
        summary = {
            "root_url": root_url,
            "started_at": started_at,
            "finished_at": utc_iso(),
            "visited_urls": visited_urls,
            "stats": {e.value: stats[e.value] for e in CrawlEvent},
        }
        self.json_path.parent.mkdir(parents=True, exist_ok=True)
        self.json_path.write_text(
            json.dumps(summary, indent=2, ensure_ascii=False), encoding="utf-8"
        )
