from __future__ import annotations

import threading


class VisitGuard:
    """Set of URLs already claimed by the crawl.

    try_visit() is an atomic test-and-set: for any URL string exactly one
    caller ever gets True. Membership only grows.
    """

    def __init__(self) -> None:
        self._seen: set[str] = set()
        self._lock = threading.Lock()

    def try_visit(self, url: str) -> bool:
        with self._lock:
            if url in self._seen:
                return False
            self._seen.add(url)
            return True

    def __contains__(self, url: object) -> bool:
        with self._lock:
            return url in self._seen

    def __len__(self) -> int:
        with self._lock:
            return len(self._seen)
