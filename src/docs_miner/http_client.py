from __future__ import annotations

import time
from dataclasses import dataclass

import requests
from requests import exceptions as req_exc

from .errors import FetchUnavailable


@dataclass(frozen=True)
class FetchResult:
    url: str
    status_code: int
    fetched_at: float
    body: bytes


class HttpClient:
    """Plain GET transport.

    Any response body counts as a payload regardless of status code or
    content type; only transport errors (including timeouts) fail.
    """

    def __init__(
        self,
        session: requests.Session,
        *,
        timeout_s: float = 45,
        max_retries: int = 0,
        backoff_base_s: float = 1.0,
    ) -> None:
        self._session = session
        self._timeout_s = timeout_s
        self._max_retries = max_retries
        self._backoff_base_s = backoff_base_s

    def get(self, url: str) -> FetchResult:
        last_error: Exception | None = None

        for attempt in range(self._max_retries + 1):
            try:
                resp = self._session.get(url, timeout=self._timeout_s)
                return FetchResult(
                    url=url,
                    status_code=int(resp.status_code),
                    fetched_at=time.time(),
                    body=resp.content,
                )
            except req_exc.RequestException as e:
                last_error = e
                if attempt >= self._max_retries:
                    break
                time.sleep(self._backoff_base_s * (2**attempt))

        raise FetchUnavailable(url, last_error)
