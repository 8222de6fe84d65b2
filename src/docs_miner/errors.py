from __future__ import annotations


class MinerError(Exception):
    """Base class for per-page crawl failures."""


class FetchUnavailable(MinerError):
    """Neither the cache nor the network produced a payload."""

    def __init__(self, url: str, reason: object = None) -> None:
        self.url = url
        self.reason = reason
        msg = f"Failed to fetch {url}"
        if reason is not None:
            msg += f": {reason}"
        super().__init__(msg)


class ParseFailure(MinerError):
    pass


class ClassificationRejected(MinerError):
    def __init__(self, label: str) -> None:
        self.label = label
        super().__init__(f"Unrecognized page type label: {label!r}")


class LinkResolutionFailure(MinerError):
    pass
