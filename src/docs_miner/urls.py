from __future__ import annotations

from pathlib import PurePosixPath
from urllib.parse import urljoin, urlparse

from .errors import LinkResolutionFailure

_WEB_SCHEMES = {"http", "https"}


def resolve_link(href: str | None, *, base_url: str) -> str:
    """Resolve an anchor href against the page it was found on.

    The result is the exact string used for visit de-duplication, so no
    further normalization is applied (fragments and queries are kept).
    """

    if href is None:
        raise LinkResolutionFailure("anchor has no href")
    try:
        absolute = urljoin(base_url, href.strip())
        parsed = urlparse(absolute)
    except ValueError as e:
        raise LinkResolutionFailure(f"{href!r}: {e}") from e

    if parsed.scheme.lower() not in _WEB_SCHEMES or not parsed.netloc:
        raise LinkResolutionFailure(f"{href!r} does not resolve to a web URL")
    return absolute


def path_segments(url: str) -> tuple[str, ...]:
    """Return the URL path split into segments safe to use as directories.

    Empty, "." and ".." segments are dropped so a cache location can never
    escape its root.
    """

    path = urlparse(url).path
    return tuple(
        seg for seg in PurePosixPath("/" + path).parts[1:] if seg not in {".", ".."}
    )
