from __future__ import annotations

import threading
from collections import Counter
from pathlib import Path

import pytest

from docs_miner.cache import ContentStore
from docs_miner.errors import FetchUnavailable
from docs_miner.http_client import FetchResult

ROOT = "https://docs.example.com/documentation"

_CRUMB_CLASS = "localnav-menu-item localnav-menu-breadcrumb-item"


def build_page(
    label: str | None = None,
    *,
    crumbs: tuple[str, ...] = (),
    topics: tuple[str, ...] = (),
    categories: dict[str, tuple[str, ...]] | None = None,
    truncated_last: bool = False,
) -> bytes:
    """Render a page in the documentation site's markup."""

    items = []
    for i, crumb in enumerate(crumbs):
        cls = _CRUMB_CLASS
        if truncated_last and i == len(crumbs) - 1:
            cls += " truncated"
        items.append(f'<li class="{cls}">{crumb}</li>')
    # The trailing "current page" item has a different class and is ignored.
    items.append('<li class="localnav-menu-item localnav-menu-current">here</li>')
    localnav = (
        '<div id="localnav"><div><div><div></div><div><div><div><ul>'
        + "".join(items)
        + "</ul><ul><li class=\"" + _CRUMB_CLASS + "\">second list</li></ul>"
        + "</div></div></div></div></div></div>"
    )

    main = ""
    if label is not None:
        main = f'<div id="main"><div><span> {label} </span></div><div><span>x</span></div></div>'

    topic_html = ""
    if topics:
        anchors = "".join(f'<a href="{href}">{href}</a>' for href in topics)
        topic_html = (
            '<div id="topics"><div><div><section><div><div><div><div><div>'
            + anchors
            + "</div></div></div></div></div></section></div></div></div>"
        )

    category_html = ""
    for cat_id, hrefs in (categories or {}).items():
        lis = "".join(f'<li><div><a href="{h}">{h}</a></div></li>' for h in hrefs)
        category_html += (
            f'<section id="{cat_id}"><div><h2>{cat_id}</h2></div>'
            f"<div><ul>{lis}</ul></div></section>"
        )

    return (
        "<!DOCTYPE html><html><head><title>t</title></head><body>"
        + localnav
        + main
        + category_html
        + topic_html
        + "</body></html>"
    ).encode("utf-8")


class FakeSite:
    """In-memory transport: URL -> body, counting every network call."""

    def __init__(self, pages: dict[str, bytes] | None = None) -> None:
        self.pages = dict(pages or {})
        self.calls: Counter[str] = Counter()
        self.fail_after_first: set[str] = set()
        self._lock = threading.Lock()

    def get(self, url: str) -> FetchResult:
        with self._lock:
            self.calls[url] += 1
            count = self.calls[url]
        if url in self.fail_after_first and count > 1:
            raise FetchUnavailable(url, "network gone")
        if url not in self.pages:
            raise FetchUnavailable(url, "no such page")
        return FetchResult(url=url, status_code=200, fetched_at=0.0, body=self.pages[url])


@pytest.fixture
def site() -> FakeSite:
    return FakeSite()


@pytest.fixture
def store(site: FakeSite, tmp_path: Path) -> ContentStore:
    return ContentStore(site, cache_dir=tmp_path / "cache")
