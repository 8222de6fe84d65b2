from __future__ import annotations

import threading
import time
from collections import Counter
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from pathlib import Path

import requests
from bs4 import BeautifulSoup
from tqdm import tqdm

from .cache import ContentStore
from .classify import (
    ROOT_PAGE,
    TOPIC_PAGE,
    PageShape,
    RejectionPolicy,
    classify,
)
from .content import parse_html
from .errors import (
    ClassificationRejected,
    FetchUnavailable,
    LinkResolutionFailure,
    ParseFailure,
)
from .http_client import HttpClient
from .manifest import CrawlEvent, CrawlManifest
from .models import DocumentRecord
from .tree import TreeNode, build_tree
from .urls import resolve_link
from .visit import VisitGuard

DEFAULT_ROOT_URL = "https://developer.apple.com/documentation"
DEFAULT_TITLE = "Documentation"


@dataclass
class CrawlConfig:
    root_url: str = DEFAULT_ROOT_URL
    title: str = DEFAULT_TITLE
    cache_dir: Path | None = None
    workers: int = 8
    timeout_s: float = 45
    deadline_s: float | None = None
    max_retries: int = 0
    rejection_policy: RejectionPolicy = RejectionPolicy.DROP_SUBTREE
    progress: bool = False


@dataclass(eq=False)
class _PageTask:
    url: str
    shape: PageShape
    record: DocumentRecord | None = None
    children: list[_PageTask] = field(default_factory=list)


@dataclass
class _Visited:
    record: DocumentRecord | None = None
    children: list[_PageTask] = field(default_factory=list)


def fold_records(root: _PageTask) -> list[DocumentRecord]:
    """Flatten the task tree post-order: children (in discovery order) first,
    then the page's own record."""

    out: list[DocumentRecord] = []
    stack: list[tuple[_PageTask, bool]] = [(root, False)]
    while stack:
        task, expanded = stack.pop()
        if expanded:
            if task.record is not None:
                out.append(task.record)
            continue
        stack.append((task, True))
        for child in reversed(task.children):
            stack.append((child, False))
    return out


class Crawler:
    """Crawl driver.

    Page tasks run on a bounded thread pool. Workers only fetch, parse,
    classify and claim links; the driver loop owns the task tree, so results
    are joined by parent task rather than by call stack.
    """

    def __init__(
        self,
        *,
        store: ContentStore,
        config: CrawlConfig,
        guard: VisitGuard | None = None,
        manifest: CrawlManifest | None = None,
    ) -> None:
        self.store = store
        self.cfg = config
        self.guard = guard if guard is not None else VisitGuard()
        self.manifest = manifest
        self._stats: Counter[str] = Counter()
        self._lock = threading.Lock()

    @property
    def stats(self) -> Counter[str]:
        with self._lock:
            merged = Counter(self._stats)
        merged.update(self.store.stats)
        return merged

    def _note(self, event: CrawlEvent, url: str, **detail: object) -> None:
        with self._lock:
            self._stats[event.value] += 1
        if self.manifest is not None:
            self.manifest.record(event, url, **detail)

    def _claim_links(self, hrefs: list[str], *, base_url: str) -> list[_PageTask]:
        children: list[_PageTask] = []
        for href in hrefs:
            try:
                url = resolve_link(href, base_url=base_url)
            except LinkResolutionFailure:
                self._note(CrawlEvent.UNRESOLVED_LINK, base_url, href=href)
                continue
            if not self.guard.try_visit(url):
                self._note(CrawlEvent.ALREADY_VISITED, url)
                continue
            children.append(_PageTask(url=url, shape=TOPIC_PAGE))
        return children

    def _visit(self, task: _PageTask, doc: BeautifulSoup | None = None) -> _Visited:
        if doc is None:
            try:
                doc = parse_html(self.store.fetch(task.url))
            except FetchUnavailable:
                return _Visited()
            except OSError as e:
                self._note(CrawlEvent.UNAVAILABLE, task.url, error=str(e))
                return _Visited()
            except ParseFailure as e:
                self._note(CrawlEvent.PARSE_FAILED, task.url, error=str(e))
                return _Visited()

        try:
            c = classify(doc, task.shape)
        except ClassificationRejected as e:
            self._note(
                CrawlEvent.REJECTED,
                task.url,
                label=e.label,
                policy=self.cfg.rejection_policy.value,
            )
            if self.cfg.rejection_policy is RejectionPolicy.DROP_SUBTREE:
                return _Visited()
            hrefs = task.shape.extract_links(doc)
            return _Visited(children=self._claim_links(hrefs, base_url=task.url))

        record = DocumentRecord(type=c.type, path=c.path, url=task.url)
        return _Visited(
            record=record,
            children=self._claim_links(c.links, base_url=task.url),
        )

    def crawl(self, root_url: str | None = None) -> list[DocumentRecord]:
        """Crawl from root_url and return every classified page record.

        Only a failure to fetch or parse the root itself propagates.
        """

        root_url = root_url or self.cfg.root_url
        self.guard.try_visit(root_url)
        doc = parse_html(self.store.fetch(root_url))
        root = _PageTask(url=root_url, shape=ROOT_PAGE)

        deadline = (
            time.monotonic() + self.cfg.deadline_s
            if self.cfg.deadline_s is not None
            else None
        )
        expired = False
        pool = ThreadPoolExecutor(
            max_workers=max(1, self.cfg.workers), thread_name_prefix="docs-miner"
        )
        bar = tqdm(total=1, desc="Crawling", unit="page", disable=not self.cfg.progress)
        try:
            pending: dict[Future[_Visited], _PageTask] = {
                pool.submit(self._visit, root, doc): root
            }
            while pending:
                timeout = None
                if deadline is not None:
                    timeout = max(0.0, deadline - time.monotonic())
                done, _ = wait(pending, timeout=timeout, return_when=FIRST_COMPLETED)
                if not done:
                    expired = True
                    for task in pending.values():
                        self._note(CrawlEvent.DEADLINE_DROPPED, task.url)
                    break

                for fut in done:
                    task = pending.pop(fut)
                    visited = fut.result()
                    task.record = visited.record
                    task.children = visited.children
                    if visited.record is not None:
                        self._note(CrawlEvent.RECORDED, task.url)
                    for child in visited.children:
                        pending[pool.submit(self._visit, child)] = child
                    bar.total += len(visited.children)
                    bar.update(1)
        finally:
            bar.close()
            pool.shutdown(wait=not expired, cancel_futures=True)

        return fold_records(root)


def build_store(
    config: CrawlConfig, *, manifest: CrawlManifest | None = None
) -> ContentStore:
    session = requests.Session()
    http = HttpClient(
        session, timeout_s=config.timeout_s, max_retries=config.max_retries
    )
    return ContentStore(http, cache_dir=config.cache_dir, manifest=manifest)


def mine(
    config: CrawlConfig,
    *,
    store: ContentStore | None = None,
    manifest: CrawlManifest | None = None,
) -> tuple[TreeNode, Crawler]:
    """Crawl the site and reduce the records to the sample-code tree."""

    if store is None:
        store = build_store(config, manifest=manifest)
    crawler = Crawler(store=store, config=config, manifest=manifest)
    records = crawler.crawl()
    tree = build_tree(config.root_url, config.title, records)
    return tree, crawler
