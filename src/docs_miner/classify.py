"""Page classification and link extraction.

Two page shapes are understood: the site root, whose links live in a fixed
set of category containers, and topic pages, whose links live in the
"topics" listing. A page's shape comes from where it sits in the crawl, not
from its markup.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Final

from bs4 import BeautifulSoup, Tag

from .errors import ClassificationRejected
from .models import ElementType

TYPE_LABEL_SELECTOR: Final = "#main > div:nth-of-type(1) > span"

ROOT_CATEGORIES: Final[tuple[str, ...]] = (
    "app-frameworks",
    "graphics-and-games",
    "app-services",
    "media",
    "web",
    "developer-tools",
    "system",
)

TOPIC_LINK_SELECTOR: Final = (
    "#topics > div > div > section > div > div > div > div > div > a"
)

_BREADCRUMB_LIST: Final = (
    "#localnav > div > div > div:nth-of-type(2) > div"
    " > div:nth-of-type(1) > ul:nth-of-type(1)"
)
_BREADCRUMB_CLASSES: Final[tuple[str, ...]] = (
    "localnav-menu-item localnav-menu-breadcrumb-item",
    "localnav-menu-item localnav-menu-breadcrumb-item truncated",
)
BREADCRUMB_SELECTOR: Final = ", ".join(
    f'{_BREADCRUMB_LIST} > li[class="{cls}"]' for cls in _BREADCRUMB_CLASSES
)


class RejectionPolicy(str, Enum):
    """What happens to a page whose type label is not recognized.

    DROP_SUBTREE: the page yields nothing and its links are never followed,
    so pages reachable only through it vanish from the output.
    SKIP_PAGE: the page yields no record but its links are still followed.
    """

    DROP_SUBTREE = "drop-subtree"
    SKIP_PAGE = "skip-page"


class PageShape:
    name: ClassVar[str] = "base"

    def link_selector(self) -> str:
        raise NotImplementedError

    def extract_links(self, doc: BeautifulSoup) -> list[str]:
        """Return raw href values in document order."""
        hrefs: list[str] = []
        for a in doc.select(self.link_selector()):
            href = a.get("href")
            if isinstance(href, str):
                hrefs.append(href)
        return hrefs


@dataclass(frozen=True)
class RootPage(PageShape):
    categories: tuple[str, ...] = ROOT_CATEGORIES
    name: ClassVar[str] = "root"

    def link_selector(self) -> str:
        return ", ".join(
            f"#{cat} > div:nth-of-type(2) > ul > li > div > a"
            for cat in self.categories
        )


@dataclass(frozen=True)
class TopicPage(PageShape):
    name: ClassVar[str] = "topic"

    def link_selector(self) -> str:
        return TOPIC_LINK_SELECTOR


ROOT_PAGE: Final = RootPage()
TOPIC_PAGE: Final = TopicPage()


@dataclass(frozen=True)
class Classification:
    type: ElementType
    links: list[str]
    path: tuple[str, ...]


def _text(node: Tag) -> str:
    return " ".join(node.get_text(" ").split())


def read_type_label(doc: BeautifulSoup) -> str:
    node = doc.select_one(TYPE_LABEL_SELECTOR)
    if node is None:
        return ElementType.OTHER.value
    return node.get_text(strip=True)


def read_breadcrumbs(doc: BeautifulSoup) -> tuple[str, ...]:
    return tuple(_text(li) for li in doc.select(BREADCRUMB_SELECTOR))


def classify(doc: BeautifulSoup, shape: PageShape) -> Classification:
    """Classify a parsed page and collect its child links and breadcrumb.

    Raises ClassificationRejected when the type label is present but does
    not name a known ElementType. A missing label means OTHER.
    """

    label = read_type_label(doc)
    element_type = ElementType.from_label(label)
    if element_type is None:
        raise ClassificationRejected(label)

    return Classification(
        type=element_type,
        links=shape.extract_links(doc),
        path=read_breadcrumbs(doc),
    )
