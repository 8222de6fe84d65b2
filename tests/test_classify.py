from __future__ import annotations

import pytest

from docs_miner.classify import (
    ROOT_PAGE,
    TOPIC_PAGE,
    RootPage,
    classify,
    read_breadcrumbs,
)
from docs_miner.content import parse_html
from docs_miner.errors import ClassificationRejected
from docs_miner.models import ElementType

from conftest import build_page


@pytest.mark.parametrize(
    "label, expected",
    [
        ("(ROOT)", ElementType.ROOT),
        ("Framework", ElementType.FRAMEWORK),
        ("Article", ElementType.ARTICLE),
        ("Sample Code", ElementType.SAMPLE),
        ("(OTHER)", ElementType.OTHER),
    ],
)
def test_type_labels(label: str, expected: ElementType):
    doc = parse_html(build_page(label))
    assert classify(doc, TOPIC_PAGE).type is expected


def test_missing_label_means_other():
    doc = parse_html(build_page(None, crumbs=("Kit",)))
    assert classify(doc, TOPIC_PAGE).type is ElementType.OTHER


@pytest.mark.parametrize("label", ["Sample", "framework", "API Collection", ""])
def test_unknown_label_is_rejected(label: str):
    doc = parse_html(build_page(label))
    with pytest.raises(ClassificationRejected) as info:
        classify(doc, TOPIC_PAGE)
    assert info.value.label == label


def test_topic_links_in_document_order():
    doc = parse_html(
        build_page(
            "Framework",
            topics=("b", "/documentation/a", "https://other.example/c"),
            categories={"web": ("/documentation/web-only",)},
        )
    )
    c = classify(doc, TOPIC_PAGE)
    assert c.links == ["b", "/documentation/a", "https://other.example/c"]


def test_root_links_come_from_whitelisted_categories_only():
    doc = parse_html(
        build_page(
            None,
            topics=("/documentation/topic-only",),
            categories={
                "app-frameworks": ("/documentation/uikit",),
                "secret-stuff": ("/documentation/hidden",),
                "web": ("/documentation/webkit", "/documentation/safari"),
            },
        )
    )
    c = classify(doc, ROOT_PAGE)
    assert c.links == [
        "/documentation/uikit",
        "/documentation/webkit",
        "/documentation/safari",
    ]


def test_root_shape_categories_are_configurable():
    doc = parse_html(build_page(None, categories={"secret-stuff": ("/x",), "web": ("/y",)}))
    assert RootPage(categories=("secret-stuff",)).extract_links(doc) == ["/x"]


def test_page_of_neither_shape_has_no_links():
    doc = parse_html(build_page("Article", crumbs=("Kit", "Guide")))
    c = classify(doc, TOPIC_PAGE)
    assert c.links == []
    assert c.path == ("Kit", "Guide")


def test_breadcrumbs():
    doc = parse_html(build_page("Sample Code", crumbs=("Kit", "Drawing  Shapes"), truncated_last=True))
    assert read_breadcrumbs(doc) == ("Kit", "Drawing Shapes")


def test_no_breadcrumbs_is_empty_path():
    doc = parse_html(b"<html><body><div id='main'><div><span>Article</span></div></div></body></html>")
    c = classify(doc, TOPIC_PAGE)
    assert c.path == ()
    assert c.type is ElementType.ARTICLE
