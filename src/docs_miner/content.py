from __future__ import annotations

from bs4 import BeautifulSoup

from .errors import ParseFailure


def parse_html(body: bytes) -> BeautifulSoup:
    """Turn a fetched payload into a queryable document.

    Raises ParseFailure when the bytes are empty, are not UTF-8, or contain
    no element at all. Fragments and pages with long preambles are accepted.
    """

    if not body:
        raise ParseFailure("empty payload")
    try:
        text = body.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ParseFailure(f"payload is not UTF-8: {e}") from e
    doc = BeautifulSoup(text, "html.parser")
    if doc.find(True) is None:
        raise ParseFailure("payload contains no HTML elements")
    return doc
