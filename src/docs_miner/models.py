from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

PATH_SEPARATOR = "/"


class ElementType(str, Enum):
    """Page taxonomy; values are the literal labels rendered on the page."""

    ROOT = "(ROOT)"
    FRAMEWORK = "Framework"
    ARTICLE = "Article"
    SAMPLE = "Sample Code"
    OTHER = "(OTHER)"

    @classmethod
    def from_label(cls, label: str) -> ElementType | None:
        for member in cls:
            if member.value == label:
                return member
        return None


def path_key(path: tuple[str, ...] | list[str]) -> str:
    return PATH_SEPARATOR.join(path)


@dataclass(frozen=True)
class DocumentRecord:
    type: ElementType
    path: tuple[str, ...]
    url: str

    @property
    def key(self) -> str:
        return path_key(self.path)

    def __str__(self) -> str:
        return self.key


def build_lookup(records: list[DocumentRecord]) -> dict[str, DocumentRecord]:
    """Index records by joined path; on collisions the later record wins."""
    return {r.key: r for r in records}
