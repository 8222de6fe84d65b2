from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Mapping

from .models import DocumentRecord, ElementType, build_lookup, path_key


@dataclass(eq=False)
class TreeNode:
    url: str
    title: str
    type: ElementType
    children: list[TreeNode] = field(default_factory=list)

    def find_child(self, title: str) -> TreeNode | None:
        for child in self.children:
            if child.title == title:
                return child
        return None

    def insert_path(
        self, path: Iterable[str], lookup: Mapping[str, DocumentRecord]
    ) -> TreeNode:
        """Walk path from this node, creating missing nodes on the way.

        A missing node is created from the record whose joined path equals the
        prefix walked so far. The walk stops at the first prefix with no
        record; the deepest node reached is returned.
        """

        current = self
        prefix: list[str] = []
        for title in path:
            prefix.append(title)
            child = current.find_child(title)
            if child is None:
                record = lookup.get(path_key(prefix))
                if record is None:
                    break
                child = TreeNode(url=record.url, title=title, type=record.type)
                current.children.append(child)
            current = child
        return current

    def sorted_children(self) -> list[TreeNode]:
        return sorted(self.children, key=lambda n: n.title)


def build_tree(root_url: str, title: str, records: list[DocumentRecord]) -> TreeNode:
    """Reduce crawl records to the ancestor chains of every sample page."""

    lookup = build_lookup(records)
    root = TreeNode(url=root_url, title=title, type=ElementType.ROOT)
    for record in records:
        if record.type is ElementType.SAMPLE:
            root.insert_path(record.path, lookup)
    return root
