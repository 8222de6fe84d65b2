from __future__ import annotations

from typing import TextIO

from .models import ElementType
from .tree import TreeNode

LIST_INDENT_WIDTH = 4

_HEADER_TYPES = {ElementType.FRAMEWORK, ElementType.OTHER}
_LIST_TYPES = {ElementType.ARTICLE, ElementType.SAMPLE}


def _link(node: TreeNode) -> str:
    return f"[{node.title}]({node.url})"


def render_markdown(
    node: TreeNode, header_level: int = 1, list_level: int = 0
) -> list[str]:
    """Serialize the tree depth-first, pre-order, children sorted by title.

    Framework/other nodes become headers (only when they have children),
    article/sample nodes become list items. The root itself is not emitted.
    """

    lines: list[str] = []
    stack: list[tuple[TreeNode, int, int]] = [(node, header_level, list_level)]
    while stack:
        current, header, depth = stack.pop()
        if current.type in _HEADER_TYPES:
            if not current.children:
                continue
            lines.append("")
            lines.append(f"{'#' * header} {_link(current)}")
            header += 1
        elif current.type in _LIST_TYPES:
            lines.append(f"{' ' * (depth * LIST_INDENT_WIDTH)}* {_link(current)}")
            depth += 1
        stack.extend(
            (child, header, depth) for child in reversed(current.sorted_children())
        )
    return lines


def write_markdown(node: TreeNode, stream: TextIO) -> None:
    for line in render_markdown(node):
        stream.write(line + "\n")
