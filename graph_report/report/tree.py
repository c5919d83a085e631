"""Tree nodes and the box-drawing renderer used by the text report."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TextIO

from graph_report.report.colors import PLAIN, Style

SIBLING_CONNECTOR = "├"
LAST_SIBLING_CONNECTOR = "└"
CHILD_DEPS_CONNECTOR = "┬"
CHILD_NO_DEPS_CONNECTOR = "─"
VERTICAL_CONNECTOR = "│"
EMPTY_CONNECTOR = " "


@dataclass
class TreeNode:
    text: str
    children: list[TreeNode] = field(default_factory=list)


def render_tree(node: TreeNode, writer: TextIO, style: Style = PLAIN) -> None:
    """Write ``node`` and its descendants, one line per node.

    Uses an explicit stack, so arbitrarily deep trees render without
    hitting the recursion limit.
    """
    writer.write(f"{node.text}\n")
    # (siblings, index of the next sibling to print, prefix for that level)
    stack: list[tuple[list[TreeNode], int, str]] = [(node.children, 0, "")]
    while stack:
        siblings, index, prefix = stack.pop()
        if index >= len(siblings):
            continue
        child = siblings[index]
        is_last = index + 1 == len(siblings)
        sibling_connector = LAST_SIBLING_CONNECTOR if is_last else SIBLING_CONNECTOR
        child_connector = CHILD_DEPS_CONNECTOR if child.children else CHILD_NO_DEPS_CONNECTOR
        connectors = f"{prefix}{sibling_connector}─{child_connector}"
        writer.write(f"{style.gray(connectors)} {child.text}\n")

        stack.append((siblings, index + 1, prefix))
        if child.children:
            child_prefix = prefix + (EMPTY_CONNECTOR if is_last else VERTICAL_CONNECTOR) + EMPTY_CONNECTOR
            stack.append((child.children, 0, child_prefix))
