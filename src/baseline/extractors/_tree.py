"""Shared tree-sitter helpers for the extractors."""

from __future__ import annotations

from typing import Iterator

from tree_sitter import Node

from .models import SourceRange


class PositionMapper:
    """Converts tree-sitter byte columns into character columns."""

    def __init__(self, source: bytes) -> None:
        self._lines = source.split(b"\n")

    def column(self, row: int, byte_column: int) -> int:
        if row >= len(self._lines):
            return byte_column
        line = self._lines[row]
        if line.isascii():
            return byte_column
        return len(line[:byte_column].decode("utf-8", errors="ignore"))

    def node_range(self, node: Node | None) -> SourceRange | None:
        """Range of a node, or None when the parser synthesized it."""
        if node is None or node.is_missing or node.start_byte == node.end_byte:
            return None
        start_row, start_col = node.start_point
        end_row, end_col = node.end_point
        return SourceRange(
            start_line=start_row,
            start_column=self.column(start_row, start_col),
            end_line=end_row,
            end_column=self.column(end_row, end_col),
        )


def walk(root: Node) -> Iterator[Node]:
    """Depth-first pre-order traversal without recursion."""
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def node_text(node: Node | None) -> str:
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8", errors="replace")


def describe_error(root: Node) -> str:
    """Human-readable location of the first syntax error under ``root``."""
    for node in walk(root):
        if node.type == "ERROR" or node.is_missing:
            row, col = node.start_point
            kind = "missing token" if node.is_missing else "syntax error"
            return f"{kind} at line {row + 1}, column {col + 1}"
    return "syntax error"
