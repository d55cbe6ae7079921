"""Node capability interface, extractor type, and the shared helpers.

Built-in and synthesized extractors only ever see :class:`SyntaxNode`
objects and the three helper functions defined here.
"""

from __future__ import annotations

from typing import Callable, Protocol, runtime_checkable

from ..models import Extraction


@runtime_checkable
class SyntaxNode(Protocol):
    """The slice of a syntax-tree node that extractors may use."""

    @property
    def type(self) -> str:
        """Grammar node type, e.g. ``"function_definition"``."""
        ...

    @property
    def start_point(self) -> tuple[int, int]:
        """Zero-based ``(row, column)`` of the node's first character."""
        ...

    @property
    def named_child_count(self) -> int: ...

    def named_child(self, index: int) -> SyntaxNode | None: ...

    @property
    def text(self) -> str:
        """Source text spanned by the node."""
        ...


# An extractor maps a tree root to the file's symbols and imports.
Extractor = Callable[[SyntaxNode], Extraction]


def node_text(node: SyntaxNode | None) -> str:
    """Return the source text of *node*, or ``""`` for ``None``."""
    if node is None:
        return ""
    return node.text or ""


def named_children(node: SyntaxNode) -> list[SyntaxNode]:
    result: list[SyntaxNode] = []
    for i in range(node.named_child_count):
        child = node.named_child(i)
        if child is not None:
            result.append(child)
    return result


def first_named_child_of_type(node: SyntaxNode, node_type: str) -> SyntaxNode | None:
    """Return the first direct named child whose type is *node_type*."""
    for child in named_children(node):
        if child.type == node_type:
            return child
    return None


def named_children_of_type(node: SyntaxNode, *node_types: str) -> list[SyntaxNode]:
    """Return all direct named children whose type is one of *node_types*."""
    return [child for child in named_children(node) if child.type in node_types]


def line_of(node: SyntaxNode) -> int:
    """1-based line number of *node*."""
    return node.start_point[0] + 1


def unquote(text: str) -> str:
    """Strip one layer of matching string quotes."""
    if len(text) >= 2 and text[0] == text[-1] and text[0] in "\"'`":
        return text[1:-1]
    return text
