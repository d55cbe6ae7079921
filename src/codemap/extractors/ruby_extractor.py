"""Ruby extractor -- requires, modules, classes and their public methods."""

from __future__ import annotations

from ..models import Extraction, Symbol
from .base import (
    SyntaxNode,
    first_named_child_of_type,
    line_of,
    named_children,
    node_text,
    unquote,
)

_REQUIRES = ("require", "require_relative")
_VISIBILITY_CUTOFFS = ("private", "protected")


def _constant_name(node: SyntaxNode) -> str:
    for node_type in ("constant", "scope_resolution"):
        child = first_named_child_of_type(node, node_type)
        if child is not None:
            return node_text(child)
    return "(anonymous)"


def _method(node: SyntaxNode, kind: str = "method") -> Symbol:
    name = first_named_child_of_type(node, "identifier")
    params = first_named_child_of_type(node, "method_parameters")
    return Symbol(
        kind=kind,
        name=node_text(name) if name is not None else "(anonymous)",
        signature=node_text(params) if params is not None else None,
        line=line_of(node),
    )


def _public_methods(body: SyntaxNode) -> list[Symbol]:
    """Methods of a class body up to the first bare ``private``/``protected``."""
    methods: list[Symbol] = []
    for child in named_children(body):
        if child.type == "identifier" and node_text(child) in _VISIBILITY_CUTOFFS:
            break
        if child.type in ("method", "singleton_method"):
            methods.append(_method(child))
    return methods


def _class(node: SyntaxNode) -> Symbol:
    superclass = first_named_child_of_type(node, "superclass")
    body = first_named_child_of_type(node, "body_statement")
    return Symbol(
        kind="class",
        name=_constant_name(node),
        signature=node_text(superclass) if superclass is not None else None,
        line=line_of(node),
        children=_public_methods(body) if body is not None else [],
    )


def _module(node: SyntaxNode) -> Symbol:
    children: list[Symbol] = []
    body = first_named_child_of_type(node, "body_statement")
    if body is not None:
        for child in named_children(body):
            if child.type == "class":
                children.append(_class(child))
            elif child.type in ("method", "singleton_method"):
                children.append(_method(child))
    return Symbol(kind="module", name=_constant_name(node), line=line_of(node), children=children)


def _require_target(node: SyntaxNode) -> str | None:
    method = first_named_child_of_type(node, "identifier")
    if method is None or node_text(method) not in _REQUIRES:
        return None
    args = first_named_child_of_type(node, "argument_list")
    target = first_named_child_of_type(args, "string") if args is not None else None
    if target is None:
        return None
    content = first_named_child_of_type(target, "string_content")
    return node_text(content) if content is not None else unquote(node_text(target))


def extract_ruby(root: SyntaxNode) -> Extraction:
    symbols: list[Symbol] = []
    imports: list[str] = []

    for node in named_children(root):
        if node.type == "call":
            target = _require_target(node)
            if target:
                imports.append(target)
        elif node.type == "module":
            symbols.append(_module(node))
        elif node.type == "class":
            symbols.append(_class(node))
        elif node.type == "method":
            symbols.append(_method(node, kind="function"))

    return Extraction(symbols=symbols, imports=imports)
