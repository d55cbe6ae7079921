"""Python extractor -- walks a tree-sitter-python tree.

Names starting with ``_`` are private; dunder methods are kept because they
describe a class's protocol.
"""

from __future__ import annotations

from ..models import Extraction, Symbol
from .base import (
    SyntaxNode,
    first_named_child_of_type,
    line_of,
    named_children,
    named_children_of_type,
    node_text,
)

_DEFINITIONS = ("function_definition", "class_definition")


def _is_public(name: str) -> bool:
    return bool(name) and not name.startswith("_")


def _is_dunder(name: str) -> bool:
    return len(name) > 4 and name.startswith("__") and name.endswith("__")


def _unwrap(node: SyntaxNode) -> SyntaxNode | None:
    """Return the definition inside a ``decorated_definition``, else *node*."""
    if node.type != "decorated_definition":
        return node
    for node_type in _DEFINITIONS:
        inner = first_named_child_of_type(node, node_type)
        if inner is not None:
            return inner
    return None


def _signature(func: SyntaxNode) -> str | None:
    params = first_named_child_of_type(func, "parameters")
    if params is None:
        return None
    ret = first_named_child_of_type(func, "type")
    return node_text(params) + (f" -> {node_text(ret)}" if ret is not None else "")


def _methods(block: SyntaxNode) -> list[Symbol]:
    methods: list[Symbol] = []
    for child in named_children(block):
        func = _unwrap(child)
        if func is None or func.type != "function_definition":
            continue
        name = node_text(first_named_child_of_type(func, "identifier"))
        if not (_is_public(name) or _is_dunder(name)):
            continue
        methods.append(Symbol(
            kind="method", name=name, signature=_signature(func), line=line_of(func),
        ))
    return methods


def _imports(node: SyntaxNode) -> list[str]:
    if node.type == "import_statement":
        names: list[str] = []
        for child in named_children_of_type(node, "dotted_name", "aliased_import"):
            if child.type == "aliased_import":
                child = first_named_child_of_type(child, "dotted_name")
            if child is not None:
                names.append(node_text(child))
        return names
    # import_from_statement: the module is the first dotted_name or relative_import
    for child in named_children(node):
        if child.type in ("relative_import", "dotted_name"):
            return [node_text(child)]
    return []


def _constant(node: SyntaxNode) -> Symbol | None:
    assign = first_named_child_of_type(node, "assignment")
    if assign is None or assign.named_child_count == 0:
        return None
    left = assign.named_child(0)
    if left is None or left.type != "identifier":
        return None
    name = node_text(left)
    if not (_is_public(name) and name.isupper()):
        return None
    return Symbol(kind="constant", name=name, line=line_of(node))


def extract_python(root: SyntaxNode) -> Extraction:
    symbols: list[Symbol] = []
    imports: list[str] = []

    for node in named_children(root):
        if node.type in ("import_statement", "import_from_statement"):
            imports.extend(_imports(node))
            continue

        if node.type == "expression_statement":
            const = _constant(node)
            if const is not None:
                symbols.append(const)
            continue

        definition = _unwrap(node)
        if definition is None:
            continue

        if definition.type == "class_definition":
            name = node_text(first_named_child_of_type(definition, "identifier"))
            if not _is_public(name):
                continue
            bases = first_named_child_of_type(definition, "argument_list")
            block = first_named_child_of_type(definition, "block")
            symbols.append(Symbol(
                kind="class",
                name=name,
                signature=node_text(bases) if bases is not None else None,
                line=line_of(definition),
                children=_methods(block) if block is not None else [],
            ))
        elif definition.type == "function_definition":
            name = node_text(first_named_child_of_type(definition, "identifier"))
            if not _is_public(name):
                continue
            symbols.append(Symbol(
                kind="function",
                name=name,
                signature=_signature(definition),
                line=line_of(definition),
            ))

    return Extraction(symbols=symbols, imports=imports)
