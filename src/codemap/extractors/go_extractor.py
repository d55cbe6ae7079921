"""Go extractor -- exported (capitalized) declarations and imports."""

from __future__ import annotations

from ..models import Extraction, Symbol
from .base import (
    SyntaxNode,
    first_named_child_of_type,
    line_of,
    named_children,
    named_children_of_type,
    node_text,
    unquote,
)


def _exported(name: str) -> bool:
    return name[:1].isupper()


def _import_paths(decl: SyntaxNode) -> list[str]:
    specs = named_children_of_type(decl, "import_spec")
    spec_list = first_named_child_of_type(decl, "import_spec_list")
    if spec_list is not None:
        specs.extend(named_children_of_type(spec_list, "import_spec"))
    paths: list[str] = []
    for spec in specs:
        path = first_named_child_of_type(spec, "interpreted_string_literal")
        if path is None:
            path = first_named_child_of_type(spec, "raw_string_literal")
        if path is not None:
            paths.append(unquote(node_text(path)))
    return paths


def _signature(children: list[SyntaxNode], params_index: int) -> str | None:
    """Parameter list at *params_index* plus the result type that follows it."""
    if params_index >= len(children):
        return None
    sig = node_text(children[params_index])
    if params_index + 1 < len(children) and children[params_index + 1].type != "block":
        sig += " " + node_text(children[params_index + 1])
    return sig


def _function(node: SyntaxNode) -> Symbol | None:
    children = named_children(node)
    name = node_text(first_named_child_of_type(node, "identifier"))
    if not _exported(name):
        return None
    params = next((i for i, c in enumerate(children) if c.type == "parameter_list"), len(children))
    return Symbol(kind="function", name=name, signature=_signature(children, params), line=line_of(node))


def _method(node: SyntaxNode) -> Symbol | None:
    children = named_children(node)
    name = node_text(first_named_child_of_type(node, "field_identifier"))
    if not _exported(name):
        return None
    lists = [i for i, c in enumerate(children) if c.type == "parameter_list"]
    receiver = node_text(children[lists[0]]) if lists else ""
    sig = _signature(children, lists[1]) if len(lists) > 1 else None
    if receiver:
        sig = f"{receiver} {sig}" if sig else receiver
    return Symbol(kind="method", name=name, signature=sig, line=line_of(node))


def _types(decl: SyntaxNode) -> list[Symbol]:
    symbols: list[Symbol] = []
    for spec in named_children_of_type(decl, "type_spec", "type_alias"):
        name = node_text(first_named_child_of_type(spec, "type_identifier"))
        if not _exported(name):
            continue
        kind = "interface" if first_named_child_of_type(spec, "interface_type") is not None else "type"
        symbols.append(Symbol(kind=kind, name=name, line=line_of(spec)))
    return symbols


def _constants(decl: SyntaxNode) -> list[Symbol]:
    symbols: list[Symbol] = []
    for spec in named_children_of_type(decl, "const_spec"):
        for ident in named_children_of_type(spec, "identifier"):
            name = node_text(ident)
            if _exported(name):
                symbols.append(Symbol(kind="constant", name=name, line=line_of(spec)))
    return symbols


def extract_go(root: SyntaxNode) -> Extraction:
    symbols: list[Symbol] = []
    imports: list[str] = []

    for node in named_children(root):
        if node.type == "import_declaration":
            imports.extend(_import_paths(node))
        elif node.type == "type_declaration":
            symbols.extend(_types(node))
        elif node.type == "const_declaration":
            symbols.extend(_constants(node))
        elif node.type == "function_declaration":
            sym = _function(node)
            if sym is not None:
                symbols.append(sym)
        elif node.type == "method_declaration":
            sym = _method(node)
            if sym is not None:
                symbols.append(sym)

    return Extraction(symbols=symbols, imports=imports)
