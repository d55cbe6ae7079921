"""TypeScript / JavaScript extractor.

Only ``export``ed declarations are symbols. Imports are ESM sources, plus
``require("...")`` targets bound by top-level declarations.
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
    unquote,
)

_FUNCTIONS = ("function_declaration", "generator_function_declaration", "function_signature")
_CLASSES = ("class_declaration", "abstract_class_declaration", "class")
_VARIABLES = ("lexical_declaration", "variable_declaration")
_METHODS = ("method_definition", "method_signature", "abstract_method_signature")
_FUNCTION_VALUES = ("arrow_function", "function_expression", "function", "generator_function")
_DECLARATIONS = (
    *_FUNCTIONS, *_CLASSES, *_VARIABLES,
    "interface_declaration", "type_alias_declaration", "enum_declaration",
)


def _string_value(node: SyntaxNode) -> str:
    frag = first_named_child_of_type(node, "string_fragment")
    return node_text(frag) if frag is not None else unquote(node_text(node))


def _name(decl: SyntaxNode) -> str:
    for node_type in ("type_identifier", "identifier"):
        child = first_named_child_of_type(decl, node_type)
        if child is not None:
            return node_text(child)
    return "(anonymous)"


def _signature(func: SyntaxNode) -> str | None:
    params = first_named_child_of_type(func, "formal_parameters")
    if params is None:
        return None
    ret = first_named_child_of_type(func, "type_annotation")
    return node_text(params) + (node_text(ret) if ret is not None else "")


def _class_methods(cls: SyntaxNode) -> list[Symbol]:
    body = first_named_child_of_type(cls, "class_body")
    if body is None:
        return []
    methods: list[Symbol] = []
    for child in named_children_of_type(body, *_METHODS):
        modifier = first_named_child_of_type(child, "accessibility_modifier")
        if modifier is not None and node_text(modifier) == "private":
            continue
        name_node = first_named_child_of_type(child, "property_identifier")
        if name_node is None:
            continue
        methods.append(Symbol(
            kind="method",
            name=node_text(name_node),
            signature=_signature(child),
            line=line_of(child),
        ))
    return methods


def _declarator_value(declarator: SyntaxNode) -> SyntaxNode | None:
    children = named_children(declarator)
    if len(children) < 2 or children[-1].type == "type_annotation":
        return None
    return children[-1]


def _require_target(value: SyntaxNode | None) -> str | None:
    if value is None or value.type != "call_expression":
        return None
    fn = first_named_child_of_type(value, "identifier")
    args = first_named_child_of_type(value, "arguments")
    if fn is None or node_text(fn) != "require" or args is None:
        return None
    target = first_named_child_of_type(args, "string")
    return _string_value(target) if target is not None else None


def _variable_symbols(decl: SyntaxNode, line: int) -> list[Symbol]:
    symbols: list[Symbol] = []
    for declarator in named_children_of_type(decl, "variable_declarator"):
        name_node = first_named_child_of_type(declarator, "identifier")
        if name_node is None:
            continue
        value = _declarator_value(declarator)
        if value is not None and value.type in _FUNCTION_VALUES:
            symbols.append(Symbol(
                kind="function", name=node_text(name_node), signature=_signature(value), line=line,
            ))
        else:
            symbols.append(Symbol(kind="constant", name=node_text(name_node), line=line))
    return symbols


def _exported_symbols(decl: SyntaxNode, line: int) -> list[Symbol]:
    if decl.type in _FUNCTIONS:
        return [Symbol(kind="function", name=_name(decl), signature=_signature(decl), line=line)]
    if decl.type in _CLASSES:
        return [Symbol(kind="class", name=_name(decl), line=line, children=_class_methods(decl))]
    if decl.type == "interface_declaration":
        return [Symbol(kind="interface", name=_name(decl), line=line)]
    if decl.type in ("type_alias_declaration", "enum_declaration"):
        return [Symbol(kind="type", name=_name(decl), line=line)]
    if decl.type in _VARIABLES:
        return _variable_symbols(decl, line)
    return []


def extract_typescript(root: SyntaxNode) -> Extraction:
    symbols: list[Symbol] = []
    imports: list[str] = []

    for node in named_children(root):
        if node.type == "import_statement":
            src = first_named_child_of_type(node, "string")
            if src is None:
                clause = first_named_child_of_type(node, "import_require_clause")
                src = first_named_child_of_type(clause, "string") if clause is not None else None
            if src is not None:
                imports.append(_string_value(src))
            continue

        if node.type in _VARIABLES:
            for declarator in named_children_of_type(node, "variable_declarator"):
                target = _require_target(_declarator_value(declarator))
                if target is not None:
                    imports.append(target)
            continue

        if node.type == "export_statement":
            decl = next((c for c in named_children(node) if c.type in _DECLARATIONS), None)
            if decl is not None:
                symbols.extend(_exported_symbols(decl, line_of(node)))
                continue
            # export { a } from "./b"
            src = first_named_child_of_type(node, "string")
            if src is not None:
                imports.append(_string_value(src))

    return Extraction(symbols=symbols, imports=imports)
