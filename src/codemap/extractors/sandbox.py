"""Turns synthesized extractor text into a callable with no ambient access.

The rule is plain Python defining ``extract(root)``. It is checked with
``ast`` before compilation and executed against a namespace that holds only
a small builtins table and the three node helpers.
"""

from __future__ import annotations

import ast
import builtins
import re
from typing import Any, Callable

from ..errors import ExtractorCompileError
from ..models import Extraction
from .base import Extractor, SyntaxNode, first_named_child_of_type, named_children_of_type, node_text

EXTRACT_MARKER = "def extract("

HELPERS: dict[str, Callable[..., Any]] = {
    "node_text": node_text,
    "first_named_child_of_type": first_named_child_of_type,
    "named_children_of_type": named_children_of_type,
}

_SAFE_BUILTIN_NAMES = (
    "abs", "all", "any", "bool", "dict", "enumerate", "filter", "int", "isinstance",
    "len", "list", "map", "max", "min", "range", "reversed", "set", "sorted", "str",
    "sum", "tuple", "zip",
)
SAFE_BUILTINS: dict[str, Any] = {name: getattr(builtins, name) for name in _SAFE_BUILTIN_NAMES}

# The only attributes a rule may touch: the node interface plus plain
# str, list and dict methods. Anything else (frames, code objects, format
# strings) could reach the caller's state.
_ALLOWED_ATTRIBUTES = frozenset({
    # SyntaxNode
    "type", "start_point", "named_child_count", "named_child", "text",
    # str
    "strip", "lstrip", "rstrip", "split", "rsplit", "splitlines", "partition",
    "rpartition", "startswith", "endswith", "replace", "lower", "upper", "title",
    "find", "rfind", "index", "count", "join", "isupper", "islower", "isdigit",
    "isalpha", "isalnum", "isidentifier", "removeprefix", "removesuffix",
    # list
    "append", "extend", "insert", "pop", "remove", "reverse", "sort", "copy",
    # dict
    "get", "items", "keys", "values", "setdefault", "update",
})

# Constructs that hand a rule a suspended frame (coroutines, generator
# functions) or an anonymous callable.
_FORBIDDEN_NODES: dict[type, str] = {
    ast.AsyncFunctionDef: "async def",
    ast.Await: "await",
    ast.AsyncFor: "async for",
    ast.AsyncWith: "async with",
    ast.Yield: "yield",
    ast.YieldFrom: "yield from",
    ast.Lambda: "lambda",
    ast.ClassDef: "class",
}

_FENCE_RE = re.compile(r"^```[\w+-]*[ \t]*\n?|\n?```[ \t]*$")
_ALL_RE = re.compile(r"^__all__\s*=.*$", re.MULTILINE)
_MAIN_GUARD_RE = re.compile(r"^if\s+__name__\s*==\s*['\"]__main__['\"]\s*:.*\Z", re.MULTILINE | re.DOTALL)


def strip_fences(text: str) -> str:
    """Remove a surrounding Markdown code fence, if present."""
    code = text.strip()
    if code.startswith("```"):
        code = _FENCE_RE.sub("", code).strip()
    return code


def has_extract_marker(code: str) -> bool:
    return EXTRACT_MARKER in code


def strip_export_boilerplate(code: str) -> str:
    """Drop ``__all__`` assignments and a trailing ``__main__`` guard."""
    code = _MAIN_GUARD_RE.sub("", code)
    code = _ALL_RE.sub("", code)
    return code.strip()


def strip_header(code: str) -> str:
    """Drop the leading comment block (the provenance header)."""
    lines = code.splitlines()
    while lines and (not lines[0].strip() or lines[0].lstrip().startswith("#")):
        lines.pop(0)
    return strip_export_boilerplate("\n".join(lines))


class _SafetyChecker(ast.NodeVisitor):
    def __init__(self) -> None:
        self.problems: list[str] = []

    def _flag(self, node: ast.AST, message: str) -> None:
        self.problems.append(f"line {getattr(node, 'lineno', '?')}: {message}")

    def visit_Import(self, node: ast.Import) -> None:
        self._flag(node, "import statements are not allowed")

    def visit_ImportFrom(self, node: ast.ImportFrom) -> None:
        self._flag(node, "import statements are not allowed")

    def visit_Global(self, node: ast.Global) -> None:
        self._flag(node, "global is not allowed")

    def visit_Nonlocal(self, node: ast.Nonlocal) -> None:
        self._flag(node, "nonlocal is not allowed")

    def visit_Name(self, node: ast.Name) -> None:
        if "__" in node.id:
            self._flag(node, f"name {node.id!r} is not allowed")

    def visit(self, node: ast.AST) -> None:
        forbidden = _FORBIDDEN_NODES.get(type(node))
        if forbidden is not None:
            self._flag(node, f"'{forbidden}' is not allowed")
        super().visit(node)

    def visit_Attribute(self, node: ast.Attribute) -> None:
        if node.attr not in _ALLOWED_ATTRIBUTES:
            self._flag(node, f"attribute {node.attr!r} is not allowed")
        self.generic_visit(node)


def check_source(code: str, filename: str = "<extractor>") -> ast.Module:
    """Parse *code* and reject constructs that escape the helper sandbox."""
    try:
        tree = ast.parse(code, filename=filename)
    except SyntaxError as exc:
        raise ExtractorCompileError(f"{filename}: syntax error: {exc}") from exc

    checker = _SafetyChecker()
    checker.visit(tree)
    if checker.problems:
        raise ExtractorCompileError(f"{filename}: " + "; ".join(checker.problems))

    if not any(isinstance(n, ast.FunctionDef) and n.name == "extract" for n in tree.body):
        raise ExtractorCompileError(f"{filename}: no top-level function named 'extract'")
    return tree


def compile_extractor(code: str, filename: str = "<extractor>") -> Extractor:
    """Bind *code* to the helpers and return its ``extract`` as an Extractor.

    The returned callable validates the rule's output into an Extraction, so
    a rule that returns malformed data raises on the file it was run against.
    """
    tree = check_source(code, filename)
    namespace: dict[str, Any] = {"__builtins__": SAFE_BUILTINS, **HELPERS}
    try:
        exec(compile(tree, filename, "exec"), namespace)
    except Exception as exc:
        raise ExtractorCompileError(f"{filename}: failed to evaluate: {exc}") from exc

    rule = namespace.get("extract")
    if not callable(rule):
        raise ExtractorCompileError(f"{filename}: 'extract' is not callable")

    def extract(root: SyntaxNode) -> Extraction:
        return Extraction.model_validate(rule(root))

    extract.__qualname__ = f"synthesized:{filename}"
    return extract
