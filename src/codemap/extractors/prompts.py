"""Prompt template for synthesizing an extractor for a new language."""

from __future__ import annotations

# Reference extractor shown to the oracle as a worked pattern.
EXAMPLE_EXTRACTOR = '''\
# Example: TypeScript extractor (for reference)
# This shows the pattern: walk root's named children, check node.type, extract names.
#
# Available helpers (already in scope):
#   node_text(node)                              -> str (the source text of a node)
#   first_named_child_of_type(node, "type")      -> child node or None
#   named_children_of_type(node, "t1", "t2")     -> list of matching children
#
# node attributes:
#   node.type               -> str (node type such as "function_declaration")
#   node.named_child_count  -> int
#   node.named_child(i)     -> child node
#   node.start_point        -> (row, column), zero-based
#   node.text               -> str (source text)

def extract(root):
    symbols = []
    imports = []

    for i in range(root.named_child_count):
        node = root.named_child(i)

        if node.type == "import_statement":
            src = first_named_child_of_type(node, "string")
            if src:
                frag = first_named_child_of_type(src, "string_fragment")
                imports.append(node_text(frag) if frag else node_text(src))
            continue

        if node.type == "export_statement":
            decl = node.named_child(0)
            if not decl:
                continue

            if decl.type == "function_declaration":
                name = first_named_child_of_type(decl, "identifier")
                params = first_named_child_of_type(decl, "formal_parameters")
                symbols.append({
                    "kind": "function",
                    "name": node_text(name) if name else "(anonymous)",
                    "signature": node_text(params) if params else None,
                    "line": node.start_point[0] + 1,
                    "children": [],
                })
            # ... similar for class_declaration, interface_declaration, etc.

    return {"symbols": symbols, "imports": imports}
'''

SYNTHESIS_PROMPT = """\
# Task

Generate a tree-sitter extractor function for **{language}** source files.

# Syntax Tree Shape

Here is the tree-sitter syntax tree ({depth} levels deep) for a real {language} file ({sample_path}):

```
{tree_dump}
```

# Source File

```
{source}
```

# Example Extractor

```python
{example}
```

# Requirements

Write a single Python function called `extract` that:
1. Takes a tree-sitter root node as its only argument
2. Returns `{{"symbols": [...], "imports": [...]}}`
3. Extracts public/exported functions, classes, types, interfaces, methods, modules, constants
4. Extracts import/require/use/include statements as plain target strings
5. For classes and modules with methods, nests the methods as children

Symbol shape (a dict):
```
{{"kind": "function"|"class"|"type"|"interface"|"constant"|"method"|"module",
  "name": str, "signature": str | None, "line": int, "children": [Symbol]}}
```
Only "class" and "module" symbols may have non-empty children.

Available helpers (already in scope, do NOT define or import them):
- `node_text(node)` -> str
- `first_named_child_of_type(node, type)` -> node or None
- `named_children_of_type(node, *types)` -> list of nodes

Rules:
- Use the node types you see above; they are the actual types for this language
- Walk `root.named_child_count` / `root.named_child(i)`
- Use `node.start_point[0] + 1` for line numbers
- Return empty lists if nothing is found
- Follow the language's visibility convention: where it marks exports (pub, public, export),
  only include marked symbols; otherwise use its naming convention (e.g. leading underscore = private)
- No imports, no I/O, no async, yield, lambda or class
- Only these attributes are allowed: the node attributes above plus plain str, list and dict
  methods (strip, split, startswith, replace, join, append, extend, get, items, ...)
- Keep it under 80 lines

Respond with ONLY the Python function. No markdown fences, no explanation.
Start with `def extract(root):`.
"""


def build_synthesis_prompt(
    language: str,
    sample_path: str,
    tree_dump: str,
    source: str,
    *,
    depth: int = 3,
    max_source_chars: int = 3000,
) -> str:
    return SYNTHESIS_PROMPT.format(
        language=language,
        sample_path=sample_path,
        tree_dump=tree_dump,
        source=source[:max_source_chars],
        example=EXAMPLE_EXTRACTOR,
        depth=depth,
    )
