"""Pure projections of a CodebaseMap into text."""

from __future__ import annotations

from .models import CodebaseMap, Symbol


def _signature(symbol: Symbol) -> str:
    sig = symbol.signature or ""
    # Parameter lists hug the name; anything else (e.g. "< Base") is spaced.
    if sig and not sig.startswith(("(", "[")):
        return f" {sig}"
    return sig


def _symbol_lines(symbol: Symbol, depth: int) -> list[str]:
    indent = "  " * depth
    lines = [f"{indent}- `{symbol.kind} {symbol.name}{_signature(symbol)}`"]
    for child in symbol.children:
        lines.extend(_symbol_lines(child, depth + 1))
    return lines


def format_markdown(codebase: CodebaseMap) -> str:
    """Human-readable outline: summary line, then one section per file."""
    lines: list[str] = ["# Codebase Map", ""]

    counts = sorted(codebase.stats.by_language.items(), key=lambda kv: (-kv[1], kv[0]))
    breakdown = ", ".join(f"{lang}: {count}" for lang, count in counts)
    lines.extend([f"{codebase.stats.total_files} files ({breakdown})", ""])

    for file in codebase.files:
        lines.append(f"## {file.path} ({file.language})")
        if file.imports:
            lines.append(f"imports: {', '.join(file.imports)}")
        for symbol in file.symbols:
            lines.extend(_symbol_lines(symbol, 0))
        lines.append("")

    return "\n".join(lines)


def format_json(codebase: CodebaseMap) -> str:
    """Full-fidelity JSON document of the map."""
    return codebase.model_dump_json(indent=2)


def load_json(text: str) -> CodebaseMap:
    """Inverse of :func:`format_json`."""
    return CodebaseMap.model_validate_json(text)
