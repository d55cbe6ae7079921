"""Extraction engine -- routes files to the right extractor by extension."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .base import (
    Extractor,
    SyntaxNode,
    first_named_child_of_type,
    named_children_of_type,
    node_text,
)
from .go_extractor import extract_go
from .python_extractor import extract_python
from .ruby_extractor import extract_ruby
from .treesitter import GrammarRef
from .typescript_extractor import extract_typescript

__all__ = [
    "BUILTIN_LANGUAGES",
    "SYNTHESIZABLE_LANGUAGES",
    "Extractor",
    "GrammarRef",
    "LanguageConfig",
    "LanguageRegistry",
    "SyntaxNode",
    "first_named_child_of_type",
    "named_children_of_type",
    "node_text",
]


@dataclass(frozen=True)
class LanguageConfig:
    """How to handle files with one extension.

    ``extract`` is ``None`` for languages whose extractor is synthesized on
    demand.
    """

    extension: str
    language: str
    grammar: GrammarRef
    extract: Extractor | None = None

    @property
    def is_builtin(self) -> bool:
        return self.extract is not None


def _configs(
    table: dict[str, tuple[str, GrammarRef]], extract: Extractor | None = None
) -> list[LanguageConfig]:
    return [LanguageConfig(ext, lang, ref, extract) for ext, (lang, ref) in table.items()]


_TS = GrammarRef("tree_sitter_typescript", "language_typescript")
_TSX = GrammarRef("tree_sitter_typescript", "language_tsx")
_JS = GrammarRef("tree_sitter_javascript")

# Hand-written extractors.
BUILTIN_LANGUAGES: tuple[LanguageConfig, ...] = (
    *_configs({".ts": ("typescript", _TS), ".tsx": ("tsx", _TSX)}, extract_typescript),
    *_configs({ext: ("javascript", _JS) for ext in (".js", ".jsx", ".mjs", ".cjs")}, extract_typescript),
    *_configs({".rb": ("ruby", GrammarRef("tree_sitter_ruby"))}, extract_ruby),
    *_configs({ext: ("python", GrammarRef("tree_sitter_python")) for ext in (".py", ".pyi")}, extract_python),
    *_configs({".go": ("go", GrammarRef("tree_sitter_go"))}, extract_go),
)

# Grammar available (when the package is installed), extractor synthesized.
SYNTHESIZABLE_LANGUAGES: tuple[LanguageConfig, ...] = tuple(_configs({
    ".rs": ("rust", GrammarRef("tree_sitter_rust")),
    ".swift": ("swift", GrammarRef("tree_sitter_swift")),
    ".java": ("java", GrammarRef("tree_sitter_java")),
    ".kt": ("kotlin", GrammarRef("tree_sitter_kotlin")),
    ".scala": ("scala", GrammarRef("tree_sitter_scala")),
    ".c": ("c", GrammarRef("tree_sitter_c")),
    ".h": ("c", GrammarRef("tree_sitter_c")),
    ".cpp": ("cpp", GrammarRef("tree_sitter_cpp")),
    ".cc": ("cpp", GrammarRef("tree_sitter_cpp")),
    ".hpp": ("cpp", GrammarRef("tree_sitter_cpp")),
    ".cs": ("c_sharp", GrammarRef("tree_sitter_c_sharp")),
    ".ex": ("elixir", GrammarRef("tree_sitter_elixir")),
    ".exs": ("elixir", GrammarRef("tree_sitter_elixir")),
    ".lua": ("lua", GrammarRef("tree_sitter_lua")),
    ".php": ("php", GrammarRef("tree_sitter_php", "language_php")),
    ".dart": ("dart", GrammarRef("tree_sitter_dart")),
    ".zig": ("zig", GrammarRef("tree_sitter_zig")),
    ".ml": ("ocaml", GrammarRef("tree_sitter_ocaml", "language_ocaml")),
    ".elm": ("elm", GrammarRef("tree_sitter_elm")),
    ".sh": ("bash", GrammarRef("tree_sitter_bash")),
    ".bash": ("bash", GrammarRef("tree_sitter_bash")),
}))


class LanguageRegistry:
    """Maps file extensions to language configs.

    Built-in configs always win over synthesizable ones for the same
    extension, regardless of registration order.
    """

    def __init__(
        self,
        builtins: tuple[LanguageConfig, ...] | list[LanguageConfig] = BUILTIN_LANGUAGES,
        synthesizable: tuple[LanguageConfig, ...] | list[LanguageConfig] = SYNTHESIZABLE_LANGUAGES,
    ) -> None:
        self._builtin: dict[str, LanguageConfig] = {}
        self._synthesizable: dict[str, LanguageConfig] = {}
        for config in builtins:
            if config.extract is None:
                raise ValueError(f"built-in config for {config.extension} has no extractor")
            self._builtin[config.extension.lower()] = config
        for config in synthesizable:
            self._synthesizable[config.extension.lower()] = config

    def lookup(self, extension: str) -> LanguageConfig | None:
        """Return the config for *extension* (e.g. ``".rs"``), or ``None``."""
        ext = extension.lower()
        return self._builtin.get(ext) or self._synthesizable.get(ext)

    def lookup_path(self, path: Path | str) -> LanguageConfig | None:
        return self.lookup(Path(path).suffix)

    def is_known(self, path: Path | str) -> bool:
        return self.lookup_path(path) is not None

    def extensions_for(self, language: str) -> list[str]:
        """All extensions that resolve to *language*, sorted."""
        exts = {
            ext for ext in (*self._builtin, *self._synthesizable)
            if (cfg := self.lookup(ext)) is not None and cfg.language == language
        }
        return sorted(exts)

    def languages(self) -> list[str]:
        return sorted({cfg.language for cfg in (*self._builtin.values(), *self._synthesizable.values())})
