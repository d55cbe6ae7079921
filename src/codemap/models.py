"""Pydantic models for codemap's structural outline."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, model_validator

SymbolKind = Literal["function", "class", "type", "interface", "constant", "method", "module"]

# Only these kinds may carry nested members.
CONTAINER_KINDS: frozenset[str] = frozenset({"class", "module"})


# ---------------------------------------------------------------------------
# Extraction output
# ---------------------------------------------------------------------------

class Symbol(BaseModel):
    """One named declaration found by an extractor."""

    kind: SymbolKind
    name: str
    signature: str | None = None
    line: int = Field(ge=1)
    children: list[Symbol] = Field(default_factory=list)

    @model_validator(mode="after")
    def _leaf_kinds_have_no_children(self) -> Symbol:
        if self.children and self.kind not in CONTAINER_KINDS:
            raise ValueError(f"{self.kind} symbol {self.name!r} cannot have children")
        return self


class Extraction(BaseModel):
    """Output from any extractor (built-in or synthesized)."""

    symbols: list[Symbol] = Field(default_factory=list)
    imports: list[str] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.symbols and not self.imports


# ---------------------------------------------------------------------------
# Aggregated map
# ---------------------------------------------------------------------------

class FileMap(BaseModel):
    """Outline of a single source file."""

    path: str       # relative to the project root (forward slashes)
    language: str
    imports: list[str] = Field(default_factory=list)
    symbols: list[Symbol] = Field(default_factory=list)


class Stats(BaseModel):
    total_files: int = 0
    by_language: dict[str, int] = Field(default_factory=dict)


class CodebaseMap(BaseModel):
    """The full structural map produced by one scan."""

    files: list[FileMap] = Field(default_factory=list)
    stats: Stats = Field(default_factory=Stats)

    @classmethod
    def from_files(cls, files: list[FileMap]) -> CodebaseMap:
        """Build a map whose stats are derived from *files*."""
        by_language: dict[str, int] = {}
        for fm in files:
            by_language[fm.language] = by_language.get(fm.language, 0) + 1
        return cls(files=files, stats=Stats(total_files=len(files), by_language=by_language))


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

class MapConfig(BaseModel):
    """User configuration stored in ``.codemap/config.toml``.

    CLI flags override these values for a single invocation.
    Precedence: CLI flag > config.toml > default.
    """

    cache_dir: str = ".codemap/extractors"
    """Directory (relative to the project root) holding synthesized extractors."""

    skip_dirs: list[str] = Field(default_factory=list)
    """Extra directory names to exclude, on top of the built-in set."""

    synthesize: bool = True
    """Ask the generation oracle for extractors the cache does not have."""

    oracle_command: list[str] = Field(default_factory=lambda: ["claude", "-p", "-"])
    """Command run for the generation oracle; the prompt is sent on stdin."""

    oracle_timeout: float | None = 600.0
    """Seconds before an oracle call is abandoned (``None`` waits forever)."""

    sample_min_lines: int = 5
    """A sample file needs more than this many non-blank lines to be preferred."""

    sample_max_depth: int = 5
    """How many directory levels the sample search descends."""

    tree_dump_depth: int = 3
    """Depth of the syntax-tree dump included in synthesis requests."""

    source_excerpt_chars: int = 3000
    """Characters of sample source included in synthesis requests."""


Symbol.model_rebuild()
