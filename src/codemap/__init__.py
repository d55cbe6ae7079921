"""Codemap - structural outlines of source trees across languages."""

from .models import (  # noqa: F401 -- public re-exports
    CodebaseMap,
    Extraction,
    FileMap,
    MapConfig,
    Stats,
    Symbol,
)
from .errors import (  # noqa: F401
    CodemapError,
    ExtractorCompileError,
    InvalidExtractorError,
    MissingGrammarError,
    OracleError,
    ScanRootError,
)
from .formatters import format_json, format_markdown, load_json
from .mapper import CodebaseMapper, map_codebase
from .oracle import CommandOracle, GenerationOracle

__version__ = "0.1.0"

__all__ = [
    "CodebaseMapper",
    "CommandOracle",
    "GenerationOracle",
    "map_codebase",
    "format_json",
    "format_markdown",
    "load_json",
    "CodebaseMap",
    "Extraction",
    "FileMap",
    "MapConfig",
    "Stats",
    "Symbol",
    "CodemapError",
    "ExtractorCompileError",
    "InvalidExtractorError",
    "MissingGrammarError",
    "OracleError",
    "ScanRootError",
]
