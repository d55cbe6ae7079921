"""Exception hierarchy for codemap.

Everything except :class:`ScanRootError` is handled inside the mapper and
turned into a skipped file or language.
"""

from __future__ import annotations

from pathlib import Path


class CodemapError(Exception):
    """Base class for all codemap errors."""


class ScanRootError(CodemapError):
    """A scan root does not exist or cannot be listed."""

    def __init__(self, path: Path, reason: str = "not a readable directory") -> None:
        self.path = path
        super().__init__(f"{path}: {reason}")


class MissingGrammarError(CodemapError):
    """The tree-sitter grammar for a language is absent or unloadable."""

    def __init__(self, language: str, reason: str = "") -> None:
        self.language = language
        msg = f"no grammar available for {language}"
        if reason:
            msg = f"{msg} ({reason})"
        super().__init__(msg)


class OracleError(CodemapError):
    """The generation oracle was unavailable or returned a failure."""


class InvalidExtractorError(OracleError):
    """The oracle answered, but the answer is not a usable extractor."""


class ExtractorCompileError(CodemapError):
    """A synthesized extraction rule failed safety checks or compilation."""
