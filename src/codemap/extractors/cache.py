"""Memory- and disk-backed store of synthesized extractors, keyed by language."""

from __future__ import annotations

import logging
from pathlib import Path

from ..errors import ExtractorCompileError
from .base import Extractor
from .sandbox import compile_extractor, strip_header

logger = logging.getLogger(__name__)

_HEADER = """\
#
# auto-generated {language} extractor for codemap
# generated from: {sample}
# delete this file to regenerate
#
# helpers available: node_text, first_named_child_of_type, named_children_of_type
#
"""


class ExtractorCache:
    """One ``<language>.py`` file per synthesized extractor under *directory*.

    Compiled extractors are memoized for the lifetime of the cache object,
    so each language's file is read and compiled at most once per run.
    """

    def __init__(self, directory: Path) -> None:
        self.directory = directory
        self._memory: dict[str, Extractor] = {}

    def path_for(self, language: str) -> Path:
        return self.directory / f"{language}.py"

    def get(self, language: str) -> Extractor | None:
        """Return the extractor for *language* from memory, then disk."""
        if language in self._memory:
            return self._memory[language]
        path = self.path_for(language)
        if not path.is_file():
            return None
        try:
            extractor = self.load(path)
        except (OSError, ExtractorCompileError) as exc:
            logger.warning("Ignoring cached %s extractor: %s", language, exc)
            return None
        self._memory[language] = extractor
        return extractor

    def store(self, language: str, code: str, sample: str) -> Path:
        """Persist *code* with a provenance header and return the file path."""
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.path_for(language)
        header = _HEADER.format(language=language, sample=sample)
        path.write_text(f"{header}\n{code.strip()}\n", encoding="utf-8")
        self._memory.pop(language, None)
        logger.info("Cached %s extractor at %s", language, path)
        return path

    def remember(self, language: str, extractor: Extractor) -> None:
        self._memory[language] = extractor

    @staticmethod
    def load(path: Path) -> Extractor:
        """Read and compile a persisted extractor file."""
        code = strip_header(path.read_text(encoding="utf-8"))
        return compile_extractor(code, filename=str(path))
