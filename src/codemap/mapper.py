"""Aggregator -- walks the scan roots and builds the CodebaseMap."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from .extractors import LanguageRegistry
from .extractors.cache import ExtractorCache
from .extractors.synthesis import ExtractorSynthesizer
from .extractors.treesitter import ParserAdapter
from .models import CodebaseMap, FileMap, MapConfig, Symbol
from .oracle import CommandOracle, GenerationOracle
from .project import cache_dir
from .scanner import relative_path, walk_source_files

logger = logging.getLogger(__name__)


def _within_file(symbols: list[Symbol], line_count: int) -> list[Symbol]:
    """Drop symbols (and children) whose line lies outside the file."""
    kept: list[Symbol] = []
    for sym in symbols:
        if sym.line > line_count:
            logger.debug("Dropping %s %s: line %d beyond end of file", sym.kind, sym.name, sym.line)
            continue
        if sym.children:
            sym = sym.model_copy(update={"children": _within_file(sym.children, line_count)})
        kept.append(sym)
    return kept


class CodebaseMapper:
    """Holds the per-run state of a scan: registry, parsers, extractor cache.

    A mapper may be reused for several scans of the same project; grammars and
    synthesized extractors are then loaded only once.
    """

    def __init__(
        self,
        root: Path,
        *,
        config: MapConfig | None = None,
        oracle: GenerationOracle | None = None,
        registry: LanguageRegistry | None = None,
        parser: ParserAdapter | None = None,
    ) -> None:
        self.root = root.resolve()
        self.config = config or MapConfig()
        self.registry = registry or LanguageRegistry()
        self.parser = parser or ParserAdapter()
        self.cache = ExtractorCache(cache_dir(self.root, self.config))
        if oracle is None and self.config.synthesize:
            oracle = CommandOracle(
                self.config.oracle_command, cwd=self.root, timeout=self.config.oracle_timeout,
            )
        self.oracle = oracle if self.config.synthesize else None

    def map(self, dirs: Sequence[str | Path] = (".",)) -> CodebaseMap:
        """Scan *dirs* (relative to the project root) and return the map.

        Raises ScanRootError if a scan root is missing or unreadable; every
        other failure only skips the affected file or language.
        """
        paths = walk_source_files(self.root, dirs, self.registry, self.config.skip_dirs)
        synthesizer = ExtractorSynthesizer(
            self.root, self.registry, self.parser, self.cache, self.oracle,
            config=self.config, scan_dirs=dirs,
        )

        files: list[FileMap] = []
        for path in paths:
            try:
                file_map = self._map_file(path, synthesizer)
            except Exception as exc:
                logger.debug("Skipping %s: %s", relative_path(path, self.root), exc)
                continue
            if file_map is not None:
                files.append(file_map)

        logger.debug("Mapped %d of %d candidate files", len(files), len(paths))
        return CodebaseMap.from_files(files)

    def _map_file(self, path: Path, synthesizer: ExtractorSynthesizer) -> FileMap | None:
        config = self.registry.lookup_path(path)
        if config is None:
            return None

        source = path.read_text(encoding="utf-8", errors="replace")
        if not source.strip():
            return None

        extractor = synthesizer.resolve(config)
        if extractor is None:
            return None

        tree = self.parser.parse(source, config.grammar)
        if tree is None:
            return None

        result = extractor(tree)
        symbols = _within_file(result.symbols, len(source.splitlines()))
        if not symbols and not result.imports:
            return None

        return FileMap(
            path=relative_path(path, self.root),
            language=config.language,
            imports=list(result.imports),
            symbols=symbols,
        )


def map_codebase(
    root: Path,
    dirs: Sequence[str | Path] = (".",),
    *,
    config: MapConfig | None = None,
    oracle: GenerationOracle | None = None,
) -> CodebaseMap:
    """Convenience wrapper: build a :class:`CodebaseMapper` and scan once."""
    return CodebaseMapper(root, config=config, oracle=oracle).map(dirs)
