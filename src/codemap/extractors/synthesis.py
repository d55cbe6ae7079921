"""Synthesizes extractors for languages that have a grammar but no built-in.

Protocol per language: cache lookup (memory, then disk) -> sample file ->
syntax-tree dump -> oracle request -> validation -> persist -> compile.
Any failure excludes the language for the rest of the run.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from ..errors import CodemapError, InvalidExtractorError, MissingGrammarError
from ..models import MapConfig
from ..oracle import GenerationOracle
from ..scanner import find_sample_file, relative_path
from . import LanguageConfig, LanguageRegistry
from .base import Extractor, SyntaxNode, named_children
from .cache import ExtractorCache
from .prompts import build_synthesis_prompt
from .sandbox import compile_extractor, has_extract_marker, strip_export_boilerplate, strip_fences
from .treesitter import ParserAdapter

logger = logging.getLogger(__name__)

_DUMP_TEXT_CHARS = 80


def dump_tree(root: SyntaxNode, max_depth: int = 3) -> str:
    """Render the top *max_depth* levels below *root*, one node per line."""
    lines: list[str] = []

    def walk(node: SyntaxNode, depth: int) -> None:
        if depth > max_depth:
            return
        text = node.text[:_DUMP_TEXT_CHARS].replace("\n", "\\n")
        lines.append(f"{'  ' * depth}{node.type} | {text}")
        for child in named_children(node):
            walk(child, depth + 1)

    for child in named_children(root):
        walk(child, 0)
    return "\n".join(lines)


def clean_response(raw: str) -> str:
    """Validate an oracle response and return the bare extractor source.

    Raises InvalidExtractorError when the ``extract`` function is missing.
    """
    code = strip_fences(raw)
    if not has_extract_marker(code):
        raise InvalidExtractorError("response does not define an extract function")
    return strip_export_boilerplate(code)


class ExtractorSynthesizer:
    """Resolves extractors for synthesizable languages, asking the oracle on a miss.

    Owns the per-run bookkeeping: a language whose synthesis failed is not
    retried until a new synthesizer is built.
    """

    def __init__(
        self,
        root: Path,
        registry: LanguageRegistry,
        parser: ParserAdapter,
        cache: ExtractorCache,
        oracle: GenerationOracle | None,
        config: MapConfig | None = None,
        scan_dirs: Sequence[str | Path] = (".",),
    ) -> None:
        self.root = root
        self.registry = registry
        self.parser = parser
        self.cache = cache
        self.oracle = oracle
        self.config = config or MapConfig()
        self.scan_dirs = list(scan_dirs)
        self._failed: set[str] = set()

    def resolve(self, config: LanguageConfig) -> Extractor | None:
        if config.extract is not None:
            return config.extract

        language = config.language
        if language in self._failed:
            return None

        cached = self.cache.get(language)
        if cached is not None:
            return cached

        if self.oracle is None:
            logger.info("No %s extractor cached and synthesis is disabled; skipping", language)
            self._failed.add(language)
            return None

        try:
            extractor = self._synthesize(config)
        except CodemapError as exc:
            logger.warning("Could not synthesize %s extractor: %s", language, exc)
            self._failed.add(language)
            return None

        self.cache.remember(language, extractor)
        return extractor

    def _synthesize(self, config: LanguageConfig) -> Extractor:
        language = config.language
        assert self.oracle is not None

        sample = find_sample_file(
            self.root,
            self.scan_dirs,
            self.registry.extensions_for(language),
            min_lines=self.config.sample_min_lines,
            max_depth=self.config.sample_max_depth,
            skip_dirs=self.config.skip_dirs,
        )
        if sample is None:
            raise CodemapError(f"no sample {language} file found")
        sample_rel = relative_path(sample, self.root)

        source = sample.read_text(encoding="utf-8", errors="replace")
        tree = self.parser.parse(source, config.grammar)
        if tree is None:
            raise MissingGrammarError(language)

        logger.info("Synthesizing %s extractor from %s", language, sample_rel)
        prompt = build_synthesis_prompt(
            language,
            sample_rel,
            dump_tree(tree, self.config.tree_dump_depth),
            source,
            depth=self.config.tree_dump_depth,
            max_source_chars=self.config.source_excerpt_chars,
        )
        code = clean_response(self.oracle.generate(prompt))

        path = self.cache.store(language, code, sample_rel)
        return self.cache.load(path)
