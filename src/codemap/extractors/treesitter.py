"""Parser adapter: lazily loads tree-sitter grammars and parses source text."""

from __future__ import annotations

import importlib
import logging
from dataclasses import dataclass

from tree_sitter import Language, Node, Parser

from ..errors import MissingGrammarError
from .base import SyntaxNode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GrammarRef:
    """Where to find a grammar: ``importlib.import_module(module).<function>()``."""

    module: str
    function: str = "language"


class TreeSitterNode:
    """Adapts a ``tree_sitter.Node`` to the :class:`SyntaxNode` interface."""

    __slots__ = ("_node",)

    def __init__(self, node: Node) -> None:
        self._node = node

    @property
    def type(self) -> str:
        return self._node.type

    @property
    def start_point(self) -> tuple[int, int]:
        point = self._node.start_point
        return (point[0], point[1])

    @property
    def named_child_count(self) -> int:
        return self._node.named_child_count

    def named_child(self, index: int) -> TreeSitterNode | None:
        child = self._node.named_child(index)
        return TreeSitterNode(child) if child is not None else None

    @property
    def text(self) -> str:
        raw = self._node.text
        if raw is None:
            return ""
        return raw.decode("utf-8", errors="replace")

    def __repr__(self) -> str:
        return f"TreeSitterNode({self.type!r}, line={self.start_point[0] + 1})"


def load_language(ref: GrammarRef) -> Language:
    """Import and instantiate a grammar. Raises MissingGrammarError on failure."""
    try:
        module = importlib.import_module(ref.module)
        return Language(getattr(module, ref.function)())
    except Exception as exc:
        raise MissingGrammarError(ref.module, str(exc)) from exc


class ParserAdapter:
    """Loads each grammar once and turns source text into syntax trees.

    A grammar that fails to load is remembered as missing, so the failure is
    logged once per run rather than once per file.
    """

    def __init__(self) -> None:
        self._parsers: dict[GrammarRef, Parser | None] = {}

    def _get_parser(self, ref: GrammarRef) -> Parser | None:
        if ref not in self._parsers:
            try:
                self._parsers[ref] = Parser(load_language(ref))
            except MissingGrammarError as exc:
                logger.warning("Skipping %s files: %s", ref.module, exc)
                self._parsers[ref] = None
        return self._parsers[ref]

    def has_grammar(self, ref: GrammarRef) -> bool:
        return self._get_parser(ref) is not None

    def parse(self, source: str, ref: GrammarRef) -> SyntaxNode | None:
        """Parse *source* and return the root node, or ``None`` without a grammar."""
        parser = self._get_parser(ref)
        if parser is None:
            return None
        tree = parser.parse(source.encode("utf-8"))
        return TreeSitterNode(tree.root_node)
