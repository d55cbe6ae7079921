"""Tests for the tree-sitter parser adapter and the non-Python built-in extractors."""

from __future__ import annotations

import pytest

from codemap.extractors.base import SyntaxNode
from codemap.extractors.go_extractor import extract_go
from codemap.extractors.ruby_extractor import extract_ruby
from codemap.extractors.treesitter import GrammarRef, ParserAdapter, TreeSitterNode
from codemap.extractors.typescript_extractor import extract_typescript

_TS = GrammarRef("tree_sitter_typescript", "language_typescript")
_JS = GrammarRef("tree_sitter_javascript")
_GO = GrammarRef("tree_sitter_go")
_RUBY = GrammarRef("tree_sitter_ruby")


@pytest.fixture(scope="module")
def parser() -> ParserAdapter:
    return ParserAdapter()


def _root(parser: ParserAdapter, code: str, ref: GrammarRef) -> SyntaxNode:
    root = parser.parse(code, ref)
    assert root is not None
    return root


# ---- Parser adapter ----

class TestParserAdapter:
    def test_node_interface(self, parser: ParserAdapter):
        root = _root(parser, "package main\n\nfunc Hello() {}\n", _GO)
        assert isinstance(root, SyntaxNode)
        assert isinstance(root, TreeSitterNode)
        assert root.type == "source_file"
        assert root.named_child_count == 2
        func = root.named_child(1)
        assert func is not None
        assert func.type == "function_declaration"
        assert func.start_point == (2, 0)
        assert func.text == "func Hello() {}"

    def test_out_of_range_child(self, parser: ParserAdapter):
        root = _root(parser, "package main\n", _GO)
        assert root.named_child(99) is None

    def test_missing_grammar_yields_no_tree(self):
        adapter = ParserAdapter()
        ref = GrammarRef("tree_sitter_no_such_language")
        assert adapter.parse("anything", ref) is None
        assert adapter.has_grammar(ref) is False

    def test_grammar_loaded_once(self, monkeypatch: pytest.MonkeyPatch):
        import codemap.extractors.treesitter as ts

        calls: list[GrammarRef] = []
        real = ts.load_language

        def counting(ref: GrammarRef):
            calls.append(ref)
            return real(ref)

        monkeypatch.setattr(ts, "load_language", counting)
        adapter = ParserAdapter()
        adapter.parse("package a\n", _GO)
        adapter.parse("package b\n", _GO)
        assert calls == [_GO]


# ---- TypeScript ----

class TestTypeScript:
    def test_imports_and_function(self, parser: ParserAdapter):
        code = (
            "import { Router } from 'express';\n"
            "import './side-effect';\n"
            "export function createApp(config: Config): void {}\n"
        )
        result = extract_typescript(_root(parser, code, _TS))
        assert result.imports == ["express", "./side-effect"]
        assert len(result.symbols) == 1
        sym = result.symbols[0]
        assert (sym.kind, sym.name, sym.line) == ("function", "createApp", 3)
        assert sym.signature == "(config: Config): void"

    def test_types(self, parser: ParserAdapter):
        code = (
            "export interface AppConfig { port: number }\n"
            "export type UserId = string;\n"
            "export enum Color { Red }\n"
        )
        result = extract_typescript(_root(parser, code, _TS))
        assert [(s.kind, s.name) for s in result.symbols] == [
            ("interface", "AppConfig"),
            ("type", "UserId"),
            ("type", "Color"),
        ]

    def test_class_methods(self, parser: ParserAdapter):
        code = (
            "export class AppController {\n"
            "  constructor(svc: Service) {}\n"
            "  handle(req: Request): Response { return req as any; }\n"
            "  private secret(): void {}\n"
            "}\n"
        )
        result = extract_typescript(_root(parser, code, _TS))
        cls = result.symbols[0]
        assert (cls.kind, cls.name) == ("class", "AppController")
        assert [m.name for m in cls.children] == ["constructor", "handle"]
        assert cls.children[1].signature == "(req: Request): Response"
        assert cls.children[1].line == 3

    def test_abstract_class_members(self, parser: ParserAdapter):
        code = (
            "export abstract class Repo<T> {\n"
            "  abstract find(id: string): T;\n"
            "  count(): number { return 0; }\n"
            "}\n"
        )
        result = extract_typescript(_root(parser, code, _TS))
        cls = result.symbols[0]
        assert (cls.kind, cls.name) == ("class", "Repo")
        assert [(m.name, m.signature) for m in cls.children] == [
            ("find", "(id: string): T"),
            ("count", "(): number"),
        ]
        assert cls.children[0].line == 2

    def test_only_exports_are_symbols(self, parser: ParserAdapter):
        code = (
            "function helper() {}\n"
            "export const API_URL = 'x';\n"
            "export const handler = async (event: Event): Promise<void> => {};\n"
        )
        result = extract_typescript(_root(parser, code, _TS))
        assert [(s.kind, s.name) for s in result.symbols] == [
            ("constant", "API_URL"),
            ("function", "handler"),
        ]
        assert result.symbols[1].signature == "(event: Event): Promise<void>"

    def test_reexport_source_is_import(self, parser: ParserAdapter):
        result = extract_typescript(_root(parser, "export { a } from './a';\n", _TS))
        assert result.imports == ["./a"]
        assert result.symbols == []


# ---- JavaScript ----

class TestJavaScript:
    def test_require_import_and_class(self, parser: ParserAdapter):
        code = (
            "const fs = require('fs');\n"
            "import path from 'path';\n"
            "export class Store {\n"
            "  load(key) { return key; }\n"
            "}\n"
        )
        result = extract_typescript(_root(parser, code, _JS))
        assert result.imports == ["fs", "path"]
        assert len(result.symbols) == 1
        store = result.symbols[0]
        assert (store.kind, store.name) == ("class", "Store")
        assert [(m.kind, m.name, m.signature) for m in store.children] == [("method", "load", "(key)")]

    def test_unexported_file_is_empty(self, parser: ParserAdapter):
        result = extract_typescript(_root(parser, "function local() { return 1; }\n", _JS))
        assert result.is_empty


# ---- Go ----

class TestGo:
    CODE = (
        "package main\n"
        "\n"
        "import (\n"
        '\t"fmt"\n'
        '\tlog "github.com/sirupsen/logrus"\n'
        ")\n"
        "\n"
        'import "os"\n'
        "\n"
        "const MaxRetries = 3\n"
        "const internal = 1\n"
        "\n"
        "type User struct {\n"
        "\tName string\n"
        "}\n"
        "\n"
        "type Logger interface {\n"
        "\tLog(msg string)\n"
        "}\n"
        "\n"
        "type handler struct{}\n"
        "\n"
        "func Hello(name string) string {\n"
        "\treturn name\n"
        "}\n"
        "\n"
        "func helper() {}\n"
        "\n"
        "func (s *Server) Start(ctx context.Context) error {\n"
        "\treturn nil\n"
        "}\n"
    )

    def test_imports(self, parser: ParserAdapter):
        result = extract_go(_root(parser, self.CODE, _GO))
        assert result.imports == ["fmt", "github.com/sirupsen/logrus", "os"]

    def test_exported_symbols(self, parser: ParserAdapter):
        result = extract_go(_root(parser, self.CODE, _GO))
        assert [(s.kind, s.name) for s in result.symbols] == [
            ("constant", "MaxRetries"),
            ("type", "User"),
            ("interface", "Logger"),
            ("function", "Hello"),
            ("method", "Start"),
        ]

    def test_signatures(self, parser: ParserAdapter):
        symbols = {s.name: s for s in extract_go(_root(parser, self.CODE, _GO)).symbols}
        assert symbols["Hello"].signature == "(name string) string"
        assert symbols["Hello"].line == 23
        assert symbols["Start"].signature == "(s *Server) (ctx context.Context) error"


# ---- Ruby ----

class TestRuby:
    CODE = (
        'require "json"\n'
        'require_relative "lib/helper"\n'
        "\n"
        "module Billing\n"
        "  class Invoice < Record\n"
        "    def total(tax)\n"
        "    end\n"
        "\n"
        "    private\n"
        "\n"
        "    def secret\n"
        "    end\n"
        "  end\n"
        "\n"
        "  def self.configure\n"
        "  end\n"
        "end\n"
        "\n"
        "class Report\n"
        "  def render\n"
        "  end\n"
        "end\n"
        "\n"
        "def main\n"
        "end\n"
    )

    def test_requires(self, parser: ParserAdapter):
        result = extract_ruby(_root(parser, self.CODE, _RUBY))
        assert result.imports == ["json", "lib/helper"]

    def test_module_nesting(self, parser: ParserAdapter):
        result = extract_ruby(_root(parser, self.CODE, _RUBY))
        billing = result.symbols[0]
        assert (billing.kind, billing.name, billing.line) == ("module", "Billing", 4)
        invoice, configure = billing.children
        assert (invoice.kind, invoice.name, invoice.signature) == ("class", "Invoice", "< Record")
        assert [(m.name, m.signature) for m in invoice.children] == [("total", "(tax)")]
        assert (configure.kind, configure.name) == ("method", "configure")

    def test_top_level_class_and_function(self, parser: ParserAdapter):
        result = extract_ruby(_root(parser, self.CODE, _RUBY))
        report, main = result.symbols[1:]
        assert (report.kind, report.name) == ("class", "Report")
        assert [m.name for m in report.children] == ["render"]
        assert (main.kind, main.name, main.line) == ("function", "main", 24)
