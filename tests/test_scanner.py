"""Tests for the directory walker and sample-file discovery."""

from __future__ import annotations

import tempfile
from pathlib import Path

import pytest

from codemap.errors import ScanRootError
from codemap.extractors import LanguageRegistry
from codemap.scanner import (
    SKIP_DIRS,
    find_sample_file,
    relative_path,
    should_skip_dir,
    walk_source_files,
)


def _make_repo(structure: dict[str, str | dict]) -> Path:
    """Create a temporary directory with the given file structure.

    Structure is a dict where:
    - keys are file/dir names
    - values are file content strings or nested dicts for directories
    """
    root = Path(tempfile.mkdtemp())
    _populate(root, structure)
    return root


def _populate(base: Path, structure: dict) -> None:
    for name, content in structure.items():
        path = base / name
        if isinstance(content, dict):
            path.mkdir(parents=True, exist_ok=True)
            _populate(path, content)
        else:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")


def _rel(paths: list[Path], root: Path) -> list[str]:
    return [relative_path(p, root.resolve()) for p in paths]


class TestWalk:
    def test_known_extensions_only(self):
        repo = _make_repo({"app.py": "x", "main.rs": "fn main() {}", "README.md": "# hi", "data.json": "{}"})
        files = walk_source_files(repo, ["."], LanguageRegistry())
        assert _rel(files, repo) == ["app.py", "main.rs"]

    def test_sorted_by_path(self):
        repo = _make_repo({"z.py": "", "a": {"b.go": "", "a.ts": ""}, "m.rb": ""})
        files = walk_source_files(repo, ["."], LanguageRegistry())
        assert _rel(files, repo) == ["a/a.ts", "a/b.go", "m.rb", "z.py"]

    def test_skip_dirs(self):
        repo = _make_repo({
            "src": {"app.py": "x"},
            "node_modules": {"lib.js": "x"},
            "__pycache__": {"cached.py": "x"},
            "vendor": {"dep.go": "x"},
            "coverage": {"report.js": "x"},
            "dist": {"bundle.js": "x"},
        })
        files = walk_source_files(repo, ["."], LanguageRegistry())
        assert _rel(files, repo) == ["src/app.py"]

    def test_hidden_dirs_skipped(self):
        repo = _make_repo({".git": {"hook.py": "x"}, ".codemap": {"extractors": {"rust.py": "x"}}, "ok.py": "x"})
        files = walk_source_files(repo, ["."], LanguageRegistry())
        assert _rel(files, repo) == ["ok.py"]

    def test_extra_skip_dirs(self):
        repo = _make_repo({"generated": {"gen.py": "x"}, "app.py": "x"})
        files = walk_source_files(repo, ["."], LanguageRegistry(), skip_dirs=["generated"])
        assert _rel(files, repo) == ["app.py"]

    def test_only_excluded_dirs(self):
        repo = _make_repo({"node_modules": {"a.js": "x"}, ".git": {"b.py": "x"}, "build": {"c.go": "x"}})
        assert walk_source_files(repo, ["."], LanguageRegistry()) == []

    def test_multiple_and_overlapping_roots(self):
        repo = _make_repo({"src": {"a.py": "x", "pkg": {"b.py": "x"}}, "lib": {"c.rb": "x"}, "top.py": "x"})
        files = walk_source_files(repo, ["src", "lib", "src/pkg"], LanguageRegistry())
        assert _rel(files, repo) == ["lib/c.rb", "src/a.py", "src/pkg/b.py"]

    def test_missing_root_is_hard_failure(self):
        repo = _make_repo({"app.py": "x"})
        with pytest.raises(ScanRootError):
            walk_source_files(repo, ["does-not-exist"], LanguageRegistry())

    def test_file_as_root_is_hard_failure(self):
        repo = _make_repo({"app.py": "x"})
        with pytest.raises(ScanRootError):
            walk_source_files(repo, ["app.py"], LanguageRegistry())

    def test_should_skip_dir(self):
        assert "node_modules" in SKIP_DIRS
        assert should_skip_dir(".hidden")
        assert should_skip_dir("custom", extra={"custom"})
        assert not should_skip_dir("src")


class TestSampleFile:
    BIG = "\n".join(f"line {i}" for i in range(10)) + "\n"

    def test_prefers_substantial_file(self):
        repo = _make_repo({"a.rs": "fn a() {}\n", "b.rs": self.BIG, "c.rs": self.BIG})
        sample = find_sample_file(repo, ["."], [".rs"])
        assert sample is not None
        assert sample.name == "b.rs"

    def test_falls_back_to_largest(self):
        repo = _make_repo({"a.rs": "fn a() {}\n", "b.rs": "fn b() {}\nfn c() {}\n", "empty.rs": ""})
        sample = find_sample_file(repo, ["."], [".rs"])
        assert sample is not None
        assert sample.name == "b.rs"

    def test_blank_lines_do_not_count(self):
        repo = _make_repo({"a.rs": "\n" * 50 + "fn a() {}\n", "b.rs": "x\ny\nz\n"})
        sample = find_sample_file(repo, ["."], [".rs"])
        assert sample.name == "b.rs"

    def test_any_extension_of_language(self):
        repo = _make_repo({"x.hpp": self.BIG})
        sample = find_sample_file(repo, ["."], [".cc", ".cpp", ".hpp"])
        assert sample is not None and sample.name == "x.hpp"

    def test_depth_bound(self):
        repo = _make_repo({"a": {"b": {"c": {"deep.rs": self.BIG}}}})
        assert find_sample_file(repo, ["."], [".rs"], max_depth=2) is None
        assert find_sample_file(repo, ["."], [".rs"], max_depth=3) is not None

    def test_skips_excluded_dirs(self):
        repo = _make_repo({"target": {"gen.rs": self.BIG}, ".hidden": {"h.rs": self.BIG}})
        assert find_sample_file(repo, ["."], [".rs"]) is None

    def test_no_candidates(self):
        repo = _make_repo({"app.py": self.BIG})
        assert find_sample_file(repo, ["."], [".rs"]) is None
