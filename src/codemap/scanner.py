"""Repo scanner -- walks scan roots and collects mappable source files."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import TYPE_CHECKING

from .errors import ScanRootError

if TYPE_CHECKING:
    from .extractors import LanguageRegistry

logger = logging.getLogger(__name__)

# Directories to skip unconditionally (hidden directories are skipped too).
SKIP_DIRS: frozenset[str] = frozenset({
    ".git", "node_modules", "__pycache__", "vendor", "dist", "build",
    "target",          # Rust / Java (Maven)
    ".next", ".nuxt",  # Next.js / Nuxt
    "coverage",        # test coverage output
    "tmp", ".bundle",
    ".venv", "venv", ".tox", ".eggs", ".mypy_cache", ".pytest_cache",
})


def should_skip_dir(name: str, extra: Iterable[str] = ()) -> bool:
    return name.startswith(".") or name in SKIP_DIRS or name in extra


def resolve_scan_roots(root: Path, dirs: Iterable[str | Path]) -> list[Path]:
    """Resolve *dirs* against *root*; every one must be a readable directory."""
    roots: list[Path] = []
    for d in dirs:
        path = (root / d).resolve()
        if not path.is_dir():
            raise ScanRootError(path, "not a directory")
        if not os.access(path, os.R_OK | os.X_OK):
            raise ScanRootError(path, "permission denied")
        roots.append(path)
    return roots


def _walk(
    scan_root: Path, skip: frozenset[str], max_depth: int | None = None
) -> Iterator[tuple[Path, int]]:
    """Yield ``(file, depth)`` under *scan_root*, directories in sorted order."""

    def _onerror(exc: OSError) -> None:
        logger.debug("Cannot list %s: %s", exc.filename, exc)

    for dirpath, dirnames, filenames in os.walk(scan_root, onerror=_onerror):
        depth = len(Path(dirpath).relative_to(scan_root).parts)
        # Prune excluded directories in-place so os.walk skips them.
        dirnames[:] = sorted(d for d in dirnames if not should_skip_dir(d, skip))
        if max_depth is not None and depth >= max_depth:
            dirnames[:] = []
        for fname in sorted(filenames):
            yield Path(dirpath) / fname, depth


def walk_source_files(
    root: Path,
    dirs: Iterable[str | Path],
    registry: LanguageRegistry,
    skip_dirs: Iterable[str] = (),
) -> list[Path]:
    """Return every file under the scan roots whose extension is registered.

    Paths are absolute, de-duplicated (scan roots may overlap) and sorted by
    their path relative to *root*.
    """
    root = root.resolve()
    skip = frozenset(skip_dirs)
    found: set[Path] = set()
    for scan_root in resolve_scan_roots(root, dirs):
        for path, _depth in _walk(scan_root, skip):
            if registry.is_known(path):
                found.add(path)
    return sorted(found, key=lambda p: relative_path(p, root))


def relative_path(path: Path, root: Path) -> str:
    """Forward-slash path of *path* relative to *root* (absolute if outside)."""
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return path.as_posix()


def _line_count(path: Path) -> int:
    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except OSError:
        return 0
    return sum(1 for line in text.splitlines() if line.strip())


def find_sample_file(
    root: Path,
    dirs: Iterable[str | Path],
    extensions: Iterable[str],
    *,
    min_lines: int = 5,
    max_depth: int = 5,
    skip_dirs: Iterable[str] = (),
) -> Path | None:
    """Pick a representative file with one of *extensions*.

    Scan roots are searched in order, depth-first in sorted order, no deeper
    than *max_depth*. The first file with more than *min_lines* non-blank
    lines wins; failing that, the largest non-empty candidate.
    """
    exts = {e.lower() for e in extensions}
    skip = frozenset(skip_dirs)
    fallback: tuple[int, Path] | None = None
    for d in dirs:
        scan_root = (root / d).resolve()
        if not scan_root.is_dir():
            continue
        for path, _depth in _walk(scan_root, skip, max_depth=max_depth):
            if path.suffix.lower() not in exts:
                continue
            lines = _line_count(path)
            if lines > min_lines:
                return path
            if lines > 0 and (fallback is None or lines > fallback[0]):
                fallback = (lines, path)
    return fallback[1] if fallback is not None else None
