"""Source scanner -- walks a scan root and selects files by pattern."""

from __future__ import annotations

import fnmatch
import logging
import os
import re
from collections.abc import Iterator
from pathlib import Path

from .errors import NotFound
from .models import ScanTarget

logger = logging.getLogger(__name__)

# Directories to skip unconditionally.
SKIP_DIRS: set[str] = {
    ".git", "node_modules", "dist", "build", "out",
    ".next", ".nuxt",           # Next.js / Nuxt
    ".turbo", ".vercel",
    ".storybook-static", "storybook-static",
    "coverage",                 # test coverage output
    ".cache",                   # generic caches
    "__pycache__",
}


class SourceScanner:
    """Lazy, restartable sequence of files under ``target.root``.

    Every call to :meth:`__iter__` walks the tree again. Directory and file
    names are visited in sorted order so the output is reproducible.
    """

    def __init__(self, target: ScanTarget) -> None:
        self.target = target
        self._include = _compile(target.include, target.pattern_syntax)
        self._exclude = _compile(target.exclude, target.pattern_syntax)

    def __iter__(self) -> Iterator[Path]:
        root = self.target.root
        if not root.is_dir():
            raise NotFound(root)
        return self._walk(root.resolve())

    def _walk(self, root: Path) -> Iterator[Path]:
        for dirpath, dirnames, filenames in os.walk(root):
            # Prune excluded directories in-place so os.walk skips them.
            dirnames[:] = sorted(d for d in dirnames if d not in SKIP_DIRS)

            rel_dir = Path(dirpath).relative_to(root).as_posix()
            for fname in sorted(filenames):
                rel_path = fname if rel_dir == "." else f"{rel_dir}/{fname}"
                if self.selects(rel_path):
                    yield Path(dirpath) / fname
                else:
                    logger.debug("Skipping %s", rel_path)

    def selects(self, rel_path: str) -> bool:
        """True when *rel_path* passes the include and exclude rules."""
        if not any(match(rel_path) for match in self._include):
            return False
        return not any(match(rel_path) for match in self._exclude)


def scan(target: ScanTarget) -> list[Path]:
    """Return every selected file under *target* as a list."""
    files = list(SourceScanner(target))
    logger.debug("Scanned %s: %d file(s) selected", target.root, len(files))
    return files


def _compile(patterns: list[str], syntax: str):
    if syntax == "regex":
        return [re.compile(p).search for p in patterns]
    return [_glob_matcher(p) for p in patterns]


def _glob_matcher(pattern: str):
    # fnmatch's "*" also crosses "/", so "*.tsx" selects files at any depth.
    def match(rel_path: str) -> bool:
        return fnmatch.fnmatchcase(rel_path, pattern)

    return match
