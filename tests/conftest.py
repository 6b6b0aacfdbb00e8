"""Shared fixtures: build throwaway source trees."""

from __future__ import annotations

from pathlib import Path

import pytest


def _populate(base: Path, structure: dict) -> None:
    for name, content in structure.items():
        path = base / name
        if isinstance(content, dict):
            path.mkdir(parents=True, exist_ok=True)
            _populate(path, content)
        else:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")


@pytest.fixture
def make_repo(tmp_path: Path):
    """Create a directory tree under tmp_path.

    Keys are file/dir names; values are file contents or nested dicts.
    """

    def _make(structure: dict[str, str | dict]) -> Path:
        root = tmp_path / "repo"
        root.mkdir(exist_ok=True)
        _populate(root, structure)
        return root

    return _make
