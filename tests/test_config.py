"""Tests for configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from storydoc.config import StorydocConfig, find_config_file, load_config
from storydoc.errors import ConfigError


class TestDefaults:
    def test_defaults_without_file(self, tmp_path: Path):
        cfg = load_config(tmp_path)
        assert cfg.base_dir == tmp_path.resolve()
        assert cfg.components.root == Path("src/components")
        assert cfg.components.include == ["*.ts", "*.tsx"]
        assert cfg.components.exclude == ["*.test.*"]
        assert cfg.api_routes.root == Path("src/app/api")
        assert cfg.api_routes.route_stem == "route"
        assert cfg.method_detection == "syntax"
        assert cfg.strict is False

    def test_scan_targets_resolve_against_base(self, tmp_path: Path):
        cfg = load_config(tmp_path)
        assert cfg.components_target().root == tmp_path.resolve() / "src" / "components"
        assert cfg.api_routes_target().root == tmp_path.resolve() / "src" / "app" / "api"

    def test_absolute_root_kept(self, tmp_path: Path):
        cfg = load_config(tmp_path, {"components": {"root": str(tmp_path / "ui")}})
        assert cfg.components_target().root == tmp_path / "ui"


class TestFileSources:
    def test_storydoc_toml(self, tmp_path: Path):
        (tmp_path / "storydoc.toml").write_text(
            'timeout = 3.5\n\n[components]\nroot = "app/ui"\n',
            encoding="utf-8",
        )
        cfg = load_config(tmp_path)
        assert cfg.timeout == 3.5
        assert cfg.components.root == Path("app/ui")
        # Unset keys of a partial table keep their defaults.
        assert cfg.components.include == ["*.ts", "*.tsx"]
        assert cfg.components.title == "Components"

    def test_pyproject_table(self, tmp_path: Path):
        (tmp_path / "pyproject.toml").write_text(
            '[project]\nname = "x"\n\n[tool.storydoc]\nmethod_detection = "text"\n',
            encoding="utf-8",
        )
        assert find_config_file(tmp_path) == tmp_path / "pyproject.toml"
        assert load_config(tmp_path).method_detection == "text"

    def test_pyproject_without_table_ignored(self, tmp_path: Path):
        (tmp_path / "pyproject.toml").write_text('[project]\nname = "x"\n', encoding="utf-8")
        assert find_config_file(tmp_path) is None

    def test_storydoc_toml_preferred(self, tmp_path: Path):
        (tmp_path / "storydoc.toml").write_text("concurrency = 2\n", encoding="utf-8")
        (tmp_path / "pyproject.toml").write_text("[tool.storydoc]\nconcurrency = 8\n", encoding="utf-8")
        assert load_config(tmp_path).concurrency == 2


class TestOverrides:
    def test_override_beats_file(self, tmp_path: Path):
        (tmp_path / "storydoc.toml").write_text("timeout = 3.0\n", encoding="utf-8")
        assert load_config(tmp_path, {"timeout": 1.0}).timeout == 1.0

    def test_none_override_ignored(self, tmp_path: Path):
        (tmp_path / "storydoc.toml").write_text("timeout = 3.0\n", encoding="utf-8")
        assert load_config(tmp_path, {"timeout": None}).timeout == 3.0

    def test_with_target(self, tmp_path: Path):
        cfg = load_config(tmp_path).with_target("components", root=Path("lib"), include=None, exclude=[])
        assert cfg.components.root == Path("lib")
        assert cfg.components.exclude == ["*.test.*"]

    def test_with_target_no_updates_returns_same(self, tmp_path: Path):
        cfg = load_config(tmp_path)
        assert cfg.with_target("api_routes") is cfg


class TestInvalid:
    def test_bad_toml(self, tmp_path: Path):
        (tmp_path / "storydoc.toml").write_text("timeout = = 1\n", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config(tmp_path)

    def test_bad_value(self, tmp_path: Path):
        (tmp_path / "storydoc.toml").write_text('method_detection = "guess"\n', encoding="utf-8")
        with pytest.raises(ConfigError, match="method_detection"):
            load_config(tmp_path)

    def test_non_positive_concurrency(self, tmp_path: Path):
        with pytest.raises(ConfigError):
            load_config(tmp_path, {"concurrency": 0})

    def test_bad_regex(self, tmp_path: Path):
        (tmp_path / "storydoc.toml").write_text(
            '[components]\npattern_syntax = "regex"\ninclude = ["(unclosed"]\nexclude = []\n',
            encoding="utf-8",
        )
        with pytest.raises(ConfigError, match="bad regex"):
            load_config(tmp_path)

    def test_with_target_bad_regex(self, tmp_path: Path):
        cfg = load_config(
            tmp_path,
            {"components": {"pattern_syntax": "regex", "include": [r"\.tsx$"], "exclude": []}},
        )
        with pytest.raises(ConfigError):
            cfg.with_target("components", include=["[oops"])


def test_model_defaults_match_loader(tmp_path: Path):
    assert StorydocConfig(base_dir=tmp_path.resolve()) == load_config(tmp_path)
