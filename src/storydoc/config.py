"""Project configuration -- ``storydoc.toml`` or ``[tool.storydoc]``.

Precedence: CLI flag > config file > default.
"""

from __future__ import annotations

import logging
import re
import tomllib
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, ValidationError, model_validator

from .errors import ConfigError
from .models import ScanTarget

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "storydoc.toml"
PYPROJECT_FILENAME = "pyproject.toml"


class TargetConfig(BaseModel):
    """Where one documentation target looks for its source files."""

    root: Path
    """Scan root, relative to the project directory unless absolute."""

    include: list[str] = Field(default_factory=lambda: ["*"])
    exclude: list[str] = Field(default_factory=list)

    pattern_syntax: Literal["glob", "regex"] = "glob"
    """How *include* / *exclude* are interpreted."""

    title: str
    """Top-level heading of the generated document."""

    @model_validator(mode="after")
    def _check_patterns(self) -> "TargetConfig":
        if self.pattern_syntax == "regex":
            for pattern in (*self.include, *self.exclude):
                try:
                    re.compile(pattern)
                except re.error as exc:
                    raise ValueError(f"bad regex {pattern!r}: {exc}") from exc
        return self

    def resolve_root(self, base: Path) -> Path:
        return self.root if self.root.is_absolute() else base / self.root

    def to_scan_target(self, base: Path) -> ScanTarget:
        return ScanTarget(
            root=self.resolve_root(base),
            include=self.include,
            exclude=self.exclude,
            pattern_syntax=self.pattern_syntax,
        )


class RoutesTargetConfig(TargetConfig):
    route_stem: str = "route"
    """File stem that marks a route file; dropped from the URL path."""


def _default_components() -> TargetConfig:
    return TargetConfig(
        root=Path("src/components"),
        include=["*.ts", "*.tsx"],
        exclude=["*.test.*"],
        title="Components",
    )


def _default_api_routes() -> RoutesTargetConfig:
    return RoutesTargetConfig(
        root=Path("src/app/api"),
        include=["route.ts", "*/route.ts"],
        title="API Routes",
    )


class StorydocConfig(BaseModel):
    """User configuration for a documentation build."""

    base_dir: Path = Path(".")
    """Project directory; target roots are resolved against it."""

    components: TargetConfig = Field(default_factory=_default_components)
    api_routes: RoutesTargetConfig = Field(default_factory=_default_api_routes)

    concurrency: int = Field(default=4, ge=1)
    """Files extracted in parallel."""

    timeout: float = Field(default=10.0, gt=0)
    """Per-file extraction timeout in seconds."""

    method_detection: Literal["syntax", "text"] = "syntax"
    """How route handlers are found: parsed declarations or raw text."""

    strict: bool = False
    """Treat extraction warnings as a failed build (CLI only)."""

    output_dir: Path = Path("docs")
    """Where ``storydoc build`` writes its markdown files."""

    def components_target(self) -> ScanTarget:
        return self.components.to_scan_target(self.base_dir)

    def api_routes_target(self) -> ScanTarget:
        return self.api_routes.to_scan_target(self.base_dir)

    def with_target(self, key: Literal["components", "api_routes"], **updates: Any) -> "StorydocConfig":
        """Copy of this config with fields of one target replaced.

        Empty or ``None`` updates are ignored.
        """
        updates = {k: v for k, v in updates.items() if v}
        if not updates:
            return self
        current = getattr(self, key)
        try:
            target = type(current).model_validate({**current.model_dump(), **updates})
        except ValidationError as exc:
            raise ConfigError(f"Invalid {key} options:\n{exc}") from exc
        return self.model_copy(update={key: target})


def find_config_file(project_dir: Path) -> Path | None:
    """Return ``storydoc.toml`` or a ``pyproject.toml`` with a storydoc table."""
    candidate = project_dir / CONFIG_FILENAME
    if candidate.is_file():
        return candidate
    pyproject = project_dir / PYPROJECT_FILENAME
    if pyproject.is_file() and "storydoc" in _read_toml(pyproject).get("tool", {}):
        return pyproject
    return None


def load_config(project_dir: Path, overrides: dict[str, Any] | None = None) -> StorydocConfig:
    """Load configuration for *project_dir*.

    *overrides* are applied on top of the file values; ``None`` entries
    are ignored so unset CLI flags fall through.
    """
    project_dir = project_dir.resolve()
    data: dict[str, Any] = {}

    path = find_config_file(project_dir)
    if path is not None:
        raw = _read_toml(path)
        data = raw.get("tool", {}).get("storydoc", {}) if path.name == PYPROJECT_FILENAME else raw
        logger.debug("Loaded configuration from %s", path)

    data = {**data, "base_dir": project_dir}
    for key, value in (overrides or {}).items():
        if value is None:
            continue
        if isinstance(value, dict) and isinstance(data.get(key), dict):
            data[key] = {**data[key], **value}
        else:
            data[key] = value

    # Partial target tables fill in from the defaults.
    for key, default in (("components", _default_components()), ("api_routes", _default_api_routes())):
        if isinstance(data.get(key), dict):
            data[key] = {**default.model_dump(), **data[key]}

    try:
        return StorydocConfig.model_validate(data)
    except ValidationError as exc:
        where = path if path is not None else project_dir
        raise ConfigError(f"Invalid configuration ({where}):\n{exc}") from exc


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as fh:
            return tomllib.load(fh)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Cannot read {path}: {exc}") from exc
