"""Pydantic models for storydoc's extraction pipeline."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Scanner input
# ---------------------------------------------------------------------------

class ScanTarget(BaseModel):
    """One directory plus the include/exclude rules that select its files.

    Patterns are matched against the root-relative POSIX path of each file.
    A file is selected when it matches any *include* pattern and no
    *exclude* pattern.
    """

    model_config = ConfigDict(frozen=True)

    root: Path
    include: list[str] = Field(default_factory=lambda: ["*"])
    exclude: list[str] = Field(default_factory=list)
    pattern_syntax: Literal["glob", "regex"] = "glob"


class SourceFile(BaseModel):
    """Snapshot of one file's text, scoped to a single extraction call."""

    model_config = ConfigDict(frozen=True)

    path: str
    text: str

    @classmethod
    def read(cls, path: Path) -> "SourceFile":
        return cls(path=str(path), text=path.read_text(encoding="utf-8"))


# ---------------------------------------------------------------------------
# Extractor output
# ---------------------------------------------------------------------------

class DeclarationKind(str, Enum):
    component = "component"
    interface = "interface"
    route_handler = "route_handler"


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"


class FieldDescriptor(BaseModel):
    """A single member of a props interface."""

    model_config = ConfigDict(frozen=True)

    name: str
    type_expression: str = ""
    required: bool = True


class DeclarationRecord(BaseModel):
    """A named declaration pulled out of one source file."""

    model_config = ConfigDict(frozen=True)

    name: str
    kind: DeclarationKind
    fields: list[FieldDescriptor] = Field(default_factory=list)
    source_path: str


class RouteRecord(BaseModel):
    """A route file reduced to its URL path and exported HTTP methods."""

    model_config = ConfigDict(frozen=True)

    url_path: str
    methods: list[HttpMethod] = Field(default_factory=list)  # discovery order, no duplicates
    source_path: str


class ExtractionWarning(BaseModel):
    """A file that was skipped, and why."""

    path: str
    message: str


# ---------------------------------------------------------------------------
# Rendered document
# ---------------------------------------------------------------------------

class Table(BaseModel):
    """A markdown table.

    ``columns`` lists the data columns only; the renderer always appends a
    blank ``Description`` column.  ``spaced`` adds a blank line after the
    last row.
    """

    columns: list[str]
    rows: list[list[str]] = Field(default_factory=list)
    spaced: bool = False


class Section(BaseModel):
    """A heading, optionally followed by a table."""

    level: int = Field(ge=1, le=6)
    heading: str
    table: Table | None = None


class Document(BaseModel):
    """The assembled documentation for one target."""

    title: str
    sections: list[Section] = Field(default_factory=list)
    warnings: list[ExtractionWarning] = Field(default_factory=list)

    def to_markdown(self) -> str:
        from .renderer import to_markdown

        return to_markdown(self)
