"""Renderer -- turns extracted records into markdown documents.

Rendering is pure: the same records always give byte-identical text.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from .models import (
    DeclarationRecord,
    Document,
    ExtractionWarning,
    RouteRecord,
    Section,
    Table,
)
from .routing import methods_cell

logger = logging.getLogger(__name__)

COMPONENTS_TITLE = "Components"
API_ROUTES_TITLE = "API Routes"

PROPS_COLUMNS = ["Name", "Type", "Required"]
ROUTE_COLUMNS = ["Route", "Methods"]
DESCRIPTION_COLUMN = "Description"


# ---------------------------------------------------------------------------
# Document builders
# ---------------------------------------------------------------------------

def render_component_document(
    records: Iterable[DeclarationRecord],
    title: str = COMPONENTS_TITLE,
    warnings: Iterable[ExtractionWarning] = (),
) -> Document:
    """One ``##`` section per component, with a ``### Props`` table when it has fields."""
    doc = Document(title=title, sections=[Section(level=1, heading=title)], warnings=list(warnings))
    seen: dict[str, str] = {}

    for record in records:
        if not record.name:
            continue
        if record.name in seen:
            doc.warnings.append(ExtractionWarning(
                path=record.source_path,
                message=f"duplicate component {record.name!r} (first defined in {seen[record.name]})",
            ))
            continue
        seen[record.name] = record.source_path

        doc.sections.append(Section(level=2, heading=record.name))
        if record.fields:
            rows = [
                [f.name, f"`{f.type_expression}`", "true" if f.required else "false"]
                for f in record.fields
            ]
            doc.sections.append(Section(
                level=3,
                heading="Props",
                table=Table(columns=PROPS_COLUMNS, rows=rows, spaced=True),
            ))

    logger.debug("Rendered %d component section(s)", len(seen))
    return doc


def render_route_document(
    records: Iterable[RouteRecord],
    title: str = API_ROUTES_TITLE,
    warnings: Iterable[ExtractionWarning] = (),
) -> Document:
    """A single table with one row per route, in the order given."""
    rows = [[f"`{r.url_path}`", methods_cell(r.methods)] for r in records]
    table = Table(columns=ROUTE_COLUMNS, rows=rows)
    return Document(
        title=title,
        sections=[Section(level=1, heading=title, table=table)],
        warnings=list(warnings),
    )


# ---------------------------------------------------------------------------
# Markdown
# ---------------------------------------------------------------------------

def to_markdown(document: Document) -> str:
    parts: list[str] = []
    for section in document.sections:
        parts.append(f"{'#' * section.level} {section.heading}\n\n")
        if section.table is not None:
            parts.append(render_table(section.table))
    return "".join(parts)


def render_table(table: Table) -> str:
    columns = [*table.columns, DESCRIPTION_COLUMN]
    lines = [
        "| " + " | ".join(columns) + " |",
        "|" + "|".join("-" * (len(c) + 2) for c in columns) + "|",
    ]
    # The Description cell is always blank.
    lines.extend("| " + " | ".join(row) + " | |" for row in table.rows)
    text = "\n".join(lines) + "\n"
    if table.spaced:
        text += "\n"
    return text
