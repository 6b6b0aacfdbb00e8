"""Component extractor -- one component name plus its props interface."""

from __future__ import annotations

import logging

from ..models import DeclarationKind, DeclarationRecord, FieldDescriptor, SourceFile
from .syntax import (
    VALUE_KINDS,
    DeclarationNodeKind,
    TopLevelDeclaration,
    parse_declarations,
)

logger = logging.getLogger(__name__)

PROPS_MARKER = "Props"


class ComponentExtractor:
    """Pair a file's first exported value with its first ``*Props*`` interface."""

    def __init__(self, props_marker: str = PROPS_MARKER) -> None:
        self.props_marker = props_marker

    def extract(self, source: SourceFile) -> list[DeclarationRecord]:
        declarations = parse_declarations(source)

        name = component_name(declarations)
        if name is None:
            logger.debug("%s: no exported component found", source.path)
            return []

        props = props_interface(declarations, self.props_marker)
        fields = [
            FieldDescriptor(
                name=member.name,
                type_expression=member.type_expression,
                required=not member.optional,
            )
            for member in (props.members if props is not None else ())
        ]
        return [DeclarationRecord(
            name=name,
            kind=DeclarationKind.component,
            fields=fields,
            source_path=source.path,
        )]


def component_name(declarations: list[TopLevelDeclaration]) -> str | None:
    """Name of the first exported value declaration that has one.

    A local ``export { x as Name }`` counts when ``x`` is a value declared
    in the same file.
    """
    local_values = {
        decl.name for decl in declarations
        if decl.kind in VALUE_KINDS and decl.kind is not DeclarationNodeKind.default_export and decl.name
    }
    for decl in declarations:
        if not (decl.exported and decl.name):
            continue
        if decl.kind in VALUE_KINDS:
            return decl.name
        if decl.kind is DeclarationNodeKind.export_specifier and decl.local_name in local_values:
            return decl.name
    return None


def props_interface(
    declarations: list[TopLevelDeclaration], marker: str = PROPS_MARKER
) -> TopLevelDeclaration | None:
    for decl in declarations:
        if decl.kind is DeclarationNodeKind.interface and decl.name and marker in decl.name:
            return decl
    return None
