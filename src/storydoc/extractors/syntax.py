"""Tree-sitter front end for TypeScript and TSX.

Turns a source file into a flat list of :class:`TopLevelDeclaration`
variants.  Every variant carries an optional ``name``; a declaration whose
name cannot be resolved (destructuring, anonymous default export, call
expression) has ``name=None`` rather than a missing attribute.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import PurePath

import tree_sitter_typescript
from tree_sitter import Language, Node, Parser

from ..errors import ParseError
from ..models import SourceFile

logger = logging.getLogger(__name__)


# --------------------------------------------------------------------------
# Grammar loading
# --------------------------------------------------------------------------

# File suffix -> grammar dialect.  JSX only parses with the TSX grammar.
DIALECTS: dict[str, str] = {
    ".ts": "typescript",
    ".mts": "typescript",
    ".cts": "typescript",
    ".tsx": "tsx",
    ".js": "tsx",
    ".jsx": "tsx",
    ".mjs": "tsx",
}


def _load_grammar(dialect: str) -> Language:
    if dialect == "tsx":
        return Language(tree_sitter_typescript.language_tsx())
    return Language(tree_sitter_typescript.language_typescript())


# Cache loaded grammars.
_grammar_cache: dict[str, Language] = {}


def get_grammar(dialect: str) -> Language:
    if dialect not in _grammar_cache:
        _grammar_cache[dialect] = _load_grammar(dialect)
    return _grammar_cache[dialect]


def dialect_for(path: str) -> str:
    return DIALECTS.get(PurePath(path).suffix.lower(), "tsx")


# --------------------------------------------------------------------------
# Tagged variants
# --------------------------------------------------------------------------

class DeclarationNodeKind(str, Enum):
    function = "function"
    class_ = "class"
    variable = "variable"
    interface = "interface"
    type_alias = "type_alias"
    default_export = "default_export"
    export_specifier = "export_specifier"


# Kinds that bind a runtime value (as opposed to a type).
VALUE_KINDS = frozenset({
    DeclarationNodeKind.function,
    DeclarationNodeKind.class_,
    DeclarationNodeKind.variable,
    DeclarationNodeKind.default_export,
})


@dataclass(frozen=True)
class Member:
    """One member of an interface body."""

    name: str
    type_expression: str
    optional: bool


@dataclass(frozen=True)
class TopLevelDeclaration:
    kind: DeclarationNodeKind
    name: str | None
    line: int
    exported: bool = False
    is_async: bool = False
    is_function: bool = False
    members: tuple[Member, ...] = ()
    local_name: str | None = None
    """Binding an ``export { local as name }`` clause re-exports; ``None`` for ``from`` re-exports."""


# --------------------------------------------------------------------------
# Parsing
# --------------------------------------------------------------------------

def parse_declarations(source: SourceFile) -> list[TopLevelDeclaration]:
    """Parse *source* and return its top-level declarations in file order.

    Raises :class:`ParseError` when the syntax tree contains errors.
    """
    grammar = get_grammar(dialect_for(source.path))
    parser = Parser(grammar)
    tree = parser.parse(source.text.encode("utf-8"))
    root = tree.root_node

    if root.has_error:
        raise ParseError(source.path, _describe_error(root))

    declarations: list[TopLevelDeclaration] = []
    for child in root.named_children:
        declarations.extend(_declarations_from(child, exported=False))
    logger.debug("%s: %d top-level declaration(s)", source.path, len(declarations))
    return declarations


def _describe_error(root: Node) -> str:
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            row, column = node.start_point
            what = f"missing {node.type}" if node.is_missing else "unexpected syntax"
            return f"syntax error: {what} at line {row + 1}, column {column + 1}"
        stack.extend(reversed(node.children))
    return "syntax error"


def _declarations_from(node: Node, *, exported: bool) -> list[TopLevelDeclaration]:
    kind = node.type
    line = node.start_point[0] + 1

    if kind == "export_statement":
        return _export_statement(node)

    if kind in ("function_declaration", "generator_function_declaration", "function_signature"):
        return [TopLevelDeclaration(
            kind=DeclarationNodeKind.function,
            name=_field_text(node, "name"),
            line=line,
            exported=exported,
            is_async=_has_token(node, "async"),
            is_function=True,
        )]

    if kind in ("class_declaration", "abstract_class_declaration"):
        return [TopLevelDeclaration(
            kind=DeclarationNodeKind.class_,
            name=_field_text(node, "name"),
            line=line,
            exported=exported,
        )]

    if kind in ("lexical_declaration", "variable_declaration"):
        return [
            _variable(declarator, exported=exported)
            for declarator in node.named_children
            if declarator.type == "variable_declarator"
        ]

    if kind == "interface_declaration":
        body = node.child_by_field_name("body")
        return [TopLevelDeclaration(
            kind=DeclarationNodeKind.interface,
            name=_field_text(node, "name"),
            line=line,
            exported=exported,
            members=tuple(_members(body)) if body is not None else (),
        )]

    if kind == "type_alias_declaration":
        return [TopLevelDeclaration(
            kind=DeclarationNodeKind.type_alias,
            name=_field_text(node, "name"),
            line=line,
            exported=exported,
        )]

    return []


def _export_statement(node: Node) -> list[TopLevelDeclaration]:
    declaration = node.child_by_field_name("declaration")
    if declaration is not None:
        return _declarations_from(declaration, exported=True)

    line = node.start_point[0] + 1

    # export default <expression>
    value = node.child_by_field_name("value")
    if value is not None:
        return [TopLevelDeclaration(
            kind=DeclarationNodeKind.default_export,
            name=_expression_name(value),
            line=line,
            exported=True,
            is_async=_has_token(value, "async"),
            is_function=value.type in _FUNCTION_VALUES,
        )]

    # export { a, b as c } [from "..."]
    reexport = node.child_by_field_name("source") is not None
    specifiers: list[TopLevelDeclaration] = []
    for child in node.named_children:
        if child.type != "export_clause":
            continue
        for spec in child.named_children:
            if spec.type != "export_specifier":
                continue
            specifiers.append(TopLevelDeclaration(
                kind=DeclarationNodeKind.export_specifier,
                name=_field_text(spec, "alias") or _field_text(spec, "name"),
                line=spec.start_point[0] + 1,
                exported=True,
                local_name=None if reexport else _field_text(spec, "name"),
            ))
    return specifiers


_FUNCTION_VALUES = frozenset({"arrow_function", "function_expression", "function"})


def _variable(declarator: Node, *, exported: bool) -> TopLevelDeclaration:
    name_node = declarator.child_by_field_name("name")
    value = declarator.child_by_field_name("value")
    is_function = value is not None and value.type in _FUNCTION_VALUES
    return TopLevelDeclaration(
        kind=DeclarationNodeKind.variable,
        # Destructuring patterns bind no single name.
        name=_text(name_node) if name_node is not None and name_node.type == "identifier" else None,
        line=declarator.start_point[0] + 1,
        exported=exported,
        is_async=is_function and _has_token(value, "async"),
        is_function=is_function,
    )


def _expression_name(node: Node) -> str | None:
    if node.type == "identifier":
        return _text(node)
    if node.type in ("function_expression", "function", "class"):
        return _field_text(node, "name")
    return None


def _members(body: Node) -> list[Member]:
    members: list[Member] = []
    for child in body.named_children:
        if child.type == "property_signature":
            name = _field_text(child, "name")
            if not name:
                continue
            members.append(Member(
                name=name,
                type_expression=_annotation_text(child.child_by_field_name("type")),
                optional=_has_token(child, "?"),
            ))
        elif child.type == "method_signature":
            name = _field_text(child, "name")
            if not name:
                continue
            params = child.child_by_field_name("parameters")
            returns = _annotation_text(child.child_by_field_name("return_type")) or "any"
            members.append(Member(
                name=name,
                type_expression=f"{_text(params) if params is not None else '()'} => {returns}",
                optional=_has_token(child, "?"),
            ))
    return members


# --------------------------------------------------------------------------
# Node helpers
# --------------------------------------------------------------------------

def _text(node: Node) -> str:
    return node.text.decode("utf-8") if node.text is not None else ""


def _field_text(node: Node, field: str) -> str | None:
    child = node.child_by_field_name(field)
    if child is None:
        return None
    return _text(child) or None


def _has_token(node: Node, token: str) -> bool:
    return any(child.type == token for child in node.children)


def _annotation_text(node: Node | None) -> str:
    """Text of a ``: T`` annotation without the colon."""
    if node is None:
        return ""
    if node.type == "type_annotation" and node.named_children:
        return _text(node.named_children[0])
    return _text(node).lstrip(":").strip()
