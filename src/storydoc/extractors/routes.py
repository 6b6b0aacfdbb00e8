"""Route handler extractor -- which HTTP verbs a route file exports."""

from __future__ import annotations

import re
from typing import Literal

from ..models import DeclarationKind, DeclarationRecord, HttpMethod, SourceFile
from .syntax import DeclarationNodeKind, TopLevelDeclaration, parse_declarations

HTTP_VERBS: frozenset[str] = frozenset(m.value for m in HttpMethod)

# Fast path: literal ``export async function VERB`` anywhere in the text.
_TEXT_PATTERN = re.compile(
    r"\bexport\s+async\s+function\s+(?P<verb>" + "|".join(m.value for m in HttpMethod) + r")\b"
)


class RouteHandlerExtractor:
    """Find exported HTTP handlers in a route file.

    ``mode="syntax"`` inspects the parsed top-level declarations and counts:

    * ``export async function GET() {}``
    * ``export const GET = async () => {}``
    * ``export { handler as GET }``

    ``mode="text"`` only searches the raw text for
    ``export async function VERB``; it is faster but also matches inside
    comments and strings.
    """

    def __init__(self, mode: Literal["syntax", "text"] = "syntax") -> None:
        self.mode = mode

    def extract(self, source: SourceFile) -> list[DeclarationRecord]:
        if self.mode == "text":
            verbs = methods_from_text(source.text)
        else:
            verbs = methods_from_declarations(parse_declarations(source))
        return [
            DeclarationRecord(name=verb.value, kind=DeclarationKind.route_handler, source_path=source.path)
            for verb in verbs
        ]


def is_handler(decl: TopLevelDeclaration) -> bool:
    if not decl.exported or decl.name not in HTTP_VERBS:
        return False
    if decl.kind is DeclarationNodeKind.export_specifier:
        return True
    return decl.is_async and decl.is_function


def methods_from_declarations(declarations: list[TopLevelDeclaration]) -> list[HttpMethod]:
    """Exported verbs in discovery order, without duplicates."""
    seen: dict[HttpMethod, None] = {}
    for decl in declarations:
        if is_handler(decl):
            seen.setdefault(HttpMethod(decl.name))
    return list(seen)


def methods_from_text(text: str) -> list[HttpMethod]:
    seen: dict[HttpMethod, None] = {}
    for match in _TEXT_PATTERN.finditer(text):
        seen.setdefault(HttpMethod(match.group("verb")))
    return list(seen)
