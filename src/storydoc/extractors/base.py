"""Base protocol for per-target declaration extractors."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from ..models import DeclarationRecord, SourceFile


@runtime_checkable
class Extractor(Protocol):
    """Interface that every target extractor must satisfy.

    Implementations:
      - ComponentExtractor     (component name + props interface)
      - RouteHandlerExtractor  (exported HTTP verb handlers)
    """

    def extract(self, source: SourceFile) -> list[DeclarationRecord]:
        """Return the declarations of interest in *source*.

        An empty list means nothing matched.  Malformed source raises
        :class:`~storydoc.errors.ParseError`.
        """
        ...
