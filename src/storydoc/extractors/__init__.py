"""Extraction engine -- routes each documentation target to its extractor."""

from __future__ import annotations

from typing import Literal

from .base import Extractor
from .components import ComponentExtractor
from .routes import RouteHandlerExtractor

__all__ = [
    "COMPONENTS",
    "API_ROUTES",
    "ComponentExtractor",
    "Extractor",
    "RouteHandlerExtractor",
    "get_extractor",
    "register",
    "setup_extractors",
]

COMPONENTS = "components"
API_ROUTES = "api_routes"

# Registry populated via setup_extractors().
_REGISTRY: dict[str, Extractor] = {}


def register(target: str, extractor: Extractor) -> None:
    """Register an extractor instance for a documentation target."""
    _REGISTRY[target] = extractor


def get_extractor(target: str) -> Extractor | None:
    """Return the extractor for *target*, or ``None`` if none is registered."""
    return _REGISTRY.get(target)


def setup_extractors(*, method_detection: Literal["syntax", "text"] = "syntax") -> None:
    """Register the built-in extractors.

    Call at pipeline startup; calling again replaces the previous instances.
    """
    register(COMPONENTS, ComponentExtractor())
    register(API_ROUTES, RouteHandlerExtractor(mode=method_detection))
