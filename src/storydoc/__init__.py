"""storydoc - component and API route documentation from a TypeScript tree."""

from .errors import ConfigError, MalformedInput, NotFound, ParseError, StorydocError
from .models import (  # noqa: F401 -- public re-exports
    DeclarationKind,
    DeclarationRecord,
    Document,
    ExtractionWarning,
    FieldDescriptor,
    HttpMethod,
    RouteRecord,
    ScanTarget,
    SourceFile,
)
from .config import StorydocConfig, load_config
from .orchestrator import (
    TRANSFORMS,
    generate_api_route_docs,
    generate_api_route_docs_async,
    generate_component_docs,
    generate_component_docs_async,
    run_transform,
)

__version__ = "0.1.0"

__all__ = [
    "TRANSFORMS",
    "generate_api_route_docs",
    "generate_api_route_docs_async",
    "generate_component_docs",
    "generate_component_docs_async",
    "run_transform",
    "StorydocConfig",
    "load_config",
    "ConfigError",
    "MalformedInput",
    "NotFound",
    "ParseError",
    "StorydocError",
    "DeclarationKind",
    "DeclarationRecord",
    "Document",
    "ExtractionWarning",
    "FieldDescriptor",
    "HttpMethod",
    "RouteRecord",
    "ScanTarget",
    "SourceFile",
]
