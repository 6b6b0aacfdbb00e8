"""Orchestrator -- scan, extract, normalize and render one documentation target."""

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Callable
from pathlib import Path
from typing import Any

from .config import StorydocConfig
from .errors import ParseError
from .extractors import API_ROUTES, COMPONENTS, Extractor, get_extractor, setup_extractors
from .models import (
    DeclarationRecord,
    Document,
    ExtractionWarning,
    HttpMethod,
    RouteRecord,
    SourceFile,
)
from .renderer import render_component_document, render_route_document
from .routing import normalize_route_path
from .scanner import scan

logger = logging.getLogger(__name__)

_Outcome = tuple[list[DeclarationRecord], ExtractionWarning | None]


def _extract_file(extractor: Extractor, path: Path) -> list[DeclarationRecord]:
    """Read *path* and run *extractor* on it; read failures become ParseError."""
    try:
        source = SourceFile.read(path)
    except UnicodeDecodeError as exc:
        raise ParseError(path, f"not UTF-8 text ({exc.reason})") from exc
    except OSError as exc:
        raise ParseError(path, f"unreadable ({exc.strerror or exc})") from exc
    return extractor.extract(source)


def _settle(future: asyncio.Future, result: Any, error: BaseException | None) -> None:
    if future.done():
        # Already timed out.
        return
    if error is not None:
        future.set_exception(error)
    else:
        future.set_result(result)


def _run_in_daemon_thread(
    loop: asyncio.AbstractEventLoop, fn: Callable[..., Any], *args: Any
) -> asyncio.Future:
    """Run ``fn(*args)`` on a daemon thread and return a future for its result.

    An abandoned thread never keeps the interpreter alive.
    """
    future = loop.create_future()

    def worker() -> None:
        result: Any = None
        error: Exception | None = None
        try:
            result = fn(*args)
        except Exception as exc:
            error = exc
        try:
            loop.call_soon_threadsafe(_settle, future, result, error)
        except RuntimeError:
            # The loop closed while this file was still running.
            logger.debug("Discarding late result of %s%r", getattr(fn, "__name__", fn), args)

    threading.Thread(target=worker, name="storydoc-extract", daemon=True).start()
    return future


async def _extract_one(
    path: Path,
    extractor: Extractor,
    sem: asyncio.Semaphore,
    timeout: float,
) -> _Outcome:
    """Extract a single file under concurrency + timeout control."""
    loop = asyncio.get_running_loop()
    async with sem:
        # The clock starts once a slot is free, so queueing time is not charged.
        try:
            records = await asyncio.wait_for(
                _run_in_daemon_thread(loop, _extract_file, extractor, path),
                timeout=timeout,
            )
            return records, None
        except asyncio.TimeoutError:
            error = ParseError.timeout(path, timeout)
        except ParseError as exc:
            error = exc
        except Exception as exc:
            # Per-file failures should not kill the target.
            logger.debug("Unexpected failure extracting %s", path, exc_info=True)
            error = ParseError(path, f"{type(exc).__name__}: {exc}")
    logger.warning("Skipping %s", error)
    return [], ExtractionWarning(path=error.path, message=error.cause)


async def _extract_all(
    paths: list[Path], extractor: Extractor, config: StorydocConfig
) -> list[_Outcome]:
    """Extract every path; results come back in *paths* order."""
    sem = asyncio.Semaphore(config.concurrency)
    return await asyncio.gather(*(
        _extract_one(path, extractor, sem, config.timeout) for path in paths
    ))


def _warnings(outcomes: list[_Outcome]) -> list[ExtractionWarning]:
    return [warning for _, warning in outcomes if warning is not None]


# ---------------------------------------------------------------------------
# Targets
# ---------------------------------------------------------------------------

async def generate_component_docs_async(config: StorydocConfig) -> Document:
    """Scan -> extract -> render for the components target.

    Raises :class:`~storydoc.errors.NotFound` when the scan root is missing;
    per-file failures are attached to the document as warnings.
    """
    setup_extractors(method_detection=config.method_detection)
    extractor = get_extractor(COMPONENTS)
    assert extractor is not None

    paths = scan(config.components_target())
    logger.info("Components: %d file(s) to extract", len(paths))
    outcomes = await _extract_all(paths, extractor, config)

    records = [record for found, _ in outcomes for record in found]
    return render_component_document(records, title=config.components.title, warnings=_warnings(outcomes))


async def generate_api_route_docs_async(config: StorydocConfig) -> Document:
    """Scan -> extract -> normalize -> render for the API routes target."""
    setup_extractors(method_detection=config.method_detection)
    extractor = get_extractor(API_ROUTES)
    assert extractor is not None

    target = config.api_routes_target()
    paths = scan(target)
    logger.info("API routes: %d file(s) to extract", len(paths))
    outcomes = await _extract_all(paths, extractor, config)

    api_root = target.root.resolve()
    routes: list[RouteRecord] = []
    for path, (found, warning) in zip(paths, outcomes):
        if warning is not None:
            continue
        routes.append(RouteRecord(
            url_path=normalize_route_path(path, api_root, config.api_routes.route_stem),
            methods=[HttpMethod(record.name) for record in found],
            source_path=str(path),
        ))
    return render_route_document(routes, title=config.api_routes.title, warnings=_warnings(outcomes))


def generate_component_docs(config: StorydocConfig) -> Document:
    return asyncio.run(generate_component_docs_async(config))


def generate_api_route_docs(config: StorydocConfig) -> Document:
    return asyncio.run(generate_api_route_docs_async(config))


# Named build-time transforms, keyed the way the docs build refers to them.
TRANSFORMS: dict[str, Callable[[StorydocConfig], Document]] = {
    "COMPONENTS": generate_component_docs,
    "API_ROUTES": generate_api_route_docs,
}


def run_transform(name: str, config: StorydocConfig) -> str:
    """Run the transform called *name* and return its markdown."""
    try:
        transform = TRANSFORMS[name]
    except KeyError:
        raise ValueError(f"Unknown transform {name!r}; expected one of {sorted(TRANSFORMS)}") from None
    return transform(config).to_markdown()
