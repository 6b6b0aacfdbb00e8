"""Route-path normalizer -- file location to URL path."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from pathlib import Path, PurePosixPath

from .errors import MalformedInput
from .models import HttpMethod

logger = logging.getLogger(__name__)

_OPTIONAL_CATCH_ALL = re.compile(r"^\[\[\.\.\.([^\[\]/]+)\]\]$")
_CATCH_ALL = re.compile(r"^\[\.\.\.([^\[\]/]+)\]$")
_DYNAMIC = re.compile(r"^\[([^\[\]/.][^\[\]/]*)\]$")
_GROUP = re.compile(r"^\([^()/]+\)$")


def normalize_segment(segment: str) -> str | None:
    """Rewrite one path segment; ``None`` drops it.

    ``[id]`` becomes ``:id``, ``[...slug]`` becomes ``:slug+`` and
    ``[[...slug]]`` becomes ``:slug*``.  Route groups like ``(auth)`` do not
    appear in the URL.
    """
    if m := _OPTIONAL_CATCH_ALL.match(segment):
        return f":{m.group(1)}*"
    if m := _CATCH_ALL.match(segment):
        return f":{m.group(1)}+"
    if m := _DYNAMIC.match(segment):
        return f":{m.group(1)}"
    if _GROUP.match(segment):
        return None
    return segment


def normalize_route_path(file_path: Path | str, api_root: Path | str, route_stem: str = "route") -> str:
    """Return the URL path for the route file *file_path* under *api_root*.

    Never raises: when *file_path* is not under *api_root* the input is
    returned unchanged.
    """
    raw = str(file_path)
    try:
        relative = _relative_parts(raw, str(api_root))
    except MalformedInput as exc:
        logger.debug("Leaving route path as-is: %s", exc)
        return raw

    if relative and PurePosixPath(relative[-1]).stem == route_stem:
        relative = relative[:-1]

    segments = [s for s in (normalize_segment(part) for part in relative) if s]
    return "/" + "/".join(segments)


def _relative_parts(path: str, root: str) -> list[str]:
    path_parts = [p for p in path.replace("\\", "/").split("/") if p not in ("", ".")]
    root_parts = [p for p in root.replace("\\", "/").split("/") if p not in ("", ".")]
    if path_parts[: len(root_parts)] != root_parts:
        raise MalformedInput(path, f"not under {root}")
    return path_parts[len(root_parts):]


def methods_cell(methods: Iterable[HttpMethod]) -> str:
    return ", ".join(m.value for m in methods)
