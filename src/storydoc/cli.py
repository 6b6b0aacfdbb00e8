"""CLI entry point for storydoc."""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from .config import StorydocConfig, load_config
from .errors import ConfigError, NotFound
from .models import Document

app = typer.Typer(
    name="storydoc",
    help="Generate component and API route documentation from a TypeScript source tree.",
    add_completion=False,
)

console = Console()
err_console = Console(stderr=True)


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _load(path: Path | None, **overrides) -> StorydocConfig:
    """Load configuration for *path* or exit with an error."""
    project_dir = Path(path).resolve() if path else Path.cwd()
    try:
        return load_config(project_dir, overrides)
    except ConfigError as exc:
        err_console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(code=1)


def _with_target(cfg: StorydocConfig, key: str, **updates) -> StorydocConfig:
    try:
        return cfg.with_target(key, **updates)
    except ConfigError as exc:
        err_console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(code=1)


def _generate(generate: Callable[[StorydocConfig], Document], cfg: StorydocConfig) -> Document:
    try:
        return generate(cfg)
    except NotFound as exc:
        err_console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(code=1)


def _display_path(path: str, base: Path) -> str:
    try:
        return Path(path).relative_to(base).as_posix()
    except ValueError:
        return path


def _report_warnings(doc: Document, cfg: StorydocConfig) -> None:
    if not doc.warnings:
        return
    err_console.print(f"[yellow]{len(doc.warnings)} file(s) skipped in {escape(doc.title)}:[/yellow]")
    for warning in doc.warnings:
        err_console.print(f"  {escape(_display_path(warning.path, cfg.base_dir))}: {escape(warning.message)}")
    if cfg.strict:
        err_console.print("[red]Strict mode:[/red] warnings fail the build.")
        raise typer.Exit(code=1)


def _emit(text: str, output: Path | None) -> None:
    if output is None:
        typer.echo(text, nl=False)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text, encoding="utf-8")
    err_console.print(f"[green]Wrote[/green] {escape(str(output))}")


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

_PATH_ARG = typer.Argument(None, help="Project directory (default: current directory).")
_ROOT_OPT = typer.Option(None, "--root", help="Scan root, relative to the project directory.")
_INCLUDE_OPT = typer.Option(None, "--include", "-i", help="Include pattern (repeatable).")
_EXCLUDE_OPT = typer.Option(None, "--exclude", "-x", help="Exclude pattern (repeatable).")
_OUTPUT_OPT = typer.Option(None, "--output", "-o", help="Write markdown here instead of stdout.")
_TIMEOUT_OPT = typer.Option(None, "--timeout", "-t", help="Per-file timeout in seconds.")
_CONCURRENCY_OPT = typer.Option(None, "--concurrency", "-j", help="Files extracted in parallel.")
_STRICT_OPT = typer.Option(False, "--strict", help="Fail when any file is skipped.")
_VERBOSE_OPT = typer.Option(False, "--verbose", "-v", help="Debug logging.")


@app.command()
def components(
    path: Optional[Path] = _PATH_ARG,
    root: Optional[Path] = _ROOT_OPT,
    include: Optional[list[str]] = _INCLUDE_OPT,
    exclude: Optional[list[str]] = _EXCLUDE_OPT,
    output: Optional[Path] = _OUTPUT_OPT,
    timeout: Optional[float] = _TIMEOUT_OPT,
    concurrency: Optional[int] = _CONCURRENCY_OPT,
    strict: bool = _STRICT_OPT,
    verbose: bool = _VERBOSE_OPT,
) -> None:
    """Document components and their props."""
    from .orchestrator import generate_component_docs

    _setup_logging(verbose)
    cfg = _load(path, timeout=timeout, concurrency=concurrency, strict=strict or None)
    cfg = _with_target(cfg, "components", root=root, include=include, exclude=exclude)

    doc = _generate(generate_component_docs, cfg)
    _report_warnings(doc, cfg)
    _emit(doc.to_markdown(), output)


@app.command("api-routes")
def api_routes(
    path: Optional[Path] = _PATH_ARG,
    root: Optional[Path] = _ROOT_OPT,
    include: Optional[list[str]] = _INCLUDE_OPT,
    exclude: Optional[list[str]] = _EXCLUDE_OPT,
    output: Optional[Path] = _OUTPUT_OPT,
    method_detection: Optional[str] = typer.Option(
        None, "--method-detection", help="How handlers are found: 'syntax' or 'text'."
    ),
    timeout: Optional[float] = _TIMEOUT_OPT,
    concurrency: Optional[int] = _CONCURRENCY_OPT,
    strict: bool = _STRICT_OPT,
    verbose: bool = _VERBOSE_OPT,
) -> None:
    """Document API route files and their HTTP methods."""
    from .orchestrator import generate_api_route_docs

    _setup_logging(verbose)
    cfg = _load(
        path,
        timeout=timeout,
        concurrency=concurrency,
        strict=strict or None,
        method_detection=method_detection,
    )
    cfg = _with_target(cfg, "api_routes", root=root, include=include, exclude=exclude)

    doc = _generate(generate_api_route_docs, cfg)
    _report_warnings(doc, cfg)
    _emit(doc.to_markdown(), output)


@app.command()
def build(
    path: Optional[Path] = _PATH_ARG,
    output_dir: Optional[Path] = typer.Option(None, "--output-dir", "-o", help="Directory for the markdown files."),
    timeout: Optional[float] = _TIMEOUT_OPT,
    concurrency: Optional[int] = _CONCURRENCY_OPT,
    strict: bool = _STRICT_OPT,
    verbose: bool = _VERBOSE_OPT,
) -> None:
    """Generate COMPONENTS.md and API_ROUTES.md."""
    from .orchestrator import TRANSFORMS

    _setup_logging(verbose)
    cfg = _load(path, timeout=timeout, concurrency=concurrency, strict=strict or None, output_dir=output_dir)
    target_dir = cfg.output_dir if cfg.output_dir.is_absolute() else cfg.base_dir / cfg.output_dir

    # Generate everything first so a failing target writes nothing.
    docs = {name: _generate(generate, cfg) for name, generate in TRANSFORMS.items()}
    for doc in docs.values():
        _report_warnings(doc, cfg)

    for name, doc in docs.items():
        _emit(doc.to_markdown(), target_dir / f"{name}.md")


@app.command("config")
def show_config(
    path: Optional[Path] = _PATH_ARG,
) -> None:
    """Show the effective configuration."""
    from .config import find_config_file

    cfg = _load(path)
    source = find_config_file(cfg.base_dir)
    console.print(f"[bold]storydoc config[/bold] ({escape(str(source or 'defaults'))}):")
    for field_name in StorydocConfig.model_fields:
        value = getattr(cfg, field_name)
        if hasattr(value, "model_dump"):
            console.print(f"  [bold]{field_name}[/bold]")
            for sub_name, sub_value in value.model_dump().items():
                console.print(f"    {sub_name} = {escape(repr(sub_value))}")
        else:
            console.print(f"  {field_name} = {escape(repr(value))}")
