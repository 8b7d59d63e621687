"""CLI command implementations"""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer

from freedocs.config import Settings, load_config
from freedocs.core.export import COPY_MODES
from freedocs.core.pipeline import Source, load_source, run_copy, run_parse, run_universal
from freedocs.errors import FreeDocsError
from freedocs.fetch.archive import ArchiveClient
from freedocs.fetch.urls import is_safe_url, to_mobile_basic


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling."""
    try:
        return load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))


def _source(source: str, settings: Settings) -> Source:
    try:
        return load_source(source, settings)
    except FreeDocsError as e:
        _fail(str(e))


def main_callback(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log at debug level")] = False,
    ):
    """Configure logging from log_level (or --verbose)."""
    settings = _settings()
    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.log_level,
        format="%(levelname)s %(name)s: %(message)s",
    )


def parse_cmd(
    source: Annotated[str, typer.Argument(help="Local HTML file or Google Docs URL")],
    out: Annotated[Optional[str], typer.Option("--out-dir", help="Output directory")] = None,
    no_code: Annotated[bool, typer.Option("--no-code", help="Disable code and numbered-list detection")] = False,
    hide_deletions: Annotated[bool, typer.Option("--hide-deletions", help="Drop removed (-) code lines")] = False,
    no_images: Annotated[bool, typer.Option("--no-images", help="Skip image blocks")] = False,
    ):
    """Parse a document into blocks JSON plus sanitized HTML."""
    settings = _settings(overrides={
        "output_dir": out,
        "auto_detect_code": False if no_code else None,
        "show_deletions": False if hide_deletions else None,
        "extract_images": False if no_images else None,
    })
    doc = _source(source, settings)
    output_dir = Path(settings.output_dir)

    try:
        result, json_path, html_path = run_parse(doc, settings.parse_options(), output_dir)
    except FreeDocsError as e:
        _fail(str(e))
    except RuntimeError as e:
        _fail("Parse failed", e)

    typer.echo(f"  {doc.slug} -> {json_path}")
    typer.echo(f"  {doc.slug} -> {html_path}")
    typer.echo(f"Parsed {len(result.blocks)} block(s) to {output_dir}/")


def universal_cmd(
    source: Annotated[str, typer.Argument(help="Local HTML file or Google Docs URL")],
    debug: Annotated[bool, typer.Option("--debug", help="Include adapter scores and errors")] = False,
    threshold: Annotated[Optional[float], typer.Option("--threshold", help="Minimum adapter score")] = None,
    ):
    """Print the heading/section AST chosen by the adapter registry."""
    settings = _settings(overrides={"adapter_threshold": threshold})
    doc = _source(source, settings)
    try:
        result = run_universal(doc, debug=debug, threshold=settings.adapter_threshold)
    except FreeDocsError as e:
        _fail(str(e))
    typer.echo(result.model_dump_json(indent=2, by_alias=True))


def copy_cmd(
    source: Annotated[str, typer.Argument(help="Local HTML file or Google Docs URL")],
    mode: Annotated[str, typer.Option("--mode", help="clean, additions, or all")] = "clean",
    ):
    """Print clipboard text for the whole document."""
    if mode not in COPY_MODES:
        _fail(f"Unknown copy mode '{mode}'. Supported: {', '.join(COPY_MODES)}")
    settings = _settings()
    doc = _source(source, settings)
    try:
        text = run_copy(doc, settings.parse_options(), mode)
    except FreeDocsError as e:
        _fail(str(e))
    typer.echo(text)


def snapshot_cmd(
    url: Annotated[str, typer.Argument(help="Google Docs URL")],
    ):
    """Find or create an archive snapshot of a document's mobilebasic page."""
    settings = _settings()
    mobile_url = to_mobile_basic(url)
    if not mobile_url or not is_safe_url(mobile_url):
        _fail(f"Not a Google Docs URL: {url}")
    try:
        result = ArchiveClient(settings).get_archive_snapshot(mobile_url)
    except FreeDocsError as e:
        _fail(str(e))
    typer.echo(result.url)
    typer.echo(f"service: {result.service}")
