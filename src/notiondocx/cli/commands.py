"""CLI command implementations"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Annotated, Optional

import typer

from notiondocx.config import Settings, load_config
from notiondocx.core.naming import author_names, document_title
from notiondocx.core.pipeline import run_export
from notiondocx.errors import ExportError, InvariantError
from notiondocx.source.notion import NotionSource, PageQuery


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMATS = ["%Y-%m-%d"]

Since = Annotated[Optional[datetime], typer.Option("--since", formats=DATE_FORMATS, help="Pages dated on or after this day")]
Until = Annotated[Optional[datetime], typer.Option("--until", formats=DATE_FORMATS, help="Pages dated on or before this day")]
Responsible = Annotated[Optional[list[str]], typer.Option("--responsible", help="Pages whose responsible party includes this name (repeatable)")]
Exclude = Annotated[Optional[list[str]], typer.Option("--exclude-responsible", help="Skip pages whose responsible party includes this name (repeatable)")]
Flag = Annotated[Optional[str], typer.Option("--flag", help="Checkbox property that must be ticked")]


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling, then configure logging."""
    try:
        settings = load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)
    return settings


def _source(settings: Settings) -> NotionSource:
    try:
        return NotionSource.from_settings(settings)
    except ValueError as e:
        _fail(str(e))


def _query(since, until, responsible, exclude, flag) -> PageQuery:
    return PageQuery(
        since=since.date() if since else None,
        until=until.date() if until else None,
        responsible=responsible or [],
        exclude_responsible=exclude or [],
        flag=flag,
    )


def _pages(source: NotionSource, query: PageQuery) -> list:
    try:
        pages = source.query_pages(query)
    except (ExportError, ValueError) as e:
        _fail("Page query failed", e)
    if not pages:
        typer.echo("No pages matched the filters.")
        raise typer.Exit(1)
    return pages


def export_cmd(
    out: Annotated[Optional[str], typer.Option("--out-dir", help="Output directory")] = None,
    template: Annotated[Optional[str], typer.Option("--template", help=".docx file providing styles")] = None,
    since: Since = None,
    until: Until = None,
    responsible: Responsible = None,
    exclude: Exclude = None,
    flag: Flag = None,
    ):
    """Fetch matching pages and write one .docx per page."""
    settings = _settings(overrides={"output_dir": out, "template_path": template})
    if settings.template_path and not Path(settings.template_path).is_file():
        _fail(f"Template not found: {settings.template_path}")

    source = _source(settings)
    pages = _pages(source, _query(since, until, responsible, exclude, flag))
    output_dir = Path(settings.output_dir)

    try:
        written, failed = run_export(source, pages, output_dir, settings)
    except InvariantError as e:
        _fail("Export aborted", e)

    for title, path in written:
        typer.echo(f"  {title} -> {path}")
    for title, reason in failed:
        typer.echo(f"  failed: {title} ({reason})", err=True)
    typer.echo(f"Exported {len(written)} of {len(pages)} page(s) to {output_dir}/")
    if failed:
        raise typer.Exit(1)


def list_cmd(
    since: Since = None,
    until: Until = None,
    responsible: Responsible = None,
    exclude: Exclude = None,
    flag: Flag = None,
    ):
    """List matching pages without exporting them."""
    settings = _settings()
    source = _source(settings)
    for page in _pages(source, _query(since, until, responsible, exclude, flag)):
        typer.echo(f"{document_title(page)}  [{author_names(page)}]")
