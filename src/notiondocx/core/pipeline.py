"""Pipeline step functions: render, export, and batch orchestration"""

import logging
from pathlib import Path
from typing import Optional, Protocol

from docx.document import Document as DocxDocument

from notiondocx.config import Settings
from notiondocx.core.export import build_document, write_document
from notiondocx.core.flatten import flatten
from notiondocx.core.models import Block, Page
from notiondocx.core.naming import document_title, page_filename
from notiondocx.core.render import RenderOptions
from notiondocx.errors import PageError


logger = logging.getLogger(__name__)


class BlockSource(Protocol):
    def fetch_blocks(self, block_id: str) -> list[Block]: ...


def render_page(
    page: Page,
    blocks: list[Block],
    settings: Settings,
    options: Optional[RenderOptions] = None,
    ) -> DocxDocument:
    """Flatten a page's block tree and build the complete document in memory."""
    body = flatten(blocks, 0, options or RenderOptions.from_settings(settings))
    return build_document(page, body, settings.template_path, settings.indent_inches)


def export_page(
    page: Page,
    blocks: list[Block],
    output_dir: Path,
    settings: Settings,
    options: Optional[RenderOptions] = None,
    ) -> Path:
    """Render then write one page. Nothing is written if rendering fails."""
    doc = render_page(page, blocks, settings, options)
    return write_document(doc, output_dir / page_filename(page))


def run_export(
    source: BlockSource,
    pages: list[Page],
    output_dir: Path,
    settings: Settings,
    options: Optional[RenderOptions] = None,
    ) -> tuple[list[tuple[str, Path]], list[tuple[str, str]]]:
    """Export every page, isolating page-scoped failures.

    Returns (written, failed): (title, path) pairs and (title, reason) pairs.
    InvariantError is not caught and aborts the whole batch.
    """
    options = options or RenderOptions.from_settings(settings)
    written, failed = [], []
    for page in pages:
        title = document_title(page)
        logger.info("Exporting %s by %s", title, " ".join(page.authors))
        try:
            blocks = source.fetch_blocks(page.id)
            path = export_page(page, blocks, output_dir, settings, options)
        except PageError as e:
            logger.error("Failed to export %s: %s", title, e)
            failed.append((title, str(e)))
            continue
        written.append((title, path))
    return written, failed
