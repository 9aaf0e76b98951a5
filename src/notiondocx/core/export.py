"""Document assembly: title + flattened body + signature block, serialized to .docx"""

import io
import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

from docx import Document
from docx.document import Document as DocxDocument
from docx.enum.style import WD_STYLE_TYPE
from docx.image.exceptions import UnrecognizedImageError
from docx.opc.constants import RELATIONSHIP_TYPE as RT
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Emu, Inches
from docx.text.paragraph import Paragraph

from notiondocx.core.models import OutputParagraph, Page, TextRun
from notiondocx.core.naming import author_names, document_title, page_label
from notiondocx.core.render import normal_paragraph
from notiondocx.errors import ImageFetchError, WriteError


logger = logging.getLogger(__name__)

EMU_PER_PIXEL = 9525    # 96 dpi
SIGNATURE_PREFIX = "记录人："


@lru_cache(maxsize=None)
def _template_bytes(path: str) -> bytes:
    """Read the style template once per process; every document opens its own copy."""
    return Path(path).read_bytes()


def new_document(template_path: Optional[str] = None) -> DocxDocument:
    if template_path is None:
        return Document()
    return Document(io.BytesIO(_template_bytes(str(template_path))))


def assemble(page: Page, body: list[OutputParagraph]) -> list[OutputParagraph]:
    """Full paragraph sequence for a page: heading-1 title, body, blank line, author, date label."""
    title = OutputParagraph(runs=[TextRun(document_title(page))], heading=1)
    signature = [
        normal_paragraph(),
        normal_paragraph(f"{SIGNATURE_PREFIX}{author_names(page)}"),
        normal_paragraph(page_label(page)),
    ]
    return [title, *body, *signature]


def _add_run(paragraph: Paragraph, run: TextRun) -> None:
    r = paragraph.add_run(run.text)
    if run.bold:
        r.bold = True
    if run.italic:
        r.italic = True
    if run.underline:
        r.underline = True
    if run.strike:
        r.font.strike = True

    if run.href:
        # python-docx has no hyperlink API; move the run under a w:hyperlink bound to an external rel
        r_id = paragraph.part.relate_to(run.href, RT.HYPERLINK, is_external=True)
        link = OxmlElement("w:hyperlink")
        link.set(qn("r:id"), r_id)
        link.append(r._r)
        paragraph._p.append(link)


def _paragraph_style(doc: DocxDocument, name: str):
    """Named paragraph style; templates saved without it get a plain stand-in."""
    try:
        return doc.styles[name]
    except KeyError:
        logger.warning("Template has no %r style, adding a plain one", name)
    style = doc.styles.add_style(name, WD_STYLE_TYPE.PARAGRAPH)
    if name.startswith("Heading "):
        style.font.bold = True
    return style


def add_paragraph(doc: DocxDocument, para: OutputParagraph, indent_inches: float = 0.3) -> Paragraph:
    name = f"Heading {para.heading}" if para.heading else para.style
    p = doc.add_paragraph(style=_paragraph_style(doc, name) if name else None)
    if para.indent_level:
        p.paragraph_format.left_indent = Inches(para.indent_level * indent_inches)

    if para.image is not None:
        try:
            p.add_run().add_picture(
                io.BytesIO(para.image.data),
                width=Emu(round(para.image.width * EMU_PER_PIXEL)),
                height=Emu(round(para.image.height * EMU_PER_PIXEL)),
            )
        except UnrecognizedImageError as e:
            raise ImageFetchError(f"Image format not supported in .docx: {e}") from e

    for run in para.runs:
        _add_run(p, run)
    return p


def build_document(
    page: Page,
    body: list[OutputParagraph],
    template_path: Optional[str] = None,
    indent_inches: float = 0.3,
    ) -> DocxDocument:
    """Serialize a page's assembled paragraphs into an in-memory document."""
    doc = new_document(template_path)
    doc.core_properties.title = page.title
    for para in assemble(page, body):
        add_paragraph(doc, para, indent_inches)
    return doc


def write_document(doc: DocxDocument, path: Path) -> Path:
    """Save doc to path, creating the parent directory. OS failures raise WriteError."""
    buf = io.BytesIO()
    doc.save(buf)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(buf.getvalue())
    except OSError as e:
        raise WriteError(f"Could not write {path}: {e}") from e
    logger.info("Wrote %s", path)
    return path
