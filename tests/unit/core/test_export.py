"""Unit tests for core/export.py"""

from datetime import date

import pytest
from docx import Document
from docx.enum.style import WD_STYLE_TYPE
from docx.shared import Emu, Inches

from notiondocx.core import export
from notiondocx.core.export import (
    EMU_PER_PIXEL,
    assemble,
    build_document,
    new_document,
    write_document,
)
from notiondocx.core.models import ImageRun, OutputParagraph, TextRun
from notiondocx.errors import ImageFetchError, WriteError


@pytest.fixture(name="page")
def page_fixture(make_page):
    return make_page(title="Park visit", start=date(2022, 5, 1), end=date(2022, 5, 3), authors=("Lin", "Zhou"))


def _body(*texts, **fields):
    return [OutputParagraph(runs=[TextRun(t)], **fields) for t in texts]


def test_assemble_wraps_body_with_title_and_signature(page):
    out = assemble(page, _body("one", "two"))
    assert [p.text for p in out] == [
        "20220501-03 Park visit",
        "one",
        "two",
        "",
        "记录人：Lin Zhou",
        "20220501-03",
    ]
    assert out[0].heading == 1
    assert [p.style for p in out[-3:]] == ["Normal"] * 3


def test_build_document_paragraph_text_and_styles(page):
    doc = build_document(page, _body("body") + _body("sub", heading=2))
    paragraphs = doc.paragraphs
    assert paragraphs[0].text == "20220501-03 Park visit"
    assert paragraphs[0].style.name == "Heading 1"
    assert paragraphs[1].text == "body"
    assert paragraphs[2].style.name == "Heading 2"
    assert [p.text for p in paragraphs[-3:]] == ["", "记录人：Lin Zhou", "20220501-03"]


def test_build_document_sets_title_property(page):
    assert build_document(page, []).core_properties.title == "Park visit"


@pytest.mark.parametrize("level", [1, 1.5, 3])
def test_indent_scales_per_level(page, level):
    doc = build_document(page, _body("x", indent_level=level))
    assert doc.paragraphs[1].paragraph_format.left_indent == Inches(level * 0.3)


def test_unindented_paragraph_has_no_left_indent(page):
    doc = build_document(page, _body("x"))
    assert doc.paragraphs[1].paragraph_format.left_indent is None


def test_custom_indent_unit(page):
    doc = build_document(page, _body("x", indent_level=2), indent_inches=0.5)
    assert doc.paragraphs[1].paragraph_format.left_indent == Inches(1.0)


def test_run_formatting(page):
    para = OutputParagraph(runs=[
        TextRun("b", bold=True),
        TextRun("i", italic=True),
        TextRun("u", underline=True),
        TextRun("s", strike=True),
    ])
    runs = build_document(page, [para]).paragraphs[1].runs
    assert runs[0].bold
    assert runs[1].italic
    assert runs[2].underline
    assert runs[3].font.strike


def test_hyperlink_run(page):
    para = OutputParagraph(runs=[TextRun("see "), TextRun("docs", href="https://example.com/docs")])
    rendered = build_document(page, [para]).paragraphs[1]
    assert rendered.text == "see docs"
    assert rendered.hyperlinks[0].address == "https://example.com/docs"
    assert rendered.hyperlinks[0].text == "docs"


def test_image_embedded_at_display_size(page, make_png):
    para = OutputParagraph(image=ImageRun(data=make_png(1300, 650), width=650, height=325))
    doc = build_document(page, [para])
    assert len(doc.inline_shapes) == 1
    shape = doc.inline_shapes[0]
    assert shape.width == Emu(650 * EMU_PER_PIXEL)
    assert shape.height == Emu(325 * EMU_PER_PIXEL)


def test_unsupported_image_format(page):
    para = OutputParagraph(image=ImageRun(data=b"not an image", width=10, height=10))
    with pytest.raises(ImageFetchError):
        build_document(page, [para])


def test_write_document_creates_directory(tmp_path, page):
    target = tmp_path / "nested" / "out.docx"
    write_document(build_document(page, _body("hi")), target)
    assert target.exists()
    assert Document(str(target)).paragraphs[1].text == "hi"


def test_write_document_failure_is_write_error(tmp_path, page):
    blocker = tmp_path / "occupied"
    blocker.write_text("a file, not a directory")
    with pytest.raises(WriteError):
        write_document(build_document(page, []), blocker / "out.docx")


def test_template_styles_are_used(tmp_path):
    template = Document()
    template.styles.add_style("Record Body", WD_STYLE_TYPE.PARAGRAPH)
    path = tmp_path / "template.docx"
    template.save(str(path))

    doc = new_document(str(path))
    assert "Record Body" in [s.name for s in doc.styles]


def test_template_read_once(tmp_path):
    path = tmp_path / "template.docx"
    Document().save(str(path))
    export._template_bytes.cache_clear()

    first = new_document(str(path))
    second = new_document(str(path))

    assert first is not second
    info = export._template_bytes.cache_info()
    assert (info.misses, info.hits) == (1, 1)


def _template_without(tmp_path, style_name):
    template = Document()
    template.styles[style_name].delete()
    path = tmp_path / "sparse.docx"
    template.save(str(path))
    return str(path)


def test_template_missing_heading_style_is_added(tmp_path, page):
    path = _template_without(tmp_path, "Heading 1")
    doc = build_document(page, _body("body"), template_path=path)
    title = doc.paragraphs[0]
    assert title.text == "20220501-03 Park visit"
    assert title.style.name == "Heading 1"
    assert title.style.font.bold


def test_template_missing_normal_style_is_added(tmp_path, page):
    path = _template_without(tmp_path, "Normal")
    doc = build_document(page, [], template_path=path)
    assert [p.style.name for p in doc.paragraphs[-3:]] == ["Normal"] * 3
