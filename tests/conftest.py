"""Root test configuration: block, page, and image factories shared by all suites"""

import io
from datetime import date

import pytest
from PIL import Image

from notiondocx.config import Settings
from notiondocx.core.models import Annotations, Block, BlockType, DateRange, Page, RichText
from notiondocx.core.render import RenderOptions


def _text(plain: str, href: str = None, **annotations) -> RichText:
    return RichText(plain_text=plain, href=href, annotations=Annotations(**annotations))


def _block(block_type: str, text: str = "", children=None, **fields) -> Block:
    children = list(children or [])
    return Block(
        id=fields.pop("id", f"{block_type}:{text}"),
        type=BlockType(block_type),
        has_children=bool(children),
        rich_text=[_text(text)] if text else [],
        children=children,
        **fields,
    )


def _png(width: int, height: int) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (width, height), "white").save(buf, format="PNG")
    return buf.getvalue()


def _page(title: str = "Spring cleanup", start=date(2022, 5, 1), end=None, authors=("Lin", "Zhou"), **fields) -> Page:
    return Page(
        id=fields.pop("id", f"page:{title}"),
        title=title,
        date=DateRange(start=start, end=end),
        authors=list(authors),
        **fields,
    )


@pytest.fixture(name="make_text")
def make_text_fixture():
    return _text


@pytest.fixture(name="make_block")
def make_block_fixture():
    return _block


@pytest.fixture(name="make_png")
def make_png_fixture():
    return _png


@pytest.fixture(name="make_page")
def make_page_fixture():
    return _page


@pytest.fixture(name="fetched")
def fetched_fixture():
    """URLs requested through the options fixture, in request order."""
    return []


@pytest.fixture(name="options")
def options_fixture(fetched):
    """RenderOptions whose image fetcher serves a 400x300 PNG without network access."""
    def fetch(url: str) -> bytes:
        fetched.append(url)
        return _png(400, 300)
    return RenderOptions(fetch_image=fetch)


@pytest.fixture(name="settings")
def settings_fixture(tmp_path):
    return Settings(output_dir=str(tmp_path / "docx"))
