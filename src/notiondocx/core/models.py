"""Data models: source blocks and pages in, abstract output paragraphs out"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator


class BlockType(str, Enum):
    """Closed set of block variants; every member has exactly one rendering policy"""
    paragraph = "paragraph"
    heading_1 = "heading_1"
    heading_2 = "heading_2"
    heading_3 = "heading_3"
    bulleted_list_item = "bulleted_list_item"
    numbered_list_item = "numbered_list_item"
    quote = "quote"
    image = "image"
    video = "video"
    audio = "audio"
    file = "file"
    pdf = "pdf"
    to_do = "to_do"
    toggle = "toggle"
    callout = "callout"
    code = "code"
    divider = "divider"
    table = "table"
    table_row = "table_row"
    column = "column"
    column_list = "column_list"
    template = "template"
    synced_block = "synced_block"
    child_page = "child_page"
    child_database = "child_database"
    breadcrumb = "breadcrumb"
    table_of_contents = "table_of_contents"
    bookmark = "bookmark"
    embed = "embed"
    link_preview = "link_preview"
    link_to_page = "link_to_page"
    equation = "equation"
    unsupported = "unsupported"


LIST_ITEM_TYPES = frozenset({BlockType.numbered_list_item, BlockType.bulleted_list_item})


class Annotations(BaseModel):
    bold: bool = False
    italic: bool = False
    strikethrough: bool = False
    underline: bool = False
    code: bool = False
    color: str = "default"


class RichText(BaseModel):
    """One styled span of a rich-text field."""
    plain_text: str = ""
    annotations: Annotations = Field(default_factory=Annotations)
    href: Optional[str] = None


def plain_text(rich_text: list[RichText]) -> str:
    return "".join(token.plain_text for token in rich_text)


class ImageSource(BaseModel):
    kind: Literal["external", "file"] = "external"
    url: str


class Block(BaseModel):
    """A content block and its exclusively owned, ordered children."""
    id: str = ""
    type: BlockType
    has_children: bool = False
    rich_text: list[RichText] = Field(default_factory=list)
    caption: list[RichText] = Field(default_factory=list)
    image: Optional[ImageSource] = None
    children: list["Block"] = Field(default_factory=list)


class DateRange(BaseModel):
    start: date
    end: Optional[date] = None

    @field_validator("start", "end", mode="before")
    @classmethod
    def _date_part(cls, value):
        # datetimes arrive as ISO strings with a time and offset; only the calendar day is used
        if isinstance(value, str):
            return value[:10]
        return value


class Page(BaseModel):
    """A database row: metadata plus (fetched separately) its block tree."""
    id: str
    title: str
    date: DateRange
    authors: list[str] = Field(default_factory=list)
    responsible: list[str] = Field(default_factory=list)


@dataclass
class TextRun:
    text: str
    bold: bool = False
    italic: bool = False
    strike: bool = False
    underline: bool = False
    href: Optional[str] = None


@dataclass
class ImageRun:
    data: bytes
    width: float     # display pixels
    height: float


@dataclass
class OutputParagraph:
    """Serializer-independent paragraph: text runs or a single image."""
    runs:         list[TextRun] = field(default_factory=list)
    image:        Optional[ImageRun] = None
    heading:      Optional[int] = None      # 1-3; None for body text
    indent_level: float = 0
    style:        Optional[str] = None      # named paragraph style, e.g. "Normal"

    @property
    def text(self) -> str:
        return "".join(run.text for run in self.runs)
