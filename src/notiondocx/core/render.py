"""Per-variant rendering of a single block into output paragraphs"""

import logging
from dataclasses import dataclass
from functools import partial
from typing import Callable, Optional

from notiondocx.core.models import Block, BlockType, ImageRun, OutputParagraph, RichText, TextRun
from notiondocx.core.utils.images import fetch_image, fit_width, image_size
from notiondocx.errors import ImageFetchError, ListRunError, UnhandledBlockTypeError


logger = logging.getLogger(__name__)

QUOTE_INDENT = 0.5
CAPTION_OPEN, CAPTION_CLOSE = "（", "）"

HEADING_LEVELS: dict[BlockType, int] = {
    BlockType.heading_1: 1,
    BlockType.heading_2: 2,
    BlockType.heading_3: 3,
}


@dataclass
class RenderOptions:
    """Collaborators and limits for the image policy."""
    fetch_image: Callable[[str], bytes] = fetch_image
    max_image_width: int = 650
    default_image_size: int = 400

    @classmethod
    def from_settings(cls, settings) -> "RenderOptions":
        return cls(
            fetch_image=partial(fetch_image, timeout=settings.image_timeout),
            max_image_width=settings.max_image_width,
            default_image_size=settings.default_image_size,
        )


def to_runs(rich_text: list[RichText]) -> list[TextRun]:
    return [
        TextRun(
            text=token.plain_text,
            bold=token.annotations.bold,
            italic=token.annotations.italic,
            strike=token.annotations.strikethrough,
            underline=token.annotations.underline,
            href=token.href,
        )
        for token in rich_text
    ]


def rich_text_paragraph(
    rich_text: list[RichText],
    indent_level: float,
    heading: Optional[int] = None,
    ) -> OutputParagraph:
    return OutputParagraph(runs=to_runs(rich_text), heading=heading, indent_level=indent_level)


def normal_paragraph(text: str = "") -> OutputParagraph:
    """Unindented paragraph in the Normal style; empty text gives a spacer line."""
    return OutputParagraph(runs=[TextRun(text)] if text else [], style="Normal")


def bracket_caption(caption: list[RichText]) -> list[RichText]:
    """Wrap a non-empty caption in full-width parentheses without touching the input tokens."""
    if not caption:
        return []
    tokens = list(caption)
    tokens[0] = tokens[0].model_copy(update={"plain_text": CAPTION_OPEN + tokens[0].plain_text})
    tokens[-1] = tokens[-1].model_copy(update={"plain_text": tokens[-1].plain_text + CAPTION_CLOSE})
    return tokens


def render_image(block: Block, indent_level: float, options: RenderOptions) -> list[OutputParagraph]:
    """Image paragraph at display size, then its caption, then a spacer."""
    if block.image is None:
        raise ImageFetchError(f"Image block {block.id} has no source")

    data = options.fetch_image(block.image.url)
    natural_width, natural_height = image_size(data)
    width = natural_width or options.default_image_size
    height = natural_height or options.default_image_size
    width, height = fit_width(width, height, options.max_image_width)
    logger.debug("Image size: %d by %d", natural_width, natural_height)
    logger.debug("Displaying at: %.1f by %.1f", width, height)

    return [
        OutputParagraph(image=ImageRun(data=data, width=width, height=height)),
        rich_text_paragraph(bracket_caption(block.caption), indent_level),
        normal_paragraph(),
    ]


def render_block(
    block: Block,
    indent_level: float,
    options: Optional[RenderOptions] = None,
    ) -> list[OutputParagraph]:
    """Render one block (not its children) into zero or more paragraphs."""
    match block.type:
        case BlockType.paragraph:
            return [rich_text_paragraph(block.rich_text, indent_level)]

        case BlockType.heading_1 | BlockType.heading_2 | BlockType.heading_3:
            return [rich_text_paragraph(block.rich_text, indent_level, heading=HEADING_LEVELS[block.type])]

        case BlockType.quote:
            return [rich_text_paragraph(block.rich_text, indent_level + QUOTE_INDENT)]

        case BlockType.numbered_list_item | BlockType.bulleted_list_item:
            raise ListRunError(f"{block.type.value} {block.id} must be rendered as part of a list run")

        case BlockType.image:
            return render_image(block, indent_level, options or RenderOptions())

        case BlockType.video | BlockType.audio | BlockType.file:
            logger.info("Skipping %s block %s: media files are not exported", block.type.value, block.id)
            return []

        case (
            BlockType.equation | BlockType.pdf | BlockType.to_do | BlockType.toggle
            | BlockType.callout | BlockType.code | BlockType.divider | BlockType.table
            | BlockType.table_row | BlockType.column | BlockType.column_list
            | BlockType.template | BlockType.synced_block | BlockType.child_page
            | BlockType.child_database | BlockType.breadcrumb | BlockType.table_of_contents
            | BlockType.bookmark | BlockType.embed | BlockType.link_preview
            | BlockType.link_to_page | BlockType.unsupported
        ):
            logger.debug("Ignoring block type %s", block.type.value)
            return []

        case _:
            raise UnhandledBlockTypeError(block.type, block.id)
