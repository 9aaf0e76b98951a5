"""Depth-first flattening of a block tree into one ordered paragraph list"""

from typing import Iterable, Optional

from notiondocx.core.grouping import take_run
from notiondocx.core.models import Annotations, Block, BlockType, OutputParagraph, RichText
from notiondocx.core.peeking import PeekingIterator
from notiondocx.core.render import RenderOptions, render_block, rich_text_paragraph


def numbered_rich_text(rich_text: list[RichText], index: int) -> list[RichText]:
    """Return rich_text with a new leading "{index}. " token styled like the first token."""
    annotations = rich_text[0].annotations.model_copy() if rich_text else Annotations()
    return [RichText(plain_text=f"{index}. ", annotations=annotations), *rich_text]


def _render_items(
    run: list[Block],
    indent_level: float,
    options: Optional[RenderOptions],
    numbered: bool,
    ) -> list[OutputParagraph]:
    paragraphs: list[OutputParagraph] = []
    for index, item in enumerate(run, start=1):
        rich_text = numbered_rich_text(item.rich_text, index) if numbered else item.rich_text
        paragraphs.append(rich_text_paragraph(rich_text, indent_level))
        if item.has_children:
            paragraphs.extend(flatten(item.children, indent_level + 1, options))
    return paragraphs


def numbered_list(run: list[Block], indent_level: float, options: Optional[RenderOptions] = None) -> list[OutputParagraph]:
    """Render a numbered run; numbering starts at 1 for every run."""
    return _render_items(run, indent_level, options, numbered=True)


def bulleted_list(run: list[Block], indent_level: float, options: Optional[RenderOptions] = None) -> list[OutputParagraph]:
    return _render_items(run, indent_level, options, numbered=False)


LIST_POLICIES = {
    BlockType.numbered_list_item: numbered_list,
    BlockType.bulleted_list_item: bulleted_list,
}


def flatten(
    blocks: Iterable[Block],
    indent_level: float = 0,
    options: Optional[RenderOptions] = None,
    ) -> list[OutputParagraph]:
    """Pre-order paragraphs for blocks; children sit one indent level deeper than their parent."""
    paragraphs: list[OutputParagraph] = []
    it = PeekingIterator(blocks)

    block, done = it.peek()
    while not done:
        policy = LIST_POLICIES.get(block.type)
        if policy is not None:
            # list items recurse into their own children inside the policy
            run = take_run(it, block.type)
            paragraphs.extend(policy(run, indent_level, options))
        else:
            paragraphs.extend(render_block(block, indent_level, options))
            if block.has_children:
                paragraphs.extend(flatten(block.children, indent_level + 1, options))
            next(it)
        block, done = it.peek()

    return paragraphs
