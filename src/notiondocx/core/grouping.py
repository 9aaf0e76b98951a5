"""Detection of contiguous same-type list-item runs among sibling blocks"""

from notiondocx.core.models import LIST_ITEM_TYPES, Block, BlockType
from notiondocx.core.peeking import PeekingIterator
from notiondocx.errors import ListRunError


def take_run(it: PeekingIterator[Block], block_type: BlockType) -> list[Block]:
    """Consume the maximal run of block_type at the head of it.

    The first non-matching block stays unconsumed. Callers check the head's
    type first, so an empty run is a flattening defect.
    """
    if block_type not in LIST_ITEM_TYPES:
        raise ListRunError(f"Runs are only grouped for list items, not {block_type.value}")

    run: list[Block] = []
    block, done = it.peek()
    while not done and block.type == block_type:
        run.append(next(it))
        block, done = it.peek()

    if not run:
        found = "end of blocks" if done else block.type.value
        raise ListRunError(f"Expected a {block_type.value} run, found {found}")
    return run
