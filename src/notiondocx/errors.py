"""Exception hierarchy: fatal invariant violations vs page-scoped failures"""


class ExportError(Exception):
    """Base class for all export failures."""


class InvariantError(ExportError):
    """A logic defect in the block-to-paragraph transformation; aborts the batch."""


class UnhandledBlockTypeError(InvariantError):
    def __init__(self, block_type: object, block_id: str = ""):
        self.block_type = block_type
        self.block_id = block_id
        where = f" (block {block_id})" if block_id else ""
        super().__init__(f"No rendering policy for block type {block_type!r}{where}")


class ListRunError(InvariantError):
    """List items must be rendered as runs through the flattener."""


class PageError(ExportError):
    """A failure confined to a single page; the batch moves on to the next page."""


class ImageFetchError(PageError):
    pass


class SourceError(PageError):
    pass


class WriteError(PageError):
    pass
