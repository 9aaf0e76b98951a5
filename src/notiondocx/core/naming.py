"""Date labels, document titles, and output file names for pages"""

import re
from datetime import date
from typing import Optional

from notiondocx.core.models import Page


_UNSAFE_CHARS_RE = re.compile(r'[\\/:*?"<>|]')


def date_label(start: date, end: Optional[date] = None) -> str:
    """Compact YYYYMMDD label; a differing end date adds the shortest unambiguous suffix.

    20220501, 20220501-03 (same month), 20220501-0603 (same year),
    20211231-20220101 (different year).
    """
    label = start.strftime("%Y%m%d")
    if end is None or end == start:
        return label
    end_label = end.strftime("%Y%m%d")
    if end.year != start.year:
        return f"{label}-{end_label}"
    if end.month != start.month:
        return f"{label}-{end_label[4:]}"
    return f"{label}-{end_label[6:]}"


def page_label(page: Page) -> str:
    return date_label(page.date.start, page.date.end)


def author_names(page: Page) -> str:
    return " ".join(page.authors)


def document_title(page: Page) -> str:
    return f"{page_label(page)} {page.title}"


def page_filename(page: Page) -> str:
    """'{label} {title} {authors}.docx'; characters not allowed in file names become '-'."""
    title = _UNSAFE_CHARS_RE.sub("-", page.title)
    return f"{page_label(page)} {title} {author_names(page)}.docx"
