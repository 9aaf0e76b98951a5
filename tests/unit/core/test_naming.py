"""Unit tests for core/naming.py"""

from datetime import date

import pytest

from notiondocx.core.naming import date_label, document_title, page_filename


@pytest.mark.parametrize("start,end,expected", [
    (date(2022, 5, 1),   None,               "20220501"),
    (date(2022, 5, 1),   date(2022, 5, 1),   "20220501"),
    (date(2022, 5, 1),   date(2022, 5, 3),   "20220501-03"),
    (date(2022, 5, 1),   date(2022, 6, 3),   "20220501-0603"),
    (date(2021, 12, 31), date(2022, 1, 1),   "20211231-20220101"),
    (date(2022, 5, 1),   date(2023, 5, 1),   "20220501-20230501"),
])
def test_date_label(start, end, expected):
    assert date_label(start, end) == expected


def test_document_title(make_page):
    page = make_page(title="Park visit", start=date(2022, 5, 1), end=date(2022, 5, 3))
    assert document_title(page) == "20220501-03 Park visit"


def test_page_filename(make_page):
    page = make_page(title="Park visit", authors=("Lin", "Zhou"))
    assert page_filename(page) == "20220501 Park visit Lin Zhou.docx"


def test_page_filename_without_authors(make_page):
    page = make_page(title="Solo", authors=())
    assert page_filename(page) == "20220501 Solo .docx"


def test_page_filename_replaces_path_separators(make_page):
    page = make_page(title="Q&A 1/2 part\\b")
    assert page_filename(page).startswith("20220501 Q&A 1-2 part-b ")


def test_page_filename_replaces_reserved_characters(make_page):
    page = make_page(title='Q: a*b? "x" <y> |z')
    assert page_filename(page) == "20220501 Q- a-b- -x- -y- -z Lin Zhou.docx"
