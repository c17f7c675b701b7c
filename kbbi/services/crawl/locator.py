from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple

from bs4 import Tag

from .markup import MarkupDocument

HEADING_SELECTOR = 'h2[style*="margin-bottom:3px"]'
DETAIL_MARKER = "Detail Data"
NOT_FOUND_MARKER = "Entri tidak ditemukan"
LOGOUT_MARKER = "Keluar"


class PageKind(str, Enum):
    SEARCH_RESULTS = "search_results"
    ENTRY_DETAIL = "entry_detail"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class PageClassification:
    kind: PageKind
    headings: Tuple[Tag, ...] = ()


def find_entry_headings(doc: MarkupDocument) -> List[Tag]:
    return doc.select(HEADING_SELECTOR)


def classify_page(doc: MarkupDocument) -> PageClassification:
    """Decide what kind of page `doc` is.

    Under SEARCH_RESULTS an empty heading tuple simply means zero entries.
    """
    if doc.containing(".page-header h2", DETAIL_MARKER):
        return PageClassification(PageKind.ENTRY_DETAIL)
    headings = find_entry_headings(doc)
    if not headings and doc.containing("div", NOT_FOUND_MARKER):
        return PageClassification(PageKind.NOT_FOUND)
    return PageClassification(PageKind.SEARCH_RESULTS, tuple(headings))


def is_authenticated(doc: MarkupDocument) -> bool:
    """A logged-in session renders a logout ("Keluar") control."""
    return bool(doc.containing("a", LOGOUT_MARKER) or doc.containing("button", LOGOUT_MARKER))
