from __future__ import annotations

from typing import List

from .markup import MarkupDocument

SUGGESTION_SELECTORS = (".col-md-3", "ul.daftar-selaras li a")


def extract_suggestions(doc: MarkupDocument) -> List[str]:
    """Similar-word suggestions shown on a "not found" page.

    Both known locations are read in turn, each in document order. Duplicates are kept.
    """
    out: List[str] = []
    for selector in SUGGESTION_SELECTORS:
        for el in doc.select(selector):
            text = el.get_text().strip()
            if text:
                out.append(text)
    return out
