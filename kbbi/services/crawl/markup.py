"""Read-only query surface over a parsed KBBI page.

BeautifulSoup does the parsing; this module adds the handful of traversals the
extractors share (text-contains filters, sibling walks bounded by headings,
own-text of an element) and keeps the raw HTML around for the few fields that
are only recoverable from the markup text itself.
"""
from __future__ import annotations

import re
from typing import Iterable, Iterator, List, Optional

from bs4 import BeautifulSoup, Comment, NavigableString, Tag

_WS_RE = re.compile(r"\s+")


class MarkupDocument:
    def __init__(self, html: str) -> None:
        self.html = html or ""
        self.soup = BeautifulSoup(self.html, "html.parser")

    def select(self, selector: str) -> List[Tag]:
        return self.soup.select(selector)

    def select_one(self, selector: str) -> Optional[Tag]:
        return self.soup.select_one(selector)

    def containing(self, selector: str, needle: str) -> List[Tag]:
        """Elements matching `selector` whose text contains `needle`."""
        return [el for el in self.soup.select(selector) if needle in el.get_text()]

    def first(self, name: str) -> Optional[Tag]:
        return self.soup.find(name)


def collapse_ws(text: str) -> str:
    return _WS_RE.sub(" ", text or "").strip()


def own_text(el: Tag) -> str:
    """Text of `el` with every child element dropped."""
    parts = [
        str(s)
        for s in el.find_all(string=True, recursive=False)
        if not isinstance(s, Comment)
    ]
    return "".join(parts).strip()


def siblings_until(el: Tag, stop: Iterable[str] = ("h2",)) -> Iterator[Tag]:
    """Following element siblings of `el`, up to the first tag named in `stop`."""
    stop_names = set(stop)
    for sib in el.next_siblings:
        if not isinstance(sib, Tag):
            continue
        if sib.name in stop_names:
            return
        yield sib


def text_siblings_until(el: Tag, stop: Iterable[str] = ("h2",)) -> Iterator[str]:
    """Bare text nodes directly following `el`, up to the first tag named in `stop`."""
    stop_names = set(stop)
    for sib in el.next_siblings:
        if isinstance(sib, Tag):
            if sib.name in stop_names:
                return
            continue
        if isinstance(sib, NavigableString) and not isinstance(sib, Comment):
            yield str(sib)


def href_of(el: Tag) -> str:
    href = el.get("href")
    return href if isinstance(href, str) else ""
