from __future__ import annotations

import logging
import time
from typing import Callable, Dict, List, Optional

from kbbi.config import CrawlSettings, get_crawl_settings

from ..assembler import assemble_entries
from ..base import Entry, ScrapeResult, Spider
from ..detail import assemble_detail
from ..fetcher import Fetcher, HttpxFetcher, search_url
from ..locator import PageKind, classify_page, is_authenticated
from ..markup import MarkupDocument
from ..orchestrator import ChallengeHandler, ScrapeOrchestrator
from ..suggestions import extract_suggestions

logger = logging.getLogger(__name__)


class KBBISpider(Spider):
    """Entry point for KBBI lookups.

    - lookup(word): one request; every field is read from the search page.
    - scrape(word): search page for ids, then one detail page per entry.
    - details(entry_id): a single detail page.

    The transport defaults to HttpxFetcher; pass `fetcher` to use another one
    (e.g. a browser session that can get past the site's challenge page).
    """

    name = "kbbi"

    def __init__(
        self,
        *,
        fetcher: Optional[Fetcher] = None,
        settings: Optional[CrawlSettings] = None,
        on_challenge: Optional[ChallengeHandler] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.settings = settings or get_crawl_settings()
        self.fetcher = fetcher or HttpxFetcher(timeout=self.settings.timeout, user_agent=self.settings.user_agent)
        self.orchestrator = ScrapeOrchestrator(
            self.fetcher,
            base_url=self.settings.base_url,
            detail_delay=self.settings.detail_delay,
            cookie_provider=self.settings.cookie_string,
            on_challenge=on_challenge,
            sleep=sleep,
            debug_dir=self.settings.debug_dir,
        )

    # --- Public API ---
    def fetch(self, word: str) -> List[Dict]:
        return self.normalize_records(self.scrape(word).entries)

    def lookup(self, word: str) -> ScrapeResult:
        word = (word or "").strip()
        if not word:
            raise ValueError("No word provided")
        url = search_url(word, self.settings.base_url)
        html = self.orchestrator.fetch_page(url, fatal=True, snapshot="entry-page.html")
        return self.parse_html(html, word=word)

    def scrape(self, word: str) -> ScrapeResult:
        return self.orchestrator.scrape(word)

    def details(self, entry_id: str) -> Optional[Entry]:
        [(_, entry)] = self.orchestrator.fetch_details([entry_id])
        return entry

    @staticmethod
    def parse_html(html: str, *, word: str) -> ScrapeResult:
        doc = MarkupDocument(html)
        authenticated = is_authenticated(doc)
        page = classify_page(doc)
        if page.kind is PageKind.NOT_FOUND:
            return ScrapeResult(word=word, authenticated=authenticated, mirip=tuple(extract_suggestions(doc)))
        if page.kind is PageKind.ENTRY_DETAIL:
            entry = assemble_detail(doc)
            entries = (entry,) if entry is not None else ()
        else:
            entries = assemble_entries(doc, page.headings)
        logger.info("Parsed %d entries for %r", len(entries), word)
        mirip = () if entries else tuple(extract_suggestions(doc))
        return ScrapeResult(word=word, authenticated=authenticated, entries=entries, mirip=mirip)
