"""Two-phase KBBI scrape.

Phase 1 fetches the search page and reduces every entry heading to a stub
(name, homonym number, id, root word). Phase 2 fetches each stub's detail page
one at a time, with a fixed pause between requests, and overlays the detail
entry on its stub. A detail page that cannot be fetched or parsed leaves its
stub as-is; only a search page that cannot be fetched fails the whole scrape.
"""
from __future__ import annotations

import logging
import time
from typing import Callable, List, Optional, Sequence, Tuple

from .assembler import assemble_stub
from .base import Entry, ScrapeResult
from .detail import assemble_detail
from .errors import ChallengeDetected, FetchFailure
from .fetcher import DEFAULT_BASE_URL, Fetcher, detail_url, search_url
from .locator import PageKind, classify_page, is_authenticated
from .markup import MarkupDocument
from .pipeline import save_debug_snapshot
from .suggestions import extract_suggestions

logger = logging.getLogger(__name__)

DEFAULT_DETAIL_DELAY = 0.5

CookieProvider = Callable[[], Optional[str]]
ChallengeHandler = Callable[[str], Optional[str]]


class ScrapeOrchestrator:
    def __init__(
        self,
        fetcher: Fetcher,
        *,
        base_url: str = DEFAULT_BASE_URL,
        detail_delay: float = DEFAULT_DETAIL_DELAY,
        cookie_provider: Optional[CookieProvider] = None,
        on_challenge: Optional[ChallengeHandler] = None,
        sleep: Callable[[float], None] = time.sleep,
        debug_dir: Optional[str] = None,
    ) -> None:
        self.fetcher = fetcher
        self.base_url = base_url
        self.detail_delay = float(detail_delay)
        self.cookie_provider = cookie_provider
        self.on_challenge = on_challenge
        self.sleep = sleep
        self.debug_dir = debug_dir

    # --- Public API ---
    def scrape(self, word: str) -> ScrapeResult:
        word = (word or "").strip()
        if not word:
            raise ValueError("No word provided")

        url = search_url(word, self.base_url)
        logger.info("Phase 1: finding entries for %r at %s", word, url)
        html = self.fetch_page(url, fatal=True, snapshot="entry-page.html")
        doc = MarkupDocument(html)
        authenticated = is_authenticated(doc)
        page = classify_page(doc)

        if page.kind is PageKind.NOT_FOUND:
            mirip = extract_suggestions(doc)
            logger.info("No entries for %r; %d suggestions", word, len(mirip))
            return ScrapeResult(word=word, authenticated=authenticated, mirip=tuple(mirip))

        if page.kind is PageKind.ENTRY_DETAIL:
            entry = assemble_detail(doc)
            entries = (entry,) if entry is not None else ()
            mirip = () if entries else tuple(extract_suggestions(doc))
            return ScrapeResult(word=word, authenticated=authenticated, entries=entries, mirip=mirip)

        stubs = [assemble_stub(doc, h) for h in page.headings]
        if not stubs:
            logger.info("No entries for %r", word)
            return ScrapeResult(word=word, authenticated=authenticated, mirip=tuple(extract_suggestions(doc)))

        logger.info("Phase 2: fetching details for %d entries", len(stubs))
        entries = self._enrich(stubs, authenticated)
        enriched = sum(1 for e in entries if e.makna)
        logger.info(
            "Found %d entries for %r (%d with details, authenticated=%s)",
            len(entries), word, enriched, authenticated,
        )
        return ScrapeResult(word=word, authenticated=authenticated, entries=tuple(entries))

    def fetch_details(self, entry_ids: Sequence[str]) -> List[Tuple[str, Optional[Entry]]]:
        """Fetch and parse detail pages for `entry_ids`, in order, one at a time."""
        results: List[Tuple[str, Optional[Entry]]] = []
        for i, entry_id in enumerate(entry_ids):
            if i:
                self.sleep(self.detail_delay)
            results.append((entry_id, self._fetch_detail(entry_id)))
        return results

    def fetch_page(self, url: str, *, fatal: bool, snapshot: Optional[str] = None) -> Optional[str]:
        """Fetch `url` through the transport, applying the challenge policy.

        With `fatal` set, failures raise FetchFailure/ChallengeDetected; otherwise
        they are logged and None is returned.
        """
        cookie = self.cookie_provider() if self.cookie_provider else None
        html = self.fetcher.fetch(url, cookie=cookie)
        if self.fetcher.challenge_detected():
            html = self.on_challenge(url) if self.on_challenge else None
            if html is None:
                if fatal:
                    raise ChallengeDetected(url)
                logger.warning("Challenge page at %s; continuing without it", url)
                return None
        if html is None:
            if fatal:
                raise FetchFailure(url)
            logger.warning("Failed to fetch %s", url)
            return None
        if self.debug_dir and snapshot:
            try:
                save_debug_snapshot(self.debug_dir, snapshot, html)
            except OSError as exc:
                logger.warning("Could not save debug snapshot %s: %s", snapshot, exc)
        return html

    # --- Internals ---
    def _enrich(self, stubs: List[Entry], authenticated: bool) -> List[Entry]:
        out: List[Entry] = []
        fetched = 0
        for stub in stubs:
            if not stub.id:
                logger.warning("No entry id for %r; keeping search-page data only", stub.nama)
                out.append(stub)
                continue
            if fetched:
                self.sleep(self.detail_delay)
            fetched += 1
            logger.info("Fetching details for %r%s (ID: %s)", stub.nama, f" {stub.nomor}" if stub.nomor else "", stub.id)
            detail = self._fetch_detail(stub.id, authenticated=authenticated)
            if detail is None:
                out.append(stub)
                continue
            out.append(stub.merged_with(detail))
        return out

    def _fetch_detail(self, entry_id: str, *, authenticated: Optional[bool] = None) -> Optional[Entry]:
        url = detail_url(entry_id, self.base_url)
        try:
            html = self.fetch_page(url, fatal=False, snapshot=f"details-{entry_id}.html")
            if html is None:
                return None
            doc = MarkupDocument(html)
            if authenticated and not is_authenticated(doc):
                logger.warning("Session lost authentication on detail page for entry %s", entry_id)
            detail = assemble_detail(doc)
        except Exception:
            logger.warning("Could not read details for entry %s", entry_id, exc_info=True)
            return None
        if detail is None:
            logger.warning("Detail page for entry %s had no recognizable fields", entry_id)
            return None
        logger.debug("Parsed details for %s: %s", entry_id, detail.to_dict())
        return detail
