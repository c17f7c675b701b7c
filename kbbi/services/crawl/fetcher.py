"""Fetch collaborator for the KBBI crawler.

The orchestrator only needs two things from a transport: the HTML of a URL
(or None when it could not be retrieved) and whether the last response was an
anti-bot challenge page. `HttpxFetcher` is the default; browser-driven
transports can be plugged in by implementing the same two methods.

URL helpers here are pure.
"""
from __future__ import annotations

import logging
import urllib.parse
from typing import Dict, Optional, Protocol

import httpx
from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://kbbi.kemdikbud.go.id"
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)

_CHALLENGE_TITLES = ("Cloudflare", "Attention Required")
_CHALLENGE_BODY = ("Checking your browser", "DDoS protection")


def search_url(word: str, base_url: str = DEFAULT_BASE_URL) -> str:
    return f"{base_url.rstrip('/')}/entri/{urllib.parse.quote(word, safe='')}"


def detail_url(entry_id: str, base_url: str = DEFAULT_BASE_URL) -> str:
    query = urllib.parse.urlencode({"eid": entry_id})
    return f"{base_url.rstrip('/')}/DataDasarEntri/Details?{query}"


def looks_like_challenge(html: str) -> bool:
    if not html:
        return False
    soup = BeautifulSoup(html, "html.parser")
    title = soup.title.get_text() if soup.title else ""
    if any(marker in title for marker in _CHALLENGE_TITLES):
        return True
    body = soup.body.get_text() if soup.body else soup.get_text()
    if any(marker in body for marker in _CHALLENGE_BODY):
        return True
    return soup.find(id="cf-error-details") is not None


class Fetcher(Protocol):
    def fetch(self, url: str, cookie: Optional[str] = None) -> Optional[str]:
        ...

    def challenge_detected(self) -> bool:
        ...


class HttpxFetcher:
    """Plain HTTP transport; every call opens (and closes) its own client session."""

    def __init__(
        self,
        *,
        timeout: float = 30.0,
        user_agent: str = DEFAULT_USER_AGENT,
        headers: Optional[Dict[str, str]] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.timeout = float(timeout)
        self.headers = {
            "User-Agent": user_agent,
            "Accept-Language": "id-ID,id;q=0.9,en-US;q=0.8,en;q=0.7",
        }
        self.headers.update(headers or {})
        self._transport = transport
        self._challenge = False

    def challenge_detected(self) -> bool:
        return self._challenge

    def fetch(self, url: str, cookie: Optional[str] = None) -> Optional[str]:
        self._challenge = False
        headers = dict(self.headers)
        if cookie:
            headers["Cookie"] = cookie
        try:
            with httpx.Client(
                timeout=self.timeout,
                headers=headers,
                follow_redirects=True,
                transport=self._transport,
            ) as client:
                r = client.get(url)
        except httpx.HTTPError as exc:
            logger.warning("Fetch failed for %s: %s", url, exc)
            return None

        if looks_like_challenge(r.text):
            self._challenge = True
            logger.warning("Challenge page returned for %s (status %s)", url, r.status_code)
            return r.text
        if r.status_code >= 400:
            logger.warning("Fetch failed for %s: HTTP %s", url, r.status_code)
            return None
        return r.text
