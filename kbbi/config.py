"""Crawler settings, read from the environment.

Configuration via environment variables (or a .env file at the project root):

- KBBI_BASE_URL      site root (default https://kbbi.kemdikbud.go.id)
- KBBI_TIMEOUT       per-request timeout in seconds (default 30)
- KBBI_DETAIL_DELAY  pause between detail-page fetches in seconds (default 0.5)
- KBBI_COOKIE        authentication cookie; a bare value is sent as .AspNet.ApplicationCookie
- KBBI_USER_AGENT    User-Agent header for the default transport
- KBBI_DEBUG_DIR     when set, fetched pages are saved there for inspection
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from kbbi.services.crawl.fetcher import DEFAULT_BASE_URL, DEFAULT_USER_AGENT

AUTH_COOKIE_NAME = ".AspNet.ApplicationCookie"


@dataclass(frozen=True)
class CrawlSettings:
    base_url: str = DEFAULT_BASE_URL
    timeout: float = 30.0
    detail_delay: float = 0.5
    cookie: Optional[str] = None
    user_agent: str = DEFAULT_USER_AGENT
    debug_dir: Optional[str] = None

    def cookie_string(self) -> Optional[str]:
        if not self.cookie:
            return None
        if "=" in self.cookie:
            return self.cookie
        return f"{AUTH_COOKIE_NAME}={self.cookie}"


def load_env_from_file() -> None:
    """Load environment variables from a .env file at the project root if present.

    Only sets variables that aren't already present in the process environment.
    """
    root_dir = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
    env_path = os.path.join(root_dir, ".env")
    if not os.path.isfile(env_path):
        return
    with open(env_path, "r", encoding="utf-8") as f:
        for line in f:
            s = line.strip()
            if not s or s.startswith("#") or "=" not in s:
                continue
            key, val = s.split("=", 1)
            key = key.strip()
            val = val.strip().strip('"').strip("'")
            if key and (key not in os.environ or not os.environ[key]):
                os.environ[key] = val


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        raise RuntimeError(
            f"{name} must be a number of seconds, got {raw!r}.\n"
            f"Fix it in your environment or in the .env file at the project root."
        ) from None
    if value < 0:
        raise RuntimeError(f"{name} must not be negative, got {raw!r}.")
    return value


def get_crawl_settings() -> CrawlSettings:
    load_env_from_file()
    return CrawlSettings(
        base_url=os.getenv("KBBI_BASE_URL") or DEFAULT_BASE_URL,
        timeout=_float_env("KBBI_TIMEOUT", 30.0),
        detail_delay=_float_env("KBBI_DETAIL_DELAY", 0.5),
        cookie=os.getenv("KBBI_COOKIE") or None,
        user_agent=os.getenv("KBBI_USER_AGENT") or DEFAULT_USER_AGENT,
        debug_dir=os.getenv("KBBI_DEBUG_DIR") or None,
    )
