from __future__ import annotations


class KBBIError(RuntimeError):
    """Base class for conditions that abort a KBBI fetch operation."""


class FetchFailure(KBBIError):
    def __init__(self, url: str, message: str = "Failed to fetch page content") -> None:
        super().__init__(f"{message}: {url}")
        self.url = url


class ChallengeDetected(KBBIError):
    """The upstream site answered with an anti-automation challenge page.

    Callers decide whether to retry with a manual (visible) session or give up.
    """

    def __init__(self, url: str) -> None:
        super().__init__(f"Anti-bot challenge detected while fetching {url}")
        self.url = url
