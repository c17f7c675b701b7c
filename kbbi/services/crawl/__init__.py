"""KBBI crawling subsystem.

Structure:
- base.py: entry records (Entry, Meaning, ...) and the spider contract
- markup.py: parsed-page query helpers over BeautifulSoup
- locator.py: entry headings and page classification
- extractors.py: per-field extraction strategies
- assembler.py: search-page entries and the meaning fallback cascade
- detail.py: detail ("Detail Data") page parsing
- suggestions.py: similar-word suggestions on "not found" pages
- fetcher.py: transport contract, httpx transport and URL helpers
- orchestrator.py: two-phase scrape (stubs, then detail pages)
- pipeline.py: JSONL staging and debug snapshots
- spiders/: site-facing entry points
"""
