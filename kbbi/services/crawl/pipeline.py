from __future__ import annotations

import json
import urllib.parse
import logging
import os
import time
from datetime import datetime, timezone
from typing import Dict, Iterable, Tuple

from .base import ScrapeResult, canonical_json, sha256_hexdigest

logger = logging.getLogger(__name__)

DEBUG_MAX_FILES = 10
DEBUG_MAX_AGE_DAYS = 7


def ensure_dir(path: str) -> None:
    os.makedirs(path, exist_ok=True)


def _record_dedupe_key(rec: Dict) -> Tuple[str, str]:
    # Same entry id with identical content is written once
    entry_id = str(rec.get("id") or "")
    return entry_id, sha256_hexdigest(canonical_json(rec))


def write_jsonl(records: Iterable[Dict], out_dir: str, filename_prefix: str) -> str:
    """Write records to a JSONL file with coarse dedupe by (id, content_hash).

    Returns the path to the written file. Existing file will be appended.
    """
    ensure_dir(out_dir)
    dt = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    path = os.path.join(out_dir, f"{filename_prefix}-{dt}.jsonl")

    seen: set = set()
    with open(path, "a", encoding="utf-8") as f:
        for rec in records:
            key = _record_dedupe_key(rec)
            if key in seen:
                continue
            seen.add(key)
            f.write(json.dumps(rec, ensure_ascii=False) + "\n")
    return path


def export_result(result: ScrapeResult, out_dir: str) -> str:
    """Stage the entries of a scrape as JSONL, one entry per line."""
    records = [e.to_dict() for e in result.entries]
    # headwords such as "dan/atau" must not turn into subdirectories
    safe_word = urllib.parse.quote(result.word, safe="")
    return write_jsonl(records, out_dir=out_dir, filename_prefix=f"entries-{safe_word}")


def cleanup_debug_files(
    debug_dir: str,
    *,
    max_files: int = DEBUG_MAX_FILES,
    max_age_days: float = DEBUG_MAX_AGE_DAYS,
) -> int:
    """Drop snapshots older than `max_age_days`, then the oldest beyond `max_files`."""
    paths = [os.path.join(debug_dir, n) for n in os.listdir(debug_dir)]
    files = sorted((p for p in paths if os.path.isfile(p)), key=os.path.getmtime, reverse=True)
    cutoff = time.time() - max_age_days * 24 * 60 * 60
    stale = [p for p in files if os.path.getmtime(p) < cutoff]
    fresh = [p for p in files if p not in stale]
    doomed = stale + fresh[max_files:]
    for p in doomed:
        os.remove(p)
    if doomed:
        logger.debug("Cleaned up %d old debug files in %s", len(doomed), debug_dir)
    return len(doomed)


def save_debug_snapshot(debug_dir: str, filename: str, html: str) -> str:
    ensure_dir(debug_dir)
    path = os.path.join(debug_dir, filename)
    with open(path, "w", encoding="utf-8") as f:
        f.write(html)
    # the fresh snapshot counts toward the cap
    cleanup_debug_files(debug_dir)
    logger.debug("Saved debug snapshot %s", path)
    return path
