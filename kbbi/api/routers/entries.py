import logging
from typing import Callable

from fastapi import APIRouter, Depends, HTTPException

from kbbi.models.entry import EntryOut, ScrapeResultOut
from kbbi.services.crawl.base import ScrapeResult
from kbbi.services.crawl.errors import ChallengeDetected, FetchFailure
from kbbi.services.crawl.spiders.kbbi_spider import KBBISpider

logger = logging.getLogger(__name__)

router = APIRouter(tags=["kbbi"])


def get_spider() -> KBBISpider:
    return KBBISpider()


def _run(action: Callable, arg: str, what: str):
    try:
        return action(arg)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except ChallengeDetected as exc:
        raise HTTPException(status_code=503, detail=f"Blocked by the site's anti-bot challenge: {exc.url}")
    except FetchFailure as exc:
        raise HTTPException(status_code=502, detail=f"Could not fetch {exc.url}")
    except Exception:
        logger.exception("KBBI %s failed for %r", what, arg)
        raise HTTPException(status_code=500, detail=f"KBBI {what} failed")


def _found_or_404(result: ScrapeResult) -> dict:
    if not result.found:
        raise HTTPException(
            status_code=404,
            detail={"message": f'Word "{result.word}" not found in KBBI', "mirip": list(result.mirip)},
        )
    return result.to_dict()


@router.get("/entri/{word}", response_model=ScrapeResultOut, response_model_exclude_none=True)
def api_lookup(word: str, spider: KBBISpider = Depends(get_spider)):
    return _found_or_404(_run(spider.lookup, word, "lookup"))


@router.get("/entri/{word}/scrape", response_model=ScrapeResultOut, response_model_exclude_none=True)
def api_scrape(word: str, spider: KBBISpider = Depends(get_spider)):
    return _found_or_404(_run(spider.scrape, word, "scrape"))


@router.get("/detail/{eid}", response_model=EntryOut, response_model_exclude_none=True)
def api_detail(eid: str, spider: KBBISpider = Depends(get_spider)):
    if not eid.isdigit():
        raise HTTPException(status_code=400, detail="Entry id must be numeric")
    entry = _run(spider.details, eid, "detail")
    if entry is None:
        raise HTTPException(status_code=404, detail="Entry not found")
    return entry.to_dict()
