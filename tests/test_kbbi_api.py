from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from kbbi.api.routers.entries import get_spider
from kbbi.config import CrawlSettings
from kbbi.main import app
from kbbi.services.crawl.fetcher import detail_url, search_url
from kbbi.services.crawl.spiders.kbbi_spider import KBBISpider

BASE = "https://kbbi.test"
CHALLENGE_PAGE = "<html><head><title>Attention Required! | Cloudflare</title></head><body></body></html>"


def read_fixture(name: str) -> str:
    p = Path(__file__).parent / "fixtures" / name
    return p.read_text(encoding="utf-8")


class FakeFetcher:
    def __init__(self, pages, challenge_urls=()):
        self.pages = pages
        self.challenge_urls = set(challenge_urls)
        self._challenge = False

    def fetch(self, url, cookie=None):
        self._challenge = url in self.challenge_urls
        return self.pages.get(url)

    def challenge_detected(self):
        return self._challenge


PAGES = {
    search_url("cinta", BASE): read_fixture("kbbi_search_cinta.html"),
    search_url("cintaa", BASE): read_fixture("kbbi_not_found.html"),
    search_url("diblokir", BASE): CHALLENGE_PAGE,
    detail_url("12345", BASE): read_fixture("kbbi_detail_cinta.html"),
}


@pytest.fixture
def client():
    fetcher = FakeFetcher(PAGES, challenge_urls=[search_url("diblokir", BASE)])
    settings = CrawlSettings(base_url=BASE, detail_delay=0)
    app.dependency_overrides[get_spider] = lambda: KBBISpider(fetcher=fetcher, settings=settings, sleep=lambda s: None)
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_lookup_found(client):
    resp = client.get("/entri/cinta")
    assert resp.status_code == 200
    data = resp.json()
    assert data["word"] == "cinta"
    assert data["authenticated"] is True
    assert data["mirip"] == []
    first = data["entries"][0]
    assert first["nama"] == "cinta"
    assert first["id"] == "12345"
    assert "rootWord" not in first
    assert first["makna"][0]["kelasKata"] == [{"kode": "a", "nama": "Adjektiva"}]
    assert "kiasan" not in first["makna"][0]
    assert first["terkait"] == {
        "kataTurunan": ["bercinta", "bercintakan"],
        "gabunganKata": ["cinta monyet", "cinta tanah air"],
    }


def test_lookup_not_found_returns_suggestions(client):
    resp = client.get("/entri/cintaa")
    assert resp.status_code == 404
    detail = resp.json()["detail"]
    assert detail["mirip"] == ["cinta", "centa"]
    assert "cintaa" in detail["message"]


def test_scrape_merges_detail_pages(client):
    resp = client.get("/entri/cinta/scrape")
    assert resp.status_code == 200
    first, second = resp.json()["entries"]
    assert first["jenis"] == "dasar"
    assert len(first["makna"]) == 2
    assert first["makna"][0]["contoh"] == [{"nomor": 1, "teks": "orang tuaku cinta kepada kami semua"}]
    # no detail page for the second homonym
    assert second == {"nama": "cinta", "nomor": "2", "id": "12346", "makna": []}


def test_detail_endpoint(client):
    resp = client.get("/detail/12345")
    assert resp.status_code == 200
    assert resp.json()["nama"] == "cinta"

    assert client.get("/detail/99999").status_code == 404
    assert client.get("/detail/abc").status_code == 400


def test_upstream_failures_map_to_status_codes(client):
    assert client.get("/entri/hilang").status_code == 502
    assert client.get("/entri/diblokir").status_code == 503
    assert client.get("/entri/%20").status_code == 400
