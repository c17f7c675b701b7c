from pathlib import Path

from kbbi.services.crawl.assembler import assemble_entries, assemble_stub, extract_meanings
from kbbi.services.crawl.base import NOT_AVAILABLE, Entry, WordClass
from kbbi.services.crawl.locator import PageKind, classify_page, find_entry_headings, is_authenticated
from kbbi.services.crawl.markup import MarkupDocument
from kbbi.services.crawl.suggestions import extract_suggestions


def read_fixture(name: str) -> str:
    p = Path(__file__).parent / "fixtures" / name
    return p.read_text(encoding="utf-8")


def _entries(fixture: str):
    doc = MarkupDocument(read_fixture(fixture))
    return assemble_entries(doc, find_entry_headings(doc))


def test_classify_pages():
    search = classify_page(MarkupDocument(read_fixture("kbbi_search_cinta.html")))
    assert search.kind is PageKind.SEARCH_RESULTS
    assert len(search.headings) == 2

    detail = classify_page(MarkupDocument(read_fixture("kbbi_detail_cinta.html")))
    assert detail.kind is PageKind.ENTRY_DETAIL

    missing = classify_page(MarkupDocument(read_fixture("kbbi_not_found.html")))
    assert missing.kind is PageKind.NOT_FOUND
    assert missing.headings == ()

    empty = classify_page(MarkupDocument("<html><body><div>kosong</div></body></html>"))
    assert empty.kind is PageKind.SEARCH_RESULTS
    assert empty.headings == ()


def test_authentication_signal():
    assert is_authenticated(MarkupDocument(read_fixture("kbbi_search_cinta.html"))) is True
    assert is_authenticated(MarkupDocument(read_fixture("kbbi_not_found.html"))) is False
    assert is_authenticated(MarkupDocument("<form><button>Keluar</button></form>")) is True


def test_search_page_full_entry():
    entries = _entries("kbbi_search_cinta.html")
    assert [(e.nama, e.nomor, e.id) for e in entries] == [("cinta", "1", "12345"), ("cinta", "2", "12346")]

    cinta = entries[0]
    assert cinta.jenis is None
    assert cinta.root_word is None
    assert cinta.etimologi is not None and cinta.etimologi.languages == ("Sanskerta",)

    # the "propose a new meaning" item is not a sense
    assert [m.nomor for m in cinta.makna] == ["1", "2", "3", "4"]
    first = cinta.makna[0]
    assert first.kelas_kata == (WordClass("a", "Adjektiva"),)
    assert first.definisi == "suka sekali; sayang benar"
    assert [ex.teks for ex in first.contoh] == ["orang tuaku cinta kepada kami semua", "cinta kepada sesama makhluk"]
    assert [ex.nomor for ex in first.contoh] == [1, 2]

    assert cinta.makna[1].definisi == "kasih sekali; terpikat (antara laki-laki dan perempuan)"
    assert cinta.makna[2].contoh == ()
    assert cinta.makna[3].kelas_kata == (WordClass("a", "Adjektiva"), WordClass("ark", "Arkais"))
    assert cinta.makna[3].definisi == "susah hati (khawatir); risau"

    assert cinta.terkait is not None
    assert cinta.terkait.kata_turunan == ("bercinta", "bercintakan")

    second = entries[1]
    assert second.makna[0].kelas_kata == (WordClass("n", "Nomina"),)
    assert second.terkait is None


def test_entry_to_dict_shape():
    d = _entries("kbbi_search_cinta.html")[0].to_dict()
    assert list(d)[:3] == ["nama", "nomor", "id"]
    assert "jenis" not in d and "rootWord" not in d
    assert d["etimologi"]["languages"] == ["Sanskerta"]
    assert d["makna"][0]["kelasKata"] == [{"kode": "a", "nama": "Adjektiva"}]
    assert "kiasan" not in d["makna"][0]
    assert d["terkait"] == {
        "kataTurunan": ["bercinta", "bercintakan"],
        "gabunganKata": ["cinta monyet", "cinta tanah air"],
    }


def test_derived_entry_root_word_and_marker_classes():
    [entry] = _entries("kbbi_search_derived.html")
    assert entry.nama == "berkaki"
    assert entry.nomor == ""
    assert entry.id is None
    assert entry.root_word == "kaki¹"
    assert entry.makna[0].kelas_kata == (WordClass("v", "Verba"),)
    assert entry.makna[0].definisi == "mempunyai kaki"
    assert entry.makna[0].contoh[0].teks == "meja itu berkaki empat"
    assert entry.makna[1].definisi == "beralas; berdasar"


def test_abbreviation_plain_text_meaning():
    [entry] = _entries("kbbi_search_abbreviation.html")
    assert entry.nama == "ABRI"
    assert entry.id == "777"
    assert entry.jenis == "akronim"
    assert len(entry.makna) == 1
    assert entry.makna[0].kelas_kata == (WordClass("n", "Nomina"),)
    assert entry.makna[0].definisi == "Angkatan Bersenjata Republik Indonesia"
    assert entry.terkait is not None and entry.terkait.gabungan_kata == ("ABRI masuk desa",)


def test_compound_entry_meanings():
    [entry] = _entries("kbbi_search_compound.html")
    assert entry.nama == "cinta monyet"
    assert entry.id == "40211"
    [meaning] = entry.makna
    assert meaning.definisi == "cinta antara anak muda yang belum dewasa"
    assert [ex.teks for ex in meaning.contoh] == ["mereka hanya cinta monyet", "itu cinta monyet saja"]
    assert meaning.kelas_kata == (WordClass("ki", "kiasan"),)
    assert meaning.kiasan is True
    assert entry.to_dict()["makna"][0]["kiasan"] is True


def test_paragraph_fallback():
    doc = MarkupDocument(
        '<div id="outer"><div id="inner"><h2 style="margin-bottom:3px">alpha</h2><h4>Info</h4>'
        "<p>first paragraph definition</p><p>tiny</p><p>second paragraph text</p></div></div>"
    )
    makna = extract_meanings(doc.select_one("h2"), "alpha")
    assert [(m.nomor, m.definisi) for m in makna] == [
        ("1", "first paragraph definition"),
        ("2", "second paragraph text"),
    ]


def test_text_node_fallback():
    doc = MarkupDocument('<div><h2 style="margin-bottom:3px">beta</h2><h4>x</h4> raw definition text here <br/> tiny </div>')
    makna = extract_meanings(doc.select_one("h2"), "beta")
    assert [(m.nomor, m.definisi) for m in makna] == [("1", "raw definition text here")]


def test_entry_without_any_meaning_text():
    doc = MarkupDocument('<div><h2 style="margin-bottom:3px">gamma</h2></div>')
    assert extract_meanings(doc.select_one("h2"), "gamma") == ()
    [entry] = assemble_entries(doc, find_entry_headings(doc))
    assert entry.makna == ()


def test_meaning_sentinel_on_empty_item():
    doc = MarkupDocument('<h2 style="margin-bottom:3px">delta</h2><ol><li><font color="red"><i>n</i></font></li></ol>')
    [entry] = assemble_entries(doc, find_entry_headings(doc))
    assert entry.makna[0].definisi == NOT_AVAILABLE


def test_nameless_heading_is_skipped_but_kept_as_stub():
    doc = MarkupDocument('<h2 style="margin-bottom:3px"><sup>1</sup></h2><h2 style="margin-bottom:3px">kata</h2>')
    headings = find_entry_headings(doc)
    assert [e.nama for e in assemble_entries(doc, headings)] == ["kata"]
    assert assemble_stub(doc, headings[0]) == Entry(nama=None, nomor="1")


def test_suggestions_keep_order_and_duplicates():
    assert extract_suggestions(MarkupDocument(read_fixture("kbbi_not_found.html"))) == ["cinta", "centa"]
    html = (
        '<div class="col-md-3">kata</div>'
        '<ul class="daftar-selaras"><li><a>kota</a></li><li><a>kata</a></li></ul>'
    )
    assert extract_suggestions(MarkupDocument(html)) == ["kata", "kota", "kata"]


def test_plain_text_meaning_skips_etymology_label():
    doc = MarkupDocument('<h2 style="margin-bottom:3px">ABRI</h2><b>Etimologi:</b> [Indonesia]<p>n Angkatan Bersenjata</p>')
    [entry] = assemble_entries(doc, find_entry_headings(doc))
    [meaning] = entry.makna
    assert meaning.definisi == "Angkatan Bersenjata"
    assert meaning.kelas_kata == (WordClass("n", "Nomina"),)
    assert entry.etimologi is not None and entry.etimologi.text == "[Indonesia]"
