"""Field extractors for KBBI entry markup.

Every extractor is a pure function of an element (and, for page-level fields,
the document) that returns the field value or None/empty. None of them raise on
unexpected markup. Fields with more than one known layout are expressed as an
ordered tuple of strategy functions tried with `first_success`.
"""
from __future__ import annotations

import copy
import html as html_lib
import re
from types import MappingProxyType
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from bs4 import Tag

from .base import NOT_AVAILABLE, Etymology, Example, RelatedWords, WordClass
from .markup import MarkupDocument, collapse_ws, href_of, own_text, siblings_until

WORD_CLASS_NAMES: Mapping[str, str] = MappingProxyType(
    {
        "n": "Nomina",
        "v": "Verba",
        "a": "Adjektiva",
        "adv": "Adverbia",
        "num": "Numeralia",
        "p": "Partikel",
        "pron": "Pronomina",
        "ki": "kiasan",
        "Jp": "Jepang",
        "sing": "singkatan",
        "Komp": "Komputer",
        "Prw": "Pariwisata",
        "Kap": "Perkapalan",
    }
)

SUPERSCRIPT_DIGITS: Mapping[str, str] = MappingProxyType(
    {
        "0": "⁰",
        "1": "¹",
        "2": "²",
        "3": "³",
        "4": "⁴",
        "5": "⁵",
        "6": "⁶",
        "7": "⁷",
        "8": "⁸",
        "9": "⁹",
    }
)
_PLAIN_DIGITS: Mapping[str, str] = MappingProxyType({v: k for k, v in SUPERSCRIPT_DIGITS.items()})
_SUP_CLASS = "".join(SUPERSCRIPT_DIGITS.values())

_SUPERSCRIPT_RE = re.compile(f"[{_SUP_CLASS}]")
_TRAILING_SUPERSCRIPT_RE = re.compile(f"([{_SUP_CLASS}]+)\\s*$")
# "kaki1¹" -> "kaki¹": the link text repeats the homonym digit before the superscript
_STRAY_DIGIT_RE = re.compile(f"(\\w+?)\\d+([{_SUP_CLASS}]+)")

_EID_PARAM_RE = re.compile(r"eid=(\d+)")
_TRAILING_ID_RE = re.compile(r"/(\d+)/?(?:[?#].*)?$")

_ETYMOLOGY_RE = re.compile(r"Etimologi:</b>\s*\[(.*?)\]", re.IGNORECASE)
_LANGUAGE_RE = re.compile(r"<i[^>]*color:\s*darkred[^>]*>(.*?)</i>", re.IGNORECASE)
_TAG_RE = re.compile(r"<[^>]*>")

_LEADING_COLON_RE = re.compile(r"^\s*:\s*")
_TRAILING_PUNCT_RE = re.compile(r"[\s;:]+$")
_LEADING_BULLETS_RE = re.compile(r"^[-–—•\s]+")

WORD_CLASS_MARKER = '[color="red"]'
EXAMPLE_MARKER = '[color="grey"]'
PROPOSE_MEANING_MARKER = "Usulkan makna baru"

ETYMOLOGY_LABEL = "Etimologi"

_PUNCTUATION_TOKENS = frozenset({",", ";", ":", "(", ")"})

_RELATED_CATEGORIES: Tuple[Tuple[str, str], ...] = (
    ("Kata Turunan", "kata_turunan"),
    ("Gabungan Kata", "gabungan_kata"),
    ("Peribahasa", "peribahasa"),
    ("Idiom", "idiom"),
)


def first_success(strategies: Sequence[Callable], *args):
    """Return the first truthy result of `strategies` applied to `args`, else None."""
    for strategy in strategies:
        result = strategy(*args)
        if result:
            return result
    return None


def to_superscript(digits: str) -> str:
    return "".join(SUPERSCRIPT_DIGITS.get(ch, ch) for ch in (digits or ""))


def from_superscript(text: str) -> str:
    return "".join(_PLAIN_DIGITS.get(ch, ch) for ch in (text or ""))


def strip_superscripts(text: str) -> str:
    return _SUPERSCRIPT_RE.sub("", text or "")


def word_class_for(code: str) -> WordClass:
    return WordClass(kode=code, nama=WORD_CLASS_NAMES.get(code, ""))


# --- Name / homonym number -------------------------------------------------


def _name_from_emphasis(heading: Tag) -> Optional[str]:
    italic = heading.find("i")
    return italic.get_text().strip() if italic else None


def _name_from_own_text(heading: Tag) -> Optional[str]:
    return own_text(heading)


NAME_STRATEGIES = (_name_from_emphasis, _name_from_own_text)


def extract_name(heading: Tag) -> Optional[str]:
    raw = first_success(NAME_STRATEGIES, heading)
    name = collapse_ws(strip_superscripts(raw or ""))
    return name or None


def _number_from_sup(heading: Tag) -> Optional[str]:
    for sup in heading.find_all("sup"):
        # the root-word link inside the heading carries its own superscript
        if sup.find_parent(class_="rootword") is not None:
            continue
        text = sup.get_text().strip()
        if text:
            return text
    return None


def _number_from_superscript_text(heading: Tag) -> Optional[str]:
    m = _TRAILING_SUPERSCRIPT_RE.search(own_text(heading))
    return from_superscript(m.group(1)) if m else None


HOMONYM_STRATEGIES = (_number_from_sup, _number_from_superscript_text)


def extract_homonym_number(heading: Tag) -> str:
    return first_success(HOMONYM_STRATEGIES, heading) or ""


# --- Entry id --------------------------------------------------------------


def _first_link_match(links: List[Tag], pattern: "re.Pattern[str]") -> Optional[str]:
    for link in links:
        m = pattern.search(href_of(link))
        if m:
            return m.group(1)
    return None


def _id_from_edit_link(heading: Tag) -> Optional[str]:
    return _first_link_match(heading.select('a[href*="Edit"]'), _EID_PARAM_RE)


def _id_from_view_link(heading: Tag) -> Optional[str]:
    return _first_link_match(heading.select('a[href*="View"]'), _TRAILING_ID_RE)


def _id_from_container_link(heading: Tag) -> Optional[str]:
    container = heading.parent
    if container is None:
        return None
    return _first_link_match(container.select('a[href*="entri"]'), _TRAILING_ID_RE)


ENTRY_ID_STRATEGIES = (_id_from_edit_link, _id_from_view_link, _id_from_container_link)


def extract_entry_id(heading: Tag) -> Optional[str]:
    return first_success(ENTRY_ID_STRATEGIES, heading)


# --- Entry type / root word ------------------------------------------------


def is_entry_type_label(el: Tag) -> bool:
    style = (el.get("style") or "").replace(" ", "").lower()
    return el.name == "small" and "color:saddlebrown" in style


def is_etymology_label(el: Tag) -> bool:
    return el.name == "b" and el.get_text().strip().startswith(ETYMOLOGY_LABEL)


def extract_entry_type(heading: Tag) -> Optional[str]:
    for sib in siblings_until(heading, ("h2",)):
        if is_entry_type_label(sib):
            return collapse_ws(sib.get_text()) or None
    return None


def root_word_from_link(link: Optional[Tag]) -> Optional[str]:
    """Link text with its homonym digit rendered as a superscript."""
    if link is None:
        return None
    text = link.get_text().strip()
    sup = link.find("sup")
    if sup is not None:
        sup_text = sup.get_text().strip()
        if sup_text:
            text += to_superscript(sup_text)
    text = _STRAY_DIGIT_RE.sub(r"\1\2", text, count=1)
    return text or None


def _root_from_kata_dasar_section(doc: MarkupDocument, heading: Tag) -> Optional[str]:
    for label in doc.containing("h4", "Kata Dasar"):
        nxt = label.find_next_sibling()
        if nxt is None or nxt.name != "ul":
            continue
        for link in nxt.find_all("a"):
            text = root_word_from_link(link)
            if text:
                return text
    return None


def _root_from_heading_marker(doc: MarkupDocument, heading: Tag) -> Optional[str]:
    marker = heading.select_one(".rootword")
    if marker is None:
        return None
    return root_word_from_link(marker.find("a"))


ROOT_WORD_STRATEGIES = (_root_from_kata_dasar_section, _root_from_heading_marker)


def extract_root_word(doc: MarkupDocument, heading: Tag) -> Optional[str]:
    return first_success(ROOT_WORD_STRATEGIES, doc, heading)


# --- Word classes / definition / examples ----------------------------------


def _classes_from_titled_spans(item: Tag) -> List[WordClass]:
    out: List[WordClass] = []
    for span in item.select(f"{WORD_CLASS_MARKER} span[title]"):
        code = span.get_text().strip()
        title = span.get("title") or ""
        if code and title:
            out.append(WordClass(kode=code, nama=title.split(":")[0].strip()))
    return out


def _classes_from_marker_text(item: Tag) -> List[WordClass]:
    out: List[WordClass] = []
    for marker in item.select(WORD_CLASS_MARKER):
        if marker.find_parent(attrs={"color": "red"}) is not None:
            continue
        # titled spans without a usable title still name their codes
        titled = marker.select_one("span[title]") is not None
        for token in marker.get_text().split():
            if token in _PUNCTUATION_TOKENS:
                continue
            out.append(WordClass(kode=token, nama="") if titled else word_class_for(token))
    return out


WORD_CLASS_STRATEGIES = (_classes_from_titled_spans, _classes_from_marker_text)


def extract_word_classes(item: Tag) -> Tuple[WordClass, ...]:
    return tuple(first_success(WORD_CLASS_STRATEGIES, item) or ())


def clean_definition(text: str) -> str:
    text = collapse_ws(text)
    text = _LEADING_COLON_RE.sub("", text)
    text = _TRAILING_PUNCT_RE.sub("", text)
    text = _LEADING_BULLETS_RE.sub("", text)
    return text.strip() or NOT_AVAILABLE


def extract_definition(item: Tag) -> str:
    clone = copy.copy(item)
    for el in clone.select(f"{EXAMPLE_MARKER}, {WORD_CLASS_MARKER}, .entrisButton"):
        el.extract()
    return clean_definition(clone.get_text())


def numbered_examples(texts) -> Tuple[Example, ...]:
    kept = [t for t in (s.strip() for s in texts) if t]
    return tuple(Example(nomor=i, teks=t) for i, t in enumerate(kept, start=1))


def _examples_from_markers(item: Tag) -> Tuple[Example, ...]:
    return numbered_examples(el.get_text() for el in item.select(EXAMPLE_MARKER))


def _examples_after_colon(item: Tag) -> Tuple[Example, ...]:
    text = item.get_text().strip()
    if ":" not in text:
        return ()
    return numbered_examples(text.split(":", 1)[1].split(";"))


EXAMPLE_STRATEGIES = (_examples_from_markers, _examples_after_colon)


def extract_examples(item: Tag) -> Tuple[Example, ...]:
    return first_success(EXAMPLE_STRATEGIES, item) or ()


# --- Etymology / related words ---------------------------------------------


def _strip_tags(fragment: str) -> str:
    return collapse_ws(html_lib.unescape(_TAG_RE.sub(" ", fragment)))


def extract_etymology(doc: MarkupDocument) -> Optional[Etymology]:
    m = _ETYMOLOGY_RE.search(doc.html)
    if not m or not m.group(1).strip():
        return None
    inner = m.group(1).strip()
    languages: Tuple[str, ...] = ()
    lang = _LANGUAGE_RE.search(inner)
    if lang and _strip_tags(lang.group(1)):
        languages = (_strip_tags(lang.group(1)),)
    return Etymology(text=f"[{_strip_tags(inner)}]", languages=languages)


def extract_related(heading: Tag) -> Optional[RelatedWords]:
    buckets: Dict[str, List[str]] = {attr: [] for _, attr in _RELATED_CATEGORIES}
    for sib in siblings_until(heading, ("h2",)):
        if sib.name != "h4":
            continue
        label = sib.get_text().strip()
        attr = next((a for key, a in _RELATED_CATEGORIES if key in label), None)
        if attr is None:
            continue
        container = sib.find_next_sibling()
        if container is None or container.name != "ul":
            continue
        for link in container.find_all("a"):
            text = link.get_text().strip()
            if text and text not in buckets[attr]:
                buckets[attr].append(text)
    related = RelatedWords(**{attr: tuple(values) for attr, values in buckets.items()})
    return None if related.is_empty() else related
