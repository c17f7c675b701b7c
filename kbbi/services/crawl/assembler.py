"""Compose field extractors into whole entries.

Meanings come from the first list under the heading when there is one. Entries
without a list (abbreviations, compounds, proverbs) go through the fallback
cascade in `extract_meanings`, first non-empty result wins.
"""
from __future__ import annotations

import re
from typing import Iterable, List, Optional, Tuple

from bs4 import Tag

from .base import Entry, Meaning
from .extractors import (
    PROPOSE_MEANING_MARKER,
    WORD_CLASS_MARKER,
    extract_definition,
    extract_entry_id,
    extract_entry_type,
    extract_etymology,
    extract_examples,
    extract_homonym_number,
    extract_name,
    extract_related,
    extract_root_word,
    extract_word_classes,
    first_success,
    is_entry_type_label,
    is_etymology_label,
    numbered_examples,
    word_class_for,
)
from .markup import MarkupDocument, collapse_ws, siblings_until, text_siblings_until

# Longer codes first so "adv" is not read as "a"
LEADING_CLASS_PATTERNS: Tuple[Tuple[str, "re.Pattern[str]"], ...] = tuple(
    (code, re.compile(rf"^{code}\b")) for code in ("adv", "num", "pron", "n", "v", "a", "p")
)
_EDGE_PUNCT_RE = re.compile(r"^\s*[;:]\s*|\s*[;:]\s*$")
MIN_FALLBACK_TEXT = 5


def _find_meaning_list(heading: Tag) -> Optional[Tag]:
    for sib in siblings_until(heading, ("h2", "h4")):
        if sib.name in ("ol", "ul"):
            return sib
    return None


def meanings_from_list(lst: Tag) -> Tuple[Meaning, ...]:
    out: List[Meaning] = []
    for item in lst.find_all("li", recursive=False):
        if PROPOSE_MEANING_MARKER in item.get_text():
            continue
        out.append(
            Meaning(
                nomor=str(len(out) + 1),
                kelas_kata=extract_word_classes(item),
                definisi=extract_definition(item),
                contoh=extract_examples(item),
            )
        )
    return tuple(out)


def _meanings_from_plain_text(heading: Tag) -> Tuple[Meaning, ...]:
    parts = [
        el.get_text().strip()
        for el in siblings_until(heading, ("h2", "h4"))
        if el.name != "br" and not is_entry_type_label(el) and not is_etymology_label(el)
    ]
    text = collapse_ws(" ".join(parts).replace(PROPOSE_MEANING_MARKER, ""))
    if not text:
        return ()
    classes = ()
    for code, pattern in LEADING_CLASS_PATTERNS:
        m = pattern.match(text)
        if m:
            classes = (word_class_for(code),)
            text = text[m.end():].strip()
            break
    if not text:
        return ()
    return (Meaning(nomor="1", kelas_kata=classes, definisi=text),)


def meanings_from_compound_list(heading: Tag) -> Tuple[Meaning, ...]:
    """Compound entries keep "definition: example; example" inside each item."""
    container = heading.parent
    lst = container.find("ol") if container is not None else None
    if lst is None:
        return ()
    out: List[Meaning] = []
    for item in lst.find_all("li"):
        text = item.get_text().strip()
        if PROPOSE_MEANING_MARKER in text:
            continue
        definition = text
        for marker in item.select(WORD_CLASS_MARKER):
            definition = definition.replace(marker.get_text(), "", 1)
        definition = _EDGE_PUNCT_RE.sub("", definition, count=1).strip()
        examples = ()
        if ":" in definition:
            definition, tail = definition.split(":", 1)
            definition = definition.strip()
            examples = numbered_examples(tail.split(";"))
        if not definition:
            continue
        out.append(
            Meaning(
                nomor=str(len(out) + 1),
                kelas_kata=extract_word_classes(item),
                definisi=collapse_ws(definition),
                contoh=examples,
                kiasan=any(i.get_text().strip() == "ki" for i in item.find_all("i")),
            )
        )
    return tuple(out)


def _meanings_from_paragraphs(heading: Tag) -> Tuple[Meaning, ...]:
    container = heading.parent
    if container is not None and container.parent is not None:
        container = container.parent
    if container is None:
        return ()
    out: List[Meaning] = []
    for el in container.find_all(["p", "div"]):
        if el.find_previous_sibling("h2") is not heading:
            continue
        text = el.get_text().strip()
        if len(text) > MIN_FALLBACK_TEXT and PROPOSE_MEANING_MARKER not in text:
            out.append(Meaning(nomor=str(len(out) + 1), definisi=collapse_ws(text)))
    return tuple(out)


def _meanings_from_text_nodes(heading: Tag) -> Tuple[Meaning, ...]:
    out: List[Meaning] = []
    for raw in text_siblings_until(heading, ("h2",)):
        text = raw.strip()
        if len(text) > MIN_FALLBACK_TEXT:
            out.append(Meaning(nomor=str(len(out) + 1), definisi=collapse_ws(text)))
    return tuple(out)


COMPOUND_STRATEGIES = (meanings_from_compound_list, _meanings_from_paragraphs, _meanings_from_text_nodes)


def compound_meanings(heading: Optional[Tag]) -> Tuple[Meaning, ...]:
    if heading is None:
        return ()
    return first_success(COMPOUND_STRATEGIES, heading) or ()


def extract_meanings(heading: Tag, name: Optional[str]) -> Tuple[Meaning, ...]:
    lst = _find_meaning_list(heading)
    if lst is not None:
        return meanings_from_list(lst)
    strategies = [_meanings_from_plain_text]
    if name and " " in name:
        strategies.append(meanings_from_compound_list)
    strategies.extend((_meanings_from_paragraphs, _meanings_from_text_nodes))
    return first_success(strategies, heading) or ()


def assemble_entry(doc: MarkupDocument, heading: Tag) -> Optional[Entry]:
    name = extract_name(heading)
    if not name:
        return None
    return Entry(
        nama=name,
        nomor=extract_homonym_number(heading),
        id=extract_entry_id(heading),
        jenis=extract_entry_type(heading),
        root_word=extract_root_word(doc, heading),
        etimologi=extract_etymology(doc),
        makna=extract_meanings(heading, name),
        terkait=extract_related(heading),
    )


def assemble_stub(doc: MarkupDocument, heading: Tag) -> Entry:
    """Identity fields only; meanings come later from the detail page."""
    return Entry(
        nama=extract_name(heading),
        nomor=extract_homonym_number(heading),
        id=extract_entry_id(heading),
        root_word=extract_root_word(doc, heading),
    )


def assemble_entries(doc: MarkupDocument, headings: Iterable[Tag]) -> Tuple[Entry, ...]:
    entries = (assemble_entry(doc, h) for h in headings)
    return tuple(e for e in entries if e is not None)
