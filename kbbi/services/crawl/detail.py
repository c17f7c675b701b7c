"""Detail page ("Detail Data") parsing.

A detail page is a run of bootstrap rows, each a bold label in `.col-md-2` and
its value in `.col-md-10`. Meaning rows open a new sense; word-class and
example rows attach to the most recent one. Examples are repeated further down
in "Contoh #M-N" sections, which are authoritative for example M-N.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from bs4 import Tag

from .assembler import compound_meanings
from .base import NOT_AVAILABLE, Entry, Example, Meaning, WordClass
from .extractors import root_word_from_link
from .markup import MarkupDocument, siblings_until

PLACEHOLDER_VALUE = "(Tidak tersedia)"
EXAMPLE_SECTION_PREFIX = "Contoh #"

_SIMPLE_FIELDS: Dict[str, str] = {
    "Eid": "id",
    "Entri": "nama",
    "Id Homonim": "nomor",
    "Jenis Entri": "jenis",
}
_ROOT_WITH_EID_RE = re.compile(r"(.+?)\s*\(Eid:\s*(\d+)\)")
_CLASS_WITH_NAME_RE = re.compile(r"^(\w+)\s+\(([^()]*)\)$")
_EXAMPLE_SECTION_RE = re.compile(r"Contoh #(\d+)-(\d+)")
_GLOSS_RE = re.compile(r"\[(.*?)\]")
_PLACEHOLDER_DEFINITIONS = frozenset({"", "→", NOT_AVAILABLE})


@dataclass
class _MeaningDraft:
    definisi: str
    kelas_kata: Tuple[WordClass, ...] = ()
    contoh: List[Example] = field(default_factory=list)

    def set_example(self, nomor: int, teks: str) -> None:
        for i, ex in enumerate(self.contoh):
            if ex.nomor == nomor:
                self.contoh[i] = Example(nomor=nomor, teks=teks)
                return
        self.contoh.append(Example(nomor=nomor, teks=teks))


def _label_and_value(row: Tag) -> Tuple[str, str]:
    label_el = row.select_one(".col-md-2 b")
    value_el = row.select_one(".col-md-10")
    label = label_el.get_text().strip() if label_el else ""
    value = value_el.get_text().strip() if value_el else ""
    return label, value


def _is_row(el: Tag) -> bool:
    return "row" in (el.get("class") or [])


def _in_example_section(row: Tag) -> bool:
    section = row.find_previous_sibling("h4")
    return section is not None and section.get_text().strip().startswith(EXAMPLE_SECTION_PREFIX)


def parse_word_classes(value: str) -> Tuple[WordClass, ...]:
    """Parse "a (Adjektiva)" or "n (Nomina), v (Verba)" style values."""
    m = _CLASS_WITH_NAME_RE.match(value)
    if m:
        return (WordClass(kode=m.group(1), nama=m.group(2)),)
    out: List[WordClass] = []
    for part in value.split(","):
        part = part.strip()
        if not part:
            continue
        pm = _CLASS_WITH_NAME_RE.match(part)
        out.append(WordClass(kode=pm.group(1), nama=pm.group(2)) if pm else WordClass(kode=part, nama=""))
    return tuple(out)


def parse_root_word(value: str) -> str:
    m = _ROOT_WITH_EID_RE.match(value)
    return m.group(1).strip() if m else value


def _apply_example_sections(doc: MarkupDocument, drafts: List[_MeaningDraft]) -> None:
    for section in doc.select("h4"):
        m = _EXAMPLE_SECTION_RE.search(section.get_text())
        if not m or not section.get_text().strip().startswith(EXAMPLE_SECTION_PREFIX):
            continue
        meaning_no, example_no = int(m.group(1)), int(m.group(2))
        if meaning_no < 1 or meaning_no > len(drafts):
            continue
        text = ""
        for row in siblings_until(section, ("h4",)):
            if not _is_row(row):
                continue
            label, value = _label_and_value(row)
            if label == "Contoh":
                text = value
                break
        if text and text != PLACEHOLDER_VALUE:
            drafts[meaning_no - 1].set_example(example_no, _GLOSS_RE.sub(r"\1", text).strip())


def _root_word_from_title(doc: MarkupDocument) -> Optional[str]:
    title = doc.select_one(".page-header h2")
    if title is None:
        return None
    return root_word_from_link(title.select_one(".rootword a"))


def assemble_detail(doc: MarkupDocument) -> Optional[Entry]:
    """Build one entry from a detail page, or None when no field was found."""
    values: Dict[str, str] = {}
    drafts: List[_MeaningDraft] = []

    for row in doc.select(".row"):
        label, value = _label_and_value(row)
        if not value or value == PLACEHOLDER_VALUE:
            continue
        if label in _SIMPLE_FIELDS:
            values[_SIMPLE_FIELDS[label]] = value
        elif label == "Induk Kata":
            values["root_word"] = parse_root_word(value)
        elif label == "Makna":
            drafts.append(_MeaningDraft(definisi=value))
        elif label == "Kelas Kata" and drafts:
            drafts[-1].kelas_kata = parse_word_classes(value)
        # rows under "Contoh #M-N" are applied by _apply_example_sections, not appended here
        elif label == "Contoh" and drafts and not _in_example_section(row):
            last = drafts[-1]
            last.contoh.append(Example(nomor=len(last.contoh) + 1, teks=value))

    _apply_example_sections(doc, drafts)

    if "root_word" not in values:
        root = _root_word_from_title(doc)
        if root:
            values["root_word"] = root

    makna = tuple(
        Meaning(nomor=str(i), definisi=d.definisi, kelas_kata=d.kelas_kata, contoh=tuple(d.contoh))
        for i, d in enumerate(drafts, start=1)
    )

    name = values.get("nama") or ""
    if " " in name and all(m.definisi in _PLACEHOLDER_DEFINITIONS for m in makna):
        compound = compound_meanings(doc.first("h2"))
        if compound:
            makna = compound

    entry = Entry(makna=makna, **values)
    return None if entry.is_empty() else entry
