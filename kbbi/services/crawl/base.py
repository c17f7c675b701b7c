from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, Iterable, List, Optional, Tuple

NOT_AVAILABLE = "Tidak tersedia"


def canonical_json(obj: Any) -> str:
    return json.dumps(obj, ensure_ascii=False, sort_keys=True, separators=(",", ":"))


def sha256_hexdigest(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class WordClass:
    kode: str
    nama: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"kode": self.kode, "nama": self.nama}


@dataclass(frozen=True)
class Example:
    nomor: int
    teks: str

    def to_dict(self) -> Dict[str, Any]:
        return {"nomor": self.nomor, "teks": self.teks}


@dataclass(frozen=True)
class Meaning:
    nomor: str
    definisi: str = NOT_AVAILABLE
    kelas_kata: Tuple[WordClass, ...] = ()
    contoh: Tuple[Example, ...] = ()
    # Only the compound-word path knows whether a sense is figurative
    kiasan: Optional[bool] = None

    def __post_init__(self) -> None:
        if not self.definisi:
            object.__setattr__(self, "definisi", NOT_AVAILABLE)

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "nomor": self.nomor,
            "kelasKata": [wc.to_dict() for wc in self.kelas_kata],
            "definisi": self.definisi,
            "contoh": [ex.to_dict() for ex in self.contoh],
        }
        if self.kiasan is not None:
            d["kiasan"] = self.kiasan
        return d


@dataclass(frozen=True)
class Etymology:
    text: str
    languages: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {"text": self.text, "languages": list(self.languages)}


@dataclass(frozen=True)
class RelatedWords:
    kata_turunan: Tuple[str, ...] = ()
    gabungan_kata: Tuple[str, ...] = ()
    peribahasa: Tuple[str, ...] = ()
    idiom: Tuple[str, ...] = ()

    def is_empty(self) -> bool:
        return not (self.kata_turunan or self.gabungan_kata or self.peribahasa or self.idiom)

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {}
        for key, values in (
            ("kataTurunan", self.kata_turunan),
            ("gabunganKata", self.gabungan_kata),
            ("peribahasa", self.peribahasa),
            ("idiom", self.idiom),
        ):
            if values:
                d[key] = list(values)
        return d


@dataclass(frozen=True)
class Entry:
    """One dictionary headword as read from a search or detail page."""

    nama: Optional[str] = None
    nomor: Optional[str] = None
    id: Optional[str] = None
    jenis: Optional[str] = None
    root_word: Optional[str] = None
    etimologi: Optional[Etymology] = None
    makna: Tuple[Meaning, ...] = ()
    terkait: Optional[RelatedWords] = None

    def is_empty(self) -> bool:
        return not any(_present(getattr(self, f.name)) for f in fields(self))

    def merged_with(self, detail: "Entry") -> "Entry":
        """Overlay a detail-page entry on this stub.

        Detail values win on every field where the detail page produced a value;
        fields the detail page left blank keep the stub's value.
        """
        updates = {f.name: getattr(detail, f.name) for f in fields(detail) if _present(getattr(detail, f.name))}
        return replace(self, **updates)

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"nama": self.nama}
        if self.nomor is not None:
            d["nomor"] = self.nomor
        if self.id is not None:
            d["id"] = self.id
        if self.jenis:
            d["jenis"] = self.jenis
        if self.root_word:
            d["rootWord"] = self.root_word
        if self.etimologi is not None:
            d["etimologi"] = self.etimologi.to_dict()
        d["makna"] = [m.to_dict() for m in self.makna]
        if self.terkait is not None and not self.terkait.is_empty():
            d["terkait"] = self.terkait.to_dict()
        return d


def _present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, (str, tuple, list)):
        return len(value) > 0
    if isinstance(value, RelatedWords):
        return not value.is_empty()
    return True


@dataclass(frozen=True)
class ScrapeResult:
    word: str
    authenticated: bool = False
    entries: Tuple[Entry, ...] = ()
    mirip: Tuple[str, ...] = field(default=())

    def __post_init__(self) -> None:
        # Suggestions are only meaningful when nothing was found
        if self.entries and self.mirip:
            object.__setattr__(self, "mirip", ())

    @property
    def found(self) -> bool:
        return bool(self.entries)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "word": self.word,
            "authenticated": self.authenticated,
            "entries": [e.to_dict() for e in self.entries],
            "mirip": list(self.mirip),
        }


class Spider:
    """Minimal spider contract.

    Subclasses should implement fetch() to return a list of normalized records
    (dicts or dataclasses with .to_dict()).
    """

    name: str = "base"

    def fetch(self, *args, **kwargs) -> List[Dict[str, Any]]:
        raise NotImplementedError

    @staticmethod
    def normalize_records(items: Iterable[Any]) -> List[Dict[str, Any]]:
        out: List[Dict[str, Any]] = []
        for x in items:
            if hasattr(x, "to_dict"):
                out.append(x.to_dict())
            elif isinstance(x, dict):
                out.append(x)
            else:
                raise TypeError(f"Unsupported record type: {type(x)}")
        return out
