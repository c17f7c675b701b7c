from pydantic import BaseModel, Field
from typing import Optional, List


class WordClassOut(BaseModel):
    kode: str
    nama: str = Field("", description="Descriptive label; empty when the code is unknown")


class ExampleOut(BaseModel):
    nomor: int
    teks: str


class MeaningOut(BaseModel):
    nomor: str
    kelasKata: List[WordClassOut] = Field(default_factory=list)
    definisi: str = Field(..., description='Never empty; "Tidak tersedia" when nothing was extracted')
    contoh: List[ExampleOut] = Field(default_factory=list)
    kiasan: Optional[bool] = Field(None, description="Figurative sense (compound entries only)")


class EtymologyOut(BaseModel):
    text: str
    languages: List[str] = Field(default_factory=list)


class RelatedWordsOut(BaseModel):
    kataTurunan: Optional[List[str]] = None
    gabunganKata: Optional[List[str]] = None
    peribahasa: Optional[List[str]] = None
    idiom: Optional[List[str]] = None


class EntryOut(BaseModel):
    nama: Optional[str] = None
    nomor: Optional[str] = Field(None, description="Homonym number")
    id: Optional[str] = Field(None, description="Site entry id (eid)")
    jenis: Optional[str] = None
    rootWord: Optional[str] = None
    etimologi: Optional[EtymologyOut] = None
    makna: List[MeaningOut] = Field(default_factory=list)
    terkait: Optional[RelatedWordsOut] = None


class ScrapeResultOut(BaseModel):
    word: str
    authenticated: bool = False
    entries: List[EntryOut] = Field(default_factory=list)
    mirip: List[str] = Field(default_factory=list, description="Suggestions; only when no entry was found")
