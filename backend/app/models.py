from typing import Literal

from pydantic import BaseModel, Field

# ============================================================================
# Store rows - records returned by the repositories
# ============================================================================


class Translation(BaseModel):
    """One Bible edition as stored in the ``translations`` table."""

    id: str
    name: str
    language: str
    status: str | None = None
    filename: str | None = None


class VerseRow(BaseModel):
    """Verse number and text within a known book/chapter."""

    number: int
    text: str


class ChapterSummary(BaseModel):
    """Chapter number with the count of verses stored for it."""

    number: int
    verses: int


class SearchRow(BaseModel):
    """Verse address and text matched by a substring search."""

    book: int
    chapter: int
    verse: int
    text: str


# ============================================================================
# Catalog responses
# ============================================================================


class LanguageEntry(BaseModel):
    code: str
    name: str
    native_name: str
    default: bool = False


class LanguagesResponse(BaseModel):
    default: str
    languages: list[LanguageEntry]


class TranslationEntry(BaseModel):
    id: str
    name: str
    language: str
    status: str | None = None
    default: bool = False


class TranslationsResponse(BaseModel):
    """Translation listing; ``language`` echoes the filter and is null when unfiltered."""

    default: str
    language: str | None = None
    translations: list[TranslationEntry]


class BookRef(BaseModel):
    id: str
    name: str


class BookSummary(BaseModel):
    id: str
    number: int
    name: str
    testament: Literal["old", "new"]
    chapters: int


class BooksResponse(BaseModel):
    translation: str
    language: str
    books: list[BookSummary]


class BookResponse(BaseModel):
    id: str
    number: int
    name: str
    language: str
    testament: Literal["old", "new"]
    chapters: int
    aliases: list[str] = Field(default_factory=list)


class ChaptersResponse(BaseModel):
    translation: str
    language: str
    book: BookRef
    chapters: list[ChapterSummary]


class ChapterResponse(BaseModel):
    translation: str
    language: str
    book: BookRef
    chapter: int
    verses: list[VerseRow]


# ============================================================================
# Verse responses
# ============================================================================


class VerseResponse(BaseModel):
    """A single addressed verse."""

    reference: str
    translation: str
    language: str
    book: BookRef
    chapter: int
    verse: int
    text: str


class PassageResponse(BaseModel):
    """A contiguous verse range within one chapter."""

    reference: str
    translation: str
    language: str
    book: BookRef
    chapter: int
    verses: list[VerseRow]


class BatchVerse(BaseModel):
    reference: str
    book: BookRef
    chapter: int
    verse: int
    text: str


class BatchVersesResponse(BaseModel):
    translation: str
    language: str
    verses: list[BatchVerse]


class Comparison(BaseModel):
    language: str
    language_name: str
    translation: str
    translation_name: str
    book_name: str
    text: str


class CompareResponse(BaseModel):
    reference: str
    book: BookRef
    chapter: int
    verse: int
    comparisons: list[Comparison]


# ============================================================================
# Search responses
# ============================================================================


class SearchHit(BaseModel):
    reference: str
    book: BookRef
    chapter: int
    verse: int
    text: str
    highlight: str


class SearchResponse(BaseModel):
    query: str
    translation: str
    language: str
    total: int
    limit: int
    offset: int
    results: list[SearchHit]


# ============================================================================
# Error envelope
# ============================================================================


class ErrorDetail(BaseModel):
    code: str
    message: str


class ErrorResponse(BaseModel):
    error: ErrorDetail
