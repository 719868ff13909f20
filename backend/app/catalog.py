"""
Canonical book catalog for the 66-book Protestant canon.

The catalog is constant data: one ``BookInfo`` per book in canonical order,
with English and French display names, the chapter count, and the alias
strings that resolve to the book. ``BookCatalog`` builds a case-insensitive
index over ids and aliases once and is handed to the services that need it.

Example:
    ```python
    from backend.app.catalog import CATALOG

    book = CATALOG.lookup("1Cor")
    book.id                       # "1co"
    book.localized_name("fr")     # "1 Corinthiens"
    CATALOG.by_number(19).name    # "Psalms"
    ```
"""

from __future__ import annotations

import unicodedata
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Final, Literal

Testament = Literal["old", "new"]

DEFAULT_LANGUAGE: Final = "en"

# code -> (English name, native name)
LANGUAGES: Final[dict[str, tuple[str, str]]] = {
    "ar": ("Arabic", "العربية"),
    "de": ("German", "Deutsch"),
    "el": ("Greek", "Ελληνικά"),
    "en": ("English", "English"),
    "es": ("Spanish", "Español"),
    "fr": ("French", "Français"),
    "he": ("Hebrew", "עברית"),
    "it": ("Italian", "Italiano"),
    "ja": ("Japanese", "日本語"),
    "ko": ("Korean", "한국어"),
    "la": ("Latin", "Latina"),
    "nl": ("Dutch", "Nederlands"),
    "pt": ("Portuguese", "Português"),
    "ru": ("Russian", "Русский"),
    "zh": ("Chinese", "中文"),
}


@dataclass(frozen=True)
class LanguageInfo:
    code: str
    name: str
    native_name: str


def language_info(code: str) -> LanguageInfo:
    """Return display names for a language code, echoing unknown codes."""
    name, native = LANGUAGES.get(code, (code, code))
    return LanguageInfo(code=code, name=name, native_name=native)


@dataclass(frozen=True)
class BookInfo:
    """Static metadata for one canonical book."""

    id: str
    number: int
    name: str
    name_fr: str
    chapters: int
    aliases: tuple[str, ...] = ()

    @property
    def testament(self) -> Testament:
        return "old" if self.number <= 39 else "new"

    @property
    def names(self) -> dict[str, str]:
        return {"en": self.name, "fr": self.name_fr}

    def localized_name(self, language: str | None = None) -> str:
        """Return the display name for ``language``, defaulting to English."""
        if language == "fr":
            return self.name_fr
        return self.name


def _normalize(value: str) -> str:
    """Lowercase, strip accents and whitespace: ``"Genèse"`` -> ``"genese"``."""
    decomposed = unicodedata.normalize("NFKD", value)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return "".join(stripped.lower().split())


def _book(
    number: int,
    book_id: str,
    name: str,
    name_fr: str,
    chapters: int,
    *extra: str,
) -> BookInfo:
    aliases: list[str] = []
    for candidate in (_normalize(name), _normalize(name_fr), *extra):
        if candidate != book_id and candidate not in aliases:
            aliases.append(candidate)
    return BookInfo(
        id=book_id,
        number=number,
        name=name,
        name_fr=name_fr,
        chapters=chapters,
        aliases=tuple(aliases),
    )


BOOKS: Final[tuple[BookInfo, ...]] = (
    # Old Testament
    _book(1, "gen", "Genesis", "Genèse", 50, "gn", "ge"),
    _book(2, "exo", "Exodus", "Exode", 40, "ex", "exod"),
    _book(3, "lev", "Leviticus", "Lévitique", 27, "lv", "le"),
    _book(4, "num", "Numbers", "Nombres", 36, "nm", "nu", "nb"),
    _book(5, "deu", "Deuteronomy", "Deutéronome", 34, "deut", "dt"),
    _book(6, "jos", "Joshua", "Josué", 24, "josh"),
    _book(7, "jdg", "Judges", "Juges", 21, "judg", "jg"),
    _book(8, "rut", "Ruth", "Ruth", 4, "ru", "rth"),
    _book(9, "1sa", "1 Samuel", "1 Samuel", 31, "1sam", "1sm"),
    _book(10, "2sa", "2 Samuel", "2 Samuel", 24, "2sam", "2sm"),
    _book(11, "1ki", "1 Kings", "1 Rois", 22, "1kgs", "1kg"),
    _book(12, "2ki", "2 Kings", "2 Rois", 25, "2kgs", "2kg"),
    _book(13, "1ch", "1 Chronicles", "1 Chroniques", 29, "1chr", "1chron"),
    _book(14, "2ch", "2 Chronicles", "2 Chroniques", 36, "2chr", "2chron"),
    _book(15, "ezr", "Ezra", "Esdras", 10),
    _book(16, "neh", "Nehemiah", "Néhémie", 13, "ne"),
    _book(17, "est", "Esther", "Esther", 10, "esth", "es"),
    _book(18, "job", "Job", "Job", 42, "jb"),
    _book(19, "psa", "Psalms", "Psaumes", 150, "ps", "psalm", "pss"),
    _book(20, "pro", "Proverbs", "Proverbes", 31, "prov", "prv", "pr"),
    _book(21, "ecc", "Ecclesiastes", "Ecclésiaste", 12, "eccl", "eccles", "qoh"),
    _book(22, "sng", "Song of Solomon", "Cantique des Cantiques", 8, "song", "songofsongs", "sos"),
    _book(23, "isa", "Isaiah", "Ésaïe", 66, "is"),
    _book(24, "jer", "Jeremiah", "Jérémie", 52, "jr"),
    _book(25, "lam", "Lamentations", "Lamentations", 5, "la"),
    _book(26, "ezk", "Ezekiel", "Ézéchiel", 48, "ezek", "eze"),
    _book(27, "dan", "Daniel", "Daniel", 12, "dn", "da"),
    _book(28, "hos", "Hosea", "Osée", 14, "ho"),
    _book(29, "jol", "Joel", "Joël", 3, "jl"),
    _book(30, "amo", "Amos", "Amos", 9, "am"),
    _book(31, "oba", "Obadiah", "Abdias", 1, "obad", "ob"),
    _book(32, "jon", "Jonah", "Jonas", 4, "jnh"),
    _book(33, "mic", "Micah", "Michée", 7, "mc"),
    _book(34, "nam", "Nahum", "Nahum", 3, "nah", "na"),
    _book(35, "hab", "Habakkuk", "Habacuc", 3, "hb"),
    _book(36, "zep", "Zephaniah", "Sophonie", 3, "zeph", "zp"),
    _book(37, "hag", "Haggai", "Aggée", 2, "hg"),
    _book(38, "zec", "Zechariah", "Zacharie", 14, "zech", "zc"),
    _book(39, "mal", "Malachi", "Malachie", 4, "ml"),
    # New Testament
    _book(40, "mat", "Matthew", "Matthieu", 28, "matt", "mt"),
    _book(41, "mrk", "Mark", "Marc", 16, "mk"),
    _book(42, "luk", "Luke", "Luc", 24, "lk"),
    _book(43, "jhn", "John", "Jean", 21, "jn", "joh"),
    _book(44, "act", "Acts", "Actes", 28, "ac"),
    _book(45, "rom", "Romans", "Romains", 16, "ro", "rm"),
    _book(46, "1co", "1 Corinthians", "1 Corinthiens", 16, "1cor"),
    _book(47, "2co", "2 Corinthians", "2 Corinthiens", 13, "2cor"),
    _book(48, "gal", "Galatians", "Galates", 6, "ga"),
    _book(49, "eph", "Ephesians", "Éphésiens", 6, "ephes"),
    _book(50, "php", "Philippians", "Philippiens", 4, "phil", "phlp"),
    _book(51, "col", "Colossians", "Colossiens", 4),
    _book(52, "1th", "1 Thessalonians", "1 Thessaloniciens", 5, "1thess", "1thes"),
    _book(53, "2th", "2 Thessalonians", "2 Thessaloniciens", 3, "2thess", "2thes"),
    _book(54, "1ti", "1 Timothy", "1 Timothée", 6, "1tim"),
    _book(55, "2ti", "2 Timothy", "2 Timothée", 4, "2tim"),
    _book(56, "tit", "Titus", "Tite", 3),
    _book(57, "phm", "Philemon", "Philémon", 1, "philem", "phlm"),
    _book(58, "heb", "Hebrews", "Hébreux", 13),
    _book(59, "jas", "James", "Jacques", 5, "jm", "jms"),
    _book(60, "1pe", "1 Peter", "1 Pierre", 5, "1pet", "1pt"),
    _book(61, "2pe", "2 Peter", "2 Pierre", 3, "2pet", "2pt"),
    _book(62, "1jn", "1 John", "1 Jean", 5, "1jo", "1joh"),
    _book(63, "2jn", "2 John", "2 Jean", 1, "2jo", "2joh"),
    _book(64, "3jn", "3 John", "3 Jean", 1, "3jo", "3joh"),
    _book(65, "jud", "Jude", "Jude", 1, "jde"),
    _book(66, "rev", "Revelation", "Apocalypse", 22, "re", "rv"),
)


class BookCatalog:
    """Immutable id/alias index over a sequence of books."""

    def __init__(self, books: Iterable[BookInfo]) -> None:
        self._books = tuple(sorted(books, key=lambda b: b.number))
        self._by_number: dict[int, BookInfo] = {}
        self._by_id: dict[str, BookInfo] = {}
        self._by_alias: dict[str, BookInfo] = {}

        for book in self._books:
            if book.number in self._by_number:
                raise ValueError(f"duplicate book number {book.number}")
            self._by_number[book.number] = book
            self._register(self._by_id, book.id, book)

        for book in self._books:
            for alias in book.aliases:
                key = alias.lower()
                if key in self._by_id and self._by_id[key] is not book:
                    raise ValueError(f"alias {alias!r} shadows book id {key!r}")
                self._register(self._by_alias, key, book)

    @staticmethod
    def _register(index: dict[str, BookInfo], key: str, book: BookInfo) -> None:
        key = key.lower()
        existing = index.get(key)
        if existing is not None and existing is not book:
            raise ValueError(f"{key!r} maps to both {existing.id!r} and {book.id!r}")
        index[key] = book

    def lookup(self, id_or_alias: str) -> BookInfo | None:
        """Resolve a book id or alias (case-insensitive)."""
        key = id_or_alias.strip().lower()
        if not key:
            return None
        return self._by_id.get(key) or self._by_alias.get(key)

    def by_number(self, number: int) -> BookInfo | None:
        return self._by_number.get(number)

    def all(self) -> tuple[BookInfo, ...]:
        return self._books

    def __iter__(self) -> Iterator[BookInfo]:
        return iter(self._books)

    def __len__(self) -> int:
        return len(self._books)


CATALOG: Final = BookCatalog(BOOKS)


def get_catalog() -> BookCatalog:
    """FastAPI dependency returning the process-wide catalog."""
    return CATALOG


__all__ = [
    "BOOKS",
    "CATALOG",
    "DEFAULT_LANGUAGE",
    "LANGUAGES",
    "BookCatalog",
    "BookInfo",
    "LanguageInfo",
    "get_catalog",
    "language_info",
]
