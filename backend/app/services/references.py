"""
Dotted verse reference parsing.

Supported forms (case-insensitive, surrounding whitespace ignored):

- ``gen.1.1``      -> Genesis 1:1
- ``jhn.3.16``     -> John 3:16
- ``psa.23.1-6``   -> Psalms 23:1-6
- ``genesis.1.1``  -> Genesis 1:1 (aliases resolve through the catalog)
- ``1cor.13.4``    -> 1 Corinthians 13:4

Parsing never raises for bad input: ``parse`` returns a ``ReferenceResult``
whose ``error`` explains what was wrong, so a batch can report every
segment independently.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from ..catalog import BookCatalog, BookInfo
from ..errors import InvalidReferenceError

REFERENCE_RE = re.compile(r"^([a-z0-9]+)\.(\d+)\.(\d+)(?:-(\d+))?$")


@dataclass(frozen=True)
class ParsedReference:
    book: str
    chapter: int
    verse_start: int
    verse_end: int | None = None

    @property
    def is_range(self) -> bool:
        """True only for ranges spanning more than one verse."""
        return self.verse_end is not None and self.verse_end != self.verse_start

    @property
    def last_verse(self) -> int:
        return self.verse_end if self.verse_end is not None else self.verse_start


@dataclass(frozen=True)
class ReferenceResult:
    """Outcome of parsing one reference string."""

    reference: ParsedReference | None = None
    book: BookInfo | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> tuple[ParsedReference, BookInfo]:
        """Return the parsed parts or raise ``InvalidReferenceError``."""
        if self.error is not None or self.reference is None or self.book is None:
            raise InvalidReferenceError(self.error or "Invalid reference")
        return self.reference, self.book


def _failure(message: str) -> ReferenceResult:
    return ReferenceResult(error=message)


# Any number with more than 9 significant digits is past every chapter and
# verse; it is stored as this ceiling instead of being converted exactly.
_NUMBER_CEILING = 10**9


def _significant(digits: str) -> str:
    return digits.lstrip("0") or "0"


def _number(digits: str) -> int:
    significant = _significant(digits)
    if len(significant) > 9:
        return _NUMBER_CEILING
    return int(significant)


def _magnitude(digits: str) -> tuple[int, str]:
    """Sort key ordering digit strings by numeric value without converting them."""
    significant = _significant(digits)
    return len(significant), significant


class ReferenceParser:
    """Turns ``book.chapter.verse[-verse]`` strings into references."""

    def __init__(self, catalog: BookCatalog) -> None:
        self._catalog = catalog

    def parse(self, ref: str) -> ReferenceResult:
        normalized = ref.strip().lower()
        match = REFERENCE_RE.match(normalized)
        if not match:
            return _failure(
                f'Invalid reference format: "{ref}". Expected format: '
                "book.chapter.verse (e.g., gen.1.1 or jhn.3.16-17)"
            )

        token, chapter_str, start_str, end_str = match.groups()
        book = self._catalog.lookup(token)
        if book is None:
            return _failure(
                f'Unknown book: "{token}". Use standard abbreviations like gen, exo, mat, jhn, etc.'
            )

        chapter = _number(chapter_str)
        verse_start = _number(start_str)
        verse_end = _number(end_str) if end_str is not None else None

        if chapter < 1 or chapter > book.chapters:
            return _failure(
                f"Invalid chapter {_significant(chapter_str)} for {book.name}. "
                f"Valid range: 1-{book.chapters}"
            )

        if end_str is not None and _magnitude(end_str) < _magnitude(start_str):
            return _failure(
                f"Invalid verse range: {_significant(start_str)}-{_significant(end_str)}. "
                "End verse must be >= start verse."
            )

        return ReferenceResult(
            reference=ParsedReference(
                book=book.id,
                chapter=chapter,
                verse_start=verse_start,
                verse_end=verse_end,
            ),
            book=book,
        )

    def parse_multiple(self, refs: str) -> list[ReferenceResult]:
        """Parse a comma-separated list, one result per segment, in order."""
        return [self.parse(part.strip()) for part in refs.split(",")]


def format_reference(ref: ParsedReference, book: BookInfo, language: str = "en") -> str:
    """Render ``"<name> <chapter>:<start>[-<end>]"`` in the given language."""
    name = book.localized_name(language)
    if ref.is_range:
        return f"{name} {ref.chapter}:{ref.verse_start}-{ref.verse_end}"
    return f"{name} {ref.chapter}:{ref.verse_start}"
