"""
Domain models for the literature notes pipeline.

This module defines the normalized in-memory representation of bibliographic
records and the small value types that flow from the Library Index through
note synthesis to file materialization. Raw export records (CSL-JSON style
mappings) are converted once into immutable :class:`Entry` objects by
:func:`normalize`; everything downstream reads only the normalized form.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
import re
from types import MappingProxyType
from typing import Any, Union

_YEAR_PATTERN = re.compile(r"\b(\d{4})\b", re.ASCII)
_INTEGER_PATTERN = re.compile(r"-?\d+", re.ASCII)


@dataclass(frozen=True)
class Author:
    """A structured author name as found in CSL-JSON ``author`` lists."""

    family: str = ""
    """Family name, including any non-dropping particle (e.g. "van Gogh")."""

    given: str = ""
    """Given name(s), possibly hyphenated (e.g. "Jean-Paul")."""

    literal: str = ""
    """Verbatim name for institutions and unparsed names. Takes precedence
    over family/given when set."""

    @property
    def initials(self) -> str:
        """Initials of the given name: "Jean-Paul Marie" -> "J.-P. M."."""
        parts = []
        for word in self.given.split():
            pieces = [piece for piece in word.split("-") if piece]
            if pieces:
                parts.append("-".join(f"{piece[0]}." for piece in pieces))
        return " ".join(parts)

    @property
    def display_name(self) -> str:
        """Name in "Family, I." form used by :func:`format_author_string`."""
        if self.literal:
            return self.literal
        if self.family and self.given:
            return f"{self.family}, {self.initials}"
        return self.family or self.given

    def __str__(self) -> str:
        return self.display_name


def format_author_string(authors: tuple[Author, ...]) -> str:
    """Render an author list as a single display string.

    Each author is rendered as ``"Family, I."`` and authors are joined with
    ``"; "``. The result depends only on ``authors``.

    Example:
        >>> format_author_string((Author(family="Smith", given="Jane"),))
        'Smith, J.'
    """
    return "; ".join(name for name in (a.display_name for a in authors) if name)


@dataclass(frozen=True)
class Entry:
    """A normalized bibliographic entry, keyed by its citation key.

    Entries are built once per raw record during a Library rebuild and are
    never mutated afterwards.
    """

    id: str
    """Citation key. Unique within a Library."""

    authors: tuple[Author, ...] = ()
    """Ordered author list. Empty when the record carries no authors."""

    year: int | None = None
    """Publication year, or None when the record has no usable date."""

    title: str | None = None
    container_title: str | None = None
    publisher: str | None = None
    doi: str | None = None
    url: str | None = None
    abstract: str | None = None

    data: Mapping[str, Any] = field(
        default_factory=lambda: MappingProxyType({}), compare=False, repr=False
    )
    """Read-only view of the raw record, for templates that reference
    arbitrary export fields."""

    @property
    def author_string(self) -> str:
        """Display string derived from :attr:`authors`."""
        return format_author_string(self.authors)

    @property
    def zotero_select_uri(self) -> str:
        """Zotero URI that selects this item via Better BibTeX citekey lookup."""
        return f"zotero://select/items/@{self.id}"


def _parse_author(raw: Any) -> Author | None:
    if isinstance(raw, str):
        return Author(literal=raw.strip()) if raw.strip() else None
    if not isinstance(raw, Mapping):
        return None

    literal = _as_text(raw.get("literal")) or ""
    family = _as_text(raw.get("family")) or ""
    particle = _as_text(raw.get("non-dropping-particle"))
    if particle and family:
        family = f"{particle} {family}"
    given = _as_text(raw.get("given")) or ""

    if not (literal or family or given):
        return None
    return Author(family=family, given=given, literal=literal)


def _parse_authors(raw: Mapping[str, Any]) -> tuple[Author, ...]:
    names = raw.get("author")
    if names is None:
        names = raw.get("authors")
    if not isinstance(names, list):
        return ()

    authors = []
    for name in names:
        author = _parse_author(name)
        if author is not None:
            authors.append(author)
    return tuple(authors)


def _as_year(value: Any) -> int | None:
    # bool is an int subclass; a boolean year is never meaningful
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and _INTEGER_PATTERN.fullmatch(value.strip()):
        return int(value.strip())
    return None


def _parse_year(raw: Mapping[str, Any]) -> int | None:
    year = _as_year(raw.get("year"))
    if year is not None:
        return year

    issued = raw.get("issued")
    if not isinstance(issued, Mapping):
        return None

    date_parts = issued.get("date-parts")
    if isinstance(date_parts, list) and date_parts:
        first = date_parts[0]
        if isinstance(first, list) and first:
            year = _as_year(first[0])
            if year is not None:
                return year

    for key in ("raw", "literal"):
        text = issued.get(key)
        if isinstance(text, str):
            match = _YEAR_PATTERN.search(text)
            if match:
                return int(match.group(1))
    return None


def _as_text(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


def normalize(raw: Mapping[str, Any]) -> Entry:
    """Normalize one raw export record into an :class:`Entry`.

    Missing optional fields never fail: an absent author list becomes an
    empty tuple and an absent or unparseable date becomes ``None``. The
    caller guarantees that ``raw["id"]`` is present.

    Args:
        raw: Mapping decoded from one element of the export array.

    Returns:
        The normalized, immutable Entry.
    """
    return Entry(
        id=str(raw["id"]),
        authors=_parse_authors(raw),
        year=_parse_year(raw),
        title=_as_text(raw.get("title")),
        container_title=_as_text(raw.get("container-title")),
        publisher=_as_text(raw.get("publisher")),
        doi=_as_text(raw.get("DOI")),
        url=_as_text(raw.get("URL")),
        abstract=_as_text(raw.get("abstract")),
        data=MappingProxyType(dict(raw)),
    )


@dataclass(frozen=True)
class Found:
    """Successful Library lookup."""

    entry: Entry


@dataclass(frozen=True)
class NotFound:
    """Library lookup for a citation key that is not indexed."""

    citekey: str


LookupResult = Union[Found, NotFound]


@dataclass(frozen=True)
class SynthesizedNote:
    """Title, vault-relative path and initial content derived for a citekey.

    Transient: only ``path`` (and, when seeding is enabled, ``content``) is
    realized into a file.
    """

    citekey: str
    title: str
    path: str
    content: str


@dataclass(frozen=True)
class NoteFile:
    """Handle to a literature note file inside the vault."""

    path: str
    """Vault-relative path, using forward slashes."""

    absolute_path: Path
    """Resolved location on disk."""
