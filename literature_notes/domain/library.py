"""
Library Index: decoding a bibliographic export into entries keyed by citekey.

The export is a UTF-8 encoded JSON array of records (CSL-JSON as written by
Zotero/Better BibTeX). Loading is all-or-nothing: any decode or parse failure
raises before a Library object exists, so a caller that swaps its Library
reference only after :func:`load_library` returns never exposes a partially
built index.

Example usage:
    >>> library = load_library(b'[{"id": "doe2020", "year": 2020}]')
    >>> library.lookup("doe2020")
    Found(entry=Entry(id='doe2020', authors=(), year=2020, ...))
    >>> library.lookup("missing")
    NotFound(citekey='missing')
"""

from collections.abc import Iterator, Mapping
import json
import logging
from types import MappingProxyType
from typing import Any

from literature_notes.domain.exceptions import DecodeError, ParseError
from literature_notes.domain.models import (
    Entry,
    Found,
    LookupResult,
    NotFound,
    normalize,
)

logger = logging.getLogger(__name__)


class Library(Mapping[str, Entry]):
    """Immutable mapping from citation key to :class:`Entry`.

    Libraries are never updated in place. A reload builds a new Library and
    the owner replaces its reference in one assignment.
    """

    def __init__(self, entries: Mapping[str, Entry] | None = None) -> None:
        self._entries: Mapping[str, Entry] = MappingProxyType(dict(entries or {}))

    def __getitem__(self, citekey: str) -> Entry:
        return self._entries[citekey]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"Library({len(self)} entries)"

    def lookup(self, citekey: str) -> LookupResult:
        """Look up a citation key, making the missing case explicit.

        Args:
            citekey: Citation key to look up.

        Returns:
            ``Found(entry)`` when indexed, ``NotFound(citekey)`` otherwise.
        """
        entry = self._entries.get(citekey)
        if entry is None:
            return NotFound(citekey)
        return Found(entry)


def _decode(buffer: bytes) -> str:
    try:
        # utf-8-sig tolerates the BOM some exporters on Windows prepend
        return buffer.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise DecodeError("Citation export is not valid UTF-8", e) from e


def _parse(text: str) -> list[Mapping[str, Any]]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ParseError("Citation export is not valid JSON", e) from e

    if not isinstance(data, list):
        raise ParseError(
            f"Citation export must be a JSON array of records, "
            f"got {type(data).__name__}"
        )

    for index, record in enumerate(data):
        if not isinstance(record, dict):
            raise ParseError(
                f"Record {index} is not an object (got {type(record).__name__})"
            )
        citekey = record.get("id")
        if isinstance(citekey, bool) or not isinstance(citekey, (str, int)):
            raise ParseError(f"Record {index} has no citation key in 'id'")
        if isinstance(citekey, str) and not citekey.strip():
            raise ParseError(f"Record {index} has an empty citation key")

    return data


def load_library(buffer: bytes) -> Library:
    """Decode an export buffer into a :class:`Library`.

    Records are indexed in source order; when two records share an ``id``,
    the later one wins.

    Args:
        buffer: Raw bytes of the export file.

    Returns:
        A new Library.

    Raises:
        DecodeError: If the bytes are not valid UTF-8.
        ParseError: If the text is not a JSON array of records with ``id``.
    """
    records = _parse(_decode(buffer))

    entries: dict[str, Entry] = {}
    for record in records:
        entry = normalize(record)
        if entry.id in entries:
            logger.debug(f"Duplicate citation key '{entry.id}', keeping later record")
        entries[entry.id] = entry

    return Library(entries)
