"""
Note formatting utilities shared by the synthesis stages.

This module provides the NoteFormatter class which turns a normalized
:class:`~literature_notes.domain.models.Entry` into the named-field context
consumed by the title and content templates, makes rendered titles safe for
use as file name segments, and formats wiki links to literature notes.

Example usage:
    >>> from literature_notes.domain.models import Author, Entry
    >>> entry = Entry(id="smith2019", authors=(Author("Smith", "Jane"),), year=2019)
    >>> NoteFormatter.build_context(entry)["authorString"]
    'Smith, J.'
    >>> NoteFormatter.sanitize_title("What/Why: a study?")
    'What_Why_ a study_'
    >>> NoteFormatter.format_link("@smith2019")
    '[[@smith2019]]'
"""

import re
from typing import Any

from literature_notes.domain.config import FORBIDDEN_FILENAME_CHARACTERS
from literature_notes.domain.models import Entry

_FORBIDDEN_PATTERN = re.compile(
    "[" + re.escape(FORBIDDEN_FILENAME_CHARACTERS) + "\x00-\x1f\x7f]"
)


class NoteFormatter:
    """Stateless helpers for literature note synthesis.

    All methods are static and can be called without instantiation.
    """

    @staticmethod
    def build_context(entry: Entry) -> dict[str, Any]:
        """Build the template context for an entry.

        The context keys are the names available to the title and content
        templates.

        Args:
            entry: Normalized entry to expose to templates.

        Returns:
            Dictionary with ``citekey``, ``authors``, ``authorString``,
            ``year``, ``title``, ``containerTitle``, ``publisher``, ``DOI``,
            ``URL``, ``abstract``, ``zoteroSelectURI`` and ``entry`` (the raw
            export record).
        """
        return {
            "citekey": entry.id,
            "authors": entry.authors,
            "authorString": entry.author_string,
            "year": entry.year,
            "title": entry.title,
            "containerTitle": entry.container_title,
            "publisher": entry.publisher,
            "DOI": entry.doi,
            "URL": entry.url,
            "abstract": entry.abstract,
            "zoteroSelectURI": entry.zotero_select_uri,
            "entry": entry.data,
        }

    @staticmethod
    def sanitize_title(title: str, replacement: str = "_") -> str:
        """Make a rendered title usable as a single file name segment.

        Path separators, characters reserved on common file systems and
        control characters are replaced with ``replacement``. Surrounding
        whitespace and trailing dots are removed.

        Args:
            title: Output of the title template.
            replacement: Text substituted for each forbidden character.

        Returns:
            Sanitized title. Never contains a path separator.
        """
        sanitized = _FORBIDDEN_PATTERN.sub(replacement, title)
        return sanitized.strip().rstrip(".").rstrip()

    @staticmethod
    def format_link(title: str) -> str:
        """Format a wiki link to the literature note with the given title."""
        return f"[[{title}]]"
