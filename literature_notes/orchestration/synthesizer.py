"""
Note Synthesizer: title, path and content for a citation key.

NoteSynthesizer composes one Library snapshot with one set of compiled
templates. It never mutates either; when the library is reloaded or the
templates are reconfigured, the owner builds a new synthesizer and swaps it
in. Each call recomputes its result from scratch.

The rendering pipeline is:
    entry --title template--> title --sanitize--> noteTitle --path template--> path
    entry --content template--> content

Example usage:
    >>> synthesizer = NoteSynthesizer(library, templates)
    >>> synthesizer.title_for("smith2019")
    'Smith, J. (2019)'
    >>> synthesizer.path_for("smith2019")
    'Literature/Smith, J. (2019).md'
"""

import logging
from typing import Any

from literature_notes.clients.exceptions import UnsafePathError
from literature_notes.domain.exceptions import UnknownCitekeyError
from literature_notes.domain.library import Library
from literature_notes.domain.models import Entry, Found, SynthesizedNote
from literature_notes.domain.note_formatter import NoteFormatter
from literature_notes.domain.template_engine import NoteTemplates


class NoteSynthesizer:
    """Renders literature note titles, paths and content for citation keys.

    Attributes:
        library: Library snapshot used for lookups.
        templates: Compiled title, path and content templates.
        title_replacement: Replacement for file-name-unsafe title characters.
    """

    def __init__(
        self,
        library: Library,
        templates: NoteTemplates,
        title_replacement: str = "_",
    ) -> None:
        self.library = library
        self.templates = templates
        self.title_replacement = title_replacement
        self.logger = logging.getLogger(__name__)

    def entry_for(self, citekey: str) -> Entry:
        """Return the entry for ``citekey``.

        Raises:
            UnknownCitekeyError: If the citation key is not in the library.
        """
        result = self.library.lookup(citekey)
        if isinstance(result, Found):
            return result.entry
        raise UnknownCitekeyError(result.citekey)

    def _context_for(self, citekey: str) -> dict[str, Any]:
        return NoteFormatter.build_context(self.entry_for(citekey))

    def title_for(self, citekey: str) -> str:
        """Render the title template for ``citekey``.

        Raises:
            UnknownCitekeyError: If the citation key is not in the library.
        """
        return self.templates.title.render(self._context_for(citekey))

    def _note_title(self, citekey: str, title: str) -> str:
        note_title = NoteFormatter.sanitize_title(title, self.title_replacement)
        if note_title:
            return note_title

        # entries with empty titles must not share one hidden file
        note_title = NoteFormatter.sanitize_title(citekey, self.title_replacement)
        if not note_title:
            raise UnsafePathError(
                f"Note title for '{citekey}' is empty after removing characters "
                f"not allowed in file names"
            )
        self.logger.debug(f"Empty title for '{citekey}', using the citation key")
        return note_title

    def note_title_for(self, citekey: str) -> str:
        """Title made safe for use as a file name segment.

        Falls back to the citation key when the sanitized title is empty.

        Raises:
            UnknownCitekeyError: If the citation key is not in the library.
            UnsafePathError: If neither the title nor the citation key leaves
                a usable file name.
        """
        return self._note_title(citekey, self.title_for(citekey))

    def path_for(self, citekey: str) -> str:
        """Render the path template with ``noteTitle`` for ``citekey``.

        Raises:
            UnknownCitekeyError: If the citation key is not in the library.
        """
        return self.templates.path.render({"noteTitle": self.note_title_for(citekey)})

    def content_for(self, citekey: str) -> str:
        """Render the content template for ``citekey``.

        Raises:
            UnknownCitekeyError: If the citation key is not in the library.
        """
        return self.templates.content.render(self._context_for(citekey))

    def synthesize(self, citekey: str) -> SynthesizedNote:
        """Render title, path and content for ``citekey`` in one pass.

        Raises:
            UnknownCitekeyError: If the citation key is not in the library.
        """
        context = self._context_for(citekey)
        title = self.templates.title.render(context)
        note_title = self._note_title(citekey, title)
        path = self.templates.path.render({"noteTitle": note_title})
        content = self.templates.content.render(context)
        self.logger.debug(f"Synthesized note for '{citekey}': {path}")
        return SynthesizedNote(citekey=citekey, title=title, path=path, content=content)
