"""
LiteratureNotes: owner of the library and templates, and the user-facing API.

This module provides the LiteratureNotes class which holds the process-wide
state of the literature notes core (the current Library and the compiled
templates) and exposes the operations a host application binds to commands:
rendering titles/paths/content, getting or creating the note file for a
citation key, opening it, and inserting a link to it at the editor cursor.

State is never mutated in place. Loading a library or compiling templates
builds a new :class:`NoteSynthesizer` snapshot which replaces the previous one
in a single assignment, so every request sees one consistent Library and one
consistent set of templates. A failed reload or reconfiguration raises and
leaves the previous snapshot active.

Example usage:
    >>> notes = LiteratureNotes(cfg, LocalVaultClient(cfg.vault.root))
    >>> await notes.init()
    >>> handle = await notes.get_or_create_literature_note_file("smith2019")
    >>> await notes.open_literature_note("smith2019", new_pane=False)
"""

import logging

from literature_notes.clients.editor_client import EditorClient
from literature_notes.clients.exceptions import EditorError
from literature_notes.clients.storage_client import StorageClient
from literature_notes.domain.config import AppConfig, ConfigMissingError, TemplatesConfig
from literature_notes.domain.library import Library, load_library
from literature_notes.domain.models import Entry, NoteFile
from literature_notes.domain.note_formatter import NoteFormatter
from literature_notes.domain.template_engine import compile_note_templates
from literature_notes.orchestration.materializer import FileMaterializer
from literature_notes.orchestration.synthesizer import NoteSynthesizer
from literature_notes.utils.logging import (
    log_library_loaded,
    log_link_inserted,
    log_note_opened,
)


class LiteratureNotes:
    """Owns the Library and templates and implements the user-facing operations.

    Attributes:
        config: Application configuration.
        storage: Storage collaborator (export reading, note files).
        editor: Optional editor collaborator, required for link insertion.
        materializer: Get-or-create helper for note files.
    """

    def __init__(
        self,
        config: AppConfig,
        storage: StorageClient,
        editor: EditorClient | None = None,
    ) -> None:
        self.config = config
        self.storage = storage
        self.editor = editor
        self.materializer = FileMaterializer(storage)
        self.logger = logging.getLogger(__name__)
        self._synthesizer = NoteSynthesizer(
            Library(),
            compile_note_templates(
                config.templates.title,
                config.templates.path,
                config.templates.content,
            ),
            config.literature_note.title_replacement,
        )

    @property
    def synthesizer(self) -> NoteSynthesizer:
        """Current Library/templates snapshot."""
        return self._synthesizer

    @property
    def library(self) -> Library:
        return self._synthesizer.library

    async def init(self) -> None:
        """Load the configured export.

        A missing export path is reported once as a warning and leaves the
        Library empty; every lookup then fails with UnknownCitekeyError.

        Raises:
            StorageError: If the export file cannot be read.
            LibraryError: If the export cannot be decoded or parsed.
        """
        if not self.config.library.citation_export_path:
            warning = ConfigMissingError(
                "Citation export path is not set. Please update "
                "library.citation_export_path in the configuration."
            )
            self.logger.warning(str(warning))
            return

        await self.reload_library()

    def configure(self, templates: TemplatesConfig) -> None:
        """Recompile the templates from new configuration.

        Raises:
            TemplateSyntaxError: If any template is invalid. The previous
                templates stay active.
        """
        compiled = compile_note_templates(
            templates.title, templates.path, templates.content
        )
        self.config.templates = templates
        self._synthesizer = NoteSynthesizer(
            self._synthesizer.library,
            compiled,
            self.config.literature_note.title_replacement,
        )
        self.logger.debug("Literature note templates recompiled")

    def load_library_buffer(self, buffer: bytes) -> Library:
        """Replace the Library with one decoded from ``buffer``.

        Raises:
            LibraryError: If decoding or parsing fails. The previous Library
                stays active.
        """
        library = load_library(buffer)
        self._synthesizer = NoteSynthesizer(
            library,
            self._synthesizer.templates,
            self._synthesizer.title_replacement,
        )
        return library

    async def reload_library(self) -> Library:
        """Re-read the configured export and replace the Library.

        Raises:
            ConfigMissingError: If no export path is configured.
            StorageError: If the export file cannot be read.
            LibraryError: If the export cannot be decoded or parsed.
        """
        export_path = self.config.library.citation_export_path
        if not export_path:
            raise ConfigMissingError("Citation export path is not set")

        buffer = await self.storage.read_file(export_path)
        library = self.load_library_buffer(buffer)
        log_library_loaded(self.logger, len(library), export_path)
        return library

    def title_for(self, citekey: str) -> str:
        return self._synthesizer.title_for(citekey)

    def path_for(self, citekey: str) -> str:
        return self._synthesizer.path_for(citekey)

    def content_for(self, citekey: str) -> str:
        return self._synthesizer.content_for(citekey)

    def search(self, query: str) -> list[Entry]:
        """Find entries whose citekey, title, authors or year contain ``query``.

        Matching is case-insensitive. An empty query matches every entry.
        Results are ordered by citation key.
        """
        needle = query.strip().lower()
        matches = []
        for entry in self.library.values():
            haystack = " ".join(
                text
                for text in (
                    entry.id,
                    entry.title or "",
                    entry.author_string,
                    "" if entry.year is None else str(entry.year),
                )
                if text
            ).lower()
            if needle in haystack:
                matches.append(entry)
        return sorted(matches, key=lambda entry: entry.id)

    async def get_or_create_literature_note_file(self, citekey: str) -> NoteFile:
        """Return the literature note file for ``citekey``, creating it if needed.

        New notes are empty unless ``literature_note.seed_content`` is enabled,
        in which case they start with the rendered content template.

        Raises:
            UnknownCitekeyError: If the citation key is not in the library.
            StorageError: Propagated from the storage collaborator.
        """
        return await self._materialize(self._synthesizer, citekey)

    async def _materialize(self, synthesizer: NoteSynthesizer, citekey: str) -> NoteFile:
        note = synthesizer.synthesize(citekey)
        content = note.content if self.config.literature_note.seed_content else ""
        return await self.materializer.get_or_create(note.path, content)

    async def open_literature_note(self, citekey: str, new_pane: bool) -> NoteFile:
        """Get or create the note for ``citekey`` and open it."""
        handle = await self.get_or_create_literature_note_file(citekey)
        await self.storage.open_file(handle, new_pane)
        log_note_opened(self.logger, handle.path)
        return handle

    async def insert_literature_note_link(self, citekey: str) -> str:
        """Get or create the note for ``citekey`` and insert a link to it.

        The link ``[[noteTitle]]`` is inserted at the editor cursor.

        Returns:
            The inserted link text.

        Raises:
            EditorError: If no editor is available or insertion fails.
            UnknownCitekeyError: If the citation key is not in the library.
        """
        if self.editor is None:
            raise EditorError("No editor available to insert a link into")

        synthesizer = self._synthesizer
        await self._materialize(synthesizer, citekey)
        link = NoteFormatter.format_link(synthesizer.note_title_for(citekey))
        position = await self.editor.get_cursor_position()
        await self.editor.insert_text(link, position)
        log_link_inserted(self.logger, link)
        return link
