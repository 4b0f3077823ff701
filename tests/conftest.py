from __future__ import annotations

import asyncio
import json
from pathlib import Path

import pytest

from literature_notes.clients.editor_client import CursorPosition, EditorClient
from literature_notes.clients.exceptions import NoteExistsError, StorageError
from literature_notes.clients.storage_client import StorageClient
from literature_notes.domain.config import (
    AppConfig,
    LibraryConfig,
    LiteratureNoteConfig,
    TemplatesConfig,
)
from literature_notes.domain.models import NoteFile

EXPORT_PATH = "export.json"

SMITH = {
    "id": "smith2019",
    "type": "article-journal",
    "title": "Reading Notes at Scale",
    "container-title": "Journal of Note Taking",
    "author": [{"given": "Jane", "family": "Smith"}],
    "issued": {"date-parts": [[2019, 4]]},
    "DOI": "10.1000/notes.2019",
}

DOE = {
    "id": "doe2020",
    "title": "A Study of Citations",
    "author": [
        {"given": "John", "family": "Doe"},
        {"given": "Mary Ann", "family": "Roe"},
    ],
    "issued": {"date-parts": [[2020]]},
}


def make_export(records: list) -> bytes:
    return json.dumps(records).encode("utf-8")


class FakeStorage(StorageClient):
    """In-memory vault. Yields to the event loop on every call."""

    def __init__(self) -> None:
        self.files: dict[str, str] = {}
        self.exports: dict[str, bytes] = {}
        self.create_calls = 0
        self.opened: list[tuple[str, bool]] = []

    def _handle(self, path: str) -> NoteFile:
        return NoteFile(path=path, absolute_path=Path("/vault") / path)

    async def read_file(self, path: str) -> bytes:
        await asyncio.sleep(0)
        if path not in self.exports:
            raise StorageError(f"No such file: {path}")
        return self.exports[path]

    async def file_exists_at(self, path: str) -> bool:
        await asyncio.sleep(0)
        return path in self.files

    async def get_file(self, path: str) -> NoteFile:
        await asyncio.sleep(0)
        if path not in self.files:
            raise StorageError(f"No note at {path}")
        return self._handle(path)

    async def create_file(self, path: str, content: str) -> NoteFile:
        self.create_calls += 1
        await asyncio.sleep(0)
        if path in self.files:
            raise NoteExistsError(f"Note already exists: {path}")
        self.files[path] = content
        return self._handle(path)

    async def open_file(self, handle: NoteFile, new_pane: bool) -> None:
        self.opened.append((handle.path, new_pane))


class FakeEditor(EditorClient):
    def __init__(self) -> None:
        self.cursor = CursorPosition(line=3, ch=7)
        self.inserted: list[tuple[str, CursorPosition]] = []

    async def get_cursor_position(self) -> CursorPosition:
        return self.cursor

    async def insert_text(self, text: str, position: CursorPosition) -> None:
        self.inserted.append((text, position))


@pytest.fixture
def storage() -> FakeStorage:
    fake = FakeStorage()
    fake.exports[EXPORT_PATH] = make_export([SMITH, DOE])
    return fake


@pytest.fixture
def editor() -> FakeEditor:
    return FakeEditor()


@pytest.fixture
def app_config() -> AppConfig:
    return AppConfig(
        library=LibraryConfig(citation_export_path=EXPORT_PATH),
        templates=TemplatesConfig(
            title="{{authorString}} ({{year}})",
            path="Literature/{{noteTitle}}.md",
            content="# {{title}}\n\n{{citekey}}\n",
        ),
        literature_note=LiteratureNoteConfig(),
    )
