"""
Editor collaborator: cursor access and text insertion.

The core only needs two editor capabilities to insert a link to a literature
note: reading the cursor position and inserting text at a position.
FileEditorClient implements them against a Markdown document on disk, with
the cursor given by configuration.
"""

from abc import ABC, abstractmethod
import asyncio
from dataclasses import dataclass
import logging
from pathlib import Path

from literature_notes.clients.exceptions import EditorError


@dataclass(frozen=True)
class CursorPosition:
    """0-indexed line and column (character) position in a document."""

    line: int
    ch: int


class EditorClient(ABC):
    """Abstract base class for editors that can receive inserted text."""

    @abstractmethod
    async def get_cursor_position(self) -> CursorPosition:
        """Return the current cursor position."""
        pass

    @abstractmethod
    async def insert_text(self, text: str, position: CursorPosition) -> None:
        """Insert ``text`` at ``position``.

        Raises:
            EditorError: If the position is outside the document or the
                document cannot be written.
        """
        pass


class FileEditorClient(EditorClient):
    """Editor over a Markdown file on disk.

    Args:
        path: Document to edit. Must exist.
        line: Cursor line; defaults to the last line of the document.
        column: Cursor column; defaults to the end of the cursor line.
    """

    def __init__(
        self, path: str | Path, line: int | None = None, column: int | None = None
    ) -> None:
        self.path = Path(path).expanduser()
        self.line = line
        self.column = column
        self.logger = logging.getLogger(__name__)

    def _read_lines(self) -> list[str]:
        try:
            return self.path.read_text(encoding="utf-8").split("\n")
        except OSError as e:
            raise EditorError(f"Failed to read {self.path}", e) from e

    async def get_cursor_position(self) -> CursorPosition:
        lines = await asyncio.to_thread(self._read_lines)
        line = len(lines) - 1 if self.line is None else self.line
        if not 0 <= line < len(lines):
            raise EditorError(
                f"Cursor line {line} is outside {self.path} ({len(lines)} lines)"
            )
        ch = len(lines[line]) if self.column is None else self.column
        return CursorPosition(line=line, ch=ch)

    async def insert_text(self, text: str, position: CursorPosition) -> None:
        await asyncio.to_thread(self._insert, text, position)
        self.logger.debug(
            f"Inserted {len(text)} characters into {self.path} "
            f"at {position.line}:{position.ch}"
        )

    def _insert(self, text: str, position: CursorPosition) -> None:
        lines = self._read_lines()
        if not 0 <= position.line < len(lines):
            raise EditorError(f"Cursor line {position.line} is outside {self.path}")
        if not 0 <= position.ch <= len(lines[position.line]):
            raise EditorError(
                f"Cursor column {position.ch} is outside line {position.line} "
                f"of {self.path}"
            )

        current = lines[position.line]
        lines[position.line] = current[: position.ch] + text + current[position.ch :]
        try:
            self.path.write_text("\n".join(lines), encoding="utf-8")
        except OSError as e:
            raise EditorError(f"Failed to write {self.path}", e) from e
