"""
Local file system implementation of the storage collaborator.

LocalVaultClient treats a directory as a notes vault (as Obsidian does):
note paths are resolved relative to the vault root and are refused when they
would resolve outside of it. Blocking file calls are run in worker threads
with :func:`asyncio.to_thread` so callers can await them without stalling
the event loop.

There is no editor pane to open a note in. With ``launch`` enabled the note
is handed to the platform's default program for Markdown files; otherwise
opening only reports where the note is.
"""

import asyncio
import logging
import os
from pathlib import Path, PurePosixPath, PureWindowsPath
import subprocess
import sys

from literature_notes.clients.exceptions import (
    NoteExistsError,
    StorageError,
    StorageIOError,
    UnsafePathError,
)
from literature_notes.clients.storage_client import StorageClient
from literature_notes.domain.models import NoteFile


class LocalVaultClient(StorageClient):
    """Storage backend for a vault directory on the local file system.

    Args:
        root: Vault root directory. Created on first note creation if missing.
        launch: Whether :meth:`open_file` starts the default program for the
            note. When False it only logs the note's location.
    """

    def __init__(self, root: str | Path, launch: bool = False) -> None:
        self.root = Path(root).expanduser().resolve()
        self.launch = launch
        self.logger = logging.getLogger(__name__)

    def resolve(self, path: str) -> NoteFile:
        """Resolve a vault-relative note path to a handle.

        Args:
            path: Vault-relative path.

        Returns:
            NoteFile with the normalized relative path and its absolute location.

        Raises:
            UnsafePathError: If the path is empty, absolute, or escapes the vault.
        """
        if not path or not path.strip():
            raise UnsafePathError("Note path is empty")
        if PurePosixPath(path).is_absolute() or PureWindowsPath(path).is_absolute():
            raise UnsafePathError(f"Note path must be relative to the vault: {path!r}")
        if PureWindowsPath(path).drive:
            raise UnsafePathError(f"Note path must not name a drive: {path!r}")

        absolute_path = (self.root / path).resolve()
        if absolute_path == self.root or not absolute_path.is_relative_to(self.root):
            raise UnsafePathError(f"Note path escapes the vault: {path!r}")

        relative = absolute_path.relative_to(self.root).as_posix()
        return NoteFile(path=relative, absolute_path=absolute_path)

    async def read_file(self, path: str) -> bytes:
        file_path = Path(path).expanduser()
        try:
            return await asyncio.to_thread(file_path.read_bytes)
        except OSError as e:
            raise StorageIOError(f"Failed to read {file_path}", e) from e

    async def file_exists_at(self, path: str) -> bool:
        handle = self.resolve(path)
        return await asyncio.to_thread(handle.absolute_path.is_file)

    async def get_file(self, path: str) -> NoteFile:
        handle = self.resolve(path)
        if not await asyncio.to_thread(handle.absolute_path.is_file):
            raise StorageError(f"No note at {handle.path!r}")
        return handle

    async def create_file(self, path: str, content: str) -> NoteFile:
        handle = self.resolve(path)
        await asyncio.to_thread(self._write_new, handle.absolute_path, content)
        self.logger.debug(f"Created note file: {handle.absolute_path}")
        return handle

    async def open_file(self, handle: NoteFile, new_pane: bool) -> None:
        """Open a note with the default program, or report its location.

        ``new_pane`` has no effect on an external program and is only logged.

        Raises:
            StorageIOError: If the default program cannot be started.
        """
        pane = "new pane" if new_pane else "active pane"
        if not self.launch:
            self.logger.info(f"Note {handle.path} is at {handle.absolute_path}")
            return

        self.logger.info(f"Opening {handle.path} in {pane}")
        try:
            await asyncio.to_thread(self._launch, handle.absolute_path)
        except OSError as e:
            raise StorageIOError(f"Failed to open {handle.absolute_path}", e) from e

    @staticmethod
    def _launch(absolute_path: Path) -> None:
        if sys.platform == "win32":
            os.startfile(absolute_path)  # type: ignore[attr-defined]
        elif sys.platform == "darwin":
            subprocess.Popen(["open", str(absolute_path)])
        else:
            subprocess.Popen(["xdg-open", str(absolute_path)])

    @staticmethod
    def _write_new(absolute_path: Path, content: str) -> None:
        try:
            absolute_path.parent.mkdir(parents=True, exist_ok=True)
            # "x" mode fails instead of truncating a note created concurrently
            with absolute_path.open("x", encoding="utf-8") as f:
                f.write(content)
        except FileExistsError as e:
            raise NoteExistsError(f"Note already exists: {absolute_path}", e) from e
        except OSError as e:
            raise StorageIOError(f"Failed to create {absolute_path}", e) from e
