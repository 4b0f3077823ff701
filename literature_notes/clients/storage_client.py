"""
Abstract base class for storage collaborator implementations.

This module defines the interface the literature notes core needs from the
host storage layer: reading the bibliographic export, checking whether a note
exists, creating notes and opening them for the user. All operations are
coroutines; implementations suspend on file system I/O instead of blocking
the event loop.

Example workflow:
    # 1. buffer = await storage.read_file(export_path)
    # 2. if await storage.file_exists_at(path): handle = await storage.get_file(path)
    # 3. else: handle = await storage.create_file(path, "")
    # 4. await storage.open_file(handle, new_pane=False)
"""

from abc import ABC, abstractmethod

from ..domain.models import NoteFile


class StorageClient(ABC):
    """Abstract base class for note storage backends.

    Note paths are vault-relative strings using forward slashes. The export
    path given to :meth:`read_file` is a regular file system path and may
    point outside the vault.
    """

    @abstractmethod
    async def read_file(self, path: str) -> bytes:
        """Read a file's raw bytes.

        Args:
            path: File system path (absolute, or relative to the working
                directory).

        Returns:
            File content as bytes.

        Raises:
            StorageError: If the file cannot be read.
        """
        pass

    @abstractmethod
    async def file_exists_at(self, path: str) -> bool:
        """Return whether a note exists at the vault-relative ``path``.

        Raises:
            UnsafePathError: If ``path`` would resolve outside the vault.
        """
        pass

    @abstractmethod
    async def get_file(self, path: str) -> NoteFile:
        """Return the handle of an existing note.

        Raises:
            StorageError: If no note exists at ``path``.
        """
        pass

    @abstractmethod
    async def create_file(self, path: str, content: str) -> NoteFile:
        """Create a new note with the given content.

        Missing parent folders are created.

        Args:
            path: Vault-relative note path.
            content: Initial note content.

        Returns:
            Handle of the created note.

        Raises:
            NoteExistsError: If a file already exists at ``path``.
            StorageError: For any other failure.
        """
        pass

    @abstractmethod
    async def open_file(self, handle: NoteFile, new_pane: bool) -> None:
        """Open a note for the user.

        Args:
            handle: Note to open.
            new_pane: Whether to open in a new pane instead of the active one.
        """
        pass
