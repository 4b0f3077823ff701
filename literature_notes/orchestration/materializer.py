"""
File Materializer: get-or-create for literature note files.

FileMaterializer turns a synthesized note path into a file handle. An
existing file is returned unchanged, so user edits to a literature note
survive repeated invocations. A missing file is created exactly once: the
existence check and the creation for one path run under a per-path
:class:`asyncio.Lock`, so concurrent requests for the same destination are
serialized and only the first creates the file.
"""

import asyncio
import logging
import posixpath

from literature_notes.clients.exceptions import NoteExistsError
from literature_notes.clients.storage_client import StorageClient
from literature_notes.domain.models import NoteFile
from literature_notes.utils.logging import log_note_created, log_note_existing


class FileMaterializer:
    """Idempotent note file creation on top of a storage collaborator.

    Attributes:
        storage: Storage backend used for existence checks and creation.
    """

    def __init__(self, storage: StorageClient) -> None:
        self.storage = storage
        self.logger = logging.getLogger(__name__)
        self._locks: dict[str, asyncio.Lock] = {}
        self._lock_users: dict[str, int] = {}

    async def get_or_create(self, path: str, content: str = "") -> NoteFile:
        """Return the note at ``path``, creating it if it does not exist.

        Args:
            path: Vault-relative note path.
            content: Content for a newly created note. Ignored when the note
                already exists.

        Returns:
            Handle of the existing or newly created note.

        Raises:
            StorageError: Propagated unchanged from the storage collaborator.
        """
        key = posixpath.normpath(path)
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._lock_users[key] = self._lock_users.get(key, 0) + 1
        try:
            async with lock:
                return await self._get_or_create_locked(path, content)
        finally:
            self._lock_users[key] -= 1
            if self._lock_users[key] == 0:
                del self._lock_users[key]
                del self._locks[key]

    async def _get_or_create_locked(self, path: str, content: str) -> NoteFile:
        if await self.storage.file_exists_at(path):
            handle = await self.storage.get_file(path)
            log_note_existing(self.logger, handle.path)
            return handle

        try:
            handle = await self.storage.create_file(path, content)
        except NoteExistsError:
            # created outside this process between the check and the create
            handle = await self.storage.get_file(path)
            log_note_existing(self.logger, handle.path)
            return handle

        log_note_created(self.logger, handle.path)
        return handle
