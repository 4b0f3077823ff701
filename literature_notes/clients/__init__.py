"""Collaborator clients (storage, editor).

This module provides the abstract interfaces the core needs from its host
environment, a local file system implementation of each, and the custom
exception classes for their failures.
"""

from .editor_client import CursorPosition, EditorClient, FileEditorClient
from .exceptions import (
    EditorError,
    NoteExistsError,
    StorageError,
    StorageIOError,
    UnsafePathError,
)
from .storage_client import StorageClient
from .vault_client import LocalVaultClient

__all__ = [
    "CursorPosition",
    "EditorClient",
    "FileEditorClient",
    "StorageClient",
    "LocalVaultClient",
    "StorageError",
    "UnsafePathError",
    "NoteExistsError",
    "StorageIOError",
    "EditorError",
]
