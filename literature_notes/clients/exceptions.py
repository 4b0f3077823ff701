"""
Custom exception classes for collaborator operations (storage and editor).

This module defines exceptions that provide clear error context for file
system and editor interactions, making error handling and debugging easier in
the orchestration layer. Errors from these collaborators are propagated
unchanged to the caller.

Exception Hierarchy:
- StorageError (base for all storage collaborator errors)
  ├── UnsafePathError
  ├── NoteExistsError
  └── StorageIOError
- EditorError
"""


class StorageError(Exception):
    """Base exception for all storage collaborator errors.

    All storage-related exceptions inherit from this class, allowing for
    broad exception catching when needed while maintaining specific error types
    for precise error handling.
    """

    def __init__(self, message: str, original_exception: Exception | None = None):
        """Initialize the exception.

        Args:
            message: Human-readable error message describing what went wrong.
            original_exception: Optional original exception that caused this error.
        """
        super().__init__(message)
        self.message = message
        self.original_exception = original_exception

    def __str__(self) -> str:
        """Return string representation with context."""
        if self.original_exception:
            orig_type = type(self.original_exception).__name__
            orig_msg = str(self.original_exception)
            return f"{self.message} (Original: {orig_type}: {orig_msg})"
        return self.message


class UnsafePathError(StorageError):
    """Exception raised for note paths that would leave the vault.

    Raised for absolute paths, paths that escape the vault root through
    ``..`` segments, and empty paths.
    """

    pass


class NoteExistsError(StorageError):
    """Exception raised when creating a file that already exists.

    The file materializer checks existence before creating, so this only
    surfaces when another process creates the file in between.
    """

    pass


class StorageIOError(StorageError):
    """Exception raised for underlying file system failures (permissions,
    missing export file, disk errors)."""

    pass


class EditorError(Exception):
    """Exception raised when the editor collaborator cannot insert text."""

    def __init__(self, message: str, original_exception: Exception | None = None):
        super().__init__(message)
        self.message = message
        self.original_exception = original_exception

    def __str__(self) -> str:
        if self.original_exception:
            orig_type = type(self.original_exception).__name__
            orig_msg = str(self.original_exception)
            return f"{self.message} (Original: {orig_type}: {orig_msg})"
        return self.message
