"""
Domain exceptions for the literature notes pipeline.

These exceptions cover failures of the pure data-transformation layer:
decoding the bibliographic export, compiling note templates, and looking up
citation keys. Storage failures live in ``literature_notes.clients.exceptions``.

Exception Hierarchy:
- LibraryError (base for export loading failures)
  ├── DecodeError
  └── ParseError
- TemplateSyntaxError
- UnknownCitekeyError
"""


class LibraryError(Exception):
    """Base exception for failures while building a Library from an export.

    A LibraryError always invalidates the whole reload attempt. The previously
    active Library, if any, stays in place.
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


class DecodeError(LibraryError):
    """Exception raised when the export bytes are not valid UTF-8."""

    pass


class ParseError(LibraryError):
    """Exception raised when the decoded export is not a JSON array of records.

    Raised for malformed JSON, for a top-level value that is not an array, and
    for array elements that are not objects carrying a citation key in ``id``.
    """

    pass


class TemplateSyntaxError(Exception):
    """Exception raised when a note template uses unsupported syntax.

    Raised at compile time, before any note is synthesized, so that a bad
    template configuration is reported as soon as it is loaded.
    """

    def __init__(self, message: str, source: str = "", position: int | None = None):
        """Initialize the exception.

        Args:
            message: Human-readable error message describing what went wrong.
            source: The template source that failed to compile.
            position: Character offset of the offending tag, if known.
        """
        super().__init__(message)
        self.message = message
        self.source = source
        self.position = position

    def __str__(self) -> str:
        """Return string representation with the offending position."""
        if self.position is None:
            return self.message
        return f"{self.message} (at offset {self.position})"


class UnknownCitekeyError(LookupError):
    """Exception raised when a citation key is not present in the Library."""

    def __init__(self, citekey: str):
        super().__init__(citekey)
        self.citekey = citekey

    def __str__(self) -> str:
        return f"Unknown citation key: {self.citekey!r}"
