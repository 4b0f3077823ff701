"""Logging utilities for the literature notes pipeline.

This module provides structured logging functions that integrate with Hydra's
logging system and support unicode/emoji for user-friendly terminal output.
"""

import logging
import os
import sys

from tabulate import tabulate


def _supports_unicode() -> bool:
    """Detect if terminal supports unicode/emoji.

    Checks system encoding and environment variables to determine if the
    terminal can display unicode characters and emoji.

    Returns:
        True if terminal supports unicode, False otherwise
    """
    # Check for explicit ASCII-only mode
    if os.environ.get("FORCE_ASCII") == "1":
        return False

    encoding = getattr(sys.stdout, "encoding", None)
    if encoding is None:
        return False

    unicode_encodings = {"utf-8", "utf-16", "utf-32", "utf-8-sig"}
    return encoding.lower() in unicode_encodings


def _format_with_emoji(message: str, emoji: str, fallback: str) -> str:
    """Format message with emoji or fallback text.

    Args:
        message: The message text to format
        emoji: Unicode emoji character to prepend
        fallback: ASCII fallback text to use if unicode not supported

    Returns:
        Formatted message with emoji or fallback
    """
    if _supports_unicode():
        return f"{emoji} {message}"
    else:
        return f"{fallback} {message}"


def setup_logging() -> logging.Logger:
    """Return the application logger.

    Hydra configures handlers and formatting when ``@hydra.main()`` is used,
    so this function only hands out the logger used by the CLI layer.

    Returns:
        Configured logger instance ready for use
    """
    return logging.getLogger("literature_notes")


def log_startup(logger: logging.Logger, message: str) -> None:
    """Log startup message.

    Example:
        >>> log_startup(logger, "Literature notes")
        # Output: "🚀 Literature notes" or "[START] Literature notes"
    """
    logger.info(_format_with_emoji(message, "🚀", "[START]"))


def log_library_loaded(logger: logging.Logger, entry_count: int, path: str) -> None:
    """Log a successful library (re)load.

    Args:
        logger: Logger instance to use for logging
        entry_count: Number of entries in the new Library
        path: Export file the Library was read from

    Example:
        >>> log_library_loaded(logger, 120, "library.json")
        # Output: "📚 Loaded 120 entries from library.json"
    """
    message = f"Loaded {entry_count} entries from {path}"
    logger.info(_format_with_emoji(message, "📚", "[LIBRARY]"))


def log_note_created(logger: logging.Logger, path: str) -> None:
    """Log creation of a new literature note file."""
    logger.info(_format_with_emoji(f"Created note: {path}", "📝", "[NOTE]"))


def log_note_existing(logger: logging.Logger, path: str) -> None:
    """Log reuse of an existing literature note file."""
    logger.debug(_format_with_emoji(f"Using existing note: {path}", "📄", "[NOTE]"))


def log_note_opened(logger: logging.Logger, path: str) -> None:
    """Log that a literature note was handed to the editor to open."""
    logger.info(_format_with_emoji(f"Opened note: {path}", "📖", "[OPEN]"))


def log_link_inserted(logger: logging.Logger, link: str) -> None:
    """Log insertion of a literature note link."""
    logger.info(_format_with_emoji(f"Inserted link: {link}", "🔗", "[LINK]"))


def log_error(logger: logging.Logger, error: Exception, context: dict) -> None:
    """Log an error with structured context information.

    Formats a detailed error message including the exception details and
    relevant context (citekey, step) for debugging.

    Args:
        logger: Logger instance to use for logging
        error: Exception that was raised
        context: Dictionary containing context information such as:
            - citekey: Citation key being processed
            - step: Operation where the error occurred

    Example:
        >>> log_error(logger, KeyError("x"), {"citekey": "doe2020", "step": "open"})
        # Output: "❌ Error processing doe2020\\n   Step: open\\n   Error: KeyError: 'x'"
    """
    citekey = context.get("citekey", "Unknown")
    step = context.get("step", "Unknown")
    error_type = type(error).__name__

    if _supports_unicode():
        header = f"❌ Error processing {citekey}"
    else:
        header = f"[ERROR] Error processing {citekey}"

    logger.error(f"{header}\n   Step: {step}\n   Error: {error_type}: {error}")


def log_library_table(
    logger: logging.Logger, rows: list[list[str]], headers: list[str]
) -> None:
    """Log a table of library entries.

    Args:
        logger: Logger instance to use for logging
        rows: Table rows
        headers: Column headers
    """
    if not rows:
        logger.info("No matching entries")
        return

    tablefmt = "grid" if _supports_unicode() else "simple"
    logger.info("\n" + tabulate(rows, headers=headers, tablefmt=tablefmt))
    logger.info(f"Total: {len(rows)} entries")


def log_completion(logger: logging.Logger) -> None:
    """Log command completion."""
    logger.info(_format_with_emoji("Done", "✅", "[DONE]"))
