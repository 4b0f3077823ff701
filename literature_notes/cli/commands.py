"""Command implementations for the literature notes CLI.

This module contains the command coroutines behind ``command=...`` on the
command line. Commands are called from the main entry point after
configuration validation and library loading, and return a process exit code.
"""

import logging

from literature_notes.domain.config import AppConfig, MissingArgumentError
from literature_notes.domain.exceptions import UnknownCitekeyError
from literature_notes.domain.models import Entry
from literature_notes.orchestration.plugin import LiteratureNotes
from literature_notes.utils.logging import log_completion, log_library_table

TITLE_WIDTH = 50


def _truncate(text: str, width: int = TITLE_WIDTH) -> str:
    return text[:width] + "..." if len(text) > width else text


def _require_citekey(cfg: AppConfig) -> str:
    if not cfg.citekey:
        raise MissingArgumentError(
            f"Command '{cfg.command}' requires a citation key. "
            f"Pass citekey=<key> on the command line."
        )
    return cfg.citekey


def _entry_row(entry: Entry) -> list[str]:
    return [
        entry.id,
        _truncate(entry.author_string),
        "" if entry.year is None else str(entry.year),
        _truncate(entry.title or ""),
    ]


async def titles_command(
    cfg: AppConfig, logger: logging.Logger, notes: LiteratureNotes
) -> int:
    """Preview the note title and path of every entry without creating files.

    Returns:
        Exit code: 0 for success
    """
    rows = [
        [citekey, _truncate(notes.title_for(citekey)), notes.path_for(citekey)]
        for citekey in sorted(notes.library)
    ]
    log_library_table(logger, rows, ["Citekey", "Title", "Path"])
    return 0


async def search_command(
    cfg: AppConfig, logger: logging.Logger, notes: LiteratureNotes
) -> int:
    """List entries matching ``cfg.query``.

    Returns:
        Exit code: 0 for success
    """
    entries = notes.search(cfg.query)
    log_library_table(
        logger,
        [_entry_row(entry) for entry in entries],
        ["Citekey", "Authors", "Year", "Title"],
    )
    return 0


async def show_command(
    cfg: AppConfig, logger: logging.Logger, notes: LiteratureNotes
) -> int:
    """Log the synthesized title, path and content for one citation key.

    Returns:
        Exit code: 0 for success
    """
    citekey = _require_citekey(cfg)
    note = notes.synthesizer.synthesize(citekey)
    logger.info(f"Title:   {note.title}")
    logger.info(f"Path:    {note.path}")
    logger.info(f"Content:\n{note.content}")
    return 0


async def open_command(
    cfg: AppConfig, logger: logging.Logger, notes: LiteratureNotes
) -> int:
    """Get or create the literature note for a citation key and open it.

    Returns:
        Exit code: 0 for success
    """
    citekey = _require_citekey(cfg)
    handle = await notes.open_literature_note(citekey, cfg.new_pane)
    logger.info(f"Literature note: {handle.absolute_path}")
    log_completion(logger)
    return 0


async def insert_command(
    cfg: AppConfig, logger: logging.Logger, notes: LiteratureNotes
) -> int:
    """Get or create the literature note and insert a link to it.

    Returns:
        Exit code: 0 for success
    """
    citekey = _require_citekey(cfg)
    if not cfg.editor.target:
        raise MissingArgumentError(
            "Command 'insert' requires editor.target, the document to insert "
            "the link into."
        )
    await notes.insert_literature_note_link(citekey)
    log_completion(logger)
    return 0


COMMANDS = {
    "titles": titles_command,
    "search": search_command,
    "show": show_command,
    "open": open_command,
    "insert": insert_command,
}


async def run_command(
    cfg: AppConfig, logger: logging.Logger, notes: LiteratureNotes
) -> int:
    """Dispatch ``cfg.command``.

    Returns:
        Exit code: 0 for success, 1 for an unknown citation key or a missing
        command argument
    """
    try:
        return await COMMANDS[cfg.command](cfg, logger, notes)
    except UnknownCitekeyError as e:
        logger.error(f"{e}. Run command=search to find citation keys.")
        return 1
    except MissingArgumentError as e:
        logger.error(str(e))
        return 1
