"""
Configuration dataclasses for the literature notes pipeline.

This module defines type-safe configuration schemas using Python dataclasses.
These schemas are registered with Hydra to enable validation and IDE autocomplete
support for configuration values.
"""

from dataclasses import dataclass, field
from typing import Optional

from hydra.core.config_store import ConfigStore

FORBIDDEN_FILENAME_CHARACTERS = '\\/:*?"<>|'
"""Characters that cannot appear in a file name on at least one common file
system (Windows being the strictest)."""

ALLOWED_COMMANDS = frozenset({"titles", "search", "show", "open", "insert"})


class ConfigError(Exception):
    """Configuration error for the literature notes pipeline.

    Raised when configuration values are invalid or inconsistent. Using a
    dedicated exception type makes it easier to distinguish configuration
    problems from other runtime errors.
    """


class ConfigMissingError(ConfigError):
    """Raised when no citation export path is configured.

    This condition does not block startup: it is reported once as a warning
    and the Library stays empty.
    """


class MissingArgumentError(ConfigError):
    """Raised when a command is invoked without an argument it requires,
    such as ``citekey`` for ``open``. Reported as a usage error (exit 1).
    """


@dataclass
class LibraryConfig:
    """Location of the bibliographic export consumed by the Library Index."""

    citation_export_path: Optional[str] = None
    """Path to the CSL-JSON export written by the reference manager (e.g.
    Better BibTeX "Keep updated" export). When unset, library loading is
    disabled and a warning is logged."""


@dataclass
class TemplatesConfig:
    """Template sources for the three stages of note synthesis.

    The title and content templates receive the entry context (citekey,
    authors, authorString, year, title, ...). The path template receives only
    ``noteTitle``, the sanitized output of the title template.
    """

    title: str = "@{{citekey}}"
    """Literature note title template."""

    path: str = "Reading notes/{{noteTitle}}.md"
    """Literature note path template, relative to the vault root."""

    content: str = (
        "---\n"
        "title: {{title}}\n"
        "authors: {{authorString}}\n"
        "year: {{year}}\n"
        "---\n\n"
    )
    """Initial content template for newly created literature notes."""


@dataclass
class VaultConfig:
    """Notes vault in which literature notes are materialized."""

    root: str = "."
    """Vault root directory. Note paths are resolved relative to it."""

    launch: bool = False
    """Whether opening a note starts the platform's default program for it.
    When False, opening only logs the note's location."""

    def __post_init__(self) -> None:
        """Validate that the vault root is not empty."""
        if not self.root or not self.root.strip():
            raise ConfigError(
                "vault.root is required and cannot be empty. "
                "Specify the directory that holds your notes."
            )


@dataclass
class LiteratureNoteConfig:
    """Behavior of literature note creation."""

    seed_content: bool = False
    """Whether newly created notes are filled with the content template.
    When False (default), new notes are created empty."""

    title_replacement: str = "_"
    """Replacement for characters in note titles that are not allowed in
    file names, applied before the title is used in the path template."""

    def __post_init__(self) -> None:
        """Validate that the replacement is itself a legal file name fragment."""
        if any(ch in FORBIDDEN_FILENAME_CHARACTERS for ch in self.title_replacement):
            raise ConfigError(
                f"title_replacement '{self.title_replacement}' contains characters "
                f"that are not allowed in file names ({FORBIDDEN_FILENAME_CHARACTERS})"
            )
        if any(ord(ch) < 32 for ch in self.title_replacement):
            raise ConfigError("title_replacement cannot contain control characters")


@dataclass
class EditorConfig:
    """Markdown document that receives inserted literature note links."""

    target: Optional[str] = None
    """Path of the document to edit. Required by the ``insert`` command."""

    line: Optional[int] = None
    """0-indexed cursor line. Defaults to the end of the document."""

    column: Optional[int] = None
    """0-indexed cursor column. Defaults to the end of the cursor line."""


@dataclass
class AppConfig:
    """Top-level application configuration.

    Combines all configuration groups into a single type-safe configuration
    object. This is the configuration class that Hydra will instantiate and
    pass to the main function.
    """

    library: LibraryConfig = field(default_factory=LibraryConfig)
    """Bibliographic export configuration."""

    templates: TemplatesConfig = field(default_factory=TemplatesConfig)
    """Note template configuration."""

    vault: VaultConfig = field(default_factory=VaultConfig)
    """Notes vault configuration."""

    literature_note: LiteratureNoteConfig = field(default_factory=LiteratureNoteConfig)
    """Note creation behavior."""

    editor: EditorConfig = field(default_factory=EditorConfig)
    """Link insertion target."""

    command: str = "titles"
    """CLI command. Options: 'titles', 'search', 'show', 'open', 'insert'"""

    citekey: Optional[str] = None
    """Citation key for 'show', 'open' and 'insert'."""

    query: str = ""
    """Search text for 'search'."""

    new_pane: bool = False
    """Whether 'open' should open the note in a new pane."""

    def __post_init__(self) -> None:
        """Validate the command name."""
        if self.command not in ALLOWED_COMMANDS:
            raise ConfigError(
                f"Unknown command '{self.command}'. "
                f"Choose one of: {', '.join(sorted(ALLOWED_COMMANDS))}"
            )


def register_configs() -> None:
    """Register structured configs with Hydra.

    This function must be called before Hydra initializes to enable type-safe
    configuration validation and IDE autocomplete support.
    """
    cs = ConfigStore.instance()

    # Register config groups with names matching YAML defaults
    cs.store(group="library", name="default", node=LibraryConfig)
    cs.store(group="templates", name="default", node=TemplatesConfig)
    cs.store(group="vault", name="default", node=VaultConfig)
    cs.store(group="literature_note", name="default", node=LiteratureNoteConfig)
    cs.store(group="editor", name="default", node=EditorConfig)

    # Register top-level config
    cs.store(name="base_config", node=AppConfig)
