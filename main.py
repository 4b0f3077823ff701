"""Main entry point for the literature notes CLI."""

import asyncio
import logging
import sys

import hydra
from omegaconf import DictConfig

from literature_notes.cli.commands import run_command
from literature_notes.clients.editor_client import FileEditorClient
from literature_notes.clients.exceptions import EditorError, StorageError
from literature_notes.clients.vault_client import LocalVaultClient
from literature_notes.domain.config import (
    AppConfig,
    ConfigError,
    EditorConfig,
    LibraryConfig,
    LiteratureNoteConfig,
    TemplatesConfig,
    VaultConfig,
    register_configs,
)
from literature_notes.domain.exceptions import LibraryError, TemplateSyntaxError
from literature_notes.orchestration.plugin import LiteratureNotes
from literature_notes.utils.logging import log_error, log_startup, setup_logging

# Structured configs must be in the ConfigStore before Hydra composes conf/
register_configs()


def build_app_config(cfg: DictConfig) -> AppConfig:
    """Convert the composed Hydra configuration into a validated AppConfig.

    Args:
        cfg: Hydra configuration object

    Returns:
        Application configuration object

    Raises:
        ConfigError: If any configuration group fails validation.
    """
    return AppConfig(
        library=LibraryConfig(**cfg.library),
        templates=TemplatesConfig(**cfg.templates),
        vault=VaultConfig(**cfg.vault),
        literature_note=LiteratureNoteConfig(**cfg.literature_note),
        editor=EditorConfig(**cfg.editor),
        command=cfg.command,
        citekey=cfg.citekey,
        query=cfg.query,
        new_pane=cfg.new_pane,
    )


def initialize_notes(cfg: AppConfig, logger: logging.Logger) -> LiteratureNotes:
    """Create the storage and editor collaborators and the LiteratureNotes core.

    Args:
        cfg: Application configuration object
        logger: Logger instance

    Returns:
        LiteratureNotes instance with compiled templates and an empty Library
    """
    storage = LocalVaultClient(cfg.vault.root, launch=cfg.vault.launch)
    logger.info(f"Vault: {storage.root}")

    editor = None
    if cfg.editor.target:
        editor = FileEditorClient(cfg.editor.target, cfg.editor.line, cfg.editor.column)

    return LiteratureNotes(cfg, storage, editor)


async def run(cfg: AppConfig, logger: logging.Logger) -> int:
    """Load the library and execute the configured command."""
    notes = initialize_notes(cfg, logger)
    await notes.init()
    return await run_command(cfg, logger, notes)


@hydra.main(version_base=None, config_path="conf", config_name="config")
def main(cfg: DictConfig) -> int:
    """Main entry point for the CLI.

    Args:
        cfg: Hydra configuration object

    Returns:
        Exit code: 0 for success, 1 for an unknown citation key or a missing
        command argument, 3 for configuration, template, library or I/O
        failures
    """
    logger = setup_logging()

    try:
        app_cfg = build_app_config(cfg)
        log_startup(logger, f"Literature notes: {app_cfg.command}")
        return asyncio.run(run(app_cfg, logger))

    except (ConfigError, TemplateSyntaxError) as e:
        logger.error(f"Configuration error: {e}")
        return 3
    except LibraryError as e:
        logger.error(f"Could not load citation export: {e}")
        return 3
    except (StorageError, EditorError) as e:
        log_error(logger, e, {"citekey": cfg.get("citekey"), "step": cfg.get("command")})
        return 3
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        return 3


if __name__ == "__main__":
    sys.exit(main())  # type: ignore[call-arg]
