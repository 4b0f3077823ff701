from __future__ import annotations

from hydra import compose, initialize
import pytest

import main
from literature_notes.domain.config import (
    AppConfig,
    ConfigError,
    LiteratureNoteConfig,
    VaultConfig,
)


def _compose(overrides: list[str] | None = None):
    with initialize(version_base=None, config_path="../conf"):
        return compose(config_name="config", overrides=overrides or [])


def test_default_configuration_is_valid() -> None:
    cfg = main.build_app_config(_compose())

    assert cfg.command == "titles"
    assert cfg.library.citation_export_path is None
    assert cfg.templates.title == "@{{citekey}}"
    assert cfg.templates.path == "Reading notes/{{noteTitle}}.md"
    assert cfg.templates.content.startswith("---\ntitle: {{title}}\n")
    assert cfg.literature_note.seed_content is False
    assert cfg.editor.target is None
    assert cfg.vault.launch is False


def test_command_line_overrides() -> None:
    cfg = main.build_app_config(
        _compose(
            [
                "command=open",
                "citekey=smith2019",
                "new_pane=true",
                "library.citation_export_path=library.json",
                "literature_note.seed_content=true",
                "vault.root=notes",
                "vault.launch=true",
            ]
        )
    )

    assert cfg.command == "open"
    assert cfg.citekey == "smith2019"
    assert cfg.new_pane is True
    assert cfg.library.citation_export_path == "library.json"
    assert cfg.literature_note.seed_content is True
    assert cfg.vault.root == "notes"
    assert cfg.vault.launch is True


def test_unknown_command_is_rejected() -> None:
    with pytest.raises(ConfigError, match="Unknown command 'bogus'"):
        main.build_app_config(_compose(["command=bogus"]))


def test_empty_vault_root_is_rejected() -> None:
    with pytest.raises(ConfigError):
        VaultConfig(root="  ")


@pytest.mark.parametrize("replacement", ["/", "a:b", "\n"])
def test_unsafe_title_replacement_is_rejected(replacement: str) -> None:
    with pytest.raises(ConfigError):
        LiteratureNoteConfig(title_replacement=replacement)


def test_empty_title_replacement_is_allowed() -> None:
    assert LiteratureNoteConfig(title_replacement="").title_replacement == ""


def test_default_app_config() -> None:
    cfg = AppConfig()

    assert cfg.templates.title == "@{{citekey}}"
    assert cfg.vault.root == "."
