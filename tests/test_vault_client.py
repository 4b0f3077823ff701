from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import pytest

from literature_notes.clients import vault_client
from literature_notes.clients.exceptions import (
    NoteExistsError,
    StorageError,
    StorageIOError,
    UnsafePathError,
)
from literature_notes.clients.vault_client import LocalVaultClient


@pytest.mark.parametrize(
    "path",
    [
        "",
        "   ",
        ".",
        "/etc/passwd",
        "../outside.md",
        "Notes/../../outside.md",
        "C:/Users/notes.md",
        "C:notes.md",
        "\\\\server\\share\\notes.md",
    ],
)
def test_unsafe_paths_are_rejected(tmp_path: Path, path: str) -> None:
    client = LocalVaultClient(tmp_path)

    with pytest.raises(UnsafePathError):
        client.resolve(path)


def test_resolve_normalizes_relative_paths(tmp_path: Path) -> None:
    client = LocalVaultClient(tmp_path)

    handle = client.resolve("Notes/./sub/../a.md")

    assert handle.path == "Notes/a.md"
    assert handle.absolute_path == tmp_path.resolve() / "Notes" / "a.md"


def test_create_then_exists_and_get(tmp_path: Path) -> None:
    client = LocalVaultClient(tmp_path)

    async def scenario():
        assert not await client.file_exists_at("Reading notes/@a.md")
        created = await client.create_file("Reading notes/@a.md", "# A\n")
        assert await client.file_exists_at("Reading notes/@a.md")
        return created, await client.get_file("Reading notes/@a.md")

    created, fetched = asyncio.run(scenario())

    assert created == fetched
    assert (tmp_path / "Reading notes" / "@a.md").read_text(encoding="utf-8") == "# A\n"


def test_create_never_overwrites(tmp_path: Path) -> None:
    note = tmp_path / "a.md"
    note.write_text("user edits", encoding="utf-8")
    client = LocalVaultClient(tmp_path)

    with pytest.raises(NoteExistsError):
        asyncio.run(client.create_file("a.md", "template"))

    assert note.read_text(encoding="utf-8") == "user edits"


def test_get_missing_file_raises(tmp_path: Path) -> None:
    client = LocalVaultClient(tmp_path)

    with pytest.raises(StorageError):
        asyncio.run(client.get_file("missing.md"))


def test_unsafe_create_writes_nothing(tmp_path: Path) -> None:
    vault = tmp_path / "vault"
    vault.mkdir()
    client = LocalVaultClient(vault)

    with pytest.raises(UnsafePathError):
        asyncio.run(client.create_file("../escaped.md", ""))

    assert not (tmp_path / "escaped.md").exists()


def test_read_file(tmp_path: Path) -> None:
    export = tmp_path / "export.json"
    export.write_bytes(b"[]")
    client = LocalVaultClient(tmp_path)

    assert asyncio.run(client.read_file(str(export))) == b"[]"


def test_read_missing_file_raises_io_error(tmp_path: Path) -> None:
    client = LocalVaultClient(tmp_path)

    with pytest.raises(StorageIOError) as exc_info:
        asyncio.run(client.read_file(str(tmp_path / "missing.json")))

    assert isinstance(exc_info.value.original_exception, FileNotFoundError)
    assert "Original: FileNotFoundError" in str(exc_info.value)


def test_open_file_without_launch_only_reports(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    caplog.set_level(logging.INFO)
    started = []
    monkeypatch.setattr(vault_client.subprocess, "Popen", started.append)
    client = LocalVaultClient(tmp_path)
    handle = client.resolve("a.md")

    asyncio.run(client.open_file(handle, new_pane=True))

    assert started == []
    assert f"Note a.md is at {handle.absolute_path}" in caplog.text


def test_open_file_starts_default_program(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    caplog.set_level(logging.INFO)
    started = []
    monkeypatch.setattr(vault_client.sys, "platform", "linux")
    monkeypatch.setattr(vault_client.subprocess, "Popen", started.append)
    client = LocalVaultClient(tmp_path, launch=True)
    handle = client.resolve("a.md")

    asyncio.run(client.open_file(handle, new_pane=True))

    assert started == [["xdg-open", str(handle.absolute_path)]]
    assert "Opening a.md in new pane" in caplog.text


def test_open_file_on_macos_uses_open(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    started = []
    monkeypatch.setattr(vault_client.sys, "platform", "darwin")
    monkeypatch.setattr(vault_client.subprocess, "Popen", started.append)
    client = LocalVaultClient(tmp_path, launch=True)

    asyncio.run(client.open_file(client.resolve("a.md"), new_pane=False))

    assert started[0][0] == "open"


def test_open_file_launch_failure_raises(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    def missing_program(args):
        raise FileNotFoundError(args[0])

    monkeypatch.setattr(vault_client.sys, "platform", "linux")
    monkeypatch.setattr(vault_client.subprocess, "Popen", missing_program)
    client = LocalVaultClient(tmp_path, launch=True)

    with pytest.raises(StorageIOError) as exc_info:
        asyncio.run(client.open_file(client.resolve("a.md"), new_pane=False))

    assert isinstance(exc_info.value.original_exception, FileNotFoundError)
