"""Unit tests for CLI command handling."""

from __future__ import annotations

import gzip
from pathlib import Path

import pytest

from cli import main as cli_main
from cli.main import main
from core.config import RestoreConfig
from restore.restore_client import RestoreClient
from tests.fakes import FakeNodeStore, fake_store_factory, node_entry, snapshot_bytes


def _install_fake_store(
    monkeypatch: pytest.MonkeyPatch,
    store: FakeNodeStore,
) -> list[RestoreConfig]:
    configs: list[RestoreConfig] = []

    def _client(config: RestoreConfig) -> RestoreClient:
        configs.append(config)
        return RestoreClient(config, fake_store_factory(store))

    monkeypatch.setattr(cli_main, "RestoreClient", _client)
    return configs


def test_cli_restore_prints_summary(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    """CLI restore should apply the snapshot and print summary lines."""
    store = FakeNodeStore()
    _install_fake_store(monkeypatch, store)
    snapshot_path = tmp_path / "backup.json"
    snapshot_path.write_bytes(snapshot_bytes({"/a": node_entry(b"1"), "/a/b": node_entry(b"2")}))

    exit_code = main(["restore", "--file", str(snapshot_path)])
    output = capsys.readouterr().out.strip().splitlines()

    assert exit_code == 0 and "records_read=2" in output and "created=2" in output


def test_cli_restore_handles_compressed_input_and_filters(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Compression and filter flags should reach the restore run."""
    store = FakeNodeStore()
    _install_fake_store(monkeypatch, store)
    snapshot_path = tmp_path / "backup.json.gz"
    entries = {"/a": node_entry(), "/a/b": node_entry(), "/a/c": node_entry()}
    snapshot_path.write_bytes(gzip.compress(snapshot_bytes(entries)))

    exit_code = main(
        ["restore", "-f", str(snapshot_path), "-c", "--root-path", "/a", "--exclude", "/a/b"]
    )

    assert exit_code == 0 and sorted(store.nodes) == ["/", "/a", "/a/c"]


def test_cli_connection_flags_override_config(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Global connection flags should override environment config."""
    configs = _install_fake_store(monkeypatch, FakeNodeStore())
    snapshot_path = tmp_path / "backup.json"
    snapshot_path.write_bytes(b"{}")

    main(
        [
            "--zk",
            "zk9:2181",
            "--timeout",
            "5",
            "--user",
            "admin",
            "--password",
            "secret",
            "restore",
            "--file",
            str(snapshot_path),
        ]
    )

    config = configs[0]
    assert (config.zk_hosts, config.session_timeout, config.digest_credential) == (
        "zk9:2181",
        5.0,
        "admin:secret",
    )


def test_cli_returns_error_code_for_malformed_snapshot(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Restore errors should map to exit code 1."""
    store = FakeNodeStore()
    _install_fake_store(monkeypatch, store)
    snapshot_path = tmp_path / "backup.json"
    snapshot_path.write_bytes(b'{"/a": []}')

    exit_code = main(["restore", "--file", str(snapshot_path)])

    assert exit_code == 1 and store.closed


def test_cli_returns_error_code_for_missing_input(monkeypatch: pytest.MonkeyPatch) -> None:
    """A missing snapshot file should fail cleanly."""
    _install_fake_store(monkeypatch, FakeNodeStore())

    assert main(["restore", "--file", "does/not/exist.json"]) == 1
