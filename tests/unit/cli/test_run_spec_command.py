"""Unit tests for run-spec CLI execution."""

from __future__ import annotations

from pathlib import Path

import pytest

from cli import main as cli_main
from cli.main import main
from core.config import RestoreConfig
from core.types import RestoreOptions, RestoreSummary
from restore.restore_client import RestoreClient
from tests.fixture_paths import fixture_path


def test_cli_run_spec_executes_restore_steps(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Run-spec command should route each step to the client."""
    captured: list[tuple[str, RestoreOptions]] = []

    def _fake_restore(self: RestoreClient, options: RestoreOptions) -> RestoreSummary:
        captured.append((self.config.zk_hosts, options))
        return RestoreSummary(records_read=len(captured), synthesized_paths=0)

    monkeypatch.setattr(RestoreClient, "restore", _fake_restore)
    exit_code = main(["run-spec", str(fixture_path("run_spec/valid_restore.yaml"))])
    output = capsys.readouterr().out.strip().splitlines()

    hosts, first_options = captured[0]
    assert (
        exit_code == 0
        and len(captured) == 2
        and hosts == "zk1:2181,zk2:2181"
        and first_options
        == RestoreOptions(
            input_uri="backups/app.json.gz",
            compressed=True,
            root_path="/app",
            overwrite_existing=True,
            exclude_patterns=("/app/tmp.*",),
        )
        and captured[1][1].include_patterns == ("/jobs/.*", "/jobs")
        and output.count("records_read=1") == 1
        and "records_read=2" in output
    )


def test_cli_run_spec_rejects_unknown_step_field(tmp_path: Path) -> None:
    """Unknown restore fields should fail with exit code 1."""
    spec_path = tmp_path / "spec.yaml"
    spec_path.write_text(
        "version: 1\nsteps:\n  - command: restore\n    input: a.json\n    overwrite: true\n",
        encoding="utf-8",
    )

    assert main(["run-spec", str(spec_path)]) == 1


def test_client_with_hosts_keeps_other_settings() -> None:
    """Host overrides from run-spec defaults keep the remaining config."""
    client = RestoreClient(RestoreConfig(zk_user="u", zk_password="p"))

    updated = client.with_hosts("zk3:2181")

    assert updated.config.zk_hosts == "zk3:2181" and updated.config.digest_credential == "u:p"
