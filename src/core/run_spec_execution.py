"""Shared run-spec execution engine for CLI and SDK workflows.

This module maps validated run-spec steps to client operations so different
entry points can execute one declarative restore plan without drift.
"""

from __future__ import annotations

from typing import Any, Protocol

from core.constants import ROOT_PATH, STDIN_INPUT_URI
from core.errors import RestoreRunSpecError
from core.run_spec import RunSpec, RunSpecStep, load_run_spec
from core.run_spec_fields import (
    optional_bool,
    optional_string,
    reject_unknown_fields,
    string_tuple,
)
from core.types import RestoreOptions, RestoreSummary

RESTORE_STEP_FIELDS = frozenset(
    {
        "input",
        "compressed",
        "root_path",
        "overwrite_existing",
        "no_acls",
        "include",
        "exclude",
    }
)


class RunSpecClient(Protocol):
    """Client API contract required by run-spec execution."""

    def with_hosts(self, zk_hosts: str) -> Any: ...

    def restore(self, options: RestoreOptions) -> RestoreSummary: ...


def execute_run_spec_file(client: RunSpecClient, spec_file: str) -> tuple[str, ...]:
    """Load and execute a run-spec file, returning printable output lines."""
    spec = load_run_spec(spec_file)
    return execute_run_spec(client, spec)


def execute_run_spec(client: RunSpecClient, spec: RunSpec) -> tuple[str, ...]:
    """Execute a parsed run-spec object and return output lines."""
    execution_client = (
        client.with_hosts(spec.defaults.zk_hosts) if spec.defaults.zk_hosts else client
    )
    output_lines: list[str] = []
    for step in spec.steps:
        output_lines.extend(_execute_step(execution_client, step))
    return tuple(output_lines)


def build_restore_options(step: RunSpecStep) -> RestoreOptions:
    """Build restore options from a restore step's fields."""
    reject_unknown_fields(step.args, RESTORE_STEP_FIELDS, "restore")
    return RestoreOptions(
        input_uri=optional_string(step.args, "input") or STDIN_INPUT_URI,
        compressed=optional_bool(step.args, "compressed", default_value=False),
        root_path=optional_string(step.args, "root_path") or ROOT_PATH,
        overwrite_existing=optional_bool(step.args, "overwrite_existing", default_value=False),
        no_acls=optional_bool(step.args, "no_acls", default_value=False),
        include_patterns=string_tuple(step.args, "include"),
        exclude_patterns=string_tuple(step.args, "exclude"),
    )


def _execute_step(client: RunSpecClient, step: RunSpecStep) -> tuple[str, ...]:
    if step.command == "restore":
        return client.restore(build_restore_options(step)).to_lines()
    raise RestoreRunSpecError(f"Unsupported run-spec command '{step.command}'.")
