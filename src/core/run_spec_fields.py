"""Type-safe field parsing helpers for run-spec execution.

This module centralizes primitive parsing so run-spec executors can stay
concise and produce consistent validation errors.
"""

from __future__ import annotations

from typing import Mapping

from core.errors import RestoreRunSpecError


def optional_string(args: Mapping[str, object], field_name: str) -> str | None:
    """Read an optional string field from a run-spec step."""
    value = args.get(field_name)
    if value is None:
        return None
    if isinstance(value, str):
        stripped = value.strip()
        return stripped if stripped else None
    raise RestoreRunSpecError(f"Run-spec field '{field_name}' must be a string when provided.")


def optional_bool(
    args: Mapping[str, object],
    field_name: str,
    default_value: bool,
) -> bool:
    """Read an optional boolean field from a run-spec step."""
    value = args.get(field_name)
    if value is None:
        return default_value
    if isinstance(value, bool):
        return value
    raise RestoreRunSpecError(f"Run-spec field '{field_name}' must be true/false.")


def string_tuple(args: Mapping[str, object], field_name: str) -> tuple[str, ...]:
    """Read a string or list of strings; missing fields yield an empty tuple."""
    value = args.get(field_name)
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    if isinstance(value, list) and all(isinstance(item, str) for item in value):
        return tuple(value)
    raise RestoreRunSpecError(
        f"Run-spec field '{field_name}' must be a string or a list of strings."
    )


def reject_unknown_fields(
    args: Mapping[str, object],
    allowed_fields: frozenset[str],
    context: str,
) -> None:
    """Fail when a step carries fields the command does not accept."""
    unknown_fields = sorted(set(args) - allowed_fields)
    if unknown_fields:
        raise RestoreRunSpecError(
            f"Run-spec {context} step has unknown fields: {', '.join(unknown_fields)}."
        )
