"""zkrestore CLI entry points.
This module exposes commands for restoring ZooKeeper snapshots.
It maps argparse commands onto SDK calls.
"""

from __future__ import annotations

import argparse
from dataclasses import replace
from typing import Any, Sequence

from cli.run_spec_command import add_run_spec_command, run_run_spec_command
from core.config import RestoreConfig
from core.constants import ROOT_PATH, STDIN_INPUT_URI
from core.errors import ZkRestoreError
from core.logging_config import configure_logging, get_logger
from core.types import RestoreOptions
from restore.restore_client import RestoreClient

_LOGGER = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="zkrestore", description="Restore ZooKeeper backups")
    parser.add_argument("-z", "--zk", help="Override ZKRESTORE_HOSTS connect string")
    parser.add_argument("--timeout", type=float, help="Session timeout in seconds")
    parser.add_argument("--user", help="Digest auth user")
    parser.add_argument("--password", help="Digest auth password")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_restore_command(subparsers)
    add_run_spec_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the zkrestore CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)
    try:
        client = _build_client(args)
        if args.command == "restore":
            return _run_restore_command(client, args)
        if args.command == "run-spec":
            return run_run_spec_command(client, args)
    except ZkRestoreError as error:
        _LOGGER.error("restore_failed", error=str(error), error_type=type(error).__name__)
        return 1
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_client(args: argparse.Namespace) -> RestoreClient:
    """Build SDK client with connection overrides.

    Args:
        args: Parsed CLI args.

    Returns:
        Configured SDK client.
    """
    config = RestoreConfig.from_env()
    if args.zk:
        config = replace(config, zk_hosts=args.zk)
    if args.timeout is not None:
        config = replace(config, session_timeout=args.timeout)
    if args.user:
        config = replace(config, zk_user=args.user)
    if args.password:
        config = replace(config, zk_password=args.password)
    return RestoreClient(config)


def _run_restore_command(client: RestoreClient, args: argparse.Namespace) -> int:
    """Handle restore command.

    Args:
        client: SDK client.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    options = RestoreOptions(
        input_uri=args.file,
        compressed=args.compress,
        root_path=args.root_path,
        overwrite_existing=args.overwrite_existing,
        no_acls=args.no_acls,
        include_patterns=tuple(args.include),
        exclude_patterns=tuple(args.exclude),
    )
    summary = client.restore(options)
    for line in summary.to_lines():
        print(line)
    return 0


def _add_restore_command(subparsers: Any) -> None:
    """Register restore subcommand."""
    parser = subparsers.add_parser("restore", help="Restore a JSON snapshot into ZooKeeper")
    parser.add_argument(
        "-f",
        "--file",
        default=STDIN_INPUT_URI,
        help="Snapshot file, s3://bucket/key, or '-' for stdin",
    )
    parser.add_argument("-c", "--compress", action="store_true", help="Input is gzip-compressed")
    parser.add_argument("--root-path", default=ROOT_PATH, help="Only restore nodes under this path")
    parser.add_argument(
        "--include",
        action="append",
        default=[],
        help="Regex a node path must match (repeatable)",
    )
    parser.add_argument(
        "--exclude",
        action="append",
        default=[],
        help="Regex excluding matching node paths (repeatable)",
    )
    parser.add_argument(
        "--overwrite-existing",
        action="store_true",
        help="Overwrite data and ACLs of nodes that already exist",
    )
    parser.add_argument("--no-acls", action="store_true", help="Restore with open ACLs")
