"""Snapshot input opening.

This module opens the snapshot byte stream from stdin, a local file or
an S3 object, optionally through gzip decompression.
"""

from __future__ import annotations

import gzip
import sys
from contextlib import ExitStack, contextmanager
from pathlib import Path
from typing import Any, BinaryIO, Iterator, cast

from core.config import RestoreConfig
from core.constants import STDIN_INPUT_URI
from core.errors import RestoreDependencyError, RestoreInputError
from core.logging_config import get_logger
from core.s3_uri import parse_s3_uri

_LOGGER = get_logger(__name__)


@contextmanager
def open_snapshot_stream(
    input_uri: str,
    compressed: bool,
    config: RestoreConfig,
) -> Iterator[BinaryIO]:
    """Open a snapshot for streaming reads.

    Every stream opened here is closed on exit, except stdin itself.

    Args:
        input_uri: Local path, ``s3://bucket/key`` URI, or ``-`` for stdin.
        compressed: Wrap the stream in gzip decompression.
        config: Runtime configuration for S3 session defaults.

    Yields:
        Binary stream positioned at the start of the snapshot.

    Raises:
        RestoreInputError: If the input cannot be opened.
    """
    with ExitStack() as stack:
        raw_stream = _open_raw_stream(input_uri, config, stack)
        if compressed:
            raw_stream = cast(BinaryIO, stack.enter_context(gzip.GzipFile(fileobj=raw_stream)))
        yield raw_stream


def _open_raw_stream(input_uri: str, config: RestoreConfig, stack: ExitStack) -> BinaryIO:
    if input_uri == STDIN_INPUT_URI:
        _LOGGER.info("restoring_from_stdin")
        return sys.stdin.buffer
    if input_uri.startswith("s3://"):
        body = _open_s3_body(input_uri, config)
        stack.callback(body.close)
        return cast(BinaryIO, body)
    return cast(BinaryIO, stack.enter_context(_open_local_file(Path(input_uri).expanduser())))


def _open_local_file(file_path: Path) -> BinaryIO:
    """Open a local snapshot file.

    Raises:
        RestoreInputError: If the file is missing or unreadable.
    """
    if not file_path.is_file():
        raise RestoreInputError(
            f"Failed to read snapshot at {file_path}: file does not exist. "
            "Provide an existing backup file or '-' for stdin."
        )
    try:
        return file_path.open("rb")
    except OSError as error:
        raise RestoreInputError(
            f"Failed to open snapshot at {file_path}: {error}. Check file permissions."
        ) from error


def _open_s3_body(input_uri: str, config: RestoreConfig) -> Any:
    """Open a streaming body for an S3 snapshot object.

    Raises:
        RestoreInputError: If the object cannot be fetched.
        RestoreDependencyError: If boto3 is missing.
    """
    location = parse_s3_uri(input_uri)
    s3_client = _create_s3_client(config)
    _LOGGER.info("restoring_from_s3", bucket=location.bucket, key=location.key)
    try:
        response = s3_client.get_object(Bucket=location.bucket, Key=location.key)
    except Exception as error:
        raise RestoreInputError(
            f"Failed to fetch snapshot {input_uri}: {error}. "
            "Check the object key and AWS credentials."
        ) from error
    return response["Body"]


def _create_s3_client(config: RestoreConfig) -> Any:
    """Create a boto3 S3 client.

    Args:
        config: Runtime config containing optional profile/region.

    Returns:
        Boto3 S3 client.

    Raises:
        RestoreDependencyError: If boto3 is missing.
    """
    try:
        import boto3
    except ImportError as error:
        raise RestoreDependencyError(
            "S3 support requires boto3, but it is not installed. "
            "Install boto3 to restore from s3:// snapshots."
        ) from error
    session = boto3.session.Session(**_build_boto3_session_kwargs(config))
    return session.client("s3")


def _build_boto3_session_kwargs(config: RestoreConfig) -> dict[str, str]:
    kwargs: dict[str, str] = {}
    if config.s3_profile:
        kwargs["profile_name"] = config.s3_profile
    if config.s3_region:
        kwargs["region_name"] = config.s3_region
    return kwargs
