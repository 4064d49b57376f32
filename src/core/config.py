"""Runtime configuration model for zkrestore.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os

from core.constants import (
    DEFAULT_CONNECT_TIMEOUT_SECONDS,
    DEFAULT_SESSION_TIMEOUT_SECONDS,
    DEFAULT_ZK_HOSTS,
)
from core.errors import RestoreConfigError


@dataclass(frozen=True)
class RestoreConfig:
    """Validated runtime configuration.

    Attributes:
        zk_hosts: ZooKeeper connect string, e.g. ``host1:2181,host2:2181``.
        session_timeout: Session timeout in seconds.
        connect_timeout: Seconds to wait for the initial connection.
        zk_user: Optional digest auth user.
        zk_password: Optional digest auth password.
        s3_region: Optional default AWS region for S3 input.
        s3_profile: Optional AWS profile for boto3 session initialization.
    """

    zk_hosts: str = DEFAULT_ZK_HOSTS
    session_timeout: float = DEFAULT_SESSION_TIMEOUT_SECONDS
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT_SECONDS
    zk_user: str | None = None
    zk_password: str | None = None
    s3_region: str | None = None
    s3_profile: str | None = None

    @classmethod
    def from_env(cls) -> "RestoreConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            RestoreConfigError: If environment values are invalid.
        """
        return cls(
            zk_hosts=os.getenv("ZKRESTORE_HOSTS", DEFAULT_ZK_HOSTS),
            session_timeout=_parse_seconds(
                "ZKRESTORE_SESSION_TIMEOUT",
                os.getenv("ZKRESTORE_SESSION_TIMEOUT"),
                DEFAULT_SESSION_TIMEOUT_SECONDS,
            ),
            connect_timeout=_parse_seconds(
                "ZKRESTORE_CONNECT_TIMEOUT",
                os.getenv("ZKRESTORE_CONNECT_TIMEOUT"),
                DEFAULT_CONNECT_TIMEOUT_SECONDS,
            ),
            zk_user=os.getenv("ZKRESTORE_USER") or None,
            zk_password=os.getenv("ZKRESTORE_PASSWORD") or None,
            s3_region=os.getenv("ZKRESTORE_S3_REGION"),
            s3_profile=os.getenv("ZKRESTORE_S3_PROFILE"),
        )

    @property
    def digest_credential(self) -> str | None:
        """Return ``user:password`` when both halves are configured."""
        if self.zk_user is None or self.zk_password is None:
            return None
        return f"{self.zk_user}:{self.zk_password}"


def _parse_seconds(env_name: str, raw_value: str | None, default_value: float) -> float:
    """Parse a positive duration in seconds.

    Args:
        env_name: Environment variable name for error context.
        raw_value: Raw string from environment, if set.
        default_value: Value used when the variable is unset.

    Returns:
        Parsed duration.

    Raises:
        RestoreConfigError: If value is not a positive number.
    """
    if raw_value is None or not raw_value.strip():
        return default_value
    try:
        seconds = float(raw_value)
    except ValueError as error:
        raise RestoreConfigError(
            f"Invalid {env_name} value: expected seconds, got '{raw_value}'. "
            f"Set {env_name} to a positive number."
        ) from error
    if seconds <= 0:
        raise RestoreConfigError(
            f"Invalid {env_name} value: {raw_value} must be greater than zero."
        )
    return seconds
