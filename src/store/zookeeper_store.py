"""ZooKeeper node store backed by kazoo.

This module adapts a kazoo client session to the ``NodeStore`` contract
and owns the session lifecycle for one restore run.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator, Sequence

from kazoo.client import KazooClient
from kazoo.exceptions import KazooException, NodeExistsError
from kazoo.handlers.threading import KazooTimeoutError
from kazoo.security import ACL

from core.config import RestoreConfig
from core.constants import ANY_VERSION, DIGEST_AUTH_SCHEME
from core.errors import NodeExistsStoreError, StoreUnavailableError
from core.logging_config import get_logger

_LOGGER = get_logger(__name__)


class ZooKeeperNodeStore:
    """Node store operations over a started kazoo client."""

    def __init__(self, client: Any) -> None:
        """Wrap a started kazoo client.

        Args:
            client: Connected ``KazooClient`` or compatible object.
        """
        self._client = client

    def exists(self, path: str) -> bool:
        with _store_errors("exists", path):
            return self._client.exists(path) is not None

    def create(self, path: str, data: bytes | None, acls: Sequence[ACL]) -> None:
        """Create a persistent node.

        Raises:
            NodeExistsStoreError: If the node is already present.
            StoreUnavailableError: For any other store failure.
        """
        with _store_errors("create", path):
            self._client.create(path, data, acl=list(acls))

    def set_data(self, path: str, data: bytes | None, version: int = ANY_VERSION) -> None:
        with _store_errors("set_data", path):
            self._client.set(path, data, version=version)

    def set_acls(self, path: str, acls: Sequence[ACL], version: int = ANY_VERSION) -> None:
        with _store_errors("set_acls", path):
            self._client.set_acls(path, list(acls), version=version)

    def close(self) -> None:
        """Stop and close the underlying session."""
        self._client.stop()
        self._client.close()


@contextmanager
def open_zookeeper_store(config: RestoreConfig) -> Iterator[ZooKeeperNodeStore]:
    """Open a ZooKeeper session for the duration of a restore.

    The session is always closed on exit, including when the body raises.

    Args:
        config: Runtime config with hosts, timeouts and credentials.

    Yields:
        Connected node store.

    Raises:
        StoreUnavailableError: If the session cannot be established.
    """
    client = KazooClient(
        hosts=config.zk_hosts,
        timeout=config.session_timeout,
        auth_data=_build_auth_data(config),
    )
    try:
        client.start(timeout=config.connect_timeout)
    except (KazooTimeoutError, KazooException) as error:
        client.close()
        raise StoreUnavailableError(
            f"Failed to connect to ZooKeeper at {config.zk_hosts}: {error!r}. "
            "Check the connect string and that the ensemble is reachable."
        ) from error
    _LOGGER.info("zookeeper_session_started", hosts=config.zk_hosts)
    store = ZooKeeperNodeStore(client)
    try:
        yield store
    finally:
        store.close()
        _LOGGER.info("zookeeper_session_closed", hosts=config.zk_hosts)


def _build_auth_data(config: RestoreConfig) -> list[tuple[str, str]] | None:
    credential = config.digest_credential
    if credential is None:
        return None
    return [(DIGEST_AUTH_SCHEME, credential)]


@contextmanager
def _store_errors(operation: str, path: str) -> Iterator[None]:
    try:
        yield
    except NodeExistsError as error:
        raise NodeExistsStoreError(path) from error
    except (KazooTimeoutError, KazooException) as error:
        raise StoreUnavailableError(
            f"ZooKeeper {operation} failed for {path}: {error!r}."
        ) from error
