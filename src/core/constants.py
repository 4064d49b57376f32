"""Core constants used across zkrestore modules.

This module centralizes snapshot field names and runtime defaults.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

ROOT_PATH = "/"
PATH_SEPARATOR = "/"
STDIN_INPUT_URI = "-"

FIELD_EPHEMERAL_OWNER = "ephemeralOwner"
FIELD_DATA = "data"
FIELD_ACLS = "acls"
FIELD_ACL_SCHEME = "scheme"
FIELD_ACL_ID = "id"
FIELD_ACL_PERMS = "perms"
REQUIRED_NODE_FIELDS = (FIELD_EPHEMERAL_OWNER, FIELD_DATA, FIELD_ACLS)
REQUIRED_ACL_FIELDS = (FIELD_ACL_SCHEME, FIELD_ACL_ID, FIELD_ACL_PERMS)

ANY_VERSION = -1
DEFAULT_ZK_HOSTS = "localhost:2181"
DEFAULT_SESSION_TIMEOUT_SECONDS = 30.0
DEFAULT_CONNECT_TIMEOUT_SECONDS = 15.0
DIGEST_AUTH_SCHEME = "digest"
DEFAULT_READ_CHUNK_SIZE = 64 * 1024
