"""Streaming snapshot decoder.

This module turns a JSON snapshot byte stream into a lazy sequence of
node records. The top-level object is scanned incrementally and only one
node object is decoded and held in memory at a time, so memory use does
not grow with the size of the snapshot.

Token names in error messages use the Jackson vocabulary written by the
backup tool (``START_OBJECT``, ``VALUE_STRING``, ...).
"""

from __future__ import annotations

import base64
import binascii
import codecs
import json
from typing import Any, BinaryIO, Iterator, Mapping

from core.constants import (
    DEFAULT_READ_CHUNK_SIZE,
    FIELD_ACL_ID,
    FIELD_ACL_PERMS,
    FIELD_ACL_SCHEME,
    FIELD_ACLS,
    FIELD_DATA,
    FIELD_EPHEMERAL_OWNER,
    PATH_SEPARATOR,
    REQUIRED_ACL_FIELDS,
    REQUIRED_NODE_FIELDS,
)
from core.errors import MalformedSnapshotError
from core.logging_config import get_logger
from core.types import AclEntry, NodeRecord

_LOGGER = get_logger(__name__)

START_OBJECT = "START_OBJECT"
END_OBJECT = "END_OBJECT"
START_ARRAY = "START_ARRAY"
END_ARRAY = "END_ARRAY"
FIELD_NAME = "FIELD_NAME"
VALUE_STRING = "VALUE_STRING"
VALUE_NUMBER_INT = "VALUE_NUMBER_INT"
VALUE_NUMBER_FLOAT = "VALUE_NUMBER_FLOAT"
VALUE_TRUE = "VALUE_TRUE"
VALUE_FALSE = "VALUE_FALSE"
VALUE_NULL = "VALUE_NULL"
END_OF_INPUT = "end of input"

_WHITESPACE = " \t\n\r"
# Parse failures this close to the end of the buffer may just be a value
# split across reads.
_TRUNCATION_WINDOW = 16
# Leading text of stdlib decoder messages, mapped to the token that was due.
_EXPECTED_BY_MESSAGE = (
    ("Expecting value", "VALUE"),
    ("Expecting property name", FIELD_NAME),
    ("Expecting ':' delimiter", "':'"),
    ("Expecting ',' delimiter", "','"),
    ("Illegal trailing comma before end of object", FIELD_NAME),
    ("Illegal trailing comma before end of array", "VALUE"),
)
_CHAR_TOKENS = {
    "{": START_OBJECT,
    "}": END_OBJECT,
    "[": START_ARRAY,
    "]": END_ARRAY,
    '"': VALUE_STRING,
    "t": VALUE_TRUE,
    "f": VALUE_FALSE,
    "n": VALUE_NULL,
    "": END_OF_INPUT,
}


def iter_node_records(
    stream: BinaryIO,
    chunk_size: int = DEFAULT_READ_CHUNK_SIZE,
) -> Iterator[NodeRecord]:
    """Lazily decode node records from a snapshot stream.

    Args:
        stream: Binary stream positioned at the snapshot's top-level object.
        chunk_size: Bytes requested from the stream per read.

    Yields:
        Node records in stream order.

    Raises:
        MalformedSnapshotError: If the stream violates the snapshot format.
    """
    scanner = _SnapshotScanner(stream, chunk_size)
    scanner.expect("{", START_OBJECT)
    if scanner.peek() == "}":
        scanner.advance()
        scanner.expect_end_of_input()
        return
    while True:
        path = scanner.read_field_name()
        scanner.expect(":", "':'")
        yield decode_node(path, scanner.read_object())
        next_char = scanner.peek()
        if next_char == ",":
            scanner.advance()
            continue
        if next_char == "}":
            scanner.advance()
            break
        raise _unexpected(END_OBJECT, _token_at(next_char))
    scanner.expect_end_of_input()


def decode_node(path: str, payload: Mapping[str, Any]) -> NodeRecord:
    """Validate one decoded node object and build its record.

    Unknown node fields are ignored so newer backups stay readable.

    Args:
        path: Absolute node path taken from the entry key.
        payload: Decoded node object.

    Returns:
        Immutable node record.

    Raises:
        MalformedSnapshotError: If a required field is missing or mistyped.
    """
    _validate_path(path)
    missing_fields = [name for name in REQUIRED_NODE_FIELDS if name not in payload]
    if missing_fields:
        raise MalformedSnapshotError(
            f"Missing required fields for node {path}: {', '.join(missing_fields)}. "
            f"Each node requires {', '.join(REQUIRED_NODE_FIELDS)}."
        )
    for field_name in payload:
        if field_name not in REQUIRED_NODE_FIELDS:
            _LOGGER.debug("ignored_snapshot_field", path=path, field=field_name)
    return NodeRecord(
        path=path,
        ephemeral_owner=_decode_ephemeral_owner(path, payload[FIELD_EPHEMERAL_OWNER]),
        data=_decode_data(path, payload[FIELD_DATA]),
        acls=_decode_acls(path, payload[FIELD_ACLS]),
    )


def _validate_path(path: str) -> None:
    if not path.startswith(PATH_SEPARATOR):
        raise MalformedSnapshotError(
            f"Invalid node path '{path}': snapshot keys must be absolute paths."
        )


def _decode_ephemeral_owner(path: str, value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise _unexpected(VALUE_NUMBER_INT, _token_of(value), f"{FIELD_EPHEMERAL_OWNER} of {path}")
    return value


def _decode_data(path: str, value: object) -> bytes | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise _unexpected(VALUE_STRING, _token_of(value), f"{FIELD_DATA} of {path}")
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as error:
        raise MalformedSnapshotError(
            f"Invalid base64 {FIELD_DATA} for node {path}: {error}."
        ) from error


def _decode_acls(path: str, value: object) -> tuple[AclEntry, ...]:
    if not isinstance(value, list):
        raise _unexpected(START_ARRAY, _token_of(value), f"{FIELD_ACLS} of {path}")
    return tuple(_decode_acl(path, entry) for entry in value)


def _decode_acl(path: str, value: object) -> AclEntry:
    if not isinstance(value, dict):
        raise _unexpected(START_OBJECT, _token_of(value), f"ACL entry of {path}")
    for field_name in value:
        if field_name not in REQUIRED_ACL_FIELDS:
            raise MalformedSnapshotError(f"Unexpected field: {field_name} in ACL entry of {path}")
    missing_fields = [name for name in REQUIRED_ACL_FIELDS if name not in value]
    if missing_fields:
        raise MalformedSnapshotError(
            f"Missing required ACL fields for node {path}: {', '.join(missing_fields)}."
        )
    scheme = value[FIELD_ACL_SCHEME]
    identity = value[FIELD_ACL_ID]
    perms = value[FIELD_ACL_PERMS]
    if not isinstance(scheme, str):
        raise _unexpected(VALUE_STRING, _token_of(scheme), f"ACL {FIELD_ACL_SCHEME} of {path}")
    if not isinstance(identity, str):
        raise _unexpected(VALUE_STRING, _token_of(identity), f"ACL {FIELD_ACL_ID} of {path}")
    if isinstance(perms, bool) or not isinstance(perms, int):
        raise _unexpected(VALUE_NUMBER_INT, _token_of(perms), f"ACL {FIELD_ACL_PERMS} of {path}")
    return AclEntry(scheme=scheme, identity=identity, perms=perms)


class _SnapshotScanner:
    """Incremental reader over the snapshot's top-level object."""

    def __init__(self, stream: BinaryIO, chunk_size: int) -> None:
        self._stream = stream
        self._chunk_size = chunk_size
        self._text_decoder = codecs.getincrementaldecoder("utf-8")()
        self._json_decoder = json.JSONDecoder()
        self._buffer = ""
        self._pos = 0
        # Characters dropped from the front of the buffer so far.
        self._offset = 0
        self._exhausted = False

    def peek(self) -> str:
        """Return the next non-whitespace character, or ``""`` at end of input."""
        while True:
            while self._pos < len(self._buffer) and self._buffer[self._pos] in _WHITESPACE:
                self._pos += 1
            if self._pos < len(self._buffer):
                return self._buffer[self._pos]
            if not self._fill():
                return ""

    def advance(self) -> None:
        self._pos += 1

    def expect(self, char: str, token: str) -> None:
        found = self.peek()
        if found != char:
            raise _unexpected(token, _token_at(found))
        self.advance()

    def expect_end_of_input(self) -> None:
        found = self.peek()
        if found:
            raise _unexpected(END_OF_INPUT, _token_at(found))

    def read_field_name(self) -> str:
        found = self.peek()
        if found != '"':
            raise _unexpected(FIELD_NAME, _token_at(found))
        return self._decode_value()

    def read_object(self) -> dict[str, Any]:
        found = self.peek()
        if found != "{":
            raise _unexpected(START_OBJECT, _token_at(found))
        return self._decode_value()

    def _decode_value(self) -> Any:
        while True:
            try:
                value, end = self._json_decoder.raw_decode(self._buffer, self._pos)
            except json.JSONDecodeError as error:
                if self._is_truncation(error) and self._fill():
                    continue
                raise self._syntax_error(error) from error
            self._pos = end
            return value

    def _syntax_error(self, error: json.JSONDecodeError) -> MalformedSnapshotError:
        position = f"near character {self._offset + error.pos}"
        for prefix, expected in _EXPECTED_BY_MESSAGE:
            if error.msg.startswith(prefix):
                found = _token_at(self._buffer[error.pos : error.pos + 1])
                return _unexpected(expected, found, position)
        return MalformedSnapshotError(f"Invalid snapshot JSON: {error.msg} ({position}).")

    def _is_truncation(self, error: json.JSONDecodeError) -> bool:
        if self._exhausted:
            return False
        if error.msg.startswith("Unterminated string"):
            return True
        return error.pos >= len(self._buffer) - _TRUNCATION_WINDOW

    def _fill(self) -> bool:
        """Append one chunk to the buffer, returning False at end of input."""
        if self._exhausted:
            return False
        chunk = self._stream.read(self._chunk_size)
        try:
            text = self._text_decoder.decode(chunk, final=not chunk)
        except UnicodeDecodeError as error:
            raise MalformedSnapshotError(f"Snapshot is not valid UTF-8: {error.reason}.") from error
        if not chunk:
            self._exhausted = True
            return False
        self._offset += self._pos
        self._buffer = self._buffer[self._pos :] + text
        self._pos = 0
        return True


def _token_at(char: str) -> str:
    if char in _CHAR_TOKENS:
        return _CHAR_TOKENS[char]
    if char == "-" or char.isdigit():
        return "VALUE_NUMBER"
    return repr(char)


def _token_of(value: object) -> str:
    if value is None:
        return VALUE_NULL
    if value is True:
        return VALUE_TRUE
    if value is False:
        return VALUE_FALSE
    if isinstance(value, int):
        return VALUE_NUMBER_INT
    if isinstance(value, float):
        return VALUE_NUMBER_FLOAT
    if isinstance(value, str):
        return VALUE_STRING
    if isinstance(value, list):
        return START_ARRAY
    return START_OBJECT


def _unexpected(expected: str, found: str, context: str | None = None) -> MalformedSnapshotError:
    message = f"Expected: {expected}, Found: {found}"
    if context:
        message = f"{message} ({context})"
    return MalformedSnapshotError(message)
