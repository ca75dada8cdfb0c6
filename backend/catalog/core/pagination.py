"""Pagination Cursors — opaque, resumable encoding of (limit, offset).

Invariants:
    - Pure functions: no IO, no async, no DB
    - Wire format: base64(utf-8 compact JSON {"limit": int, "offset": int})
    - encode_cursor is total; decode_cursor raises MalformedCursorError on any bad input
    - Cursor fields override request fields one by one; request values are defaults only
    - Unknown extra fields in a decoded cursor are ignored (lenient, versionable token)

Design Decisions:
    - Compact separators so encoded cursors match other catalog implementations byte for byte
    - Integral floats (2.0) accepted as integers, booleans rejected: JSON has one number type
    - Negative limit/offset rejected: never valid as a store LIMIT/OFFSET
"""

import base64
import binascii
import json
from typing import NamedTuple, Protocol

from catalog.core.errors import MalformedCursorError


class CursorPosition(NamedTuple):
    """Effective page window. None means unbounded / start."""
    limit: int | None
    offset: int | None


class PaginationRequest(Protocol):
    """Structural contract for pagination input (see schemas.catalog.EntityPagination)."""
    limit: int | None
    offset: int | None
    after: str | None


def encode_cursor(limit: int, offset: int) -> str:
    """Encode a page position as an opaque cursor."""
    payload = json.dumps({"limit": limit, "offset": offset}, separators=(",", ":"))
    return base64.b64encode(payload.encode("utf-8")).decode("ascii")


def _coerce_int(raw: dict, field: str) -> int | None:
    if field not in raw:
        return None
    value = raw[field]
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, bool) or not isinstance(value, int):
        raise MalformedCursorError(f"{field} was not a number")
    if value < 0:
        raise MalformedCursorError(f"{field} was negative")
    return value


def decode_cursor(cursor: str) -> CursorPosition:
    """Decode an opaque cursor back into its page position."""
    try:
        data = base64.b64decode(cursor, validate=True)
        raw = json.loads(data.decode("utf-8"))
    except (binascii.Error, ValueError, TypeError):
        raise MalformedCursorError("could not be parsed")
    if not isinstance(raw, dict):
        raise MalformedCursorError("could not be parsed")
    return CursorPosition(_coerce_int(raw, "limit"), _coerce_int(raw, "offset"))


def resolve_pagination(pagination: PaginationRequest | None) -> CursorPosition:
    """Merge request limit/offset with the optional `after` cursor."""
    if pagination is None:
        return CursorPosition(None, None)

    limit, offset = pagination.limit, pagination.offset
    if pagination.after is not None:
        cursor = decode_cursor(pagination.after)
        if cursor.limit is not None:
            limit = cursor.limit
        if cursor.offset is not None:
            offset = cursor.offset
    return CursorPosition(limit, offset)
