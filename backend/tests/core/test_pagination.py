"""Pagination cursor tests — opaque base64 JSON cursors and request merging.

Tests cover:
    - Exact wire format of encoded cursors
    - decode(encode(limit, offset)) round trip
    - Malformed base64 / JSON / non-object / non-integer / negative fields rejected
    - Unknown extra fields ignored, missing fields left unset
    - Cursor fields override request fields one by one
"""

import base64
import json

import pytest

from catalog.core.errors import MalformedCursorError
from catalog.core.pagination import (
    CursorPosition, decode_cursor, encode_cursor, resolve_pagination,
)
from catalog.schemas.catalog import EntityPagination


def _cursor(payload) -> str:
    return base64.b64encode(json.dumps(payload).encode("utf-8")).decode("ascii")


def test_encode_uses_compact_json_in_base64():
    assert encode_cursor(2, 4) == base64.b64encode(b'{"limit":2,"offset":4}').decode()


@pytest.mark.parametrize("limit,offset", [(0, 0), (1, 0), (2, 2), (500, 123456)])
def test_decode_inverts_encode(limit, offset):
    assert decode_cursor(encode_cursor(limit, offset)) == CursorPosition(limit, offset)


def test_decode_rejects_invalid_base64():
    with pytest.raises(MalformedCursorError) as exc_info:
        decode_cursor("not base64!")
    assert exc_info.value.code == "MALFORMED_CURSOR"
    assert exc_info.value.http_status == 400


def test_decode_rejects_invalid_json():
    with pytest.raises(MalformedCursorError):
        decode_cursor(base64.b64encode(b"{limit:").decode())


def test_decode_rejects_non_object_json():
    with pytest.raises(MalformedCursorError):
        decode_cursor(_cursor([1, 2]))


@pytest.mark.parametrize("payload", [
    {"limit": "2"},
    {"offset": 1.5},
    {"limit": True},
    {"offset": None},
    {"limit": -1},
])
def test_decode_rejects_non_integer_or_negative_fields(payload):
    with pytest.raises(MalformedCursorError):
        decode_cursor(_cursor(payload))


def test_decode_accepts_integral_floats():
    assert decode_cursor(_cursor({"limit": 2.0, "offset": 4})) == CursorPosition(2, 4)


def test_decode_ignores_unknown_fields():
    assert decode_cursor(_cursor({"limit": 3, "version": 2})) == CursorPosition(3, None)


def test_decode_of_empty_object_leaves_fields_unset():
    assert decode_cursor(_cursor({})) == CursorPosition(None, None)


def test_resolve_without_pagination_is_unbounded():
    assert resolve_pagination(None) == CursorPosition(None, None)


def test_resolve_uses_request_values_without_cursor():
    pagination = EntityPagination(limit=10, offset=20)
    assert resolve_pagination(pagination) == CursorPosition(10, 20)


def test_resolve_cursor_overrides_field_by_field():
    pagination = EntityPagination(limit=10, offset=20, after=_cursor({"offset": 5}))
    assert resolve_pagination(pagination) == CursorPosition(10, 5)


def test_resolve_cursor_overrides_both_fields():
    pagination = EntityPagination(limit=10, offset=20, after=encode_cursor(3, 6))
    assert resolve_pagination(pagination) == CursorPosition(3, 6)


def test_resolve_raises_on_malformed_cursor():
    with pytest.raises(MalformedCursorError):
        resolve_pagination(EntityPagination(after="@@@"))
