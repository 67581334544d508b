from __future__ import annotations

import hashlib

import pytest

from open_kkt_sdk.exceptions import SerializationError
from open_kkt_sdk.signing import canonical_bytes, canonical_json, sign


def test_sign_is_invariant_to_key_order() -> None:
    first = {"app_id": "app", "nonce": "nonce_1", "type": "openShift", "command": {"author": "a", "report_type": "false"}}
    second = {"command": {"report_type": "false", "author": "a"}, "type": "openShift", "nonce": "nonce_1", "app_id": "app"}
    assert sign(first, "secret") == sign(second, "secret")


def test_sign_is_deterministic_lowercase_hex() -> None:
    params = {"app_id": "app", "nonce": "nonce_1"}
    signature = sign(params, "secret")
    assert signature == sign(params, "secret")
    assert len(signature) == 32
    assert signature == signature.lower()
    int(signature, 16)


@pytest.mark.parametrize(
    "changed",
    [
        {"app_id": "app-2", "nonce": "nonce_1", "token": "t"},
        {"app_id": "app", "nonce": "nonce_2", "token": "t"},
        {"app_id": "app", "nonce": "nonce_1", "token": "u"},
    ],
)
def test_changing_a_value_changes_signature(changed: dict) -> None:
    base = {"app_id": "app", "nonce": "nonce_1", "token": "t"}
    assert sign(base, "secret") != sign(changed, "secret")


def test_secret_is_part_of_signature() -> None:
    params = {"app_id": "app"}
    assert sign(params, "one") != sign(params, "two")


def test_canonical_form_is_compact_unicode_with_escaped_slashes() -> None:
    params = {"b": 1, "a": "Касса/1", "c": {"z": True, "y": None}}
    assert canonical_json(params) == '{"a":"Касса\\/1","b":1,"c":{"y":null,"z":true}}'
    assert canonical_bytes(params) == canonical_json(params).encode("utf-8")


def test_sign_matches_md5_of_canonical_form_and_secret() -> None:
    params = {"nonce": "nonce_1", "app_id": "app"}
    expected = hashlib.md5('{"app_id":"app","nonce":"nonce_1"}secret'.encode("utf-8")).hexdigest()
    assert sign(params, "secret") == expected


@pytest.mark.parametrize("value", [{1, 2}, object(), float("nan")])
def test_non_serializable_params_raise(value: object) -> None:
    with pytest.raises(SerializationError) as excinfo:
        sign({"app_id": "app", "bad": value}, "secret")
    assert excinfo.value.code == "SERIALIZATION_ERROR"


def test_canonical_form_escapes_line_separators() -> None:
    params = {"name": "a\u2028b\u2029c"}
    assert canonical_json(params) == '{"name":"a\\u2028b\\u2029c"}'
    expected = hashlib.md5('{"name":"a\\u2028b\\u2029c"}secret'.encode("utf-8")).hexdigest()
    assert sign(params, "secret") == expected
