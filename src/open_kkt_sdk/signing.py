"""Request signing.

The server recomputes the signature from the parameters it receives, so the
client must produce the exact same byte string: keys sorted, no whitespace,
UTF-8 with non-ASCII kept literal and ``/`` escaped as ``\\/``.
"""
from __future__ import annotations

import hashlib
import json
from collections.abc import Mapping
from typing import Any

from .exceptions import SerializationError

SIGN_HEADER = "sign"


def canonical_json(params: Mapping[str, Any]) -> str:
    try:
        encoded = json.dumps(
            params,
            ensure_ascii=False,
            separators=(",", ":"),
            sort_keys=True,
            allow_nan=False,
        )
    except (TypeError, ValueError) as exc:
        raise SerializationError(
            code="SERIALIZATION_ERROR",
            message=f"Request params are not JSON serializable: {exc}",
            details={"type": type(exc).__name__},
        ) from exc
    # "/", U+2028 and U+2029 can only occur inside string literals of the encoded document.
    return encoded.replace("/", "\\/").replace("\u2028", "\\u2028").replace("\u2029", "\\u2029")


def canonical_bytes(params: Mapping[str, Any]) -> bytes:
    return canonical_json(params).encode("utf-8")


def sign(params: Mapping[str, Any], secret: str) -> str:
    """Return the md5 hex digest of the canonical params followed by the secret.

    md5 is what the server verifies against; it is a compatibility
    requirement and gives no cryptographic strength.
    """
    payload = canonical_bytes(params) + secret.encode("utf-8")
    return hashlib.md5(payload).hexdigest()
