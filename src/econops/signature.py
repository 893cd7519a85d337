"""Deterministic request signatures.

A signature identifies a request payload and doubles as its response-cache
key. It is the route string followed by the SHA-256 hex digest of the
payload's canonical JSON form::

    callsignature("/compute/pca", {"n_components": 1, "data": [[1, 2]]})
    # -> "/compute/pca" + 64 hex characters

Only the payload is hashed. The route is kept verbatim as a prefix, so the
digest part of two requests to different routes with the same payload is
identical and a route can be renamed server-side without invalidating the
digest.

Payloads are first normalised into :data:`JSONValue` (``None``, ``bool``,
``int``, ``float``, ``str``, lists and string-keyed dicts). Object keys are
sorted before hashing so that the signature does not depend on the order in
which a mapping was built.
"""

from __future__ import annotations

import hashlib
import json
import math
from collections.abc import Mapping
from typing import Any, Optional, Union

from econops.exceptions import SerializationError

JSONValue = Union[None, bool, int, float, str, list["JSONValue"], dict[str, "JSONValue"]]


def normalize_payload(value: Any, path: str = "$") -> JSONValue:
    """Validate *value* and return it as a plain :data:`JSONValue`.

    Tuples become lists and mappings become plain ``dict`` objects. Bools are
    kept distinct from ints.

    Args:
        value: Arbitrary request payload.
        path: Location of *value* inside the root payload, used in error
            messages.

    Returns:
        A structure containing only JSON-compatible Python types.

    Raises:
        SerializationError: On non-string mapping keys, NaN/infinite floats,
            or any value of an unsupported type.
    """
    if value is None or isinstance(value, (bool, str)):
        return value
    if isinstance(value, int):
        return int(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            raise SerializationError(f"Non-finite number {value!r} is not valid JSON", path)
        return value
    if isinstance(value, Mapping):
        result: dict[str, JSONValue] = {}
        for key, item in value.items():
            if not isinstance(key, str):
                raise SerializationError(
                    f"Object keys must be strings, got {type(key).__name__}", path
                )
            result[key] = normalize_payload(item, f"{path}.{key}")
        return result
    if isinstance(value, (list, tuple)):
        return [normalize_payload(item, f"{path}[{i}]") for i, item in enumerate(value)]
    raise SerializationError(
        f"Unsupported payload type {type(value).__name__}", path
    )


def canonical_json(payload: Any) -> str:
    """Return the canonical JSON text of *payload*.

    Keys are sorted, separators carry no whitespace and non-ASCII characters
    are kept as-is.

    Raises:
        SerializationError: If *payload* is not JSON-compatible.
    """
    normalized = normalize_payload(payload)
    return json.dumps(
        normalized,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
    )


def payload_digest(payload: Any) -> str:
    """SHA-256 hex digest of the canonical JSON form of *payload*."""
    return hashlib.sha256(canonical_json(payload).encode("utf-8")).hexdigest()


def callsignature(route: str, payload: Any = None, pregiven: Optional[str] = None) -> str:
    """Compute the signature for a request to *route* carrying *payload*.

    Args:
        route: API route, e.g. ``/compute/pca``. Used as the signature
            prefix; it does not enter the digest.
        payload: Request payload. ``None`` is treated as an empty object.
        pregiven: A precomputed signature. When given it is returned
            unchanged and the payload is not inspected.

    Returns:
        ``route`` followed by the payload digest.

    Raises:
        SerializationError: If *payload* is not JSON-compatible.
    """
    if pregiven is not None:
        return pregiven
    return f"{route}{payload_digest({} if payload is None else payload)}"
