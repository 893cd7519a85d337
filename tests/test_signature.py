"""Tests for payload normalisation and request signatures."""

from __future__ import annotations

import hashlib
from collections import OrderedDict

import pytest

from econops.exceptions import SerializationError
from econops.signature import callsignature, canonical_json, normalize_payload, payload_digest

PCA_PAYLOAD = {"data": [[1, 2], [3, 4]], "n_components": 1}


# ------------------------------------------------------------------ #
# Normalisation
# ------------------------------------------------------------------ #


class TestNormalizePayload:
    def test_scalars_pass_through(self) -> None:
        for value in (None, True, False, 0, -3, 1.5, "text", ""):
            assert normalize_payload(value) == value

    def test_bool_stays_bool(self) -> None:
        assert normalize_payload(True) is True

    def test_tuples_become_lists(self) -> None:
        assert normalize_payload({"data": ((1, 2), (3, 4))}) == {"data": [[1, 2], [3, 4]]}

    def test_mapping_becomes_dict(self) -> None:
        result = normalize_payload(OrderedDict([("b", 1), ("a", 2)]))
        assert type(result) is dict
        assert result == {"a": 2, "b": 1}

    def test_non_string_key_rejected(self) -> None:
        with pytest.raises(SerializationError, match="keys must be strings"):
            normalize_payload({1: "x"})

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_float_rejected(self, value: float) -> None:
        with pytest.raises(SerializationError):
            normalize_payload({"x": value})

    def test_unsupported_type_reports_path(self) -> None:
        with pytest.raises(SerializationError) as excinfo:
            normalize_payload({"data": [[1, object()]]})
        assert excinfo.value.path == "$.data[0][1]"
        assert "object" in str(excinfo.value)

    def test_set_rejected(self) -> None:
        with pytest.raises(SerializationError):
            normalize_payload({"ids": {1, 2}})


# ------------------------------------------------------------------ #
# Canonical JSON
# ------------------------------------------------------------------ #


class TestCanonicalJson:
    def test_keys_sorted_and_compact(self) -> None:
        assert canonical_json({"b": 1, "a": [1, 2]}) == '{"a":[1,2],"b":1}'

    def test_nested_keys_sorted(self) -> None:
        assert canonical_json({"z": {"y": 1, "x": 2}}) == '{"z":{"x":2,"y":1}}'

    def test_unicode_kept(self) -> None:
        assert canonical_json({"name": "Zürich"}) == '{"name":"Zürich"}'

    def test_digest_is_sha256_of_canonical_text(self) -> None:
        expected = hashlib.sha256(b'{"a":1}').hexdigest()
        assert payload_digest({"a": 1}) == expected


# ------------------------------------------------------------------ #
# Signatures
# ------------------------------------------------------------------ #


class TestCallSignature:
    def test_deterministic(self) -> None:
        route = "/compute/pca"
        assert callsignature(route, PCA_PAYLOAD) == callsignature(route, PCA_PAYLOAD)

    def test_key_order_does_not_matter(self) -> None:
        reordered = {"n_components": 1, "data": [[1, 2], [3, 4]]}
        assert callsignature("/compute/pca", PCA_PAYLOAD) == callsignature("/compute/pca", reordered)

    def test_differs_for_different_leaf(self) -> None:
        changed = {"data": [[1, 2], [3, 5]], "n_components": 1}
        assert callsignature("/compute/pca", PCA_PAYLOAD) != callsignature("/compute/pca", changed)

    def test_differs_for_int_vs_string(self) -> None:
        assert callsignature("/r", {"n": 1}) != callsignature("/r", {"n": "1"})

    def test_format_is_route_plus_hex_digest(self) -> None:
        sig = callsignature("/compute/pca", PCA_PAYLOAD)
        assert sig.startswith("/compute/pca")
        digest = sig[len("/compute/pca"):]
        assert len(digest) == 64
        assert digest == payload_digest(PCA_PAYLOAD)

    def test_digest_ignores_route(self) -> None:
        a = callsignature("/compute/pca", PCA_PAYLOAD)
        b = callsignature("/compute/pca/v2", PCA_PAYLOAD)
        assert a[len("/compute/pca"):] == b[len("/compute/pca/v2"):]
        assert a != b

    def test_none_payload_equals_empty_object(self) -> None:
        assert callsignature("/status") == callsignature("/status", {})

    def test_pregiven_returned_verbatim(self) -> None:
        assert callsignature("/compute/pca", {"x": object()}, pregiven="forced") == "forced"

    def test_unserialisable_payload_raises(self) -> None:
        with pytest.raises(SerializationError):
            callsignature("/compute/pca", {"x": object()})

    def test_known_value(self) -> None:
        """The signature is a pure function of its input, stable across runs."""
        assert callsignature("/compute/pca", PCA_PAYLOAD) == (
            "/compute/pca29fc87b9911d9bb38acb7ad6fe07bd10e1ee042a6e5a67f5044cddf4fe1e3048"
        )

    def test_known_value_for_empty_payload(self) -> None:
        assert callsignature("/status") == (
            "/status44136fa355b3678a1146ad16f7e8649e94fb4fc21fe77e8310c060f61caaff8a"
        )
