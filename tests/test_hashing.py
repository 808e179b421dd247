import re

import pytest
from eth_utils import keccak

from src.attestation.hashing import AttestationHasher
from src.attestation.manifest import ZERO_ADDRESS

SCHEMA = "uint256 eventId, string[] weights, string comment"


def test_canonicalize_sorts_keys():
    assert AttestationHasher.canonicalize({"b": 1, "a": [1, "x"]}) == b'{"a":[1,"x"],"b":1}'


def test_sha256_is_key_order_independent():
    first = AttestationHasher.compute_sha256({"a": 1, "b": "two"})
    second = AttestationHasher.compute_sha256({"b": "two", "a": 1})
    assert first == second
    assert re.match(r'^[a-f0-9]{64}$', first)


def test_canonicalize_failure_is_value_error():
    with pytest.raises(ValueError):
        AttestationHasher.canonicalize({"a": object()})


def test_schema_uid_matches_packed_encoding():
    expected = "0x" + keccak(SCHEMA.encode('utf-8') + b'\x00' * 20 + b'\x01').hex()
    assert AttestationHasher.compute_schema_uid(SCHEMA, ZERO_ADDRESS, True) == expected


def test_schema_uid_depends_on_resolver_and_revocable():
    base = AttestationHasher.compute_schema_uid(SCHEMA)
    assert base != AttestationHasher.compute_schema_uid(SCHEMA, revocable=False)
    assert base != AttestationHasher.compute_schema_uid(SCHEMA, resolver="0x" + "11" * 20)
    assert re.match(r'^0x[a-f0-9]{64}$', base)
