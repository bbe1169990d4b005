"""Unit tests for the Werkzeug-backed password hasher."""

from __future__ import annotations

import pytest

from tokengate.infra.security.werkzeug_password_hasher import WerkzeugPasswordHasher


@pytest.fixture(scope="module")
def hasher() -> WerkzeugPasswordHasher:
    return WerkzeugPasswordHasher(method="pbkdf2:sha256:1000")


def test_hash_is_salted_and_verifiable(hasher):
    first = hasher.hash("S3cretPass")
    second = hasher.hash("S3cretPass")

    assert first != second
    assert first.startswith("pbkdf2:sha256:1000$")
    assert hasher.verify("S3cretPass", first)
    assert hasher.verify("S3cretPass", second)


def test_wrong_password_does_not_verify(hasher):
    assert hasher.verify("Wr0ngPass", hasher.hash("S3cretPass")) is False


@pytest.mark.parametrize("malformed", ["", "not-a-hash", "bogus$salt$digest"])
def test_malformed_hash_returns_false(hasher, malformed):
    assert hasher.verify("S3cretPass", malformed) is False


def test_scrypt_method():
    hasher = WerkzeugPasswordHasher(method="scrypt:16384:8:1")
    hashed = hasher.hash("S3cretPass")
    assert hashed.startswith("scrypt:")
    assert hasher.verify("S3cretPass", hashed)
