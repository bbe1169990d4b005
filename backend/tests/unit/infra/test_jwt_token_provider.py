"""Unit tests for the flask-jwt-extended token provider adapter."""

from __future__ import annotations

from datetime import timedelta

import pytest
from jwt.exceptions import ExpiredSignatureError, InvalidTokenError

from tokengate.infra.jwt.flask_jwt_token_provider import JWTTokenProvider


@pytest.fixture()
def provider(session) -> JWTTokenProvider:
    return JWTTokenProvider()


def test_round_trips_claims(provider):
    token = provider.create_access_token(
        identity="user-1", additional_claims={"email": "a@example.com", "role": "user"}
    )
    claims = provider.decode(token)

    assert claims["sub"] == "user-1"
    assert claims["email"] == "a@example.com"
    assert claims["role"] == "user"
    assert claims["type"] == "access"
    assert claims["exp"] - claims["iat"] == 15 * 60


def test_honours_explicit_lifetime(provider):
    token = provider.create_access_token(identity="user-1", expires_delta=timedelta(minutes=2))
    claims = provider.decode(token)
    assert claims["exp"] - claims["iat"] == 120


def test_rejects_expired_token(provider):
    token = provider.create_access_token(identity="user-1", expires_delta=timedelta(seconds=-1))
    with pytest.raises(ExpiredSignatureError):
        provider.decode(token)


def test_rejects_tampered_token(provider):
    token = provider.create_access_token(identity="user-1")
    header, payload, signature = token.split(".")
    tampered = ".".join([header, payload, signature[::-1]])
    with pytest.raises(InvalidTokenError):
        provider.decode(tampered)
