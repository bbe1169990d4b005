"""Unit tests for the role grant table."""

from __future__ import annotations

import pytest

from tokengate.services._shared.policies.roles import ANY_ROLE, grants_for, role_satisfies


@pytest.mark.parametrize("required", ["user", "editor", "admin"])
def test_admin_satisfies_every_role(required):
    assert role_satisfies("admin", required) is True


@pytest.mark.parametrize(
    ("required", "expected"),
    [("user", True), ("editor", False), ("admin", False)],
)
def test_user_satisfies_only_user(required, expected):
    assert role_satisfies("user", required) is expected


def test_unknown_role_satisfies_only_itself():
    assert grants_for("auditor") == frozenset({"auditor"})
    assert role_satisfies("auditor", "auditor") is True
    assert role_satisfies("auditor", "user") is False


def test_admin_is_wildcard():
    assert ANY_ROLE in grants_for("admin")
