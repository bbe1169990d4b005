"""Role grants: the single place where role checks are decided.

Each role maps to the set of roles it satisfies. ``ANY_ROLE`` marks a
super-role that satisfies every requirement, including roles this service
does not define (``require_role("editor")``).
"""

from __future__ import annotations

from collections.abc import Mapping

ANY_ROLE = "*"

ROLE_GRANTS: Mapping[str, frozenset[str]] = {
    "admin": frozenset({ANY_ROLE}),
    "user": frozenset({"user"}),
}


def grants_for(role: str) -> frozenset[str]:
    """Return the roles satisfied by ``role``; unknown roles satisfy only themselves."""
    return ROLE_GRANTS.get(role, frozenset({role}))


def role_satisfies(role: str, required: str) -> bool:
    """Return True if an identity holding ``role`` passes ``require_role(required)``."""
    grants = grants_for(role)
    return ANY_ROLE in grants or required in grants
