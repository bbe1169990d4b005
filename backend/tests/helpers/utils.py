"""Tiny helpers shared across test modules."""

from __future__ import annotations


def bearer(access_token: str) -> dict[str, str]:
    """Return an ``Authorization`` header carrying ``access_token``.

    Parameters
    ----------
    access_token: str
        Signed JWT as returned by the login or refresh endpoints.
    """
    return {"Authorization": f"Bearer {access_token}"}
