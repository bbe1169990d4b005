"""
Token issuance: stateless access tokens and persisted refresh tokens.

Access tokens are signed JWTs verified without a store round-trip; refresh
tokens are random opaque ids stored in ``refresh_tokens`` so they can be
revoked and rotated.
"""

from __future__ import annotations

import logging
import secrets
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError

from tokengate.models.refresh_token import RefreshToken
from tokengate.repositories.refresh_token import RefreshTokenRepository
from tokengate.services._shared.dto import Identity
from tokengate.services._shared.errors import TokenIssuanceError
from tokengate.services._shared.ports import TokenProvider
from tokengate.services.auth.dto import AuthTokenConfig, TokenPairOut

log = logging.getLogger(__name__)

# 32 random bytes -> 43 URL-safe characters
REFRESH_TOKEN_BYTES = 32


def new_refresh_token_id() -> str:
    """Return a fresh unguessable refresh token id."""
    return secrets.token_urlsafe(REFRESH_TOKEN_BYTES)


class TokenIssuer:
    """
    Issue access and refresh tokens for a verified identity.

    :param token_provider: Adapter signing access tokens.
    :param cfg: Lifetimes for both token kinds.
    """

    def __init__(self, *, token_provider: TokenProvider, cfg: AuthTokenConfig) -> None:
        self.tokens = token_provider
        self.cfg = cfg

    def issue_access_token(self, identity: Identity) -> str:
        """
        Sign an access token carrying ``sub`` (user id), ``email`` and ``role``.

        Expiry is declared in the token (``exp``) and enforced when the
        signature is verified.
        """
        return self.tokens.create_access_token(
            identity=identity.id,
            additional_claims={"email": identity.email, "role": identity.role},
            expires_delta=self.cfg.access_expires,
        )

    def issue_refresh_token(
        self, repo: RefreshTokenRepository, user_id: str, *, now: datetime
    ) -> str:
        """
        Persist a new refresh token row and return its id.

        Runs inside the caller's unit of work, so the row is committed (or
        rolled back) together with the rest of the operation.

        :raises TokenIssuanceError: If the row cannot be written.
        """
        token_id = new_refresh_token_id()
        try:
            repo.add(
                RefreshToken(
                    id=token_id,
                    user_id=user_id,
                    expires_at=now + self.cfg.refresh_expires,
                    revoked=False,
                )
            )
        except SQLAlchemyError as exc:
            log.error("refresh_token.persist_failed user_id=%s", user_id, exc_info=True)
            raise TokenIssuanceError() from exc
        return token_id

    def issue_pair(
        self, repo: RefreshTokenRepository, identity: Identity, *, now: datetime
    ) -> TokenPairOut:
        """Issue an access token and a persisted refresh token for ``identity``."""
        refresh_token = self.issue_refresh_token(repo, identity.id, now=now)
        access_token = self.issue_access_token(identity)
        return TokenPairOut(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_in=int(self.cfg.access_expires.total_seconds()),
        )


def identity_of(user) -> Identity:
    """Project a loaded user entity onto the token claims."""
    return Identity(id=user.id, email=user.email, role=getattr(user.role, "value", user.role))
