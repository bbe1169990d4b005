# tokengate/services/auth/service.py
from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError

from tokengate.services._shared.base import BaseService, ServiceContext
from tokengate.services._shared.dto import SafeUserOut
from tokengate.services._shared.errors import (
    AccountInactiveError,
    InternalServiceError,
    InvalidCredentialsError,
    InvalidOrExpiredTokenError,
)
from tokengate.services._shared.ports import PasswordHasher, TokenProvider
from tokengate.services.auth.dto import (
    AuthResultOut,
    AuthTokenConfig,
    LoginIn,
    LogoutIn,
    RefreshIn,
    TokenPairOut,
)
from tokengate.services.auth.tokens import TokenIssuer, identity_of
from tokengate.uow import CredentialStore

log = logging.getLogger(__name__)


class AuthService(BaseService):
    """
    Authentication lifecycle service (login / refresh / logout).

    Session states: anonymous -> authenticated (login) -> rotated (each
    refresh) -> revoked (logout or rotation of the presented token).

    Access tokens are issued via a pluggable :class:`TokenProvider`; refresh
    tokens are rows in the credential store, rotated atomically: revoking the
    presented token and persisting its successor happen in one transaction.
    """

    def __init__(
        self,
        *,
        store: CredentialStore,
        token_provider: TokenProvider,
        password_hasher: PasswordHasher,
        token_cfg: AuthTokenConfig | None = None,
        ctx: ServiceContext | None = None,
    ) -> None:
        """
        Initialize the service with its dependencies.

        :param store: Credential store handle.
        :param token_provider: Adapter for signing access tokens.
        :param password_hasher: Verifies submitted passwords.
        :param token_cfg: Access/Refresh expiry configuration.
        """
        super().__init__(store=store, ctx=ctx)
        self.hasher = password_hasher
        self.cfg = token_cfg or AuthTokenConfig()
        self.issuer = TokenIssuer(token_provider=token_provider, cfg=self.cfg)

    # ------------------------------------------------------------------ #
    # Login
    # ------------------------------------------------------------------ #

    def login(self, dto: LoginIn) -> AuthResultOut:
        """
        Authenticate credentials and issue a fresh token pair.

        Unknown email and wrong password raise the same error so callers
        cannot probe which emails are registered. The active flag is checked
        before the password.

        :param dto: Login input.
        :returns: Safe user view and token pair.
        :raises InvalidCredentialsError: Unknown email or wrong password.
        :raises AccountInactiveError: The account is deactivated.
        :raises InternalServiceError: The store failed after verification.
        """
        with self.ro_uow() as uow:
            user = uow.users.get_by_email(dto.email)
            if user is None:
                log.warning("auth.login.rejected reason=unknown_email")
                raise InvalidCredentialsError()
            if not user.is_active:
                log.warning("auth.login.rejected reason=inactive user_id=%s", user.id)
                raise AccountInactiveError()
            if not self.hasher.verify(dto.password, user.password_hash):
                log.warning("auth.login.rejected reason=bad_password user_id=%s", user.id)
                raise InvalidCredentialsError()
            user_id = user.id

        try:
            with self.rw_uow() as uow:
                user = uow.users.get_for_update(user_id)
                if user is None:
                    raise InvalidCredentialsError()
                now = self.now_utc()
                uow.users.touch_last_login(user, now)
                tokens = self.issuer.issue_pair(uow.refresh_tokens, identity_of(user), now=now)
                view = SafeUserOut.from_model(user)
        except SQLAlchemyError as exc:
            log.error("auth.login.store_error user_id=%s", user_id, exc_info=True)
            raise InternalServiceError("Authentication failed") from exc

        log.info("auth.login.succeeded user_id=%s", user_id)
        return AuthResultOut(user=view, tokens=tokens)

    # ------------------------------------------------------------------ #
    # Refresh with atomic rotation
    # ------------------------------------------------------------------ #

    def refresh(self, dto: RefreshIn) -> TokenPairOut:
        """
        Rotate a refresh token and emit a new token pair.

        Security
        --------
        - Only a token with ``revoked = false AND expires_at > now`` is accepted.
        - The presented token is revoked with a compare-and-set in the same
          transaction that persists its successor, so two concurrent refreshes
          of one token cannot both succeed and there is no window in which
          both tokens are valid.
        - The owner's current email/role go into the new access token.

        :raises InvalidOrExpiredTokenError: Unknown, revoked, expired or
            concurrently consumed token.
        :raises AccountInactiveError: The owner was deactivated.
        :raises InternalServiceError: The store failed.
        """
        try:
            with self.rw_uow() as uow:
                now = self.now_utc()
                found = uow.refresh_tokens.find_usable_with_user(dto.refresh_token, now)
                if found is None:
                    log.warning("auth.refresh.rejected reason=unusable_token")
                    raise InvalidOrExpiredTokenError()
                _, user = found
                if not user.is_active:
                    log.warning("auth.refresh.rejected reason=inactive user_id=%s", user.id)
                    raise AccountInactiveError()

                if not uow.refresh_tokens.revoke_if_usable(dto.refresh_token, now):
                    log.warning("auth.refresh.rejected reason=lost_race user_id=%s", user.id)
                    raise InvalidOrExpiredTokenError()

                tokens = self.issuer.issue_pair(uow.refresh_tokens, identity_of(user), now=now)
        except SQLAlchemyError as exc:
            log.error("auth.refresh.store_error", exc_info=True)
            raise InternalServiceError("Failed to refresh token") from exc

        return tokens

    # ------------------------------------------------------------------ #
    # Logout
    # ------------------------------------------------------------------ #

    def logout(self, dto: LogoutIn) -> bool:
        """
        Revoke the provided refresh token.

        Idempotent: a missing, unknown or already revoked token is a success.

        :returns: ``True`` if a live token was revoked by this call.
        :raises InternalServiceError: The store failed.
        """
        if not dto.refresh_token:
            return False
        try:
            with self.rw_uow() as uow:
                revoked = uow.refresh_tokens.revoke(dto.refresh_token)
        except SQLAlchemyError as exc:
            log.error("auth.logout.store_error", exc_info=True)
            raise InternalServiceError("Failed to revoke token") from exc
        return revoked

    # ------------------------------------------------------------------ #
    # Registration hook
    # ------------------------------------------------------------------ #

    def issue_for(self, uow, user) -> TokenPairOut:
        """
        Issue a pair for a user created inside ``uow``.

        Used as the ``issue_tokens`` hook of
        :meth:`~tokengate.services.identity.service.IdentityService.register`
        so the account and its first refresh token commit together.
        """
        return self.issuer.issue_pair(uow.refresh_tokens, identity_of(user), now=self.now_utc())
