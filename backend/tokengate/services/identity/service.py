"""
IdentityService
===============

Aggregate service responsible for managing the `User` aggregate:
- Registration with email uniqueness
- Profile reads and updates
- Password lifecycle
- Administrative access changes (role, active flag)
- Identity resolution for the authorization middleware
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from sqlalchemy.exc import IntegrityError

from tokengate.models.user import User, UserRole
from tokengate.repositories.user import UserRepository
from tokengate.services._shared.base import BaseService, ServiceContext
from tokengate.services._shared.dto import Identity, SafeUserOut
from tokengate.services._shared.errors import (
    ConflictError,
    InvalidCredentialsError,
    NotFoundError,
    ServiceError,
    violates,
)
from tokengate.services._shared.ports import PasswordHasher
from tokengate.services.auth.dto import TokenPairOut
from tokengate.services.auth.tokens import identity_of
from tokengate.services.identity.dto import (
    AccessUpdateIn,
    PasswordChangeIn,
    ProfileUpdateIn,
    RegisterIn,
    RegistrationOut,
)
from tokengate.uow import CredentialStore

log = logging.getLogger(__name__)

DUPLICATE_USER = "User with this email already exists"
EMAIL_IN_USE = "Email is already in use"

TokenHook = Callable[[Any, User], TokenPairOut]


class IdentityService(BaseService):
    """
    Application service for the `User` aggregate.

    Responsibilities
    ----------------
    - Register users ensuring email uniqueness.
    - Retrieve and update profile fields safely.
    - Manage password lifecycle.
    - Change role / active flag on behalf of administrators.
    """

    def __init__(
        self,
        *,
        store: CredentialStore,
        password_hasher: PasswordHasher,
        ctx: ServiceContext | None = None,
    ) -> None:
        super().__init__(store=store, ctx=ctx)
        self.hasher = password_hasher

    # --------------------------------------------------------------------- #
    # Registration
    # --------------------------------------------------------------------- #

    def register(
        self,
        dto: RegisterIn,
        issue_tokens: TokenHook | None = None,
        *,
        role: UserRole = UserRole.USER,
    ) -> RegistrationOut:
        """
        Register a new user.

        The existence check, the insert and (when ``issue_tokens`` is given)
        the first refresh token share one transaction; the unique constraint
        is the final arbiter for concurrent registrations.

        :param dto: User registration input DTO.
        :type dto: RegisterIn
        :param issue_tokens: Optional ``(uow, user) -> TokenPairOut`` hook.
        :param role: Initial role. Only operator tooling passes anything but
            ``UserRole.USER``; the HTTP route never does.
        :returns: Safe user view plus tokens (if issued).
        :rtype: RegistrationOut
        :raises ConflictError: If the email is already registered.
        """
        password_hash = self.hasher.hash(dto.password)

        try:
            with self.rw_uow() as uow:
                repo: UserRepository = uow.users
                if repo.exists_by_email(dto.email):
                    raise ConflictError("User", DUPLICATE_USER)

                user = repo.model(
                    email=dto.email,
                    password_hash=password_hash,
                    first_name=dto.first_name,
                    last_name=dto.last_name,
                    role=role,
                    is_active=True,
                )
                repo.add(user)
                tokens = issue_tokens(uow, user) if issue_tokens else None
                view = SafeUserOut.from_model(user)
        except IntegrityError as exc:
            if violates(exc, "uq_users_email"):
                raise ConflictError("User", DUPLICATE_USER) from exc
            raise

        log.info("identity.registered user_id=%s", view.id)
        return RegistrationOut(user=view, tokens=tokens)

    # --------------------------------------------------------------------- #
    # Retrieval
    # --------------------------------------------------------------------- #

    def get_profile(self, user_id: str) -> SafeUserOut:
        """
        Retrieve a user by identifier.

        :param user_id: User primary key.
        :type user_id: str
        :returns: Safe user DTO.
        :rtype: SafeUserOut
        :raises NotFoundError: If user does not exist.
        """
        with self.ro_uow() as uow:
            user = uow.users.get(user_id)
            if user is None:
                raise NotFoundError("User", user_id)
            return SafeUserOut.from_model(user)

    def resolve_identity(self, user_id: str) -> Identity | None:
        """
        Return the current identity of an active user, else ``None``.

        Used by the authorization middleware so role changes and deactivation
        apply to the next request.
        """
        with self.ro_uow() as uow:
            user = uow.users.get(user_id)
            if user is None or not user.is_active:
                return None
            return identity_of(user)

    # --------------------------------------------------------------------- #
    # Update profile
    # --------------------------------------------------------------------- #

    def update_profile(self, user_id: str, dto: ProfileUpdateIn) -> SafeUserOut:
        """
        Update profile fields (first_name, last_name, email).

        :param user_id: User identifier.
        :type user_id: str
        :param dto: Input DTO containing new values.
        :type dto: ProfileUpdateIn
        :returns: Updated user DTO.
        :rtype: SafeUserOut
        :raises NotFoundError: When user not found.
        :raises ConflictError: When the email belongs to another user.
        """
        updates = dto.changes()
        try:
            with self.rw_uow() as uow:
                repo: UserRepository = uow.users
                user = repo.get_for_update(user_id)
                if user is None:
                    raise NotFoundError("User", user_id)

                email = updates.get("email")
                if email is not None and repo.email_taken_by_other(email, user_id):
                    raise ConflictError("User", EMAIL_IN_USE)

                repo.update(user, **updates)
                view = SafeUserOut.from_model(user)
        except IntegrityError as exc:
            if violates(exc, "uq_users_email"):
                raise ConflictError("User", EMAIL_IN_USE) from exc
            raise
        return view

    # --------------------------------------------------------------------- #
    # Password management
    # --------------------------------------------------------------------- #

    def change_password(self, user_id: str, dto: PasswordChangeIn) -> int:
        """
        Change a user's password after verifying the current one.

        Every outstanding refresh token of the user is revoked, so other
        sessions must log in again once their access token expires.

        :param user_id: User identifier.
        :param dto: Input DTO containing current and new passwords.
        :type dto: PasswordChangeIn
        :returns: Number of refresh tokens revoked.
        :raises NotFoundError: When user not found.
        :raises InvalidCredentialsError: When the current password is wrong.
        """
        with self.rw_uow() as uow:
            user = uow.users.get_for_update(user_id)
            if user is None:
                raise NotFoundError("User", user_id)

            if not self.hasher.verify(dto.current_password, user.password_hash):
                log.warning("identity.password_change.rejected user_id=%s", user_id)
                raise InvalidCredentialsError("Current password is incorrect")

            uow.users.update_password(user, self.hasher.hash(dto.new_password))
            revoked = uow.refresh_tokens.revoke_all_for_user(user_id)

        log.info("identity.password_changed user_id=%s revoked=%d", user_id, revoked)
        return revoked

    # --------------------------------------------------------------------- #
    # Access management
    # --------------------------------------------------------------------- #

    def update_access(self, user_id: str, dto: AccessUpdateIn) -> SafeUserOut:
        """
        Change the role and/or active flag of a user.

        Deactivation revokes all of the user's refresh tokens.

        :raises NotFoundError: When user not found.
        :raises ServiceError: When the role is unknown.
        """
        with self.rw_uow() as uow:
            user = uow.users.get_for_update(user_id)
            if user is None:
                raise NotFoundError("User", user_id)

            if dto.role is not None:
                try:
                    user.role = UserRole(dto.role)
                except ValueError as exc:
                    raise ServiceError(f"Unknown role: {dto.role}") from exc
            if dto.is_active is not None:
                user.is_active = dto.is_active
            uow.users.flush()

            if dto.is_active is False:
                uow.refresh_tokens.revoke_all_for_user(user_id)
            view = SafeUserOut.from_model(user)

        log.info(
            "identity.access_updated user_id=%s role=%s is_active=%s actor_id=%s",
            user_id,
            view.role,
            view.is_active,
            self.ctx.actor_id,
        )
        return view
