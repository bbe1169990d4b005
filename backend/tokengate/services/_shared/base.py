# tokengate/services/_shared/base.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime

from tokengate.core import errors as api_errors
from tokengate.services._shared.errors import (
    AccountInactiveError,
    ConflictError,
    InternalServiceError,
    InvalidCredentialsError,
    InvalidOrExpiredTokenError,
    NotFoundError,
    ServiceError,
    TokenIssuanceError,
)
from tokengate.uow import CredentialStore, SQLAlchemyReadOnlyUnitOfWork, SQLAlchemyUnitOfWork

# Domain error -> (HTTP status). First match along the MRO wins.
ERROR_STATUS: dict[type[ServiceError], int] = {
    InvalidCredentialsError: 401,
    InvalidOrExpiredTokenError: 401,
    AccountInactiveError: 403,
    NotFoundError: 404,
    ConflictError: 409,
    TokenIssuanceError: 500,
    InternalServiceError: 500,
}


@dataclass(slots=True)
class ServiceContext:
    """
    Carry cross-cutting request-scoped data.

    :param actor_id: Authenticated user identifier.
    :param request_id: Correlation id for logging/tracing.
    """

    actor_id: str | None = None
    request_id: str | None = None


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Provide helpers to run read-only and read-write units of work on the
      injected :class:`~tokengate.uow.CredentialStore`.
    * Centralize error translation.
    * Keep services thin, orchestration-only, no web/ORM leakage.

    Notes
    -----
    - Services never touch the global session; always use a Unit of Work.
    """

    def __init__(self, *, store: CredentialStore, ctx: ServiceContext | None = None) -> None:
        """
        Initialize the base service.

        :param store: Store handle used to open units of work.
        :type store: CredentialStore
        :param ctx: Optional request-scoped context (tracing).
        :type ctx: ServiceContext | None
        """
        self.store = store
        self.ctx = ctx or ServiceContext()

    # -------------------------- UoW helpers ---------------------------------

    def rw_uow(self) -> SQLAlchemyUnitOfWork:
        """
        Create a read-write Unit of Work.

        :returns: Read-write UoW instance.
        :rtype: SQLAlchemyUnitOfWork
        """
        return self.store.transaction()

    def ro_uow(self) -> SQLAlchemyReadOnlyUnitOfWork:
        """
        Create a read-only Unit of Work.

        :returns: Read-only UoW instance.
        :rtype: SQLAlchemyReadOnlyUnitOfWork
        """
        return self.store.reader()

    @staticmethod
    def now_utc() -> datetime:
        return datetime.now(UTC)

    # -------------------------- Error handling ------------------------------

    @staticmethod
    def translate_exceptions(exc: ServiceError) -> api_errors.APIError:
        """
        Map domain/service-level errors to API-level (HTTP) errors.

        :param exc: Exception raised within the service.
        :type exc: ServiceError
        :returns: Translated exception ready to be rendered.
        :rtype: APIError
        """
        for klass in type(exc).__mro__:
            status = ERROR_STATUS.get(klass)
            if status is not None:
                return api_errors.APIError(message=str(exc), status_code=status)

        # Any other ServiceError subclass -> 400 Bad Request
        return api_errors.APIError(message=str(exc), status_code=400)
