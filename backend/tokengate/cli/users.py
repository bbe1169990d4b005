"""Flask CLI commands for account administration."""

from __future__ import annotations

import logging

import click
from flask import current_app
from flask.cli import with_appcontext
from marshmallow import ValidationError

from tokengate.api import deps
from tokengate.models.user import UserRole
from tokengate.schemas.common import validate_password_strength
from tokengate.services.identity.dto import AccessUpdateIn, RegisterIn
from tokengate.services.identity.service import IdentityService

LOGGER = logging.getLogger(__name__)


def _identity_service() -> IdentityService:
    ext = current_app.extensions
    return IdentityService(store=ext[deps.STORE_KEY], password_hasher=ext[deps.HASHER_KEY])


@click.group("users")
def users_cli() -> None:
    """Account administration commands."""


@users_cli.command("create-admin")
@click.argument("email")
@click.password_option(
    "--password",
    prompt="Password (ignored when promoting an existing user)",
    help="Password for a newly created admin.",
)
@with_appcontext
def create_admin(email: str, password: str) -> None:
    """Create an admin account for EMAIL, or promote the existing user."""
    service = _identity_service()
    store = current_app.extensions[deps.STORE_KEY]

    with store.reader() as uow:
        existing = uow.users.get_by_email(email)
        user_id = existing.id if existing is not None else None

    if user_id is not None:
        service.update_access(user_id, AccessUpdateIn(role=UserRole.ADMIN.value, is_active=True))
        LOGGER.info("cli.create_admin.promoted user_id=%s", user_id)
        click.echo(f"Promoted {email} to admin.")
        return

    try:
        validate_password_strength(password)
    except ValidationError as exc:
        raise click.BadParameter(" ".join(exc.messages), param_hint="--password") from exc

    created = service.register(RegisterIn(email=email, password=password), role=UserRole.ADMIN)
    LOGGER.info("cli.create_admin.created user_id=%s", created.user.id)
    click.echo(f"Created admin {email}.")
