"""Application factory wiring Flask extensions, services and blueprints."""

from __future__ import annotations

from flask import Flask

from tokengate.core.config import BaseConfig, ensure_production_secrets, get_config
from tokengate.core.logger import configure_logging, init_app as init_logging


def _register_services(app: Flask) -> None:
    """Build the credential dependencies once and expose them to the API layer."""

    from tokengate.api import deps
    from tokengate.core.extensions import db
    from tokengate.infra.jwt.flask_jwt_token_provider import JWTTokenProvider
    from tokengate.infra.security.werkzeug_password_hasher import WerkzeugPasswordHasher
    from tokengate.services.auth.dto import AuthTokenConfig
    from tokengate.uow import CredentialStore

    app.extensions[deps.STORE_KEY] = CredentialStore(lambda: db.session)
    app.extensions[deps.HASHER_KEY] = WerkzeugPasswordHasher(
        method=app.config["PASSWORD_HASH_METHOD"]
    )
    app.extensions[deps.TOKEN_PROVIDER_KEY] = JWTTokenProvider()
    app.extensions[deps.TOKEN_CONFIG_KEY] = AuthTokenConfig.from_mapping(app.config)


def create_app(
    config: str | type[BaseConfig] | object | None = None,
    *,
    instance_relative_config: bool = True,
    instance_config_filename: str = "config.py",
) -> Flask:
    """Build and configure the Flask application."""

    app = Flask(__name__, instance_relative_config=instance_relative_config)

    app.config.from_object(get_config(config))
    if instance_relative_config and instance_config_filename:
        app.config.from_pyfile(instance_config_filename, silent=True)
    ensure_production_secrets(app.config)

    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    from tokengate.core import proxy

    proxy.init_app(app)

    from tokengate.core import extensions

    extensions.init_app(app)

    init_logging(app)

    from tokengate.core import cors

    cors.init_app(app)

    _register_services(app)

    from tokengate.api import init_app as init_api

    init_api(app)

    from tokengate.core import errors

    errors.init_app(app)

    from tokengate import cli as app_cli

    app_cli.init_app(app)

    return app
