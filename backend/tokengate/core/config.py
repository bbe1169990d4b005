"""Application settings with environment-based simple classes."""

from __future__ import annotations

import os
from collections.abc import Mapping
from datetime import timedelta
from typing import Final

from dotenv import load_dotenv

# Public selector env var (keep neutral name to avoid collisions)
ENV_VAR: Final[str] = "APP_ENV"  # 'development' | 'testing' | 'production'

PLACEHOLDER_SECRETS: Final[frozenset[str]] = frozenset({"CHANGE_ME", "CHANGE_ME_JWT"})

# Load .env in development (no-op when the file is missing)
load_dotenv()


def env_bool(name: str, default: bool = False) -> bool:
    """Parse a boolean flag from an environment variable.

    Parameters
    ----------
    name: str
        Environment variable to inspect.
    default: bool, optional
        Value returned when the variable is unset. Defaults to ``False``.

    Returns
    -------
    bool
        ``True`` if the value resembles ``{"1", "true", "yes", "y", "on"}``
        ignoring case; otherwise ``False`` or ``default`` when missing.
    """
    val = os.getenv(name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "y", "on"}


def env_int(name: str, default: int) -> int:
    """Parse an integer from an environment variable, falling back to ``default``."""
    val = os.getenv(name)
    if val is None or not val.strip():
        return default
    return int(val)


class BaseConfig:
    """Base configuration shared across environments.

    Attributes
    ----------
    API_BASE_PREFIX: str
        Root path for registering API blueprints.
    APP_VERSION: str
        Version string reported by the health endpoint.
    SECRET_KEY: str
        Flask secret used for session signing.
    JWT_SECRET_KEY: str
        Key used by ``flask-jwt-extended`` for signing access tokens.
    JWT_ACCESS_TOKEN_EXPIRES: timedelta
        Lifetime of access tokens (``ACCESS_TOKEN_EXPIRES_MINUTES``).
    REFRESH_TOKEN_EXPIRES: timedelta
        Lifetime of persisted refresh tokens (``REFRESH_TOKEN_EXPIRES_DAYS``).
    PASSWORD_HASH_METHOD: str
        Werkzeug hashing method string carrying the work factor, e.g.
        ``"pbkdf2:sha256:600000"`` or ``"scrypt:32768:8:1"``.
    SQLALCHEMY_DATABASE_URI: str
        Database connection string consumed by SQLAlchemy.
    LOG_LEVEL: str
        Root logging verbosity (``INFO`` by default).
    CORS_ORIGINS: str
        Comma-separated list of allowed origins for CORS.
    RATELIMIT_DEFAULT: str
        Global Flask-Limiter quota per client address.
    AUTH_LOGIN_RATE_LIMIT: str
        Tighter quota applied to the login endpoint.
    EXPOSE_INTERNAL_ERRORS: bool
        When ``True`` unexpected errors surface their original message.
    REQUIRE_REAL_SECRETS: bool
        Enabled by :class:`ProductionConfig`; see :func:`ensure_production_secrets`.

    Notes
    -----
    Values are primarily sourced from environment variables, enabling
    configuration without code changes.
    """

    API_BASE_PREFIX = "/api"
    APP_VERSION = os.getenv("APP_VERSION", "1.0.0")

    # Secrets / security
    SECRET_KEY = os.getenv("SECRET_KEY", "CHANGE_ME")
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "CHANGE_ME_JWT")
    JWT_ALGORITHM = "HS256"
    JWT_TOKEN_LOCATION = ["headers"]
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(minutes=env_int("ACCESS_TOKEN_EXPIRES_MINUTES", 15))
    REFRESH_TOKEN_EXPIRES = timedelta(days=env_int("REFRESH_TOKEN_EXPIRES_DAYS", 7))
    REFRESH_TOKEN_COOKIE_NAME = "refresh_token"
    PASSWORD_HASH_METHOD = os.getenv("PASSWORD_HASH_METHOD", "pbkdf2:sha256:600000")

    # DB
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///./dev.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)

    # Flask & JSON
    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False

    # Logging & CORS
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:5173")
    CORS_MAX_AGE = env_int("CORS_MAX_AGE", 600)

    # Reverse proxy
    USE_PROXYFIX = env_bool("USE_PROXYFIX", True)
    PROXYFIX_HOPS = env_int("PROXYFIX_HOPS", 1)

    # Rate limiting (Flask-Limiter); Redis is used when REDIS_URL is set
    REDIS_URL = os.getenv("REDIS_URL")
    RATELIMIT_ENABLED = env_bool("RATELIMIT_ENABLED", True)
    RATELIMIT_DEFAULT = os.getenv("RATELIMIT_DEFAULT", "100 per 15 minutes")
    RATELIMIT_STORAGE_URI = os.getenv("RATELIMIT_STORAGE_URI") or REDIS_URL or "memory://"
    RATELIMIT_HEADERS_ENABLED = True
    AUTH_LOGIN_RATE_LIMIT = os.getenv("AUTH_LOGIN_RATE_LIMIT", "10 per minute")

    # Error surface
    EXPOSE_INTERNAL_ERRORS = False

    # Startup refuses placeholder SECRET_KEY / JWT_SECRET_KEY when set
    REQUIRE_REAL_SECRETS = False

    # Flask built-ins
    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Configuration tailored for local development.

    Notes
    -----
    Enables debug mode by default and surfaces the original message of
    unexpected errors in responses.
    """

    DEBUG = env_bool("FLASK_DEBUG", True)
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)
    EXPOSE_INTERNAL_ERRORS = env_bool("EXPOSE_INTERNAL_ERRORS", True)


class TestingConfig(BaseConfig):
    """Configuration for automated test runs.

    Notes
    -----
    - Forces ``TESTING`` mode and disables debug logs.
    - Uses an in-memory SQLite database unless ``TEST_DATABASE_URL`` is set.
    - Uses a cheap hashing work factor and disables rate limiting.
    """

    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)
    SECRET_KEY = "testing-secret-key"
    JWT_SECRET_KEY = "testing-jwt-secret-key-with-enough-length"
    PASSWORD_HASH_METHOD = "pbkdf2:sha256:1000"
    RATELIMIT_ENABLED = False
    RATELIMIT_STORAGE_URI = "memory://"
    REDIS_URL = None


class ProductionConfig(BaseConfig):
    """Configuration defaults for production deployments.

    Notes
    -----
    Keeps debug and SQL echoing disabled; unexpected errors are rendered with
    a generic message only.
    """

    DEBUG = False
    SQLALCHEMY_ECHO = False
    PROPAGATE_EXCEPTIONS = False
    EXPOSE_INTERNAL_ERRORS = False
    REQUIRE_REAL_SECRETS = True


# Map names -> classes (simple, explicit)
CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config(name: str | type[BaseConfig] | object | None = None) -> type[BaseConfig] | object:
    """Return the configuration class for ``name`` or, by default, ``APP_ENV``.

    Non-string values (config classes or objects) are returned unchanged.

    Returns
    -------
    type[BaseConfig]
        Class to pass to :meth:`flask.Config.from_object`.

    Notes
    -----
    Falls back to :class:`DevelopmentConfig` when ``APP_ENV`` is unset or
    unknown.
    """
    if name is not None and not isinstance(name, str):
        return name
    key = (name or os.getenv(ENV_VAR, "development")).strip().lower()
    return CONFIG_MAP.get(key, DevelopmentConfig)


def ensure_production_secrets(config: Mapping[str, object]) -> None:
    """Refuse to boot a production app signed with placeholder secrets.

    The check follows the loaded configuration (``REQUIRE_REAL_SECRETS``),
    not ``APP_ENV``, so ``create_app("production")`` is guarded as well.

    :param config: Loaded Flask configuration mapping.
    :raises RuntimeError: If ``SECRET_KEY`` or ``JWT_SECRET_KEY`` is a placeholder.
    """
    if not config.get("REQUIRE_REAL_SECRETS"):
        return
    for key in ("SECRET_KEY", "JWT_SECRET_KEY"):
        if config.get(key) in PLACEHOLDER_SECRETS:
            raise RuntimeError(f"{key} must be set in production.")
