"""Application settings with environment-based simple classes."""

from __future__ import annotations

import os
from collections.abc import Mapping
from datetime import timedelta
from typing import Final

from dotenv import load_dotenv

# Public selector env var (keep neutral name to avoid collisions)
ENV_VAR: Final[str] = "APP_ENV"  # 'development' | 'testing' | 'production'


# Load .env during development (no-op when missing)
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
    """Parse an integer from an environment variable, falling back on garbage."""
    val = os.getenv(name)
    if val is None or not val.strip():
        return default
    try:
        return int(val)
    except ValueError:
        return default


def env_float(name: str, default: float) -> float:
    """Parse a float from an environment variable, falling back on garbage."""
    val = os.getenv(name)
    if val is None or not val.strip():
        return default
    try:
        return float(val)
    except ValueError:
        return default


class BaseConfig:
    """Base configuration shared across environments.

    Attributes
    ----------
    API_BASE_PREFIX: str
        Root path for registering API blueprints.
    API_BASE_URL: str
        Public base URL of the service. Used as token issuer and audience.
    SECRET_KEY: str
        Flask secret used for session signing.
    JWT_SECRET: str
        Symmetric secret used to sign session tokens (HS256).
    JWT_ACCESS_TOKEN_EXPIRES: datetime.timedelta
        Lifetime of an issued session token.
    SQLALCHEMY_DATABASE_URI: str
        Database connection string consumed by SQLAlchemy.
    REDIS_URL: str
        Connection URL of the cache. Empty disables caching entirely.
    CACHE_DEFAULT_TTL: int
        TTL in seconds applied when a cache write does not pass one.
        ``0`` stores keys without expiry.
    FAVORITES_CACHE_TTL: int
        TTL in seconds for cached favorite lists and lookups.
    PRODUCT_API_URL: str
        Base URL of the external product catalog.
    PRODUCT_API_CONNECT_TIMEOUT / PRODUCT_API_TIMEOUT: float
        Connect and read timeouts for catalog calls, in seconds.
    LOG_LEVEL: str
        Root logging verbosity (``INFO`` by default).
    CORS_ORIGINS: str
        Comma-separated list of allowed origins for CORS.
    USE_PROXYFIX / PROXYFIX_HOPS: bool / int
        Whether to trust ``X-Forwarded-*`` headers, and from how many proxies.

    Notes
    -----
    Values are primarily sourced from environment variables, enabling
    configuration without code changes.
    """

    API_BASE_PREFIX = "/api"
    API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8080")

    # Secrets / security
    SECRET_KEY = os.getenv("SECRET_KEY", "CHANGE_ME")
    JWT_SECRET = os.getenv("JWT_SECRET", "CHANGE_ME_JWT")
    JWT_ALGORITHM = "HS256"
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=24)

    # DB
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///./dev.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)

    # Cache
    REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")
    REDIS_SOCKET_TIMEOUT = env_float("REDIS_SOCKET_TIMEOUT", 2.0)
    CACHE_DEFAULT_TTL = env_int("CACHE_DEFAULT_TTL", 3600)
    FAVORITES_CACHE_TTL = env_int("FAVORITES_CACHE_TTL", 1800)

    # External product catalog
    PRODUCT_API_URL = os.getenv("PRODUCT_API_URL", "https://fakestoreapi.com")
    PRODUCT_API_CONNECT_TIMEOUT = env_float("PRODUCT_API_CONNECT_TIMEOUT", 5.0)
    PRODUCT_API_TIMEOUT = env_float("PRODUCT_API_TIMEOUT", 10.0)

    APP_VERSION = os.getenv("APP_VERSION", "dev")

    # Flask & JSON
    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False

    # Logging & CORS
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")

    # Reverse proxy
    USE_PROXYFIX = env_bool("USE_PROXYFIX", True)
    PROXYFIX_HOPS = env_int("PROXYFIX_HOPS", 1)

    # Flask built-ins
    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Configuration tailored for local development."""

    DEBUG = env_bool("FLASK_DEBUG", True)
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)
    CORS_MAX_AGE = 600  # 10 minutes


class TestingConfig(BaseConfig):
    """Configuration for automated test runs.

    Notes
    -----
    - Forces ``TESTING`` mode and disables debug logs.
    - Uses an in-memory SQLite database unless ``TEST_DATABASE_URL`` is set.
    - Leaves ``REDIS_URL`` empty; tests inject a fake client explicitly.
    """

    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    SQLALCHEMY_ECHO = False
    REDIS_URL = ""
    JWT_SECRET = "test-secret-key-with-enough-entropy-for-hs256"
    PRODUCT_API_URL = "https://catalog.test"


class ProductionConfig(BaseConfig):
    """Configuration defaults for production deployments.

    Notes
    -----
    ``JWT_SECRET`` must come from the environment; :func:`validate_config`
    refuses to start with the development placeholder.
    """

    DEBUG = False
    SQLALCHEMY_ECHO = False
    PROPAGATE_EXCEPTIONS = False


# Map names -> classes (simple, explicit)
CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Return the configuration class inferred from ``APP_ENV``.

    Falls back to :class:`DevelopmentConfig` when ``APP_ENV`` is unset or
    unknown.
    """
    name = os.getenv(ENV_VAR, "development").strip().lower()
    return CONFIG_MAP.get(name, DevelopmentConfig)


def validate_config(config: Mapping[str, object]) -> None:
    """Fail fast on settings that would make the service insecure.

    :param config: Loaded Flask configuration mapping.
    :raises RuntimeError: When a production deployment uses the placeholder secret.
    """
    secret = str(config.get("JWT_SECRET") or "")
    if not secret:
        raise RuntimeError("JWT_SECRET must be configured.")
    is_prod = not config.get("DEBUG") and not config.get("TESTING")
    if is_prod and secret == "CHANGE_ME_JWT":
        raise RuntimeError("JWT_SECRET must be set from the environment in production.")
