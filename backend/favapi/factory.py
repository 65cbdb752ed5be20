"""Application factory wiring Flask extensions, the container and blueprints."""

from __future__ import annotations

from typing import Any

from flask import Flask

from favapi.core.config import BaseConfig, get_config, validate_config
from favapi.core.logger import configure_logging, init_app as init_logging


def create_app(
    config: str | type[BaseConfig] | object | None = None,
    *,
    instance_relative_config: bool = True,
    instance_config_filename: str = "config.py",
    **container_overrides: Any,
) -> Flask:
    """Build and configure the Flask application.

    ``container_overrides`` are forwarded to
    :func:`favapi.core.container.init_app` (``redis_client``, ``catalog``,
    ``token_codec``), letting tests swap infrastructure without patching.
    """

    app = Flask(__name__, instance_relative_config=instance_relative_config)

    app.config.from_object(get_config() if config is None else config)
    if instance_relative_config and instance_config_filename:
        app.config.from_pyfile(instance_config_filename, silent=True)
    validate_config(app.config)

    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    from favapi.core import proxy

    proxy.init_app(app)

    from favapi.core import extensions

    extensions.init_app(app)

    from favapi.core import container

    container.init_app(app, **container_overrides)

    init_logging(app)

    from favapi.core import cors

    cors.init_app(app)

    from favapi.api import init_app as init_api

    init_api(app)

    from favapi.core import errors

    errors.init_app(app)

    from favapi import cli as app_cli

    app_cli.init_app(app)

    return app
