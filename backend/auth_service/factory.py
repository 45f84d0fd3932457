"""Application factory wiring Flask extensions and blueprints."""

from __future__ import annotations

from flask import Flask

from auth_service.core.config import BaseConfig, get_config, validate_config
from auth_service.core.logger import configure_logging


def create_app(
    config: str | type[BaseConfig] | object | None = None,
    *,
    instance_relative_config: bool = True,
    instance_config_filename: str = "config.py",
) -> Flask:
    """Build and configure the Flask application.

    :param config: Config object, class or import path; defaults to the class
        selected by ``APP_ENV``.
    :param instance_relative_config: Also load ``instance/<filename>`` when present.
    :param instance_config_filename: Instance config file name.
    :raises RuntimeError: When the signing configuration is unsafe.
    """
    app = Flask(__name__, instance_relative_config=instance_relative_config)

    app.config.from_object(get_config() if config is None else config)
    if instance_relative_config and instance_config_filename:
        app.config.from_pyfile(instance_config_filename, silent=True)

    validate_config(app.config)
    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    from auth_service.core import cors, errors, extensions, logger, proxy

    proxy.init_app(app)
    extensions.init_app(app)
    logger.init_app(app)
    cors.init_app(app)

    from auth_service.api import init_app as init_api

    init_api(app)
    errors.init_app(app)

    from auth_service import cli

    cli.init_app(app)

    return app
