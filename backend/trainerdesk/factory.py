"""Application factory wiring Flask extensions and blueprints."""

from __future__ import annotations

from flask import Flask

from trainerdesk.core.config import BaseConfig, get_config
from trainerdesk.core.logger import configure_logging, init_app as init_logging


def create_app(
    config: str | type[BaseConfig] | object | None = None,
    *,
    instance_relative_config: bool = True,
    instance_config_filename: str = "config.py",
) -> Flask:
    """Build and configure the Flask application.

    Parameters
    ----------
    config:
        Configuration object or import path. When ``None`` the class selected
        by ``APP_ENV`` is used.
    instance_relative_config:
        Whether an instance folder ``config.py`` may override settings.
    instance_config_filename:
        Name of the optional instance configuration file.
    """

    app = Flask(__name__, instance_relative_config=instance_relative_config)

    app.config.from_object(get_config() if config is None else config)
    if instance_relative_config and instance_config_filename:
        app.config.from_pyfile(instance_config_filename, silent=True)

    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    from trainerdesk.core import extensions

    extensions.init_app(app)

    init_logging(app)

    from trainerdesk.core import cors

    cors.init_app(app)

    from trainerdesk.api import init_app as init_api

    init_api(app)

    from trainerdesk.core import errors

    errors.init_app(app)

    from trainerdesk import cli as app_cli

    app_cli.init_app(app)

    return app
