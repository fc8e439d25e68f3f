"""Habitoid application factory."""

from __future__ import annotations

import atexit
import logging
import os
from importlib import import_module
from typing import Iterable

from flask import Flask

from . import cli as _cli
from .config import BaseConfig, DevConfig
from .context import AppContext, create_app_context
from .errors import register_error_handlers
from .extensions import init_context
from .logging_config import setup_logging

logger = logging.getLogger("habitoid.app")

_CONFIG_MAP = {
    "development": DevConfig,
    "default": BaseConfig,
}


def _resolve_config(name: str | None) -> type[BaseConfig]:
    """Return the config class for the provided environment name."""

    if not name:
        return BaseConfig
    return _CONFIG_MAP.get(name.lower(), BaseConfig)


def _blueprint_paths() -> Iterable[str]:
    yield "habitoid.blueprints.auth"
    yield "habitoid.blueprints.habits"
    yield "habitoid.blueprints.focus"
    yield "habitoid.blueprints.stats"
    yield "habitoid.blueprints.insights"
    yield "habitoid.blueprints.social"
    yield "habitoid.blueprints.preferences"


def create_app(config: BaseConfig | None = None) -> Flask:
    """Create and configure the Flask application instance."""

    config_obj = config or _resolve_config(os.getenv("HABITOID_ENV"))()
    app = Flask(__name__)
    app.config.from_object(config_obj)
    app.config["HABITOID_CONFIG"] = config_obj

    setup_logging(config_obj)
    ctx = create_app_context(config_obj)
    init_context(app, ctx)
    register_error_handlers(app)
    _register_blueprints(app)
    _cli.init_app(app)

    if config_obj.SCHEDULER_ENABLED and not config_obj.TESTING:
        from .scheduler import create_scheduler

        scheduler = create_scheduler(ctx, auto_start=True)
        app.extensions["habitoid.scheduler"] = scheduler
        atexit.register(scheduler.stop)

    logger.info("Application created", extra={"database": config_obj.DATABASE_URL})
    return app


def _register_blueprints(app: Flask) -> None:
    """Import and register all blueprints declared in `_blueprint_paths`."""

    for dotted_path in _blueprint_paths():
        module = import_module(dotted_path)
        app.register_blueprint(getattr(module, "bp"))


__all__ = ["AppContext", "BaseConfig", "DevConfig", "create_app", "create_app_context"]
