"""FinTrack application factory."""

from __future__ import annotations

from importlib import import_module
from typing import Iterable

from flask import Flask, jsonify

from .config import BaseConfig, DevConfig, TestConfig

_CONFIG_MAP = {
    "development": DevConfig,
    "testing": TestConfig,
    "default": BaseConfig,
}


def _resolve_config(name: str | None) -> type[BaseConfig]:
    """Return the config class for the provided environment name."""

    if not name:
        return BaseConfig
    return _CONFIG_MAP.get(name.lower(), BaseConfig)


def _blueprint_paths() -> Iterable[str]:
    """Yield blueprint import paths in registration order."""

    yield "fintrack.blueprints.users"
    yield "fintrack.blueprints.accounts"
    yield "fintrack.blueprints.categories"
    yield "fintrack.blueprints.budgets"
    yield "fintrack.blueprints.transactions"


def create_app(config_name: str | None = None) -> Flask:
    """Create and configure the Flask application instance."""

    app = Flask(__name__, instance_relative_config=True)
    config_cls = _resolve_config(config_name)
    config_obj = config_cls()
    app.config.from_object(config_obj)
    app.config["FINTRACK_CONFIG"] = config_obj
    app.json.sort_keys = False

    from . import cli as _cli
    from .errors import register_error_handlers
    from .extensions import init_db, init_jwt
    from .logging_config import setup_logging

    setup_logging(config_obj)
    init_db(app)
    init_jwt(app)
    register_error_handlers(app)
    _register_blueprints(app)
    _cli.init_app(app)

    @app.get("/health")
    def health():
        return jsonify({"status": "ok"})

    return app


def _register_blueprints(app: Flask) -> None:
    """Import and register all blueprints declared in `_blueprint_paths`."""

    for dotted_path in _blueprint_paths():
        module = import_module(dotted_path)
        blueprint = getattr(module, "bp")
        app.register_blueprint(blueprint)


__all__ = ["create_app"]
