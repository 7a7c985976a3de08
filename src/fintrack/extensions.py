"""Database and extension wiring for FinTrack."""

from __future__ import annotations

import logging

from flask import Flask, jsonify
from flask_jwt_extended import JWTManager, get_jwt_identity

from .config import BaseConfig
from .context import EXTENSION_KEY, AppContext, create_app_context, get_context
from .errors import Unauthorized

logger = logging.getLogger(__name__)

jwt = JWTManager()


def init_db(app: Flask) -> AppContext:
    """Build the engine, schema and repositories and attach them to ``app``."""

    config: BaseConfig = app.config["FINTRACK_CONFIG"]
    ctx = create_app_context(config)
    app.extensions[EXTENSION_KEY] = ctx
    return ctx


def _unauthorized(message: str):
    return jsonify(Unauthorized(message).to_dict()), Unauthorized.status_code


def init_jwt(app: Flask) -> None:
    """Configure bearer-token handling; every token failure renders the JSON 401 body."""

    jwt.init_app(app)

    @jwt.user_lookup_loader
    def _load_user(_jwt_header, jwt_data):
        try:
            user_id = int(jwt_data["sub"])
        except (KeyError, TypeError, ValueError):
            return None
        return get_context().user_repo.get_by_id(user_id)

    @jwt.user_lookup_error_loader
    def _unknown_user(_jwt_header, jwt_data):
        logger.warning("Token for unknown user", extra={"sub": jwt_data.get("sub")})
        return _unauthorized("User for this token no longer exists")

    @jwt.unauthorized_loader
    def _missing_token(reason: str):
        return _unauthorized("Missing or malformed bearer token")

    @jwt.invalid_token_loader
    def _invalid_token(reason: str):
        logger.warning("Invalid token", extra={"reason": reason})
        return _unauthorized("Invalid token")

    @jwt.expired_token_loader
    def _expired_token(_jwt_header, _jwt_data):
        return _unauthorized("Token has expired")


def current_user_id() -> int:
    """Identity of the authenticated caller (inside a ``jwt_required`` view)."""

    return int(get_jwt_identity())
