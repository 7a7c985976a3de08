"""User registration, login and profile routes."""

from __future__ import annotations

from flask import jsonify
from flask_jwt_extended import get_current_user, jwt_required

from ...context import get_context
from ...services import auth
from ..forms import request_payload
from ..serializers import user_to_dict
from . import bp
from .forms import LoginForm, RegisterForm


@bp.post("/register")
def register():
    """Create a user and return it with a fresh bearer token."""

    form = RegisterForm.from_mapping(request_payload())
    form.validate_or_raise()

    user = auth.register_user(
        get_context().user_repo,
        firstname=form.firstname,
        lastname=form.lastname,
        email=form.email,
        password=form.password,
        role=form.role,
        image_url=form.image_url,
    )
    return jsonify(user_to_dict(user, token=auth.issue_token(user))), 201


@bp.post("/login")
def login():
    form = LoginForm.from_mapping(request_payload())
    form.validate_or_raise()

    user = auth.authenticate(get_context().user_repo, email=form.email, password=form.password)
    return jsonify(user_to_dict(user, token=auth.issue_token(user)))


@bp.get("/me")
@jwt_required()
def me():
    return jsonify(user_to_dict(get_current_user()))
