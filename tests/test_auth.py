"""Authentication service tests."""

from __future__ import annotations

import pytest
from flask_jwt_extended import decode_token

from fintrack.errors import Conflict, NotFound, Unauthorized, ValidationError
from fintrack.services import auth


def _register(ctx, email="ada@example.com", password="analytical", **kwargs):
    return auth.register_user(
        ctx.user_repo,
        firstname="Ada",
        lastname="Lovelace",
        email=email,
        password=password,
        **kwargs,
    )


def test_register_hashes_password_and_normalises_email(ctx):
    user = _register(ctx, email="  Ada@Example.COM ")

    assert user.id is not None
    assert user.email == "ada@example.com"
    assert user.role == "user"
    assert user.password_hash != "analytical"
    assert user.password_hash.startswith("$argon2")


def test_register_rejects_duplicate_email(ctx):
    _register(ctx)
    with pytest.raises(Conflict):
        _register(ctx, email="ADA@example.com")


def test_register_rejects_short_password(ctx):
    with pytest.raises(ValidationError) as excinfo:
        _register(ctx, password="123")
    assert "password" in excinfo.value.errors


def test_register_rejects_unknown_role(ctx):
    with pytest.raises(ValidationError):
        _register(ctx, role="superuser")


def test_authenticate_success_records_last_login(ctx):
    _register(ctx, role="admin")

    user = auth.authenticate(ctx.user_repo, email="Ada@example.com", password="analytical")

    assert user.role == "admin"
    assert user.last_login is not None
    assert ctx.user_repo.get_by_id(user.id).last_login is not None


@pytest.mark.parametrize(
    ("email", "password"),
    [("ada@example.com", "wrong-password"), ("nobody@example.com", "analytical"), ("", "")],
)
def test_authenticate_failures_are_unauthorized(ctx, email, password):
    _register(ctx)
    with pytest.raises(Unauthorized) as excinfo:
        auth.authenticate(ctx.user_repo, email=email, password=password)
    assert excinfo.value.message == "Invalid email or password"


def test_issue_token_carries_identity_and_role(app):
    ctx = app.extensions["fintrack"]
    user = _register(ctx)

    with app.app_context():
        token = auth.issue_token(user)
        claims = decode_token(token)

    assert claims["sub"] == str(user.id)
    assert claims["role"] == "user"


def test_get_user(ctx):
    user = _register(ctx)
    assert auth.get_user(ctx.user_repo, user.id).email == "ada@example.com"
    with pytest.raises(NotFound):
        auth.get_user(ctx.user_repo, 9999)
