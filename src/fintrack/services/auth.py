"""Authentication and user management services."""

from __future__ import annotations

import logging
from typing import Optional

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHash, VerificationError, VerifyMismatchError
from flask_jwt_extended import create_access_token
from sqlalchemy.exc import IntegrityError

from ..clock import utcnow
from ..domain.repositories import UserRepository
from ..errors import Conflict, NotFound, Unauthorized, ValidationError
from ..models.enums import Role
from ..models.user import User

logger = logging.getLogger(__name__)

_hasher = PasswordHasher()
MIN_PASSWORD_LENGTH = 6


def _normalize_role(role: Optional[str]) -> str:
    role = (role or Role.USER.value).strip().lower()
    if role not in Role.values():
        raise ValidationError(
            f"Invalid role: {role}", errors={"role": [f"Choose one of: {', '.join(Role.values())}."]}
        )
    return role


def _normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def register_user(
    repo: UserRepository,
    *,
    firstname: str,
    lastname: str,
    email: str,
    password: str,
    role: str = "user",
    image_url: Optional[str] = None,
) -> User:
    """Create a new user with an argon2 password hash."""

    email = _normalize_email(email)
    if len(password or "") < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            "Password is too short",
            errors={"password": [f"Use at least {MIN_PASSWORD_LENGTH} characters."]},
        )
    if repo.get_by_email(email) is not None:
        raise Conflict("A user with this email already exists")

    user = User(
        firstname=firstname.strip(),
        lastname=lastname.strip(),
        email=email,
        password_hash=_hasher.hash(password),
        role=_normalize_role(role),
        image_url=image_url,
    )
    try:
        user = repo.create(user)
    except IntegrityError as exc:
        raise Conflict("A user with this email already exists") from exc
    logger.info("User registered", extra={"user_id": user.id, "role": user.role})
    return user


def authenticate(repo: UserRepository, *, email: str, password: str) -> User:
    """Validate credentials; the same error is raised for unknown email and bad password."""

    user = repo.get_by_email(_normalize_email(email)) if email else None
    if user is None:
        logger.warning("Login rejected: unknown email")
        raise Unauthorized("Invalid email or password")
    try:
        _hasher.verify(user.password_hash, password or "")
    except (VerifyMismatchError, InvalidHash, VerificationError):
        logger.warning("Login rejected: bad password", extra={"user_id": user.id})
        raise Unauthorized("Invalid email or password")

    if _hasher.check_needs_rehash(user.password_hash):
        user.password_hash = _hasher.hash(password)
    user.last_login = utcnow()
    return repo.update(user)


def issue_token(user: User) -> str:
    """Signed bearer token for ``user``; lifetime comes from JWT_ACCESS_TOKEN_EXPIRES."""

    return create_access_token(identity=str(user.id), additional_claims={"role": user.role})


def get_user(repo: UserRepository, user_id: int) -> User:
    user = repo.get_by_id(user_id)
    if user is None:
        raise NotFound("User not found")
    return user
