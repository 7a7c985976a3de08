"""User model supporting authentication and roles."""

from __future__ import annotations

from datetime import datetime
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel

from ..clock import utcnow


class User(SQLModel, table=True):
    """Application user; owns every other row by ``user_id``."""

    __tablename__: ClassVar[str] = "user"

    id: Optional[int] = Field(default=None, primary_key=True)
    firstname: str = Field(nullable=False, max_length=64)
    lastname: str = Field(nullable=False, max_length=64)
    email: str = Field(nullable=False, unique=True, index=True, max_length=255)
    password_hash: str = Field(nullable=False, max_length=255)
    role: str = Field(default="user", nullable=False, max_length=16, index=True)
    image_url: Optional[str] = Field(default=None, max_length=512)
    created_at: datetime = Field(default_factory=utcnow, nullable=False)
    last_login: Optional[datetime] = Field(default=None)
