"""Ledger category definitions."""

from __future__ import annotations

from datetime import datetime
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel

from ..clock import utcnow
from .enums import EntryType


class Category(SQLModel, table=True):
    """Income or expense label; ``parent_id`` forms a shallow two-level tree."""

    __tablename__: ClassVar[str] = "category"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    name: str = Field(index=True, nullable=False, max_length=64)
    category_type: str = Field(default=EntryType.EXPENSE.value, nullable=False, max_length=16)
    parent_id: Optional[int] = Field(default=None, foreign_key="category.id", index=True)
    created_at: datetime = Field(default_factory=utcnow, nullable=False)
    updated_at: datetime = Field(default_factory=utcnow, nullable=False)

    @property
    def is_top_level(self) -> bool:
        return self.parent_id is None
