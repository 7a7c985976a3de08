"""Budgeting table."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, ClassVar, Optional

from sqlalchemy import UniqueConstraint
from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

from ..clock import utcnow

if TYPE_CHECKING:  # pragma: no cover
    from .category import Category


class Budget(SQLModel, table=True):
    """A spending cap on one category with a running total of posted expenses."""

    __tablename__: ClassVar[str] = "budget"
    __table_args__ = (
        UniqueConstraint("user_id", "category_id", name="uq_budget_user_category"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    category_id: int = Field(foreign_key="category.id", nullable=False, index=True)
    limit: float = Field(nullable=False)
    current_spending: float = Field(default=0.0, nullable=False)
    notify_exceeded: bool = Field(default=False, nullable=False)
    created_at: datetime = Field(default_factory=utcnow, nullable=False)
    updated_at: datetime = Field(default_factory=utcnow, nullable=False)

    category: Optional["Category"] = Relationship(
        sa_relationship=relationship("Category", lazy="selectin")
    )
