"""SQLModel definitions for ledger transactions."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, ClassVar, Optional

from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

from ..clock import utcnow
from .enums import EntryType

if TYPE_CHECKING:  # pragma: no cover - import guard for circular dependency
    from .account import Account
    from .category import Category


class Transaction(SQLModel, table=True):
    """A single posted income or expense event against one account."""

    __tablename__: ClassVar[str] = "transaction"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    # Nulled when the owning account is deleted; history is kept.
    account_id: Optional[int] = Field(default=None, foreign_key="account.id", index=True)
    category_id: int = Field(foreign_key="category.id", nullable=False, index=True)
    amount: float = Field(nullable=False, description="Always positive; direction comes from type")
    transaction_type: str = Field(default=EntryType.EXPENSE.value, nullable=False, max_length=16)
    description: Optional[str] = Field(default=None, max_length=255)
    # Budget whose running total counted this expense, if any.
    budget_id: Optional[int] = Field(default=None, foreign_key="budget.id")
    created_at: datetime = Field(default_factory=utcnow, nullable=False, index=True)
    updated_at: datetime = Field(default_factory=utcnow, nullable=False)

    account: Optional["Account"] = Relationship(
        sa_relationship=relationship("Account", lazy="selectin")
    )
    category: Optional["Category"] = Relationship(
        sa_relationship=relationship("Category", lazy="selectin")
    )

    @property
    def is_expense(self) -> bool:
        return self.transaction_type == EntryType.EXPENSE.value

    @property
    def signed_amount(self) -> float:
        """Effect of this transaction on its account balance."""
        return -self.amount if self.is_expense else self.amount
