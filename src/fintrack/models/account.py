"""Account model: a named money source with a running balance."""

from __future__ import annotations

from datetime import datetime
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel

from ..clock import utcnow
from .enums import AccountType


class Account(SQLModel, table=True):
    __tablename__: ClassVar[str] = "account"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    name: str = Field(nullable=False, max_length=128)
    account_type: str = Field(default=AccountType.BANK.value, nullable=False, max_length=32)
    balance: float = Field(default=0.0, nullable=False)
    created_at: datetime = Field(default_factory=utcnow, nullable=False)
    updated_at: datetime = Field(default_factory=utcnow, nullable=False)

    # Balance is only moved by the ledger service and explicit account edits.
