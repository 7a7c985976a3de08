"""SQLModel implementation of Transaction repository."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import select

from ...models.transaction import Transaction
from ..database import SessionFactory


class SQLModelTransactionRepository:
    """SQLModel-based transaction repository implementation (read side)."""

    def __init__(self, session_factory: SessionFactory):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_by_id(self, transaction_id: int, *, user_id: int) -> Optional[Transaction]:
        """Retrieve a transaction by ID."""
        with self.session_factory() as session:
            obj = session.exec(
                select(Transaction)
                .where(Transaction.id == transaction_id)
                .where(Transaction.user_id == user_id)
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def filter_by_date_range(
        self, start_date: datetime, end_date: datetime, *, user_id: int
    ) -> list[Transaction]:
        """Get transactions within an inclusive date range."""
        return self.search(start_date=start_date, end_date=end_date, user_id=user_id)

    def search(
        self,
        *,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        account_id: Optional[int] = None,
        category_id: Optional[int] = None,
        transaction_type: Optional[str] = None,
        text: Optional[str] = None,
        user_id: int,
    ) -> list[Transaction]:
        """Advanced search with multiple filters, newest first."""
        with self.session_factory() as session:
            statement = select(Transaction).where(Transaction.user_id == user_id)

            if start_date:
                statement = statement.where(Transaction.created_at >= start_date)
            if end_date:
                statement = statement.where(Transaction.created_at <= end_date)
            if account_id:
                statement = statement.where(Transaction.account_id == account_id)
            if category_id:
                statement = statement.where(Transaction.category_id == category_id)
            if transaction_type:
                statement = statement.where(Transaction.transaction_type == transaction_type)
            if text:
                statement = statement.where(Transaction.description.contains(text))  # type: ignore

            statement = statement.order_by(
                Transaction.created_at.desc(), Transaction.id.desc()  # type: ignore
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows
