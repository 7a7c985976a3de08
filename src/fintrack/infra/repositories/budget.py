"""SQLModel implementation of Budget repository."""

from __future__ import annotations

from typing import Optional

from sqlmodel import Session, select

from ...clock import utcnow
from ...models.budget import Budget
from ...models.transaction import Transaction
from ..database import SessionFactory


class SQLModelBudgetRepository:
    """SQLModel-based budget repository implementation."""

    def __init__(self, session_factory: SessionFactory):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_by_id(self, budget_id: int, *, user_id: int) -> Optional[Budget]:
        """Retrieve a budget by ID."""
        with self.session_factory() as session:
            obj = session.exec(
                select(Budget).where(Budget.id == budget_id).where(Budget.user_id == user_id)
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def get_for_category(self, category_id: int, *, user_id: int) -> Optional[Budget]:
        """Get the budget tracking a category, if any."""
        with self.session_factory() as session:
            obj = session.exec(
                select(Budget)
                .where(Budget.user_id == user_id)
                .where(Budget.category_id == category_id)
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def list_all(self, *, user_id: int) -> list[Budget]:
        """List all budgets with their category eagerly loaded."""
        with self.session_factory() as session:
            statement = (
                select(Budget)
                .where(Budget.user_id == user_id)
                .order_by(Budget.created_at.desc())  # type: ignore
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def create(self, budget: Budget, *, user_id: int) -> Budget:
        """Create a new budget."""
        with self.session_factory() as session:
            budget.user_id = user_id
            session.add(budget)
            session.commit()
            session.refresh(budget)
            session.expunge(budget)
            return budget

    def update(self, budget: Budget, *, user_id: int) -> Budget:
        """Update an existing budget.

        Column values are copied onto the persistent row so a stale, eagerly
        loaded ``category`` never overrides a changed ``category_id``.
        """
        with self.session_factory() as session:
            row = session.exec(
                select(Budget).where(Budget.id == budget.id, Budget.user_id == user_id)
            ).one()
            for column in ("category_id", "limit", "current_spending", "notify_exceeded"):
                setattr(row, column, getattr(budget, column))
            row.updated_at = utcnow()
            session.add(row)
            session.commit()
            session.refresh(row)
            session.expunge(row)
            return row

    def delete(self, budget_id: int, *, user_id: int) -> None:
        """Delete a budget and unlink the expenses it had counted."""
        with self.session_factory() as session:
            budget = session.exec(
                select(Budget).where(Budget.id == budget_id, Budget.user_id == user_id)
            ).first()
            if budget is None:
                return
            detach_counted_transactions(session, budget_id)
            session.delete(budget)
            session.commit()


def detach_counted_transactions(session: Session, budget_id: int) -> None:
    """Clear ``budget_id`` on transactions that point at a budget about to go."""

    counted = session.exec(select(Transaction).where(Transaction.budget_id == budget_id)).all()
    for txn in counted:
        txn.budget_id = None
        session.add(txn)
    session.flush()
