"""SQLModel implementation of Category repository."""

from __future__ import annotations

from typing import Optional

from sqlmodel import select

from ...clock import utcnow
from ...models.budget import Budget
from ...models.category import Category
from ...models.transaction import Transaction
from ..database import SessionFactory
from .budget import detach_counted_transactions


class SQLModelCategoryRepository:
    """SQLModel-based category repository implementation."""

    def __init__(self, session_factory: SessionFactory):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_by_id(self, category_id: int) -> Optional[Category]:
        """Retrieve a category by ID regardless of owner."""
        with self.session_factory() as session:
            obj = session.get(Category, category_id)
            if obj:
                session.expunge(obj)
            return obj

    def get_owned(self, category_id: int, *, user_id: int) -> Optional[Category]:
        """Retrieve a category only when it belongs to ``user_id``."""
        with self.session_factory() as session:
            obj = session.exec(
                select(Category).where(Category.id == category_id, Category.user_id == user_id)
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def list_all(self, *, user_id: int) -> list[Category]:
        """List all categories."""
        with self.session_factory() as session:
            statement = (
                select(Category)
                .where(Category.user_id == user_id)
                .order_by(Category.name)  # type: ignore
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def list_children(self, category_id: int, *, user_id: int) -> list[Category]:
        """List direct subcategories."""
        with self.session_factory() as session:
            statement = (
                select(Category)
                .where(Category.user_id == user_id)
                .where(Category.parent_id == category_id)
                .order_by(Category.name)  # type: ignore
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def has_transactions(self, category_id: int, *, user_id: int) -> bool:
        """Return True when any transaction is filed under the category."""
        with self.session_factory() as session:
            statement = (
                select(Transaction.id)
                .where(Transaction.user_id == user_id)
                .where(Transaction.category_id == category_id)
            )
            return session.exec(statement).first() is not None

    def create(self, category: Category, *, user_id: int) -> Category:
        """Create a new category."""
        with self.session_factory() as session:
            category.user_id = user_id
            session.add(category)
            session.commit()
            session.refresh(category)
            session.expunge(category)
            return category

    def update(self, category: Category, *, user_id: int) -> Category:
        """Update an existing category."""
        with self.session_factory() as session:
            category.user_id = user_id
            category.updated_at = utcnow()
            category = session.merge(category)
            session.commit()
            session.refresh(category)
            session.expunge(category)
            return category

    def delete(self, category_id: int, *, user_id: int) -> None:
        """Delete a category together with the budget that tracks it."""
        with self.session_factory() as session:
            category = session.exec(
                select(Category).where(Category.id == category_id, Category.user_id == user_id)
            ).first()
            if category is None:
                return
            budgets = session.exec(
                select(Budget).where(Budget.category_id == category_id, Budget.user_id == user_id)
            ).all()
            for budget in budgets:
                detach_counted_transactions(session, budget.id)
                session.delete(budget)
            session.delete(category)
            session.commit()
