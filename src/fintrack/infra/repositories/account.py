"""SQLModel implementation of Account repository."""

from __future__ import annotations

from typing import Optional

from sqlmodel import select

from ...clock import utcnow
from ...models.account import Account
from ...models.transaction import Transaction
from ..database import SessionFactory


class SQLModelAccountRepository:
    """SQLModel-based account repository implementation."""

    def __init__(self, session_factory: SessionFactory):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_by_id(self, account_id: int) -> Optional[Account]:
        """Retrieve an account by ID regardless of owner."""
        with self.session_factory() as session:
            obj = session.get(Account, account_id)
            if obj:
                session.expunge(obj)
            return obj

    def get_owned(self, account_id: int, *, user_id: int) -> Optional[Account]:
        """Retrieve an account only when it belongs to ``user_id``."""
        with self.session_factory() as session:
            obj = session.exec(
                select(Account).where(Account.id == account_id, Account.user_id == user_id)
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def list_all(self, *, user_id: int) -> list[Account]:
        """List the user's accounts ordered by name."""
        with self.session_factory() as session:
            statement = (
                select(Account)
                .where(Account.user_id == user_id)
                .order_by(Account.name)  # type: ignore
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def create(self, account: Account, *, user_id: int) -> Account:
        """Create a new account."""
        with self.session_factory() as session:
            account.user_id = user_id
            session.add(account)
            session.commit()
            session.refresh(account)
            session.expunge(account)
            return account

    def update(self, account: Account, *, user_id: int) -> Account:
        """Update an existing account."""
        with self.session_factory() as session:
            account.user_id = user_id
            account.updated_at = utcnow()
            account = session.merge(account)
            session.commit()
            session.refresh(account)
            session.expunge(account)
            return account

    def delete(self, account_id: int, *, user_id: int) -> None:
        """Delete an account and detach its transactions in one unit of work."""
        with self.session_factory() as session:
            account = session.exec(
                select(Account).where(Account.id == account_id, Account.user_id == user_id)
            ).first()
            if account is None:
                return
            orphans = session.exec(
                select(Transaction).where(Transaction.account_id == account_id)
            ).all()
            for txn in orphans:
                txn.account_id = None
                session.add(txn)
            session.flush()
            session.delete(account)
            session.commit()
