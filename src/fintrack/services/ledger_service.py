"""Transaction engine: posting, editing and deleting ledger transactions.

Every mutating function runs inside a single session from the session
factory, so the account balance change, the budget change and the
transaction row are committed together or rolled back together. Account and
budget rows are selected ``FOR UPDATE`` so databases with row locks serialise
concurrent postings against the same account (SQLite ignores the hint and
relies on its database-level write lock).
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlmodel import Session, select

from ..clock import utcnow
from ..domain.repositories import TransactionRepository
from ..errors import InsufficientBalance, NotFound, ValidationError
from ..infra.database import SessionFactory
from ..models.account import Account
from ..models.budget import Budget
from ..models.category import Category
from ..models.enums import EntryType
from ..models.transaction import Transaction
from . import budgeting

logger = logging.getLogger(__name__)

# Marks a patch field the caller did not send.
UNSET = object()


@dataclass
class LedgerFilters:
    """Filters applied to ledger listings."""

    user_id: int
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    account_id: Optional[int] = None
    category_id: Optional[int] = None
    text: Optional[str] = None
    txn_type: str = "all"  # Income | Expense | all


def _validate_amount(amount: object) -> float:
    try:
        value = float(amount)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        value = 0.0
    if not math.isfinite(value) or value <= 0:
        raise ValidationError(
            "Amount must be a valid positive number",
            errors={"amount": ["Must be greater than zero."]},
        )
    return round(value, 2)


def _validate_reference(value: object, *, field: str) -> int:
    try:
        return int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        raise ValidationError(
            f"Invalid {field}", errors={field: ["Must be a whole number."]}
        ) from None


def _validate_type(transaction_type: str) -> str:
    if transaction_type not in EntryType.values():
        raise ValidationError(
            'Type must be either "Income" or "Expense"',
            errors={"type": ['Must be either "Income" or "Expense".']},
        )
    return transaction_type


def _lock_account(session: Session, account_id: Optional[int], *, user_id: int) -> Account:
    if account_id is None:
        raise NotFound("Account not found")
    account = session.exec(
        select(Account)
        .where(Account.id == account_id, Account.user_id == user_id)
        .with_for_update()
    ).first()
    if account is None:
        raise NotFound("Account not found")
    return account


def _load_category(session: Session, category_id: int, *, user_id: int) -> Category:
    category = session.exec(
        select(Category).where(Category.id == category_id, Category.user_id == user_id)
    ).first()
    if category is None:
        raise NotFound("Category not found")
    return category


def _lock_budget_for(session: Session, category_id: int, *, user_id: int) -> Optional[Budget]:
    return session.exec(
        select(Budget)
        .where(Budget.user_id == user_id, Budget.category_id == category_id)
        .with_for_update()
    ).first()


def _post(account: Account, *, amount: float, transaction_type: str) -> None:
    """Apply a transaction's effect to an account, refusing overdrafts."""

    if transaction_type == EntryType.EXPENSE.value:
        if account.balance < amount:
            logger.warning(
                "Insufficient balance",
                extra={"account_id": account.id, "balance": account.balance, "amount": amount},
            )
            raise InsufficientBalance("Insufficient balance for this expense")
        account.balance = round(account.balance - amount, 2)
    else:
        account.balance = round(account.balance + amount, 2)
    account.updated_at = utcnow()


def _reverse(account: Account, *, amount: float, transaction_type: str) -> None:
    """Undo a previously posted effect (Income comes back out, Expense goes back in)."""

    if transaction_type == EntryType.EXPENSE.value:
        account.balance = round(account.balance + amount, 2)
    else:
        account.balance = round(account.balance - amount, 2)
    account.updated_at = utcnow()


def _count_expense(session: Session, txn: Transaction) -> None:
    """Charge an expense to its category's budget and remember which budget counted it."""

    txn.budget_id = None
    if not txn.is_expense:
        return
    budget = _lock_budget_for(session, txn.category_id, user_id=txn.user_id)
    if budget is None:
        return
    budgeting.apply_expense(budget, txn.amount)
    budget.updated_at = utcnow()
    session.add(budget)
    txn.budget_id = budget.id


def _uncount_expense(session: Session, txn: Transaction) -> None:
    """Release the amount from the budget that counted this transaction, if it still exists."""

    if txn.budget_id is None:
        return
    budget = session.exec(
        select(Budget)
        .where(Budget.id == txn.budget_id, Budget.user_id == txn.user_id)
        .with_for_update()
    ).first()
    if budget is not None:
        budgeting.release_expense(budget, txn.amount)
        budget.updated_at = utcnow()
        session.add(budget)
    txn.budget_id = None


def create_transaction(
    *,
    session_factory: SessionFactory,
    user_id: int,
    account_id: int,
    category_id: int,
    amount: float,
    transaction_type: str,
    description: Optional[str] = None,
) -> Transaction:
    """Post a transaction: move the balance, count the budget, insert the row."""

    amount = _validate_amount(amount)
    transaction_type = _validate_type(transaction_type)

    with session_factory() as session:
        account = _lock_account(session, account_id, user_id=user_id)
        category = _load_category(session, category_id, user_id=user_id)

        _post(account, amount=amount, transaction_type=transaction_type)
        session.add(account)

        txn = Transaction(
            user_id=user_id,
            account_id=account.id,
            category_id=category.id,
            amount=amount,
            transaction_type=transaction_type,
            description=(description or "").strip() or None,
        )
        _count_expense(session, txn)
        txn.account = account
        txn.category = category
        session.add(txn)
        session.flush()

        logger.info(
            "Transaction posted",
            extra={
                "user_id": user_id,
                "transaction_id": txn.id,
                "account_id": account.id,
                "type": transaction_type,
                "amount": amount,
                "balance": account.balance,
            },
        )
        return txn


def edit_transaction(
    *,
    session_factory: SessionFactory,
    user_id: int,
    transaction_id: int,
    account_id: object = UNSET,
    category_id: object = UNSET,
    amount: object = UNSET,
    transaction_type: object = UNSET,
    description: object = UNSET,
) -> Transaction:
    """Apply a partial update and reconcile balances and budget totals.

    The old effect is reversed on the old account by type and the new effect
    is posted to the (possibly different) new account by type, so Income
    moved between accounts credits the new one and an Expense is checked
    against the new account's balance. Budget spend follows the same rule.
    """

    with session_factory() as session:
        txn = session.exec(
            select(Transaction).where(
                Transaction.id == transaction_id, Transaction.user_id == user_id
            )
        ).first()
        if txn is None:
            raise NotFound("Transaction not found")

        new_account_id = (
            txn.account_id
            if account_id is UNSET
            else _validate_reference(account_id, field="account")
        )
        new_category_id = (
            txn.category_id
            if category_id is UNSET
            else _validate_reference(category_id, field="category")
        )
        new_amount = txn.amount if amount is UNSET else _validate_amount(amount)
        new_type = (
            txn.transaction_type
            if transaction_type is UNSET
            else _validate_type(transaction_type)  # type: ignore[arg-type]
        )

        money_moved = (
            new_account_id != txn.account_id
            or new_amount != txn.amount
            or new_type != txn.transaction_type
        )
        budget_moved = (
            new_category_id != txn.category_id
            or new_amount != txn.amount
            or new_type != txn.transaction_type
        )

        category = _load_category(session, new_category_id, user_id=user_id)

        if money_moved:
            old_account = None
            if txn.account_id is not None:
                old_account = session.exec(
                    select(Account)
                    .where(Account.id == txn.account_id, Account.user_id == user_id)
                    .with_for_update()
                ).first()
            if old_account is not None:
                _reverse(old_account, amount=txn.amount, transaction_type=txn.transaction_type)
                session.add(old_account)

            if old_account is not None and new_account_id == old_account.id:
                new_account = old_account
            else:
                new_account = _lock_account(session, new_account_id, user_id=user_id)
            _post(new_account, amount=new_amount, transaction_type=new_type)
            session.add(new_account)
            txn.account = new_account

        if budget_moved:
            _uncount_expense(session, txn)

        txn.account_id = new_account_id
        txn.category = category
        txn.category_id = category.id
        txn.amount = new_amount
        txn.transaction_type = new_type
        if description is not UNSET:
            txn.description = (str(description or "")).strip() or None
        txn.updated_at = utcnow()

        if budget_moved:
            _count_expense(session, txn)

        session.add(txn)
        session.flush()
        session.refresh(txn)

        logger.info(
            "Transaction edited",
            extra={
                "user_id": user_id,
                "transaction_id": txn.id,
                "rebalanced": money_moved,
                "rebudgeted": budget_moved,
            },
        )
        return txn


def delete_transaction(
    *, session_factory: SessionFactory, user_id: int, transaction_id: int
) -> None:
    """Reverse the balance effect, release budget spend and delete the row."""

    with session_factory() as session:
        txn = session.exec(
            select(Transaction).where(
                Transaction.id == transaction_id, Transaction.user_id == user_id
            )
        ).first()
        if txn is None:
            raise NotFound("Transaction not found")
        account = _lock_account(session, txn.account_id, user_id=user_id)

        _reverse(account, amount=txn.amount, transaction_type=txn.transaction_type)
        session.add(account)
        _uncount_expense(session, txn)
        session.delete(txn)

        logger.info(
            "Transaction deleted",
            extra={
                "user_id": user_id,
                "transaction_id": transaction_id,
                "account_id": account.id,
                "balance": account.balance,
            },
        )


def get_transaction(
    repo: TransactionRepository, *, user_id: int, transaction_id: int
) -> Transaction:
    txn = repo.get_by_id(transaction_id, user_id=user_id)
    if txn is None:
        raise NotFound("Transaction not found")
    return txn


def filtered_transactions(repo: TransactionRepository, filters: LedgerFilters) -> list[Transaction]:
    """Fetch transactions matching the filters, newest first."""

    txn_type = None if filters.txn_type == "all" else _validate_type(filters.txn_type)
    return repo.search(
        start_date=filters.start_date,
        end_date=filters.end_date,
        account_id=filters.account_id,
        category_id=filters.category_id,
        transaction_type=txn_type,
        text=filters.text,
        user_id=filters.user_id,
    )


def list_transactions(repo: TransactionRepository, *, user_id: int) -> list[Transaction]:
    return filtered_transactions(repo, LedgerFilters(user_id=user_id))
