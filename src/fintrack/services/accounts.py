"""Account ledger services: named money sources and their balances."""

from __future__ import annotations

import logging
import math
from typing import Optional

from ..domain.repositories import AccountRepository
from ..errors import ValidationError
from ..models.account import Account
from ..models.enums import AccountType
from .guards import ensure_owner, ensure_visible

logger = logging.getLogger(__name__)


def normalize_account_type(value: str) -> str:
    """Return the canonical account type or raise ``ValidationError``."""

    if value not in AccountType.values():
        raise ValidationError(
            "Invalid account type",
            errors={"accountType": [f"Must be one of: {', '.join(AccountType.values())}."]},
        )
    return value


def _validate_balance(balance: object) -> float:
    try:
        value = float(balance or 0.0)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        value = math.nan
    if not math.isfinite(value):
        raise ValidationError(
            "Balance must be a valid number", errors={"balance": ["Enter a valid number."]}
        )
    return round(value, 2)


def create_account(
    repo: AccountRepository,
    *,
    user_id: int,
    name: str,
    account_type: str,
    balance: float = 0.0,
) -> Account:
    """Create an account for the caller; balance defaults to zero."""

    name = (name or "").strip()
    if not name:
        raise ValidationError("Account name is required", errors={"name": ["Name is required."]})
    account = Account(
        user_id=user_id,
        name=name,
        account_type=normalize_account_type(account_type),
        balance=_validate_balance(balance),
    )
    account = repo.create(account, user_id=user_id)
    logger.info("Account created", extra={"user_id": user_id, "account_id": account.id})
    return account


def edit_account(
    repo: AccountRepository,
    *,
    user_id: int,
    account_id: int,
    name: Optional[str] = None,
    account_type: Optional[str] = None,
    balance: Optional[float] = None,
) -> Account:
    """Patch an account the caller owns; at least one field must be supplied."""

    if not name and not account_type and balance is None:
        raise ValidationError("Please provide at least one field to update")

    account = ensure_owner(repo.get_by_id(account_id), user_id=user_id, label="Account")
    if name:
        account.name = name.strip()
    if account_type:
        account.account_type = normalize_account_type(account_type)
    if balance is not None:
        balance = _validate_balance(balance)
        logger.info(
            "Account balance overwritten",
            extra={"user_id": user_id, "account_id": account_id, "old": account.balance, "new": balance},
        )
        account.balance = balance
    return repo.update(account, user_id=user_id)


def delete_account(repo: AccountRepository, *, user_id: int, account_id: int) -> None:
    """Hard-delete an account; its transactions stay in history without an account."""

    ensure_owner(repo.get_by_id(account_id), user_id=user_id, label="Account")
    repo.delete(account_id, user_id=user_id)
    logger.info("Account deleted", extra={"user_id": user_id, "account_id": account_id})


def list_accounts(repo: AccountRepository, *, user_id: int) -> list[Account]:
    return repo.list_all(user_id=user_id)


def get_account(repo: AccountRepository, *, user_id: int, account_id: int) -> Account:
    return ensure_visible(repo.get_owned(account_id, user_id=user_id), user_id=user_id, label="Account")
