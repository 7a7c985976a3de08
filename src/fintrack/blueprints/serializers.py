"""JSON shapes returned by the API."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from ..models import Account, Budget, Category, Transaction, User
from ..services.budgeting import budget_status
from ..services.categories import CategoryFamily


def _timestamp(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def user_to_dict(user: User, *, token: str | None = None) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "id": user.id,
        "firstname": user.firstname,
        "lastname": user.lastname,
        "email": user.email,
        "role": user.role,
        "imageUrl": user.image_url,
    }
    if token is not None:
        payload["token"] = token
    return payload


def account_to_dict(account: Account) -> dict[str, Any]:
    return {
        "id": account.id,
        "user": account.user_id,
        "name": account.name,
        "accountType": account.account_type,
        "balance": account.balance,
        "createdAt": _timestamp(account.created_at),
        "updatedAt": _timestamp(account.updated_at),
    }


def category_to_dict(category: Optional[Category]) -> Optional[dict[str, Any]]:
    if category is None:
        return None
    return {
        "id": category.id,
        "user": category.user_id,
        "name": category.name,
        "type": category.category_type,
        "parent": category.parent_id,
        "createdAt": _timestamp(category.created_at),
        "updatedAt": _timestamp(category.updated_at),
    }


def family_to_dict(family: CategoryFamily) -> dict[str, Any]:
    return {
        "category": category_to_dict(family.category),
        "parent": category_to_dict(family.parent),
        "children": [category_to_dict(child) for child in family.children],
    }


def budget_to_dict(budget: Budget) -> dict[str, Any]:
    status = budget_status(budget)
    category = budget.category
    return {
        "id": budget.id,
        "user": budget.user_id,
        "category": budget.category_id,
        "categoryName": category.name if category is not None else None,
        "limit": budget.limit,
        "currentSpending": budget.current_spending,
        "notifyExceeded": budget.notify_exceeded,
        "progress": status.progress,
        "severity": status.severity,
        "remaining": status.remaining,
        "createdAt": _timestamp(budget.created_at),
        "updatedAt": _timestamp(budget.updated_at),
    }


def transaction_to_dict(txn: Transaction) -> dict[str, Any]:
    account = txn.account
    category = txn.category
    return {
        "id": txn.id,
        "user": txn.user_id,
        "account": (
            {"id": account.id, "name": account.name, "accountType": account.account_type}
            if account is not None
            else None
        ),
        "category": (
            {"id": category.id, "name": category.name, "type": category.category_type}
            if category is not None
            else None
        ),
        "amount": txn.amount,
        "type": txn.transaction_type,
        "description": txn.description,
        "createdAt": _timestamp(txn.created_at),
        "updatedAt": _timestamp(txn.updated_at),
    }
