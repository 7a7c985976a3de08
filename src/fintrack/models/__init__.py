"""SQLModel table exports."""

from .account import Account
from .budget import Budget
from .category import Category
from .enums import AccountType, EntryType, Role
from .transaction import Transaction
from .user import User

__all__ = [
    "Account",
    "AccountType",
    "Budget",
    "Category",
    "EntryType",
    "Role",
    "Transaction",
    "User",
]
