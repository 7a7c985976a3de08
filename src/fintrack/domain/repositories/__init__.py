"""Repository protocol definitions for domain layer."""

from .account import AccountRepository
from .budget import BudgetRepository
from .category import CategoryRepository
from .transaction import TransactionRepository
from .user import UserRepository

__all__ = [
    "AccountRepository",
    "BudgetRepository",
    "CategoryRepository",
    "TransactionRepository",
    "UserRepository",
]
