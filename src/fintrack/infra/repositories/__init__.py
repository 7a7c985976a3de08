"""Concrete repository implementations using SQLModel."""

from .account import SQLModelAccountRepository
from .budget import SQLModelBudgetRepository
from .category import SQLModelCategoryRepository
from .transaction import SQLModelTransactionRepository
from .user import SQLModelUserRepository

__all__ = [
    "SQLModelAccountRepository",
    "SQLModelBudgetRepository",
    "SQLModelCategoryRepository",
    "SQLModelTransactionRepository",
    "SQLModelUserRepository",
]
