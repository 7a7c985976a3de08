"""Closed vocabularies stored as plain strings on the tables."""

from __future__ import annotations

from enum import Enum


class AccountType(str, Enum):
    BANK = "Bank"
    MOBILE_MONEY = "Mobile Money"
    CASH = "Cash"

    @classmethod
    def values(cls) -> tuple[str, ...]:
        return tuple(member.value for member in cls)


class EntryType(str, Enum):
    """Direction of money for both categories and transactions."""

    INCOME = "Income"
    EXPENSE = "Expense"

    @classmethod
    def values(cls) -> tuple[str, ...]:
        return tuple(member.value for member in cls)


class Role(str, Enum):
    USER = "user"
    ADMIN = "admin"

    @classmethod
    def values(cls) -> tuple[str, ...]:
        return tuple(member.value for member in cls)
