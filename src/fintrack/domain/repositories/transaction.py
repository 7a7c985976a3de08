"""Transaction repository protocol."""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from ...models.transaction import Transaction


class TransactionRepository(Protocol):
    """Read-side repository for ledger transactions.

    Writes go through the ledger service so balances move in the same unit
    of work as the transaction row.
    """

    def get_by_id(self, transaction_id: int, *, user_id: int) -> Optional[Transaction]:
        """Retrieve a transaction by ID."""
        ...

    def filter_by_date_range(
        self, start_date: datetime, end_date: datetime, *, user_id: int
    ) -> list[Transaction]:
        """Get transactions within an inclusive date range."""
        ...

    def search(
        self,
        *,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        account_id: Optional[int] = None,
        category_id: Optional[int] = None,
        transaction_type: Optional[str] = None,
        text: Optional[str] = None,
        user_id: int,
    ) -> list[Transaction]:
        """Advanced search with multiple filters."""
        ...
