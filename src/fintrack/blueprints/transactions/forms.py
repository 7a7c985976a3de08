"""Transaction form and query-string validation."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import ClassVar, Optional

from ...models.enums import EntryType
from ...services.ledger_service import UNSET
from ...services.reports import PERIODS
from ..forms import JsonForm, parse_date


@dataclass(slots=True)
class TransactionForm(JsonForm):
    """Transaction input; on edits only the supplied keys are patched."""

    FIELDS: ClassVar[tuple[str, ...]] = ("account", "category", "amount", "type", "description")

    partial: bool = False
    account_id: Optional[int] = None
    category_id: Optional[int] = None
    amount: Optional[float] = None
    transaction_type: Optional[str] = None
    description: Optional[str] = None

    def validate(self) -> bool:
        self.errors.clear()
        required = not self.partial
        self.account_id = self._identifier("account", required=required)
        self.category_id = self._identifier("category", required=required)
        self.amount = self._number("amount", required=required, positive=True)
        self.transaction_type = self._choice("type", EntryType.values(), required=required)
        self.description = self._text("description", max_length=255)

        if self.partial:
            for key in ("account", "category", "amount", "type"):
                if self.provided(key) and self.raw_data[key] in (None, ""):
                    self._add_error(key, "This field cannot be empty.")

        if self.partial and not self.errors and not self.raw_data:
            self._add_error("__all__", "Please provide at least one field to update.")
        return not self.errors

    def patch(self) -> dict[str, object]:
        """Keyword arguments for an edit, with unsent keys left as ``UNSET``."""

        return {
            "account_id": self.account_id if self.provided("account") else UNSET,
            "category_id": self.category_id if self.provided("category") else UNSET,
            "amount": self.amount if self.provided("amount") else UNSET,
            "transaction_type": self.transaction_type if self.provided("type") else UNSET,
            "description": self.description if self.provided("description") else UNSET,
        }


@dataclass(slots=True)
class TransactionQueryForm(JsonForm):
    """Query-string filters shared by the listing and report endpoints."""

    FIELDS: ClassVar[tuple[str, ...]] = (
        "startDate", "endDate", "type", "account", "category", "q", "period",
    )

    start_date: Optional[date | datetime] = None
    end_date: Optional[date | datetime] = None
    transaction_type: Optional[str] = None
    account_id: Optional[int] = None
    category_id: Optional[int] = None
    text: Optional[str] = None
    period: Optional[str] = None

    def validate(self) -> bool:
        self.errors.clear()
        self.start_date = self._date("startDate")
        self.end_date = self._date("endDate")
        if self.start_date and self.end_date and _as_date(self.start_date) > _as_date(self.end_date):
            self._add_error("endDate", "End date must be on or after the start date.")
        raw_type = self._text("type")
        if raw_type and raw_type.lower() != "all":
            self.transaction_type = self._choice("type", EntryType.values())
        self.account_id = self._identifier("account")
        self.category_id = self._identifier("category")
        self.text = self._text("q", max_length=255)
        self.period = self._choice("period", PERIODS)
        return not self.errors

    def _date(self, key: str) -> Optional[date | datetime]:
        raw = self._text(key)
        if raw is None:
            return None
        try:
            return parse_date(raw)
        except ValueError:
            self._add_error(key, "Enter a valid date (YYYY-MM-DD).")
            return None


def _as_date(value: date | datetime) -> date:
    return value.date() if isinstance(value, datetime) else value
