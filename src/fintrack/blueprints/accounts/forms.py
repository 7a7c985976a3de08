"""Account form validation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Optional

from ...models.enums import AccountType
from ..forms import JsonForm


@dataclass(slots=True)
class AccountForm(JsonForm):
    """Account create/edit input; ``partial`` relaxes the required fields for edits."""

    FIELDS: ClassVar[tuple[str, ...]] = ("name", "accountType", "balance")

    partial: bool = False
    name: Optional[str] = None
    account_type: Optional[str] = None
    balance: Optional[float] = None

    def validate(self) -> bool:
        self.errors.clear()
        required = not self.partial
        self.name = self._text("name", required=required, max_length=128)
        self.account_type = self._choice("accountType", AccountType.values(), required=required)
        self.balance = self._number("balance")
        if self.partial and not self.errors and not self.raw_data:
            self._add_error("__all__", "Please provide at least one field to update.")
        return not self.errors
