"""Budget form validation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Optional

from ..forms import JsonForm


@dataclass(slots=True)
class BudgetForm(JsonForm):
    FIELDS: ClassVar[tuple[str, ...]] = ("category", "limit", "notifyExceeded")

    partial: bool = False
    category_id: Optional[int] = None
    limit: Optional[float] = None
    notify_exceeded: Optional[bool] = None

    def validate(self) -> bool:
        self.errors.clear()
        required = not self.partial
        self.category_id = self._identifier("category", required=required)
        self.limit = self._number("limit", required=required, positive=True)

        self.notify_exceeded = None
        if self.provided("notifyExceeded"):
            raw = self.raw_data["notifyExceeded"]
            if isinstance(raw, bool):
                self.notify_exceeded = raw
            else:
                self._add_error("notifyExceeded", "Must be true or false.")

        if self.partial and not self.errors and not self.raw_data:
            self._add_error("__all__", "Please provide at least one field to update.")
        return not self.errors
