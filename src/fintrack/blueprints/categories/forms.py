"""Category form validation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Optional

from ...models.enums import EntryType
from ...services.categories import UNSET
from ..forms import JsonForm


@dataclass(slots=True)
class CategoryForm(JsonForm):
    """Category input. On edits an explicit ``"parent": null`` moves the category to the top level."""

    FIELDS: ClassVar[tuple[str, ...]] = ("name", "type", "parent")

    partial: bool = False
    name: Optional[str] = None
    category_type: Optional[str] = None
    parent_id: object = UNSET

    def validate(self) -> bool:
        self.errors.clear()
        required = not self.partial
        self.name = self._text("name", required=required, max_length=128)
        self.category_type = self._choice("type", EntryType.values(), required=required)

        self.parent_id = UNSET
        if self.provided("parent"):
            raw_parent = self.raw_data.get("parent")
            if raw_parent is None or raw_parent == "":
                self.parent_id = None
            else:
                self.parent_id = self._identifier("parent")
        elif not self.partial:
            self.parent_id = None
        return not self.errors
