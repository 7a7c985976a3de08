"""Category repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ...models.category import Category


class CategoryRepository(Protocol):
    """Repository for managing category entities."""

    def get_by_id(self, category_id: int) -> Optional[Category]:
        """Retrieve a category by ID regardless of owner."""
        ...

    def get_owned(self, category_id: int, *, user_id: int) -> Optional[Category]:
        """Retrieve a category only when it belongs to ``user_id``."""
        ...

    def list_all(self, *, user_id: int) -> list[Category]:
        """List all categories."""
        ...

    def list_children(self, category_id: int, *, user_id: int) -> list[Category]:
        """List direct subcategories."""
        ...

    def has_transactions(self, category_id: int, *, user_id: int) -> bool:
        """Return True when any transaction is filed under the category."""
        ...

    def create(self, category: Category, *, user_id: int) -> Category:
        """Create a new category."""
        ...

    def update(self, category: Category, *, user_id: int) -> Category:
        """Update an existing category."""
        ...

    def delete(self, category_id: int, *, user_id: int) -> None:
        """Delete a category by ID."""
        ...
