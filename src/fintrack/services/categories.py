"""Category tree services (two-level income/expense labels)."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from ..domain.repositories import CategoryRepository
from ..errors import Conflict, NotFound, ValidationError
from ..models.category import Category
from ..models.enums import EntryType
from .guards import ensure_owner, ensure_visible

logger = logging.getLogger(__name__)

# Distinguishes "parent not supplied" from "parent explicitly cleared".
UNSET = object()


@dataclass(slots=True)
class CategoryFamily:
    """A category with its direct parent and children (one level each way)."""

    category: Category
    parent: Optional[Category] = None
    children: list[Category] = field(default_factory=list)


def normalize_entry_type(value: str, *, field_name: str = "type") -> str:
    """Return the canonical Income/Expense label or raise ``ValidationError``."""

    if value not in EntryType.values():
        raise ValidationError(
            f"Invalid {field_name}",
            errors={field_name: ['Must be either "Income" or "Expense".']},
        )
    return value


def _resolve_parent(
    repo: CategoryRepository, parent_id: int, *, user_id: int, category_type: str
) -> Category:
    parent = repo.get_owned(parent_id, user_id=user_id)
    if parent is None:
        raise NotFound("Parent category not found")
    if parent.category_type != category_type:
        raise ValidationError(
            "A subcategory must have the same type as its parent",
            errors={"parent": [f"Parent is an {parent.category_type} category."]},
        )
    return parent


def create_category(
    repo: CategoryRepository,
    *,
    user_id: int,
    name: str,
    category_type: str,
    parent_id: Optional[int] = None,
) -> Category:
    """Create a top-level category, or a subcategory when ``parent_id`` is given."""

    name = (name or "").strip()
    if not name:
        raise ValidationError("Category name is required", errors={"name": ["Name is required."]})
    category_type = normalize_entry_type(category_type)
    if parent_id is not None:
        _resolve_parent(repo, parent_id, user_id=user_id, category_type=category_type)

    category = Category(
        user_id=user_id, name=name, category_type=category_type, parent_id=parent_id
    )
    return repo.create(category, user_id=user_id)


def get_family(repo: CategoryRepository, *, user_id: int, category_id: int) -> CategoryFamily:
    """Return the category, its parent (if any) and its direct children."""

    category = ensure_visible(
        repo.get_owned(category_id, user_id=user_id), user_id=user_id, label="Category"
    )
    parent = (
        repo.get_owned(category.parent_id, user_id=user_id)
        if category.parent_id is not None
        else None
    )
    children = repo.list_children(category_id, user_id=user_id)
    return CategoryFamily(category=category, parent=parent, children=children)


def update_category(
    repo: CategoryRepository,
    *,
    user_id: int,
    category_id: int,
    name: Optional[str] = None,
    category_type: Optional[str] = None,
    parent_id: object = UNSET,
) -> Category:
    """Patch name, type or parent; ``parent_id=None`` detaches to top level."""

    category = ensure_owner(repo.get_by_id(category_id), user_id=user_id, label="Category")

    if name:
        category.name = name.strip()
    if category_type:
        new_type = normalize_entry_type(category_type)
        if new_type != category.category_type:
            mismatched = [
                child for child in repo.list_children(category_id, user_id=user_id)
                if child.category_type != new_type
            ]
            if mismatched:
                raise ValidationError(
                    "Cannot change the type of a category whose subcategories use the old type"
                )
        category.category_type = new_type
    if parent_id is not UNSET:
        if parent_id is None:
            category.parent_id = None
        else:
            if parent_id == category_id:
                raise ValidationError(
                    "A category cannot be its own parent",
                    errors={"parent": ["Choose a different parent."]},
                )
            _resolve_parent(
                repo, int(parent_id), user_id=user_id, category_type=category.category_type
            )
            category.parent_id = int(parent_id)
    elif category.parent_id is not None and category_type:
        _resolve_parent(
            repo, category.parent_id, user_id=user_id, category_type=category.category_type
        )

    return repo.update(category, user_id=user_id)


def delete_category(repo: CategoryRepository, *, user_id: int, category_id: int) -> None:
    """Delete a leaf category that no transaction is filed under.

    The category's budget, if any, is removed with it.
    """

    ensure_owner(repo.get_by_id(category_id), user_id=user_id, label="Category")
    if repo.list_children(category_id, user_id=user_id):
        raise Conflict("Delete or move the subcategories before deleting this category")
    if repo.has_transactions(category_id, user_id=user_id):
        raise Conflict("Category still has transactions; recategorize them first")
    repo.delete(category_id, user_id=user_id)
    logger.info("Category deleted", extra={"user_id": user_id, "category_id": category_id})


def list_categories(repo: CategoryRepository, *, user_id: int) -> list[Category]:
    """Flat list; top-level entries are those with ``parent_id is None``."""

    return repo.list_all(user_id=user_id)
