"""Category tree service tests."""

from __future__ import annotations

import pytest

from fintrack.errors import Conflict, Forbidden, NotFound, ValidationError
from fintrack.services import categories, ledger_service


def test_create_top_level_and_subcategory(ctx, user, category_factory):
    food = category_factory(name="Food")
    groceries = category_factory(name="Groceries", parent_id=food.id)

    assert food.parent_id is None
    assert food.is_top_level
    assert groceries.parent_id == food.id
    assert not groceries.is_top_level


def test_subcategory_type_must_match_parent(ctx, user, category_factory):
    salary = category_factory(name="Salary", category_type="Income")

    with pytest.raises(ValidationError):
        category_factory(name="Snacks", category_type="Expense", parent_id=salary.id)


def test_parent_must_belong_to_caller(ctx, user, other_user, category_factory):
    foreign = category_factory(name="Theirs", owner=other_user)

    with pytest.raises(NotFound):
        category_factory(name="Mine", parent_id=foreign.id)


def test_invalid_type_rejected(ctx, user):
    with pytest.raises(ValidationError):
        categories.create_category(
            ctx.category_repo, user_id=user.id, name="Odd", category_type="Transfer"
        )


def test_get_family_returns_one_level_each_way(ctx, user, category_factory):
    food = category_factory(name="Food")
    groceries = category_factory(name="Groceries", parent_id=food.id)
    dining = category_factory(name="Dining", parent_id=food.id)

    family = categories.get_family(ctx.category_repo, user_id=user.id, category_id=food.id)
    assert family.category.id == food.id
    assert family.parent is None
    assert sorted(child.id for child in family.children) == sorted([groceries.id, dining.id])

    child_family = categories.get_family(
        ctx.category_repo, user_id=user.id, category_id=groceries.id
    )
    assert child_family.parent.id == food.id
    assert child_family.children == []


def test_get_family_of_foreign_category_is_not_found(ctx, other_user, category_factory):
    food = category_factory(name="Food")
    with pytest.raises(NotFound):
        categories.get_family(ctx.category_repo, user_id=other_user.id, category_id=food.id)


def test_update_category_detaches_with_explicit_none(ctx, user, category_factory):
    food = category_factory(name="Food")
    snacks = category_factory(name="Snacks", parent_id=food.id)

    moved = categories.update_category(
        ctx.category_repo, user_id=user.id, category_id=snacks.id, parent_id=None
    )
    assert moved.parent_id is None

    renamed = categories.update_category(
        ctx.category_repo, user_id=user.id, category_id=snacks.id, name="Treats"
    )
    assert renamed.name == "Treats"
    assert renamed.parent_id is None


def test_category_cannot_be_its_own_parent(ctx, user, category_factory):
    food = category_factory(name="Food")
    with pytest.raises(ValidationError):
        categories.update_category(
            ctx.category_repo, user_id=user.id, category_id=food.id, parent_id=food.id
        )


def test_type_change_blocked_by_children_of_old_type(ctx, user, category_factory):
    food = category_factory(name="Food")
    category_factory(name="Groceries", parent_id=food.id)

    with pytest.raises(ValidationError):
        categories.update_category(
            ctx.category_repo, user_id=user.id, category_id=food.id, category_type="Income"
        )


def test_update_foreign_category_forbidden(ctx, other_user, category_factory):
    food = category_factory(name="Food")
    with pytest.raises(Forbidden):
        categories.update_category(
            ctx.category_repo, user_id=other_user.id, category_id=food.id, name="Stolen"
        )


def test_delete_category_with_children_conflicts(ctx, user, category_factory):
    food = category_factory(name="Food")
    category_factory(name="Groceries", parent_id=food.id)

    with pytest.raises(Conflict):
        categories.delete_category(ctx.category_repo, user_id=user.id, category_id=food.id)


def test_delete_category_with_transactions_conflicts(ctx, user, account_factory, category_factory):
    account = account_factory(balance=50)
    food = category_factory(name="Food")
    ledger_service.create_transaction(
        session_factory=ctx.session_factory,
        user_id=user.id,
        account_id=account.id,
        category_id=food.id,
        amount=5,
        transaction_type="Expense",
    )

    with pytest.raises(Conflict):
        categories.delete_category(ctx.category_repo, user_id=user.id, category_id=food.id)


def test_delete_leaf_category_removes_its_budget(ctx, user, category_factory, budget_factory):
    food = category_factory(name="Food")
    budget = budget_factory(food.id, limit=100)

    categories.delete_category(ctx.category_repo, user_id=user.id, category_id=food.id)

    assert ctx.category_repo.get_by_id(food.id) is None
    assert ctx.budget_repo.get_by_id(budget.id, user_id=user.id) is None


def test_list_categories_flat_and_scoped(ctx, user, other_user, category_factory):
    food = category_factory(name="Food")
    category_factory(name="Groceries", parent_id=food.id)
    category_factory(name="Elsewhere", owner=other_user)

    rows = categories.list_categories(ctx.category_repo, user_id=user.id)
    assert sorted(row.name for row in rows) == ["Food", "Groceries"]
    assert [row.name for row in rows if row.parent_id is None] == ["Food"]
