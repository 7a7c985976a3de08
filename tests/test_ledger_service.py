"""Transaction engine tests: balance conservation, budget tracking and edit/delete reconciliation."""

from __future__ import annotations

import pytest

from fintrack.errors import InsufficientBalance, NotFound, ValidationError
from fintrack.services import accounts, budgeting, ledger_service
from fintrack.services.ledger_service import LedgerFilters
from tests.conftest import assert_float_equal


@pytest.fixture
def post(ctx, user):
    """Post a transaction for the default user through the engine."""

    def _post(account, category, amount, txn_type="Expense", description=None, owner=None):
        return ledger_service.create_transaction(
            session_factory=ctx.session_factory,
            user_id=(owner or user).id,
            account_id=account.id,
            category_id=category.id,
            amount=amount,
            transaction_type=txn_type,
            description=description,
        )

    return _post


def _balance(ctx, account) -> float:
    return ctx.account_repo.get_by_id(account.id).balance


def _budget(ctx, user, budget):
    return ctx.budget_repo.get_by_id(budget.id, user_id=user.id)


# ---------------------------------------------------------------------------
# create
# ---------------------------------------------------------------------------


def test_income_credits_and_expense_debits(ctx, account_factory, category_factory, post):
    account = account_factory(balance=100)
    salary = category_factory(name="Salary", category_type="Income")
    food = category_factory(name="Food")

    post(account, salary, 250, "Income")
    post(account, food, 75.5)

    assert_float_equal(_balance(ctx, account), 274.5)


def test_balance_equals_initial_plus_net_of_history(ctx, user, account_factory, category_factory, post):
    account = account_factory(balance=40)
    salary = category_factory(name="Salary", category_type="Income")
    food = category_factory(name="Food")
    amounts = [("Income", 500), ("Expense", 120.25), ("Expense", 19.75), ("Income", 10)]

    for txn_type, amount in amounts:
        post(account, salary if txn_type == "Income" else food, amount, txn_type)

    history = ledger_service.filtered_transactions(
        ctx.transaction_repo, LedgerFilters(user_id=user.id, account_id=account.id)
    )
    net = sum(txn.signed_amount for txn in history)
    assert_float_equal(_balance(ctx, account), 40 + net)
    assert_float_equal(_balance(ctx, account), 410)


def test_overdraft_rejected_without_mutation(ctx, user, account_factory, category_factory, budget_factory, post):
    account = account_factory(balance=1000)
    food = category_factory(name="Food")
    budget = budget_factory(food.id, limit=50)

    with pytest.raises(InsufficientBalance):
        post(account, food, 1300)

    assert _balance(ctx, account) == 1000
    assert _budget(ctx, user, budget).current_spending == 0
    assert ledger_service.list_transactions(ctx.transaction_repo, user_id=user.id) == []


def test_expense_equal_to_balance_is_allowed(ctx, account_factory, category_factory, post):
    account = account_factory(balance=20)
    post(account, category_factory(name="Food"), 20)
    assert _balance(ctx, account) == 0


def test_income_never_checks_balance(ctx, account_factory, category_factory, post):
    account = account_factory(balance=-5)
    post(account, category_factory(name="Gift", category_type="Income"), 1, "Income")
    assert_float_equal(_balance(ctx, account), -4)


@pytest.mark.parametrize("amount", [0, -10, "ten", None, "inf", float("nan"), "1e400"])
def test_amount_must_be_positive(ctx, account_factory, category_factory, post, amount):
    account = account_factory(balance=100)
    with pytest.raises(ValidationError):
        post(account, category_factory(name="Food"), amount)
    assert _balance(ctx, account) == 100


def test_invalid_type_rejected(ctx, account_factory, category_factory, post):
    account = account_factory(balance=100)
    with pytest.raises(ValidationError):
        post(account, category_factory(name="Food"), 5, "Transfer")


def test_missing_account_or_category_is_not_found(ctx, user, other_user, account_factory, category_factory):
    account = account_factory(balance=100)
    food = category_factory(name="Food")
    foreign_account = account_factory(balance=100, owner=other_user)

    with pytest.raises(NotFound):
        ledger_service.create_transaction(
            session_factory=ctx.session_factory, user_id=user.id, account_id=999,
            category_id=food.id, amount=1, transaction_type="Expense",
        )
    with pytest.raises(NotFound):
        ledger_service.create_transaction(
            session_factory=ctx.session_factory, user_id=user.id, account_id=account.id,
            category_id=999, amount=1, transaction_type="Expense",
        )
    with pytest.raises(NotFound):
        ledger_service.create_transaction(
            session_factory=ctx.session_factory, user_id=user.id, account_id=foreign_account.id,
            category_id=food.id, amount=1, transaction_type="Expense",
        )
    assert _balance(ctx, account) == 100
    assert _balance(ctx, foreign_account) == 100


def test_budget_spending_equals_sum_of_expenses(ctx, user, account_factory, category_factory, budget_factory, post):
    account = account_factory(balance=1000)
    food = category_factory(name="Food")
    fun = category_factory(name="Fun")
    salary = category_factory(name="Salary", category_type="Income")
    budget = budget_factory(food.id, limit=100)

    post(account, food, 30)
    post(account, food, 45.5)
    post(account, fun, 99)
    post(account, salary, 10, "Income")

    refreshed = _budget(ctx, user, budget)
    assert_float_equal(refreshed.current_spending, 75.5)
    assert refreshed.notify_exceeded is False


def test_expenses_before_budget_existed_are_not_counted(ctx, user, account_factory, category_factory, budget_factory, post):
    account = account_factory(balance=500)
    food = category_factory(name="Food")
    early = post(account, food, 40)
    budget = budget_factory(food.id, limit=100)

    assert early.budget_id is None
    assert _budget(ctx, user, budget).current_spending == 0

    ledger_service.delete_transaction(
        session_factory=ctx.session_factory, user_id=user.id, transaction_id=early.id
    )
    assert _budget(ctx, user, budget).current_spending == 0


def test_latch_is_monotonic(ctx, user, account_factory, category_factory, budget_factory, post):
    account = account_factory(balance=1000)
    food = category_factory(name="Food")
    budget = budget_factory(food.id, limit=50)

    big = post(account, food, 60)
    assert _budget(ctx, user, budget).notify_exceeded is True

    ledger_service.delete_transaction(
        session_factory=ctx.session_factory, user_id=user.id, transaction_id=big.id
    )
    refreshed = _budget(ctx, user, budget)
    assert refreshed.current_spending == 0
    assert refreshed.notify_exceeded is True


def test_created_transaction_carries_summaries(ctx, account_factory, category_factory, post):
    account = account_factory(name="Main", balance=10)
    food = category_factory(name="Food")

    txn = post(account, food, 2.5, description="  Coffee  ")

    assert txn.id is not None
    assert txn.account.name == "Main"
    assert txn.category.name == "Food"
    assert txn.description == "Coffee"
    assert txn.created_at is not None


# ---------------------------------------------------------------------------
# delete
# ---------------------------------------------------------------------------


def test_delete_reverses_effect_by_type(ctx, user, account_factory, category_factory, post):
    account = account_factory(balance=100)
    salary = category_factory(name="Salary", category_type="Income")
    food = category_factory(name="Food")
    income = post(account, salary, 50, "Income")
    expense = post(account, food, 30)

    ledger_service.delete_transaction(
        session_factory=ctx.session_factory, user_id=user.id, transaction_id=expense.id
    )
    assert_float_equal(_balance(ctx, account), 150)

    ledger_service.delete_transaction(
        session_factory=ctx.session_factory, user_id=user.id, transaction_id=income.id
    )
    assert_float_equal(_balance(ctx, account), 100)


def test_create_then_delete_restores_state(ctx, user, account_factory, category_factory, budget_factory, post):
    account = account_factory(balance=300)
    food = category_factory(name="Food")
    budget = budget_factory(food.id, limit=500)
    before = _budget(ctx, user, budget)

    txn = post(account, food, 123.45)
    ledger_service.delete_transaction(
        session_factory=ctx.session_factory, user_id=user.id, transaction_id=txn.id
    )

    after = _budget(ctx, user, budget)
    assert_float_equal(_balance(ctx, account), 300)
    assert_float_equal(after.current_spending, before.current_spending)
    assert ctx.transaction_repo.get_by_id(txn.id, user_id=user.id) is None


def test_delete_missing_transaction_is_not_found(ctx, user, other_user, account_factory, category_factory, post):
    txn = post(account_factory(balance=10), category_factory(name="Food"), 1)

    with pytest.raises(NotFound):
        ledger_service.delete_transaction(
            session_factory=ctx.session_factory, user_id=user.id, transaction_id=999
        )
    with pytest.raises(NotFound):
        ledger_service.delete_transaction(
            session_factory=ctx.session_factory, user_id=other_user.id, transaction_id=txn.id
        )


def test_delete_transaction_of_deleted_account_is_not_found(ctx, user, account_factory, category_factory, post):
    account = account_factory(balance=10)
    txn = post(account, category_factory(name="Food"), 1)
    accounts.delete_account(ctx.account_repo, user_id=user.id, account_id=account.id)

    with pytest.raises(NotFound):
        ledger_service.delete_transaction(
            session_factory=ctx.session_factory, user_id=user.id, transaction_id=txn.id
        )
    assert ctx.transaction_repo.get_by_id(txn.id, user_id=user.id) is not None


# ---------------------------------------------------------------------------
# edit
# ---------------------------------------------------------------------------


def _edit(ctx, user, txn, **patch):
    return ledger_service.edit_transaction(
        session_factory=ctx.session_factory, user_id=user.id, transaction_id=txn.id, **patch
    )


def test_edit_amount_rebalances_same_account(ctx, user, account_factory, category_factory, post):
    account = account_factory(balance=100)
    txn = post(account, category_factory(name="Food"), 30)

    edited = _edit(ctx, user, txn, amount=45)

    assert edited.amount == 45
    assert_float_equal(_balance(ctx, account), 55)


def test_edit_income_to_another_account_moves_credit(ctx, user, account_factory, category_factory, post):
    first = account_factory(name="First", balance=0)
    second = account_factory(name="Second", balance=0)
    txn = post(first, category_factory(name="Salary", category_type="Income"), 200, "Income")

    edited = _edit(ctx, user, txn, account_id=second.id)

    assert edited.account_id == second.id
    assert edited.account.name == "Second"
    assert _balance(ctx, first) == 0
    assert_float_equal(_balance(ctx, second), 200)


def test_edit_expense_to_account_without_funds_rolls_back(ctx, user, account_factory, category_factory, budget_factory, post):
    rich = account_factory(name="Rich", balance=100)
    poor = account_factory(name="Poor", balance=5)
    food = category_factory(name="Food")
    budget = budget_factory(food.id, limit=200)
    txn = post(rich, food, 50)

    with pytest.raises(InsufficientBalance):
        _edit(ctx, user, txn, account_id=poor.id)

    assert_float_equal(_balance(ctx, rich), 50)
    assert_float_equal(_balance(ctx, poor), 5)
    assert_float_equal(_budget(ctx, user, budget).current_spending, 50)
    unchanged = ctx.transaction_repo.get_by_id(txn.id, user_id=user.id)
    assert unchanged.account_id == rich.id


def test_edit_type_flip_applies_both_directions(ctx, user, account_factory, category_factory, post):
    account = account_factory(balance=100)
    txn = post(account, category_factory(name="Misc"), 30)

    _edit(ctx, user, txn, transaction_type="Income")

    assert_float_equal(_balance(ctx, account), 130)


def test_edit_moves_budget_spend_between_categories(ctx, user, account_factory, category_factory, budget_factory, post):
    account = account_factory(balance=500)
    food = category_factory(name="Food")
    fun = category_factory(name="Fun")
    food_budget = budget_factory(food.id, limit=100)
    fun_budget = budget_factory(fun.id, limit=100)
    txn = post(account, food, 80)

    edited = _edit(ctx, user, txn, category_id=fun.id, amount=120)

    assert edited.budget_id == fun_budget.id
    assert _budget(ctx, user, food_budget).current_spending == 0
    fun_after = _budget(ctx, user, fun_budget)
    assert fun_after.current_spending == 120
    assert fun_after.notify_exceeded is True
    assert_float_equal(_balance(ctx, account), 380)


def test_edit_expense_to_income_releases_budget(ctx, user, account_factory, category_factory, budget_factory, post):
    account = account_factory(balance=100)
    food = category_factory(name="Food")
    budget = budget_factory(food.id, limit=100)
    txn = post(account, food, 40)

    edited = _edit(ctx, user, txn, transaction_type="Income")

    assert edited.budget_id is None
    assert _budget(ctx, user, budget).current_spending == 0


def test_edit_description_only_touches_nothing_else(ctx, user, account_factory, category_factory, budget_factory, post):
    account = account_factory(balance=100)
    food = category_factory(name="Food")
    budget = budget_factory(food.id, limit=100)
    txn = post(account, food, 40, description="old")

    edited = _edit(ctx, user, txn, description="new")

    assert edited.description == "new"
    assert_float_equal(_balance(ctx, account), 60)
    assert _budget(ctx, user, budget).current_spending == 40


def test_edit_validates_patch(ctx, user, account_factory, category_factory, post):
    txn = post(account_factory(balance=100), category_factory(name="Food"), 10)

    with pytest.raises(ValidationError):
        _edit(ctx, user, txn, amount=0)
    with pytest.raises(NotFound):
        _edit(ctx, user, txn, category_id=999)
    with pytest.raises(ValidationError):
        _edit(ctx, user, txn, account_id=None)
    with pytest.raises(ValidationError):
        _edit(ctx, user, txn, category_id="")
    with pytest.raises(NotFound):
        ledger_service.edit_transaction(
            session_factory=ctx.session_factory, user_id=user.id, transaction_id=999, amount=5
        )


# ---------------------------------------------------------------------------
# listing
# ---------------------------------------------------------------------------


def test_list_is_newest_first_and_filterable(ctx, user, other_user, account_factory, category_factory, post):
    account = account_factory(balance=1000)
    food = category_factory(name="Food")
    salary = category_factory(name="Salary", category_type="Income")
    first = post(account, food, 1, description="bread")
    second = post(account, salary, 2, "Income", description="pay day")
    third = post(account, food, 3, description="brown bread")
    post(account_factory(balance=10, owner=other_user), category_factory(name="X", owner=other_user), 1, owner=other_user)

    everything = ledger_service.list_transactions(ctx.transaction_repo, user_id=user.id)
    assert [txn.id for txn in everything] == [third.id, second.id, first.id]

    expenses = ledger_service.filtered_transactions(
        ctx.transaction_repo, LedgerFilters(user_id=user.id, txn_type="Expense")
    )
    assert {txn.id for txn in expenses} == {first.id, third.id}

    bread = ledger_service.filtered_transactions(
        ctx.transaction_repo, LedgerFilters(user_id=user.id, text="bread")
    )
    assert {txn.id for txn in bread} == {first.id, third.id}

    by_category = ledger_service.filtered_transactions(
        ctx.transaction_repo, LedgerFilters(user_id=user.id, category_id=salary.id)
    )
    assert [txn.id for txn in by_category] == [second.id]


def test_budget_status_reflects_engine_postings(ctx, user, account_factory, category_factory, budget_factory, post):
    account = account_factory(balance=1000)
    food = category_factory(name="Food")
    budget = budget_factory(food.id, limit=200)
    post(account, food, 160)

    status = budgeting.budget_status(_budget(ctx, user, budget))
    assert status.progress == 80
    assert status.severity == "warning"
