"""Admin utilities (user creation, demo seed) used by the CLI."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import func
from sqlmodel import select

from ..constants.categories import EXPENSE_TREE, INCOME_TREE
from ..context import AppContext
from ..models import Account, Budget, Category, EntryType, Transaction, User
from . import accounts, auth, budgeting, categories, ledger_service

logger = logging.getLogger(__name__)

DEMO_EMAIL = "demo@fintrack.local"
DEMO_PASSWORD = "demo-password"


@dataclass(frozen=True)
class SeedSummary:
    """Aggregate counts returned after demo seeding."""

    user_id: int
    transactions: int
    categories: int
    accounts: int
    budgets: int


def seed_category_tree(ctx: AppContext, *, user_id: int) -> dict[str, Category]:
    """Create the starter two-level tree for a user, keyed by category name."""

    created: dict[str, Category] = {}
    for category_type, tree in ((EntryType.INCOME.value, INCOME_TREE), (EntryType.EXPENSE.value, EXPENSE_TREE)):
        for parent_name, children in tree.items():
            parent = categories.create_category(
                ctx.category_repo, user_id=user_id, name=parent_name, category_type=category_type
            )
            created[parent_name] = parent
            for child_name in children:
                created[child_name] = categories.create_category(
                    ctx.category_repo,
                    user_id=user_id,
                    name=child_name,
                    category_type=category_type,
                    parent_id=parent.id,
                )
    return created


def _demo_user(ctx: AppContext) -> User:
    existing = ctx.user_repo.get_by_email(DEMO_EMAIL)
    if existing is not None:
        return existing
    return auth.register_user(
        ctx.user_repo,
        firstname="Demo",
        lastname="User",
        email=DEMO_EMAIL,
        password=DEMO_PASSWORD,
    )


def run_demo_seed(ctx: AppContext) -> SeedSummary:
    """Seed a demo user idempotently; transactions go through the ledger engine."""

    user = _demo_user(ctx)
    user_id = user.id
    if ledger_service.list_transactions(ctx.transaction_repo, user_id=user_id):
        return build_seed_summary(ctx, user_id=user_id)

    tree = seed_category_tree(ctx, user_id=user_id)
    bank = accounts.create_account(
        ctx.account_repo, user_id=user_id, name="Main Bank", account_type="Bank", balance=2500.0
    )
    wallet = accounts.create_account(
        ctx.account_repo, user_id=user_id, name="Wallet", account_type="Cash", balance=150.0
    )
    accounts.create_account(
        ctx.account_repo, user_id=user_id, name="Mobile Wallet", account_type="Mobile Money"
    )

    budgeting.create_budget(
        ctx.budget_repo, ctx.category_repo, user_id=user_id, category_id=tree["Groceries"].id, limit=400.0
    )
    budgeting.create_budget(
        ctx.budget_repo, ctx.category_repo, user_id=user_id, category_id=tree["Dining Out"].id, limit=120.0
    )

    postings = [
        (bank, "Wages", 1800.0, EntryType.INCOME.value, "Monthly pay"),
        (bank, "Rent", 950.0, EntryType.EXPENSE.value, "Apartment rent"),
        (bank, "Groceries", 86.4, EntryType.EXPENSE.value, "Weekly shop"),
        (wallet, "Coffee", 4.5, EntryType.EXPENSE.value, None),
        (wallet, "Dining Out", 38.0, EntryType.EXPENSE.value, "Dinner with friends"),
        (bank, "Internet", 45.0, EntryType.EXPENSE.value, "Fibre plan"),
        (bank, "Interest", 3.12, EntryType.INCOME.value, None),
    ]
    for account, category_name, amount, txn_type, description in postings:
        ledger_service.create_transaction(
            session_factory=ctx.session_factory,
            user_id=user_id,
            account_id=account.id,
            category_id=tree[category_name].id,
            amount=amount,
            transaction_type=txn_type,
            description=description,
        )

    summary = build_seed_summary(ctx, user_id=user_id)
    logger.info("Demo seed completed", extra={"user_id": user_id, "transactions": summary.transactions})
    return summary


def build_seed_summary(ctx: AppContext, *, user_id: int) -> SeedSummary:
    """Compile counts for tables populated by the demo seed."""

    with ctx.session_factory() as session:

        def count(model) -> int:
            return session.exec(
                select(func.count(model.id)).where(model.user_id == user_id)
            ).one()

        return SeedSummary(
            user_id=user_id,
            transactions=count(Transaction),
            categories=count(Category),
            accounts=count(Account),
            budgets=count(Budget),
        )
