"""Budgeting domain services."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.exc import IntegrityError

from ..domain.repositories import BudgetRepository, CategoryRepository
from ..errors import Conflict, NotFound, ValidationError
from ..models.budget import Budget
from ..models.enums import EntryType
from .guards import ensure_owner

logger = logging.getLogger(__name__)

WARNING_THRESHOLD = 75.0
EXCEEDED_THRESHOLD = 100.0


@dataclass(slots=True)
class BudgetStatus:
    """Progress view of a budget as consumed by the client."""

    limit: float
    spent: float

    @property
    def progress(self) -> float:
        if self.limit <= 0:
            return EXCEEDED_THRESHOLD
        return round(min(self.spent / self.limit * 100, EXCEEDED_THRESHOLD), 2)

    @property
    def severity(self) -> str:
        progress = self.progress
        if progress >= EXCEEDED_THRESHOLD:
            return "exceeded"
        if progress > WARNING_THRESHOLD:
            return "warning"
        return "ok"

    @property
    def remaining(self) -> float:
        return round(self.limit - self.spent, 2)


def budget_status(budget: Budget) -> BudgetStatus:
    return BudgetStatus(limit=float(budget.limit), spent=float(budget.current_spending))


def apply_expense(budget: Budget, amount: float) -> Budget:
    """Count a posted expense; latches ``notify_exceeded`` once spend passes the limit."""

    budget.current_spending = round(budget.current_spending + amount, 2)
    if budget.current_spending > budget.limit and not budget.notify_exceeded:
        budget.notify_exceeded = True
        logger.warning(
            "Budget exceeded",
            extra={
                "budget_id": budget.id,
                "limit": budget.limit,
                "current_spending": budget.current_spending,
            },
        )
    return budget


def release_expense(budget: Budget, amount: float) -> Budget:
    """Uncount an expense that was edited away or deleted. The latch stays set."""

    budget.current_spending = round(max(budget.current_spending - amount, 0.0), 2)
    return budget


def _validate_limit(limit: float) -> float:
    try:
        value = float(limit)
    except (TypeError, ValueError):
        value = 0.0
    if not math.isfinite(value) or value <= 0:
        raise ValidationError(
            "Limit must be a positive number", errors={"limit": ["Must be greater than zero."]}
        )
    return value


def _expense_category(category_repo: CategoryRepository, category_id: int, *, user_id: int):
    category = category_repo.get_owned(category_id, user_id=user_id)
    if category is None:
        raise NotFound("Category not found")
    if category.category_type != EntryType.EXPENSE.value:
        raise ValidationError(
            "Budgets can only be set on Expense categories",
            errors={"category": ["Choose an Expense category."]},
        )
    return category


def create_budget(
    budget_repo: BudgetRepository,
    category_repo: CategoryRepository,
    *,
    user_id: int,
    category_id: int,
    limit: float,
) -> Budget:
    """Create the single budget allowed for (user, category)."""

    limit = _validate_limit(limit)
    _expense_category(category_repo, category_id, user_id=user_id)
    if budget_repo.get_for_category(category_id, user_id=user_id) is not None:
        raise Conflict("A budget for this category already exists")

    budget = Budget(
        user_id=user_id,
        category_id=category_id,
        limit=limit,
        current_spending=0.0,
        notify_exceeded=False,
    )
    try:
        budget = budget_repo.create(budget, user_id=user_id)
    except IntegrityError as exc:
        # Lost a race with a concurrent create for the same category.
        raise Conflict("A budget for this category already exists") from exc
    logger.info(
        "Budget created",
        extra={"user_id": user_id, "budget_id": budget.id, "category_id": category_id},
    )
    return budget


def update_budget(
    budget_repo: BudgetRepository,
    category_repo: CategoryRepository,
    *,
    user_id: int,
    budget_id: int,
    category_id: Optional[int] = None,
    limit: Optional[float] = None,
    notify_exceeded: Optional[bool] = None,
) -> Budget:
    """Patch category, limit or the latch. Spending is not recomputed from history."""

    budget = ensure_owner(
        budget_repo.get_by_id(budget_id, user_id=user_id), user_id=user_id, label="Budget"
    )
    if category_id is not None and category_id != budget.category_id:
        _expense_category(category_repo, category_id, user_id=user_id)
        if budget_repo.get_for_category(category_id, user_id=user_id) is not None:
            raise Conflict("A budget for this category already exists")
        budget.category_id = category_id
    if limit is not None:
        budget.limit = _validate_limit(limit)
    if notify_exceeded is not None:
        budget.notify_exceeded = bool(notify_exceeded)
    return budget_repo.update(budget, user_id=user_id)


def delete_budget(budget_repo: BudgetRepository, *, user_id: int, budget_id: int) -> None:
    ensure_owner(
        budget_repo.get_by_id(budget_id, user_id=user_id), user_id=user_id, label="Budget"
    )
    budget_repo.delete(budget_id, user_id=user_id)


def list_budgets(budget_repo: BudgetRepository, *, user_id: int) -> list[Budget]:
    """List the caller's budgets with their category loaded."""

    return budget_repo.list_all(user_id=user_id)
