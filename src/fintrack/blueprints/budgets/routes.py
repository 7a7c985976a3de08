"""Budget routes."""

from __future__ import annotations

from flask import jsonify
from flask_jwt_extended import jwt_required

from ...context import get_context
from ...extensions import current_user_id
from ...services import budgeting
from ..forms import request_payload
from ..serializers import budget_to_dict
from . import bp
from .forms import BudgetForm


@bp.post("")
@jwt_required()
def create_budget():
    form = BudgetForm.from_mapping(request_payload())
    form.validate_or_raise()

    ctx = get_context()
    budget = budgeting.create_budget(
        ctx.budget_repo,
        ctx.category_repo,
        user_id=current_user_id(),
        category_id=form.category_id,
        limit=form.limit,
    )
    return jsonify(budget_to_dict(budget)), 201


@bp.get("")
@jwt_required()
def list_budgets():
    """Budgets with category name, progress percentage and severity for the progress bars."""

    rows = budgeting.list_budgets(get_context().budget_repo, user_id=current_user_id())
    return jsonify([budget_to_dict(row) for row in rows])


@bp.put("/<int:budget_id>")
@jwt_required()
def update_budget(budget_id: int):
    form = BudgetForm.from_mapping(request_payload())
    form.partial = True
    form.validate_or_raise()

    ctx = get_context()
    budget = budgeting.update_budget(
        ctx.budget_repo,
        ctx.category_repo,
        user_id=current_user_id(),
        budget_id=budget_id,
        category_id=form.category_id,
        limit=form.limit,
        notify_exceeded=form.notify_exceeded,
    )
    return jsonify(budget_to_dict(budget))


@bp.delete("/<int:budget_id>")
@jwt_required()
def delete_budget(budget_id: int):
    budgeting.delete_budget(get_context().budget_repo, user_id=current_user_id(), budget_id=budget_id)
    return jsonify({"message": "Budget deleted successfully"})
