"""Transaction and report routes."""

from __future__ import annotations

from flask import jsonify, request
from flask_jwt_extended import jwt_required

from ...context import get_context
from ...errors import ValidationError
from ...extensions import current_user_id
from ...models.enums import EntryType
from ...services import ledger_service, reports
from ..forms import request_payload
from ..serializers import transaction_to_dict
from . import bp
from .forms import TransactionForm, TransactionQueryForm


def _query() -> TransactionQueryForm:
    form = TransactionQueryForm.from_mapping(request.args)
    form.validate_or_raise()
    return form


@bp.post("")
@jwt_required()
def create_transaction():
    """Post a transaction against one of the caller's accounts."""

    form = TransactionForm.from_mapping(request_payload())
    form.validate_or_raise()

    txn = ledger_service.create_transaction(
        session_factory=get_context().session_factory,
        user_id=current_user_id(),
        account_id=form.account_id,
        category_id=form.category_id,
        amount=form.amount,
        transaction_type=form.transaction_type,
        description=form.description,
    )
    return jsonify(transaction_to_dict(txn)), 201


@bp.get("")
@jwt_required()
def list_transactions():
    """Newest-first listing with optional date, type, account, category and text filters."""

    query = _query()
    filters = ledger_service.LedgerFilters(
        user_id=current_user_id(),
        start_date=reports.range_start(query.start_date),
        end_date=reports.range_end(query.end_date),
        account_id=query.account_id,
        category_id=query.category_id,
        text=query.text,
        txn_type=query.transaction_type or "all",
    )
    rows = ledger_service.filtered_transactions(get_context().transaction_repo, filters)
    return jsonify([transaction_to_dict(row) for row in rows])


@bp.get("/<int:transaction_id>")
@jwt_required()
def get_transaction(transaction_id: int):
    txn = ledger_service.get_transaction(
        get_context().transaction_repo, user_id=current_user_id(), transaction_id=transaction_id
    )
    return jsonify(transaction_to_dict(txn))


@bp.put("/<int:transaction_id>")
@jwt_required()
def edit_transaction(transaction_id: int):
    form = TransactionForm.from_mapping(request_payload())
    form.partial = True
    form.validate_or_raise()

    txn = ledger_service.edit_transaction(
        session_factory=get_context().session_factory,
        user_id=current_user_id(),
        transaction_id=transaction_id,
        **form.patch(),
    )
    return jsonify(transaction_to_dict(txn))


@bp.delete("/<int:transaction_id>")
@jwt_required()
def delete_transaction(transaction_id: int):
    ledger_service.delete_transaction(
        session_factory=get_context().session_factory,
        user_id=current_user_id(),
        transaction_id=transaction_id,
    )
    return jsonify({"message": "Transaction deleted successfully"})


@bp.get("/summary")
@jwt_required()
def summary():
    query = _query()
    rows = reports.get_summary(
        get_context().transaction_repo,
        user_id=current_user_id(),
        start_date=query.start_date,
        end_date=query.end_date,
    )
    return jsonify(rows)


@bp.get("/bar-chart")
@jwt_required()
def bar_chart():
    query = _query()
    if query.period is None:
        raise ValidationError(
            "Period must be one of week, month or year",
            errors={"period": ["This field is required."]},
        )
    series = reports.get_bar_chart_series(
        get_context().transaction_repo, user_id=current_user_id(), period=query.period
    )
    return jsonify(series)


@bp.get("/breakdown")
@jwt_required()
def breakdown():
    """Per-category totals for the pie chart (Expense unless ``type`` says otherwise)."""

    query = _query()
    rows = reports.get_category_breakdown(
        get_context().transaction_repo,
        user_id=current_user_id(),
        transaction_type=query.transaction_type or EntryType.EXPENSE.value,
        start_date=query.start_date,
        end_date=query.end_date,
    )
    return jsonify(rows)
