"""Account routes."""

from __future__ import annotations

from flask import jsonify
from flask_jwt_extended import jwt_required

from ...context import get_context
from ...extensions import current_user_id
from ...services import accounts
from ..forms import request_payload
from ..serializers import account_to_dict
from . import bp
from .forms import AccountForm


@bp.post("/create")
@jwt_required()
def create_account():
    form = AccountForm.from_mapping(request_payload())
    form.validate_or_raise()

    account = accounts.create_account(
        get_context().account_repo,
        user_id=current_user_id(),
        name=form.name,
        account_type=form.account_type,
        balance=form.balance or 0.0,
    )
    return jsonify(account_to_dict(account)), 201


@bp.get("")
@jwt_required()
def list_accounts():
    rows = accounts.list_accounts(get_context().account_repo, user_id=current_user_id())
    return jsonify([account_to_dict(row) for row in rows])


@bp.get("/<int:account_id>")
@jwt_required()
def get_account(account_id: int):
    account = accounts.get_account(
        get_context().account_repo, user_id=current_user_id(), account_id=account_id
    )
    return jsonify(account_to_dict(account))


@bp.put("/<int:account_id>")
@jwt_required()
def edit_account(account_id: int):
    form = AccountForm.from_mapping(request_payload())
    form.partial = True
    form.validate_or_raise()

    account = accounts.edit_account(
        get_context().account_repo,
        user_id=current_user_id(),
        account_id=account_id,
        name=form.name,
        account_type=form.account_type,
        balance=form.balance,
    )
    return jsonify(account_to_dict(account))


@bp.delete("/<int:account_id>")
@jwt_required()
def delete_account(account_id: int):
    accounts.delete_account(
        get_context().account_repo, user_id=current_user_id(), account_id=account_id
    )
    return jsonify({"message": "Account deleted successfully"})
