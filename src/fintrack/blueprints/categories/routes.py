"""Category tree routes."""

from __future__ import annotations

from flask import jsonify
from flask_jwt_extended import jwt_required

from ...context import get_context
from ...extensions import current_user_id
from ...services import categories
from ..forms import request_payload
from ..serializers import category_to_dict, family_to_dict
from . import bp
from .forms import CategoryForm


@bp.post("")
@jwt_required()
def create_category():
    form = CategoryForm.from_mapping(request_payload())
    form.validate_or_raise()

    category = categories.create_category(
        get_context().category_repo,
        user_id=current_user_id(),
        name=form.name,
        category_type=form.category_type,
        parent_id=form.parent_id,
    )
    return jsonify(category_to_dict(category)), 201


@bp.get("")
@jwt_required()
def list_categories():
    rows = categories.list_categories(get_context().category_repo, user_id=current_user_id())
    return jsonify([category_to_dict(row) for row in rows])


@bp.get("/family/<int:category_id>")
@jwt_required()
def category_family(category_id: int):
    family = categories.get_family(
        get_context().category_repo, user_id=current_user_id(), category_id=category_id
    )
    return jsonify(family_to_dict(family))


@bp.put("/<int:category_id>")
@jwt_required()
def update_category(category_id: int):
    form = CategoryForm.from_mapping(request_payload())
    form.partial = True
    form.validate_or_raise()

    category = categories.update_category(
        get_context().category_repo,
        user_id=current_user_id(),
        category_id=category_id,
        name=form.name,
        category_type=form.category_type,
        parent_id=form.parent_id,
    )
    return jsonify(category_to_dict(category))


@bp.delete("/<int:category_id>")
@jwt_required()
def delete_category(category_id: int):
    categories.delete_category(
        get_context().category_repo, user_id=current_user_id(), category_id=category_id
    )
    return jsonify({"message": "Category deleted successfully"})
