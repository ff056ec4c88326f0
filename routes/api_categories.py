"""
Categories API Routes
REST API endpoints for category CRUD.
"""

import logging

from flask import Blueprint, jsonify, request
from flask_login import login_required

from routes.api_tasks import api_errors
from services import get_category_service
from services.task_errors import ValidationFailedError
from services.task_validation import validate_category_input

logger = logging.getLogger(__name__)

api_categories_bp = Blueprint('api_categories', __name__, url_prefix='/api/categories')


@api_categories_bp.route('/', methods=['GET'])
@login_required
@api_errors
def list_categories():
    return jsonify({'success': True, 'categories': get_category_service().list_categories()})


@api_categories_bp.route('/<int:category_id>', methods=['GET'])
@login_required
@api_errors
def get_category(category_id):
    return jsonify({'success': True, 'category': get_category_service().get_category(category_id)})


@api_categories_bp.route('/', methods=['POST'])
@login_required
@api_errors
def create_category():
    data, errors = validate_category_input(request.get_json(silent=True))
    if errors:
        raise ValidationFailedError(errors)

    category = get_category_service().create_category(data)
    return jsonify({'success': True, 'category': category}), 201


@api_categories_bp.route('/<int:category_id>', methods=['PUT'])
@login_required
@api_errors
def update_category(category_id):
    data, errors = validate_category_input(request.get_json(silent=True))
    if errors:
        raise ValidationFailedError(errors)

    category = get_category_service().update_category(category_id, data)
    return jsonify({'success': True, 'category': category})


@api_categories_bp.route('/<int:category_id>', methods=['DELETE'])
@login_required
@api_errors
def delete_category(category_id):
    """Delete a category; its tasks become uncategorized."""
    get_category_service().delete_category(category_id)
    return '', 204
