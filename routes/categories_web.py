"""
Category Pages
Server-rendered category list and forms.
"""

import logging

from flask import Blueprint, flash, redirect, render_template, request, url_for
from flask_login import login_required

from services import get_category_service
from services.task_errors import NotFoundError, ValidationFailedError
from services.task_validation import validate_category_input

logger = logging.getLogger(__name__)

categories_web_bp = Blueprint('categories_web', __name__, url_prefix='/categories')


@categories_web_bp.errorhandler(NotFoundError)
def handle_not_found(error):
    return render_template('errors/404.html', message=error.message), 404


def _render_form(category, category_id=None, errors=None, status_code=200):
    return render_template(
        'categories/form.html',
        category=category,
        category_id=category_id,
        page_title='Edit category' if category_id else 'New category',
        errors=errors or [],
    ), status_code


@categories_web_bp.route('')
@login_required
def list_categories():
    return render_template('categories/list.html', categories=get_category_service().list_categories())


@categories_web_bp.route('/new')
@login_required
def new_category():
    return _render_form({})


@categories_web_bp.route('', methods=['POST'])
@login_required
def create_category():
    data, errors = validate_category_input(request.form)
    if errors:
        return _render_form(request.form, errors=errors, status_code=400)

    try:
        category = get_category_service().create_category(data)
    except ValidationFailedError as e:
        return _render_form(request.form, errors=e.errors, status_code=400)

    flash(f'Category "{category["name"]}" created', 'success')
    return redirect(url_for('categories_web.list_categories'))


@categories_web_bp.route('/<int:category_id>')
@login_required
def edit_category(category_id):
    return _render_form(get_category_service().get_category(category_id), category_id=category_id)


@categories_web_bp.route('/<int:category_id>', methods=['POST'])
@login_required
def update_category(category_id):
    data, errors = validate_category_input(request.form)
    if errors:
        return _render_form(request.form, category_id=category_id, errors=errors, status_code=400)

    try:
        category = get_category_service().update_category(category_id, data)
    except ValidationFailedError as e:
        return _render_form(request.form, category_id=category_id, errors=e.errors, status_code=400)

    flash(f'Category "{category["name"]}" updated', 'success')
    return redirect(url_for('categories_web.list_categories'))


@categories_web_bp.route('/<int:category_id>/delete', methods=['POST'])
@login_required
def delete_category(category_id):
    get_category_service().delete_category(category_id)
    flash('Category deleted, its tasks are now uncategorized', 'success')
    return redirect(url_for('categories_web.list_categories'))
