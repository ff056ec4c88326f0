"""
Task Pages
Server-rendered task list, create/edit forms and CSV downloads.
"""

import logging
from datetime import date

from flask import Blueprint, current_app, flash, redirect, render_template, request, url_for
from flask_login import login_required

from models import TaskStatus
from routes.api_tasks import build_csv_response
from services import get_category_service, get_csv_writer, get_task_service
from services.task_errors import FieldError, NotFoundError
from services.task_query_builder import normalize_page_request
from services.task_validation import parse_task_filters, validate_task_input

logger = logging.getLogger(__name__)

tasks_web_bp = Blueprint('tasks_web', __name__)


@tasks_web_bp.errorhandler(NotFoundError)
def handle_not_found(error):
    return render_template('errors/404.html', message=error.message), 404


def _render_form(task, task_id=None, errors=None, status_code=200):
    return render_template(
        'tasks/form.html',
        task=task,
        task_id=task_id,
        categories=get_category_service().list_categories(),
        statuses=list(TaskStatus),
        page_title='Edit task' if task_id else 'New task',
        errors=errors or [],
    ), status_code


def _category_error(error: NotFoundError) -> FieldError:
    return FieldError('category_id', error.message)


@tasks_web_bp.route('/tasks')
@login_required
def list_tasks():
    """Task list with filters, sorting and pagination."""
    filters, errors = parse_task_filters(request.args)
    for error in errors:
        flash(error.message, 'error')

    sort = request.args.get('sort')
    if not sort:
        sort = f"{request.args.get('sort_property', 'createdAt')},{request.args.get('sort_direction', 'desc')}"

    page_request = normalize_page_request(
        request.args.get('page', 0, type=int),
        request.args.get('size', None, type=int),
        sort,
        default_size=current_app.config['TASKS_DEFAULT_PAGE_SIZE'],
    )
    logger.info(f"Task list requested: filters={filters.to_query_args()}, page={page_request}")

    task_page = get_task_service().search(filters, page_request)

    query_args = filters.to_query_args()
    query_args['size'] = page_request.size

    logger.debug(f"Returning {len(task_page.items)} of {task_page.total} tasks")
    return render_template(
        'tasks/list.html',
        tasks=task_page,
        filters=filters,
        statuses=list(TaskStatus),
        categories=get_category_service().list_categories(),
        query_args=query_args,
        sort_field=page_request.sort_field,
        sort_direction=page_request.direction.lower(),
    )


@tasks_web_bp.route('/tasks/new')
@login_required
def new_task():
    return _render_form({'status': TaskStatus.TODO.value})


@tasks_web_bp.route('/tasks', methods=['POST'])
@login_required
def create_task():
    data, errors = validate_task_input(request.form)
    if errors:
        logger.warning(f"Task form rejected: {[e.field for e in errors]}")
        return _render_form(request.form, errors=errors, status_code=400)

    try:
        task = get_task_service().create_task(data)
    except NotFoundError as e:
        return _render_form(request.form, errors=[_category_error(e)], status_code=400)

    flash(f'Task "{task["title"]}" created', 'success')
    return redirect(url_for('tasks_web.list_tasks'))


@tasks_web_bp.route('/tasks/<int:task_id>')
@login_required
def edit_task(task_id):
    return _render_form(get_task_service().get_task(task_id), task_id=task_id)


@tasks_web_bp.route('/tasks/<int:task_id>', methods=['POST'])
@login_required
def update_task(task_id):
    data, errors = validate_task_input(request.form)
    if errors:
        logger.warning(f"Task {task_id} form rejected: {[e.field for e in errors]}")
        return _render_form(request.form, task_id=task_id, errors=errors, status_code=400)

    try:
        task = get_task_service().update_task(task_id, data)
    except NotFoundError as e:
        if e.entity != "Category":
            raise
        return _render_form(request.form, task_id=task_id, errors=[_category_error(e)], status_code=400)

    flash(f'Task "{task["title"]}" updated', 'success')
    return redirect(url_for('tasks_web.list_tasks'))


@tasks_web_bp.route('/tasks/<int:task_id>/delete', methods=['POST'])
@login_required
def delete_task(task_id):
    get_task_service().delete_task(task_id)
    flash('Task deleted', 'success')
    return redirect(url_for('tasks_web.list_tasks'))


@tasks_web_bp.route('/tasks/export/csv')
@login_required
def export_tasks_csv():
    records = get_task_service().export_tasks()
    logger.info(f"CSV download of {len(records)} tasks")
    return build_csv_response(
        get_csv_writer().write_tasks(records),
        f"tasks_{date.today().isoformat()}.csv"
    )


@tasks_web_bp.route('/tasks/statistics/csv')
@login_required
def export_statistics_csv():
    stats = get_task_service().get_statistics()
    logger.info(f"Statistics CSV download, total tasks: {stats.total}")
    return build_csv_response(
        get_csv_writer().write_statistics(stats),
        f"statistics_{date.today().isoformat()}.csv"
    )
