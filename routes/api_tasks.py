"""
Tasks API Routes
REST API endpoints for task listing, CRUD, statistics and CSV export.
"""

import logging
from datetime import date
from functools import wraps

from flask import Blueprint, Response, jsonify, request
from flask_login import login_required

from services import get_csv_writer, get_task_service
from services.task_errors import TaskAppError, ValidationFailedError
from services.task_validation import parse_task_filters, validate_task_input

logger = logging.getLogger(__name__)

api_tasks_bp = Blueprint('api_tasks', __name__, url_prefix='/api/tasks')


def api_errors(f):
    """Translate service errors into JSON responses; anything else becomes a 500."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except TaskAppError as e:
            return jsonify(e.to_dict()), e.status_code
        except Exception as e:
            logger.exception(f"Unhandled error in {request.method} {request.path}: {e}")
            return jsonify({'success': False, 'message': 'Internal server error'}), 500
    return decorated_function


def build_csv_response(content: str, filename: str) -> Response:
    """CSV download with attachment disposition."""
    response = Response(content, content_type='text/csv; charset=utf-8')
    response.headers['Content-Disposition'] = f'attachment; filename={filename}'
    response.headers['Cache-Control'] = 'must-revalidate, post-check=0, pre-check=0'
    return response


@api_tasks_bp.route('/', methods=['GET'])
@login_required
@api_errors
def list_tasks():
    """Get tasks with optional filters, pagination and sorting.

    Query Parameters:
        status, categoryId, dueDateBefore, dueDateAfter, title: optional filters
        page (int): zero-based page index
        size (int): page size, 1..100
        sort (str): "field,direction", e.g. "dueDate,asc"
    """
    filters, errors = parse_task_filters(request.args)
    if errors:
        raise ValidationFailedError(errors, message="Invalid filter parameters")

    page = request.args.get('page', 0, type=int)
    size = request.args.get('size', None, type=int)
    sort = request.args.get('sort', 'createdAt,desc')

    task_page = get_task_service().get_tasks_with_filters(filters, page=page, size=size, sort=sort)
    logger.debug(f"Listed {len(task_page.items)} of {task_page.total} tasks")

    return jsonify({
        'success': True,
        'tasks': task_page.items,
        'pagination': task_page.pagination()
    })


@api_tasks_bp.route('/<int:task_id>', methods=['GET'])
@login_required
@api_errors
def get_task(task_id):
    return jsonify({'success': True, 'task': get_task_service().get_task(task_id)})


@api_tasks_bp.route('/', methods=['POST'])
@login_required
@api_errors
def create_task():
    """Create a task. Body: title, status, description?, dueDate?, categoryId?"""
    data, errors = validate_task_input(request.get_json(silent=True))
    if errors:
        raise ValidationFailedError(errors)

    task = get_task_service().create_task(data)
    return jsonify({'success': True, 'task': task}), 201


@api_tasks_bp.route('/<int:task_id>', methods=['PUT'])
@login_required
@api_errors
def update_task(task_id):
    """Replace all mutable fields of a task."""
    data, errors = validate_task_input(request.get_json(silent=True))
    if errors:
        raise ValidationFailedError(errors)

    task = get_task_service().update_task(task_id, data)
    return jsonify({'success': True, 'task': task})


@api_tasks_bp.route('/<int:task_id>', methods=['DELETE'])
@login_required
@api_errors
def delete_task(task_id):
    get_task_service().delete_task(task_id)
    return '', 204


@api_tasks_bp.route('/statistics', methods=['GET'])
@login_required
@api_errors
def get_statistics():
    stats = get_task_service().get_statistics()
    return jsonify({'success': True, 'statistics': stats.to_dict()})


@api_tasks_bp.route('/export/csv', methods=['GET'])
@login_required
@api_errors
def export_tasks_csv():
    """Export every task (unpaged) as CSV."""
    records = get_task_service().export_tasks()
    content = get_csv_writer().write_tasks(records)
    logger.info(f"CSV export of {len(records)} tasks")
    return build_csv_response(content, f"tasks_{date.today().isoformat()}.csv")


@api_tasks_bp.route('/statistics/csv', methods=['GET'])
@login_required
@api_errors
def export_statistics_csv():
    stats = get_task_service().get_statistics()
    content = get_csv_writer().write_statistics(stats)
    logger.info(f"Statistics CSV export, total tasks: {stats.total}")
    return build_csv_response(content, f"statistics_{date.today().isoformat()}.csv")
