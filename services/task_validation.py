"""
Input validation for tasks, categories and listing filters.

Each validator returns the parsed value together with a list of FieldError;
callers check the list before touching a service.
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Tuple

from models import DEFAULT_CATEGORY_COLOR, TaskStatus
from services.task_errors import FieldError
from services.task_query_builder import TaskFilters

TITLE_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 1000
CATEGORY_NAME_MAX_LENGTH = 50

HEX_COLOR_PATTERN = re.compile(r'^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$')

# Largest id a 64-bit INTEGER column can hold
MAX_ID = 2 ** 63 - 1


@dataclass
class TaskInput:
    """Validated task fields for create and full update."""
    title: str
    status: TaskStatus
    description: Optional[str] = None
    due_date: Optional[date] = None
    category_id: Optional[int] = None


@dataclass
class CategoryInput:
    """Validated category fields."""
    name: str
    color: str = DEFAULT_CATEGORY_COLOR


def _first(payload, *keys):
    """Value of the first key present in payload (dict or MultiDict)."""
    for key in keys:
        if key in payload:
            return payload.get(key)
    return None


def _clean_text(value) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def parse_date(value) -> Tuple[Optional[date], bool]:
    """Parse an ISO date. Returns (date or None, ok)."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None, True
    if isinstance(value, date):
        return value, True
    try:
        return date.fromisoformat(str(value).strip()), True
    except ValueError:
        return None, False


def parse_optional_int(value) -> Tuple[Optional[int], bool]:
    """Parse an optional integer id. Returns (int or None, ok)."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None, True
    if isinstance(value, bool):
        return None, False
    if isinstance(value, int):
        number = value
    else:
        try:
            number = int(str(value).strip())
        except ValueError:
            return None, False
    if not is_storable_id(number):
        return None, False
    return number, True


def is_storable_id(value: int) -> bool:
    return -MAX_ID <= value <= MAX_ID


def _body_error(payload) -> Optional[FieldError]:
    if payload is not None and not isinstance(payload, Mapping):
        return FieldError('body', 'Request body must be a JSON object')
    return None


def validate_task_input(payload) -> Tuple[Optional[TaskInput], List[FieldError]]:
    """
    Validate a task payload from JSON or a submitted form.

    Accepts both snake_case and camelCase keys for due_date and category_id.
    """
    errors: List[FieldError] = []
    body_error = _body_error(payload)
    if body_error:
        return None, [body_error]
    payload = payload or {}

    title = _clean_text(payload.get('title'))
    if not title:
        errors.append(FieldError('title', 'Title is required'))
    elif len(title) > TITLE_MAX_LENGTH:
        errors.append(FieldError('title', f'Title must be at most {TITLE_MAX_LENGTH} characters'))

    description = _clean_text(payload.get('description'))
    if description and len(description) > DESCRIPTION_MAX_LENGTH:
        errors.append(FieldError('description', f'Description must be at most {DESCRIPTION_MAX_LENGTH} characters'))

    raw_status = payload.get('status')
    status = TaskStatus.parse(raw_status) if _clean_text(raw_status) else None
    if _clean_text(raw_status) is None:
        errors.append(FieldError('status', 'Status is required'))
    elif status is None:
        allowed = ', '.join(s.value for s in TaskStatus)
        errors.append(FieldError('status', f'Status must be one of: {allowed}'))

    due_date, ok = parse_date(_first(payload, 'due_date', 'dueDate'))
    if not ok:
        errors.append(FieldError('due_date', 'Due date must be a date in YYYY-MM-DD format'))

    category_id, ok = parse_optional_int(_first(payload, 'category_id', 'categoryId'))
    if not ok:
        errors.append(FieldError('category_id', 'Category id must be an integer'))

    if errors:
        return None, errors

    return TaskInput(
        title=title,
        status=status,
        description=description,
        due_date=due_date,
        category_id=category_id,
    ), errors


def validate_category_input(payload) -> Tuple[Optional[CategoryInput], List[FieldError]]:
    """Validate a category payload; blank color falls back to the default."""
    errors: List[FieldError] = []
    body_error = _body_error(payload)
    if body_error:
        return None, [body_error]
    payload = payload or {}

    name = _clean_text(payload.get('name'))
    if not name:
        errors.append(FieldError('name', 'Category name is required'))
    elif len(name) > CATEGORY_NAME_MAX_LENGTH:
        errors.append(FieldError('name', f'Category name must be at most {CATEGORY_NAME_MAX_LENGTH} characters'))

    color = _clean_text(payload.get('color')) or DEFAULT_CATEGORY_COLOR
    if not HEX_COLOR_PATTERN.match(color):
        errors.append(FieldError('color', 'Color must be a hex value such as #3B82F6'))

    if errors:
        return None, errors

    return CategoryInput(name=name, color=color), errors


def parse_task_filters(args) -> Tuple[TaskFilters, List[FieldError]]:
    """
    Read listing filters from query-string args.

    Invalid values are reported and left unset; a blank value means "no filter".
    """
    errors: List[FieldError] = []
    filters = TaskFilters()

    raw_status = _clean_text(args.get('status'))
    if raw_status:
        filters.status = TaskStatus.parse(raw_status)
        if filters.status is None:
            errors.append(FieldError('status', f'Unknown status: {raw_status}'))

    category_id, ok = parse_optional_int(_first(args, 'categoryId', 'category_id'))
    if ok:
        filters.category_id = category_id
    else:
        errors.append(FieldError('categoryId', 'Category id must be an integer'))

    due_before, ok = parse_date(_first(args, 'dueDateBefore', 'due_date_before'))
    if ok:
        filters.due_before = due_before
    else:
        errors.append(FieldError('dueDateBefore', 'Date must be in YYYY-MM-DD format'))

    due_after, ok = parse_date(_first(args, 'dueDateAfter', 'due_date_after'))
    if ok:
        filters.due_after = due_after
    else:
        errors.append(FieldError('dueDateAfter', 'Date must be in YYYY-MM-DD format'))

    filters.title = _clean_text(args.get('title'))

    return filters, errors
