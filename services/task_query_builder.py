"""
Task Query Builder - Shared query logic for task filtering, sorting and paging

Ensures the HTML list page and the JSON API return identical task sets for the
same parameters. Paging and sort input is normalised here and never rejected:
bad values fall back to safe defaults.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional

from sqlalchemy import func, select

from models import Category, Task, TaskStatus

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100
DEFAULT_SORT_FIELD = "created_at"
DEFAULT_SORT_DIRECTION = "DESC"

# Public spellings (snake_case and camelCase) -> Task attribute name
SORT_FIELD_ALIASES = {
    "id": "id",
    "title": "title",
    "status": "status",
    "due_date": "due_date",
    "dueDate": "due_date",
    "created_at": "created_at",
    "createdAt": "created_at",
    "updated_at": "updated_at",
    "updatedAt": "updated_at",
}

SORT_DIRECTIONS = ("ASC", "DESC")


@dataclass(frozen=True)
class PageRequest:
    """Normalised paging and ordering for one listing request."""
    page: int = 0
    size: int = DEFAULT_PAGE_SIZE
    sort_field: str = DEFAULT_SORT_FIELD
    direction: str = DEFAULT_SORT_DIRECTION

    @property
    def offset(self) -> int:
        return self.page * self.size

    @property
    def sort_token(self) -> str:
        return f"{self.sort_field},{self.direction.lower()}"


@dataclass
class TaskFilters:
    """Optional predicates; only the ones that are set constrain the query."""
    status: Optional[TaskStatus] = None
    category_id: Optional[int] = None
    due_before: Optional[date] = None
    due_after: Optional[date] = None
    title: Optional[str] = None

    def to_query_args(self) -> Dict[str, str]:
        """Public query-string form of the active filters."""
        args = {}
        if self.status is not None:
            args['status'] = self.status.value
        if self.category_id is not None:
            args['categoryId'] = str(self.category_id)
        if self.due_before is not None:
            args['dueDateBefore'] = self.due_before.isoformat()
        if self.due_after is not None:
            args['dueDateAfter'] = self.due_after.isoformat()
        if self.title and self.title.strip():
            args['title'] = self.title.strip()
        return args


@dataclass
class TaskPage:
    """One page of transport records plus total-count metadata."""
    items: List[Dict[str, Any]] = field(default_factory=list)
    page: int = 0
    size: int = DEFAULT_PAGE_SIZE
    total: int = 0

    @property
    def pages(self) -> int:
        if self.size <= 0:
            return 0
        return (self.total + self.size - 1) // self.size

    @property
    def has_next(self) -> bool:
        return self.page + 1 < self.pages

    @property
    def has_prev(self) -> bool:
        return self.page > 0

    def pagination(self) -> Dict[str, Any]:
        return {
            'page': self.page,
            'pages': self.pages,
            'size': self.size,
            'total': self.total,
            'has_next': self.has_next,
            'has_prev': self.has_prev,
        }


def _coerce_int(value) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def normalize_page_request(page=None, size=None, sort=None, default_size: int = DEFAULT_PAGE_SIZE) -> PageRequest:
    """
    Sanitise raw paging/sorting input.

    Args:
        page: Zero-based page index; negative or missing becomes 0
        size: Page size; missing, <= 0 or > MAX_PAGE_SIZE becomes default_size
        sort: "field,direction" token; unknown field falls back to created_at,
              missing or unknown direction falls back to DESC
        default_size: Configured default page size

    Returns:
        PageRequest with bounded values
    """
    page_number = _coerce_int(page)
    if page_number is None or page_number < 0:
        page_number = 0

    page_size = _coerce_int(size)
    if page_size is None or page_size <= 0 or page_size > MAX_PAGE_SIZE:
        page_size = default_size

    sort_field = DEFAULT_SORT_FIELD
    direction = DEFAULT_SORT_DIRECTION
    if sort:
        parts = str(sort).split(",", 1)
        sort_field = SORT_FIELD_ALIASES.get(parts[0].strip(), DEFAULT_SORT_FIELD)
        if len(parts) > 1:
            candidate = parts[1].strip().upper()
            if candidate in SORT_DIRECTIONS:
                direction = candidate

    return PageRequest(page=page_number, size=page_size, sort_field=sort_field, direction=direction)


class TaskQueryBuilder:
    """
    Builds task queries from TaskFilters and a PageRequest.
    Every statement selects (Task, category name) through a LEFT OUTER JOIN.
    """

    @staticmethod
    def get_filtered_tasks_query(filters: TaskFilters):
        """
        Select tasks matching the logical AND of the supplied filters.

        Due-date bounds are strict: a task due exactly on the bound is excluded.
        """
        stmt = select(Task, Category.name).outerjoin(
            Category, Task.category_id == Category.id
        )

        if filters.status is not None:
            stmt = stmt.where(Task.status == filters.status.value)

        if filters.category_id is not None:
            stmt = stmt.where(Task.category_id == filters.category_id)

        if filters.due_before is not None:
            stmt = stmt.where(Task.due_date < filters.due_before)

        if filters.due_after is not None:
            stmt = stmt.where(Task.due_date > filters.due_after)

        if filters.title and filters.title.strip():
            stmt = stmt.where(Task.title.icontains(filters.title.strip(), autoescape=True))

        return stmt

    @staticmethod
    def get_ordered_tasks_query(filters: TaskFilters, page_request: PageRequest):
        """Filtered query with ordering applied; id breaks ties in the same direction."""
        stmt = TaskQueryBuilder.get_filtered_tasks_query(filters)

        column = getattr(Task, page_request.sort_field)
        if page_request.direction == "ASC":
            stmt = stmt.order_by(column.asc(), Task.id.asc())
        else:
            stmt = stmt.order_by(column.desc(), Task.id.desc())

        return stmt

    @staticmethod
    def get_page_query(filters: TaskFilters, page_request: PageRequest):
        return TaskQueryBuilder.get_ordered_tasks_query(filters, page_request).limit(
            page_request.size
        ).offset(page_request.offset)

    @staticmethod
    def get_count_query(filters: TaskFilters):
        filtered = TaskQueryBuilder.get_filtered_tasks_query(filters).subquery()
        return select(func.count()).select_from(filtered)
