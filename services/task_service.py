"""
Task Service - listing, CRUD, statistics and export for tasks.

All reads and writes go through the session passed in; the service keeps no
state between requests.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from models import Category, Task, TaskStatus
from models.task import utcnow
from services.task_errors import NotFoundError, StorageError
from services.task_query_builder import (
    DEFAULT_PAGE_SIZE,
    PageRequest,
    TaskFilters,
    TaskPage,
    TaskQueryBuilder,
    normalize_page_request,
)
from services.task_sql_dao import TaskRecord, TaskSqlDao
from services.task_validation import TaskInput, is_storable_id

logger = logging.getLogger(__name__)


@dataclass
class TaskStatistics:
    """Task counts overall, per status and per category name."""
    total: int = 0
    by_status: Dict[str, int] = field(default_factory=dict)
    by_category: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'total': self.total,
            'by_status': dict(self.by_status),
            'by_category': dict(self.by_category),
        }


class TaskService:
    """
    Task operations used by both the JSON API and the HTML pages.

    Args:
        session: SQLAlchemy session (db.session in the app)
        default_page_size: Page size used when the requested size is out of bounds
    """

    def __init__(self, session, default_page_size: int = DEFAULT_PAGE_SIZE, dao: Optional[TaskSqlDao] = None):
        self.session = session
        self.default_page_size = default_page_size
        self.dao = dao or TaskSqlDao(session)

    # -- queries -------------------------------------------------------

    def get_tasks_with_filters(self, filters: TaskFilters, page=None, size=None, sort=None) -> TaskPage:
        """Normalise raw paging/sort input, then search."""
        page_request = normalize_page_request(page, size, sort, default_size=self.default_page_size)
        return self.search(filters, page_request)

    def search(self, filters: TaskFilters, page_request: PageRequest) -> TaskPage:
        total = self.session.execute(TaskQueryBuilder.get_count_query(filters)).scalar_one()
        if page_request.offset >= total:
            # Past the last page, offset may exceed a 64-bit INTEGER
            rows = []
        else:
            rows = self.session.execute(TaskQueryBuilder.get_page_query(filters, page_request)).all()

        return TaskPage(
            items=[task.to_dict(category_name=category_name) for task, category_name in rows],
            page=page_request.page,
            size=page_request.size,
            total=total,
        )

    def get_task(self, task_id: int) -> Dict[str, Any]:
        task = self._get_task_or_raise(task_id)
        return task.to_dict(category_name=self._category_name(task.category_id))

    def get_statistics(self) -> TaskStatistics:
        """Build the status and category breakdown from the grouped summary query."""
        stats = TaskStatistics(by_status={status.value: 0 for status in TaskStatus})
        for row in self.dao.summarize_by_category_and_status():
            stats.total += row.count
            stats.by_status[row.status] = stats.by_status.get(row.status, 0) + row.count
            stats.by_category[row.category_name] = stats.by_category.get(row.category_name, 0) + row.count
        return stats

    def export_tasks(self) -> List[TaskRecord]:
        """All tasks, unpaged, newest first."""
        return self.dao.find_all_records()

    # -- commands ------------------------------------------------------

    def create_task(self, data: TaskInput) -> Dict[str, Any]:
        category = self._resolve_category(data.category_id)

        task = Task()
        task.apply_input(data)
        now = utcnow()
        task.created_at = now
        task.updated_at = now

        self.session.add(task)
        self._commit("create task")
        logger.info(f"Created task {task.id}: {task.title!r}")
        return task.to_dict(category_name=category.name if category else None)

    def update_task(self, task_id: int, data: TaskInput) -> Dict[str, Any]:
        task = self._get_task_or_raise(task_id)
        category = self._resolve_category(data.category_id)

        task.apply_input(data)
        task.updated_at = utcnow()

        self._commit(f"update task {task_id}")
        logger.info(f"Updated task {task_id}: {task.title!r}")
        return task.to_dict(category_name=category.name if category else None)

    def delete_task(self, task_id: int) -> None:
        task = self._get_task_or_raise(task_id)
        self.session.delete(task)
        self._commit(f"delete task {task_id}")
        logger.info(f"Deleted task {task_id}")

    # -- helpers -------------------------------------------------------

    def _get_task_or_raise(self, task_id: int) -> Task:
        task = self.session.get(Task, task_id) if is_storable_id(task_id) else None
        if task is None:
            logger.warning(f"Task {task_id} not found")
            raise NotFoundError("Task", task_id)
        return task

    def _resolve_category(self, category_id: Optional[int]) -> Optional[Category]:
        if category_id is None:
            return None
        category = self.session.get(Category, category_id) if is_storable_id(category_id) else None
        if category is None:
            logger.warning(f"Category {category_id} not found")
            raise NotFoundError("Category", category_id)
        return category

    def _category_name(self, category_id: Optional[int]) -> Optional[str]:
        if category_id is None:
            return None
        category = self.session.get(Category, category_id)
        return category.name if category else None

    def _commit(self, action: str) -> None:
        try:
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Failed to {action}: {e}")
            raise StorageError(f"Failed to {action}") from e
