"""
Task SQL DAO - raw SQL reads with manual row mapping.

Feeds the CSV export and the statistics breakdown. Runs on the same
session as the ORM services so it sees the same transaction.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import List, Optional

from sqlalchemy import text

from models import TaskStatus
from services.task_errors import NotFoundError

logger = logging.getLogger(__name__)

UNCATEGORIZED = "Uncategorized"

_SELECT_RECORDS = """
    SELECT t.id, t.title, t.description, t.status, t.due_date,
           t.category_id, c.name AS category_name,
           t.created_at, t.updated_at
    FROM tasks t
    LEFT JOIN categories c ON t.category_id = c.id
"""


@dataclass
class TaskRecord:
    """Flat task row joined with its category name."""
    id: int
    title: str
    description: Optional[str]
    status: str
    due_date: Optional[date]
    category_id: Optional[int]
    category_name: Optional[str]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]


@dataclass
class TaskSummaryRow:
    """Task count for one (category, status) pair."""
    category_name: str
    status: str
    count: int


def _to_date(value) -> Optional[date]:
    # SQLite hands back ISO strings, PostgreSQL returns date objects
    if value is None or isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def _to_datetime(value) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


def map_task_record(row) -> TaskRecord:
    """Map one result row (by column name) to a TaskRecord."""
    data = row._mapping
    return TaskRecord(
        id=data['id'],
        title=data['title'],
        description=data['description'],
        status=data['status'],
        due_date=_to_date(data['due_date']),
        category_id=data['category_id'],
        category_name=data['category_name'],
        created_at=_to_datetime(data['created_at']),
        updated_at=_to_datetime(data['updated_at']),
    )


def map_summary_row(row) -> TaskSummaryRow:
    data = row._mapping
    return TaskSummaryRow(
        category_name=data['category_name'] if data['category_name'] is not None else UNCATEGORIZED,
        status=data['status'],
        count=int(data['task_count']),
    )


class TaskSqlDao:
    """Hand-written SQL over the tasks/categories tables."""

    def __init__(self, session):
        self.session = session

    def find_all_records(self) -> List[TaskRecord]:
        """All tasks, newest first."""
        result = self.session.execute(text(_SELECT_RECORDS + " ORDER BY t.created_at DESC, t.id DESC"))
        records = [map_task_record(row) for row in result]
        logger.debug(f"Loaded {len(records)} task records")
        return records

    def find_record_by_id(self, task_id: int) -> TaskRecord:
        row = self.session.execute(
            text(_SELECT_RECORDS + " WHERE t.id = :task_id"),
            {"task_id": task_id}
        ).first()
        if row is None:
            raise NotFoundError("Task", task_id)
        return map_task_record(row)

    def count_all(self) -> int:
        return int(self.session.execute(text("SELECT COUNT(*) FROM tasks")).scalar_one())

    def count_by_status(self, status: TaskStatus) -> int:
        return int(self.session.execute(
            text("SELECT COUNT(*) FROM tasks WHERE status = :status"),
            {"status": TaskStatus(status).value}
        ).scalar_one())

    def summarize_by_category_and_status(self) -> List[TaskSummaryRow]:
        """Task counts grouped by category name and status."""
        result = self.session.execute(text("""
            SELECT c.name AS category_name, t.status AS status, COUNT(*) AS task_count
            FROM tasks t
            LEFT JOIN categories c ON t.category_id = c.id
            GROUP BY c.name, t.status
        """))
        return [map_summary_row(row) for row in result]
