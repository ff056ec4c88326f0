"""
Task Model for to-do items
SQLAlchemy 2.0-safe model with status tracking, optional due date and an optional category reference.
"""

from datetime import date, datetime, timezone
from enum import Enum
from typing import Optional

from sqlalchemy import Date, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def utcnow() -> datetime:
    """Naive UTC timestamp, the form stored in the timestamp columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class TaskStatus(str, Enum):
    """Lifecycle states of a task."""
    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"

    @classmethod
    def parse(cls, value) -> Optional["TaskStatus"]:
        """Case-insensitive lookup; returns None for unknown values."""
        if isinstance(value, cls):
            return value
        if value is None:
            return None
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            return None


class Task(Base):
    """
    A to-do item.

    The category is referenced by id only. Deleting the category sets
    ``category_id`` to NULL at the database level (ON DELETE SET NULL);
    the name is looked up with an outer join when tasks are queried.
    """
    __tablename__ = "tasks"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Task content
    title: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(String(1000))

    status: Mapped[str] = mapped_column(String(20), nullable=False, default=TaskStatus.TODO.value)
    due_date: Mapped[Optional[date]] = mapped_column(Date)

    category_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("categories.id", ondelete="SET NULL"),
        nullable=True
    )

    # Timestamps - updated_at is also set explicitly by TaskService on every mutation
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        Index('ix_tasks_status', 'status'),
        Index('ix_tasks_due_date', 'due_date'),
        Index('ix_tasks_category_id', 'category_id'),
        Index('ix_tasks_created_at', 'created_at'),
    )

    def __repr__(self):
        return f'<Task {self.id}: {self.title}>'

    @property
    def is_done(self) -> bool:
        return self.status == TaskStatus.DONE.value

    @property
    def is_overdue(self) -> bool:
        """Check if task is past its due date and not done."""
        if not self.due_date or self.is_done:
            return False
        return date.today() > self.due_date

    def apply_input(self, data):
        """Replace every mutable field from a validated TaskInput."""
        self.title = data.title
        self.description = data.description
        self.status = data.status.value
        self.due_date = data.due_date
        self.category_id = data.category_id

    def to_dict(self, category_name: Optional[str] = None):
        """Convert task to dictionary for JSON serialization."""
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'status': self.status,
            'due_date': self.due_date.isoformat() if self.due_date else None,
            'category_id': self.category_id,
            'category_name': category_name,
            'created_at': self.created_at.strftime(TIMESTAMP_FORMAT) if self.created_at else None,
            'updated_at': self.updated_at.strftime(TIMESTAMP_FORMAT) if self.updated_at else None,
            'is_overdue': self.is_overdue,
        }
