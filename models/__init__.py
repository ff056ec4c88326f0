"""
Models package - exposes the Flask-SQLAlchemy handle and the mapped classes.
"""

import sqlite3

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import event
from sqlalchemy.engine import Engine

from .base import Base

db = SQLAlchemy(model_class=Base)


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores ON DELETE SET NULL unless foreign keys are switched on per connection
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


from .category import Category, DEFAULT_CATEGORY_COLOR  # noqa: E402
from .task import Task, TaskStatus  # noqa: E402

__all__ = ["db", "Base", "Category", "DEFAULT_CATEGORY_COLOR", "Task", "TaskStatus"]
