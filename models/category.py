"""
Category Model
Named, colored grouping label for tasks.
"""

from typing import Optional

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base

DEFAULT_CATEGORY_COLOR = "#3B82F6"


class Category(Base):
    """
    A category referenced by zero or more tasks.

    Tasks point at categories through ``Task.category_id`` only; there is no
    collection of tasks on the category side.
    """
    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    color: Mapped[Optional[str]] = mapped_column(String(7), default=DEFAULT_CATEGORY_COLOR)

    def __repr__(self):
        return f'<Category {self.id}: {self.name}>'

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'color': self.color,
        }
