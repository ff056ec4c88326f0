"""
Category Service - CRUD for task categories.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from models import Category
from services.task_errors import FieldError, NotFoundError, StorageError, ValidationFailedError
from services.task_validation import CategoryInput, is_storable_id

logger = logging.getLogger(__name__)


class CategoryService:
    """Category operations; deleting a category leaves its tasks uncategorized."""

    def __init__(self, session):
        self.session = session

    def list_categories(self) -> List[Dict[str, Any]]:
        categories = self.session.execute(select(Category).order_by(Category.name.asc())).scalars().all()
        return [category.to_dict() for category in categories]

    def get_category(self, category_id: int) -> Dict[str, Any]:
        return self._get_category_or_raise(category_id).to_dict()

    def create_category(self, data: CategoryInput) -> Dict[str, Any]:
        self._ensure_name_available(data.name)

        category = Category(name=data.name, color=data.color)
        self.session.add(category)
        self._commit("create category")
        logger.info(f"Created category {category.id}: {category.name!r}")
        return category.to_dict()

    def update_category(self, category_id: int, data: CategoryInput) -> Dict[str, Any]:
        category = self._get_category_or_raise(category_id)
        self._ensure_name_available(data.name, exclude_id=category_id)

        category.name = data.name
        category.color = data.color
        self._commit(f"update category {category_id}")
        logger.info(f"Updated category {category_id}: {category.name!r}")
        return category.to_dict()

    def delete_category(self, category_id: int) -> None:
        """Delete a category; the foreign key sets referencing tasks' category_id to NULL."""
        category = self._get_category_or_raise(category_id)
        self.session.delete(category)
        self._commit(f"delete category {category_id}")
        logger.info(f"Deleted category {category_id}")

    def _get_category_or_raise(self, category_id: int) -> Category:
        category = self.session.get(Category, category_id) if is_storable_id(category_id) else None
        if category is None:
            logger.warning(f"Category {category_id} not found")
            raise NotFoundError("Category", category_id)
        return category

    def _ensure_name_available(self, name: str, exclude_id: Optional[int] = None) -> None:
        stmt = select(Category.id).where(Category.name == name)
        if exclude_id is not None:
            stmt = stmt.where(Category.id != exclude_id)
        if self.session.execute(stmt).first() is not None:
            raise ValidationFailedError(
                [FieldError('name', f'Category "{name}" already exists')],
                message="Category name already exists"
            )

    def _commit(self, action: str) -> None:
        try:
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Failed to {action}: {e}")
            raise StorageError(f"Failed to {action}") from e
