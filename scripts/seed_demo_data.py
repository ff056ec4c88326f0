#!/usr/bin/env python3
"""
Seed demo categories and tasks for local development.
Safe to run repeatedly: existing categories are reused and tasks are only
added when the table is empty.
"""

import logging
import os
import sys
from datetime import date, timedelta

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import func, select

from app import create_app
from models import Category, Task, TaskStatus, db
from models.task import utcnow

logger = logging.getLogger(__name__)

DEMO_CATEGORIES = [
    ("Work", "#3B82F6"),
    ("Personal", "#10B981"),
    ("Errands", "#F59E0B"),
]

DEMO_TASKS = [
    # title, description, status, due in days, category
    ("Write quarterly report", "Summarise Q3 numbers for the team", TaskStatus.IN_PROGRESS, 3, "Work"),
    ("Review pull requests", None, TaskStatus.TODO, 1, "Work"),
    ("Book dentist appointment", None, TaskStatus.TODO, 14, "Personal"),
    ("Renew passport", "Photos; form; fee", TaskStatus.TODO, -2, "Personal"),
    ("Buy groceries", "Milk, eggs and bread", TaskStatus.DONE, 0, "Errands"),
    ("Clean up inbox", None, TaskStatus.TODO, None, None),
]


def seed_demo_data():
    """Create demo categories and tasks; returns the number of tasks added."""
    app = create_app()

    with app.app_context():
        categories = {}
        for name, color in DEMO_CATEGORIES:
            category = db.session.execute(
                select(Category).where(Category.name == name)
            ).scalar_one_or_none()
            if category is None:
                category = Category(name=name, color=color)
                db.session.add(category)
                db.session.flush()
            categories[name] = category

        existing = db.session.execute(select(func.count(Task.id))).scalar_one()
        if existing:
            db.session.commit()
            logger.info(f"Tasks table already has {existing} rows, skipping task seed")
            return 0

        today = date.today()
        now = utcnow()
        for title, description, status, due_in, category_name in DEMO_TASKS:
            db.session.add(Task(
                title=title,
                description=description,
                status=status.value,
                due_date=today + timedelta(days=due_in) if due_in is not None else None,
                category_id=categories[category_name].id if category_name else None,
                created_at=now,
                updated_at=now,
            ))

        db.session.commit()
        logger.info(f"Seeded {len(DEMO_CATEGORIES)} categories and {len(DEMO_TASKS)} tasks")
        return len(DEMO_TASKS)


if __name__ == '__main__':
    seed_demo_data()
