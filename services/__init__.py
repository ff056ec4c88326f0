"""
Service factories bound to the current Flask app and request session.
"""

from flask import current_app

from models import db
from services.category_service import CategoryService
from services.csv_export_service import CsvExportWriter
from services.task_service import TaskService


def get_task_service() -> TaskService:
    return TaskService(db.session, default_page_size=current_app.config['TASKS_DEFAULT_PAGE_SIZE'])


def get_category_service() -> CategoryService:
    return CategoryService(db.session)


def get_csv_writer() -> CsvExportWriter:
    return CsvExportWriter(delimiter=current_app.config['CSV_DELIMITER'])
