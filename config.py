"""
Application configuration loaded from the environment.
"""

import os

from dotenv import load_dotenv

load_dotenv()


class Config:
    """Flask configuration. Every value can be overridden through environment variables."""

    ENV_NAME = os.getenv("FLASK_ENV", "development")

    SECRET_KEY = os.getenv("SESSION_SECRET", "dev-secret-change-me")

    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///tasks.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Listing defaults shared by the JSON API and the HTML list page
    TASKS_DEFAULT_PAGE_SIZE = int(os.getenv("TASKS_DEFAULT_PAGE_SIZE", "10"))
    TASKS_MAX_PAGE_SIZE = 100

    CSV_DELIMITER = os.getenv("CSV_DELIMITER", ";")

    ADMIN_USERNAME = os.getenv("ADMIN_USERNAME", "admin")
    ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin123")
    ADMIN_PASSWORD_HASH = os.getenv("ADMIN_PASSWORD_HASH")

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    WTF_CSRF_ENABLED = True
