"""
Root pytest configuration and fixtures for unit, integration and security tests.
"""
import os
import sys
from datetime import datetime, timedelta
from pathlib import Path

import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# Test configuration
os.environ['FLASK_ENV'] = 'testing'
os.environ['DATABASE_URL'] = 'sqlite:///:memory:'
os.environ['SESSION_SECRET'] = 'test-secret-key-for-testing-only-0123456789'

TEST_CONFIG = {
    'TESTING': True,
    'ENV_NAME': 'testing',
    'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
    'SECRET_KEY': 'test-secret-key-for-testing-only-0123456789',
    'WTF_CSRF_ENABLED': False,
    'ADMIN_USERNAME': 'admin',
    'ADMIN_PASSWORD': 'admin123',
    'ADMIN_PASSWORD_HASH': None,
    'TASKS_DEFAULT_PAGE_SIZE': 10,
    'CSV_DELIMITER': ';',
}


@pytest.fixture(scope='function')
def app():
    """Fresh app and in-memory database per test."""
    from app import create_app
    from models import db

    test_app = create_app(dict(TEST_CONFIG))

    with test_app.app_context():
        db.create_all()
        yield test_app
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create a test client for the Flask application."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """Database session bound to the test app context."""
    from models import db

    yield db.session
    db.session.rollback()


@pytest.fixture(scope='function')
def authenticated_client(client):
    """Test client logged in as the configured admin account."""
    response = client.post('/auth/login', data={'username': 'admin', 'password': 'admin123'})
    assert response.status_code == 302
    return client


@pytest.fixture(scope='function')
def task_service(db_session):
    from services.task_service import TaskService
    return TaskService(db_session, default_page_size=10)


@pytest.fixture(scope='function')
def category_service(db_session):
    from services.category_service import CategoryService
    return CategoryService(db_session)


@pytest.fixture(scope='function')
def make_category(db_session):
    """Factory: insert a category and return it."""
    from models import Category

    def _make_category(name='Work', color='#3B82F6'):
        category = Category(name=name, color=color)
        db_session.add(category)
        db_session.commit()
        return category

    return _make_category


@pytest.fixture(scope='function')
def make_task(db_session):
    """
    Factory: insert a task directly through the ORM.

    created_at defaults to a strictly increasing timestamp per call so that
    creation order is also the default listing order (newest first).
    """
    from models import Task

    base_time = datetime(2024, 1, 1, 12, 0, 0)
    counter = {'n': 0}

    def _make_task(title='Task', status='TODO', description=None, due_date=None,
                   category=None, created_at=None):
        counter['n'] += 1
        created = created_at or base_time + timedelta(minutes=counter['n'])
        task = Task(
            title=title,
            description=description,
            status=status,
            due_date=due_date,
            category_id=category.id if category is not None else None,
            created_at=created,
            updated_at=created,
        )
        db_session.add(task)
        db_session.commit()
        return task

    return _make_task


@pytest.fixture(scope='function')
def make_app():
    """Factory for extra apps with config overrides (no context pushed)."""
    from app import create_app

    def _make_app(credential_provider=None, **overrides):
        return create_app(dict(TEST_CONFIG, **overrides), credential_provider=credential_provider)

    return _make_app
