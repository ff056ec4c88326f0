"""
Authentication utilities.

Credentials live behind a CredentialProvider so the task and category code
never depends on where users come from. The default provider holds the
single configured admin account.
"""

import logging
from typing import Optional

from flask import current_app, jsonify, redirect, request, url_for
from flask_login import LoginManager, UserMixin
from werkzeug.security import check_password_hash, generate_password_hash

logger = logging.getLogger(__name__)

login_manager = LoginManager()
login_manager.login_view = 'auth.login'
login_manager.login_message = 'Please log in to access this page.'
login_manager.login_message_category = 'info'


class AppUser(UserMixin):
    """Authenticated principal handed to Flask-Login."""

    def __init__(self, user_id: str, username: str, role: str = "admin"):
        self.id = user_id
        self.username = username
        self.role = role

    def __repr__(self):
        return f'<AppUser {self.username}>'


class CredentialProvider:
    """Interface for looking up and authenticating users."""

    def authenticate(self, username: str, password: str) -> Optional[AppUser]:
        raise NotImplementedError

    def get_user(self, user_id: str) -> Optional[AppUser]:
        raise NotImplementedError


class ConfiguredCredentialProvider(CredentialProvider):
    """
    Single account taken from configuration.

    Args:
        username: Login name
        password_hash: Werkzeug password hash; if omitted, ``password`` is hashed
        password: Plain password, hashed once at construction
    """

    def __init__(self, username: str, password_hash: Optional[str] = None, password: Optional[str] = None):
        if not password_hash and not password:
            raise ValueError("Either password_hash or password is required")
        self.user = AppUser(user_id=username, username=username)
        self.password_hash = password_hash or generate_password_hash(password)

    @classmethod
    def from_config(cls, config) -> "ConfiguredCredentialProvider":
        return cls(
            username=config['ADMIN_USERNAME'],
            password_hash=config.get('ADMIN_PASSWORD_HASH'),
            password=config.get('ADMIN_PASSWORD'),
        )

    def authenticate(self, username: str, password: str) -> Optional[AppUser]:
        if username != self.user.username:
            return None
        if not check_password_hash(self.password_hash, password):
            return None
        return self.user

    def get_user(self, user_id: str) -> Optional[AppUser]:
        if user_id == self.user.id:
            return self.user
        return None


def get_credential_provider() -> CredentialProvider:
    return current_app.extensions['credential_provider']


@login_manager.user_loader
def load_user(user_id):
    return get_credential_provider().get_user(user_id)


@login_manager.unauthorized_handler
def unauthorized():
    """JSON 401 for the API, redirect to the login page for HTML routes."""
    if request.path.startswith('/api/'):
        return jsonify({
            'success': False,
            'error': 'Authentication required',
            'message': 'Authentication required'
        }), 401
    return redirect(url_for('auth.login', next=request.full_path.rstrip('?')))
