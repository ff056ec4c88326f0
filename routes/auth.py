"""
Authentication Routes
Form-based login and logout against the configured credential provider.
"""

import logging

from flask import Blueprint, flash, redirect, render_template, request, url_for
from flask_login import current_user, login_required, login_user, logout_user

from utils.auth import get_credential_provider

logger = logging.getLogger(__name__)

auth_bp = Blueprint('auth', __name__, url_prefix='/auth')


def _safe_next(next_page):
    # Only local paths; "//host" would be an open redirect
    if next_page and next_page.startswith('/') and not next_page.startswith('//'):
        return next_page
    return None


@auth_bp.route('/login', methods=['GET', 'POST'])
def login():
    """Login page and handler."""
    if current_user.is_authenticated:
        return redirect(url_for('tasks_web.list_tasks'))

    if request.method == 'POST':
        username = request.form.get('username', '').strip()
        password = request.form.get('password', '')
        remember_me = request.form.get('remember_me') == 'on'

        if not username or not password:
            flash('Please enter both username and password', 'error')
            return render_template('auth/login.html'), 400

        user = get_credential_provider().authenticate(username, password)
        if user is None:
            logger.warning(f"Login failed for: {username}")
            flash('Invalid username or password', 'error')
            return render_template('auth/login.html'), 401

        login_user(user, remember=remember_me)
        logger.info(f"Login successful for user: {user.username}")

        next_page = _safe_next(request.args.get('next'))
        return redirect(next_page or url_for('tasks_web.list_tasks'))

    return render_template('auth/login.html')


@auth_bp.route('/logout')
@login_required
def logout():
    logger.info(f"Logout for user: {current_user.username}")
    logout_user()
    flash('You have been logged out successfully', 'info')
    return redirect(url_for('auth.login'))
