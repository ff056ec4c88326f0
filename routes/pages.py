# routes/pages.py
from flask import Blueprint, redirect, url_for
from flask_login import current_user

pages_bp = Blueprint("pages", __name__)


@pages_bp.route("/login")
def login_redirect():
    """Convenience redirect: /login -> /auth/login"""
    return redirect(url_for("auth.login"))


@pages_bp.route("/logout")
def logout_redirect():
    """Convenience redirect: /logout -> /auth/logout"""
    return redirect(url_for("auth.logout"))


@pages_bp.route("/")
def index():
    if current_user.is_authenticated:
        return redirect(url_for("tasks_web.list_tasks"))
    return redirect(url_for("auth.login"))
