"""
Task Manager application factory.
"""

import logging

from flask import Flask, jsonify, render_template, request
from flask_migrate import Migrate
from flask_wtf.csrf import CSRFProtect

from config import Config
from models import db
from services.task_errors import StorageError
from utils.auth import ConfiguredCredentialProvider, login_manager
from utils.startup_validation import run_startup_validation

logger = logging.getLogger(__name__)

csrf = CSRFProtect()
migrate = Migrate()


def _configure_logging(app):
    logging.basicConfig(
        level=app.config.get('LOG_LEVEL', 'INFO'),
        format='%(asctime)s %(levelname)s [%(name)s] %(message)s'
    )


def create_app(config_overrides=None, credential_provider=None):
    """
    Build the Flask app.

    Args:
        config_overrides: Mapping applied on top of Config (tests pass an in-memory database here)
        credential_provider: CredentialProvider used for login; defaults to the configured admin account
    """
    app = Flask(__name__)
    app.config.from_object(Config)
    if config_overrides:
        app.config.update(config_overrides)

    _configure_logging(app)

    db.init_app(app)
    migrate.init_app(app, db)
    csrf.init_app(app)
    login_manager.init_app(app)

    app.extensions['credential_provider'] = credential_provider or ConfiguredCredentialProvider.from_config(app.config)

    from routes.api_categories import api_categories_bp
    from routes.api_tasks import api_tasks_bp
    from routes.auth import auth_bp
    from routes.categories_web import categories_web_bp
    from routes.health_production import health_production_bp
    from routes.pages import pages_bp
    from routes.tasks_web import tasks_web_bp

    # JSON API uses session auth without form tokens
    csrf.exempt(api_tasks_bp)
    csrf.exempt(api_categories_bp)

    for blueprint in (pages_bp, auth_bp, tasks_web_bp, categories_web_bp,
                      api_tasks_bp, api_categories_bp, health_production_bp):
        app.register_blueprint(blueprint)

    @app.errorhandler(404)
    def not_found(error):
        if request.path.startswith('/api/'):
            return jsonify({'success': False, 'message': 'Not found'}), 404
        return render_template('errors/404.html', message='Page not found'), 404

    @app.errorhandler(StorageError)
    def storage_error(error):
        logger.error(f"Storage failure: {error.message}")
        return render_template('errors/500.html'), 500

    with app.app_context():
        run_startup_validation(app, db.session)
        logger.info(f"Application created (database: {db.engine.url.render_as_string(hide_password=True)})")

    return app
