import logging
import os
import sys

from flask import Flask, jsonify
from .extensions import db, migrate
from .config import DevConfig, ProdConfig
from .errors import OpenLinkError


def _configure_logging(app):
    """Set up structured logging for production."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(
        '[%(asctime)s] %(levelname)s in %(module)s: %(message)s'
    ))
    level = logging.INFO if not app.debug else logging.DEBUG
    app.logger.setLevel(level)
    app.logger.addHandler(handler)

    # Service modules log under the package name
    package_logger = logging.getLogger('openlink')
    package_logger.setLevel(level)
    if not package_logger.handlers:
        package_logger.addHandler(handler)
    logging.getLogger('gunicorn.error').setLevel(level)


def _register_error_handlers(app):
    @app.errorhandler(OpenLinkError)
    def handle_openlink_error(e):
        if e.status_code >= 500:
            app.logger.error('%s: %s', type(e).__name__, e.message)
        return jsonify(e.to_dict()), e.status_code


def create_app(config=None):
    app = Flask(__name__, static_folder=None)

    if config is None:
        config = ProdConfig if os.environ.get('FLASK_ENV') == 'production' else DevConfig
    app.config.from_object(config)

    _configure_logging(app)

    db.init_app(app)
    migrate.init_app(app, db)

    # Enable CORS
    from flask_cors import CORS
    CORS(app)

    _register_error_handlers(app)

    # Register blueprints
    from .api import register_blueprints
    register_blueprints(app)

    # Import models so they are registered with SQLAlchemy (needed for migrations)
    from . import models  # noqa: F401

    # Health check endpoint (used by Docker and CI)
    @app.route('/healthz')
    def health_check():
        try:
            db.session.execute(db.text('SELECT 1'))
            return jsonify(status='healthy'), 200
        except Exception:
            app.logger.exception('Health check failed')
            return jsonify(status='unhealthy'), 503

    return app
