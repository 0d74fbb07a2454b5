"""
Portfolio Site - Main Application Entry Point
Built using the Application Factory Pattern

This module initializes the Flask application with its extensions,
configuration and the contact storage collaborator. All route handling is
delegated to blueprints.
"""

import os

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from config import get_config, validate_config
from extensions import db
from utils.security import add_security_headers
from utils.storage import create_storage

# Import all blueprints
from blueprints.contact import contact_bp


def create_app(config_name=None):
    """
    Application Factory Pattern
    Creates and configures Flask application instance

    Args:
        config_name (str): Configuration environment name (optional)

    Returns:
        Flask: Configured Flask application instance

    Raises:
        ConfigurationError: If required configuration is missing
    """

    app = Flask(__name__)

    # Load configuration
    conf = get_config(config_name)
    app.config.from_object(conf)

    # Fail fast before touching the database
    validate_config(app.config)

    # Initialize extensions with app
    initialize_extensions(app)

    # Register blueprints
    register_blueprints(app)

    # Register error handlers
    register_error_handlers(app)

    # Register request/response hooks
    register_hooks(app)

    # Health check route
    @app.route('/health')
    def health_check():
        return {'status': 'ok', 'message': 'Portfolio backend is running'}, 200

    return app


def initialize_extensions(app):
    """Initialize Flask extensions and the contact storage with the app instance"""
    db.init_app(app)

    # Imported for its side effect of registering the model with SQLAlchemy
    import models  # noqa: F401

    storage_kind = app.config.get('CONTACT_STORAGE', 'database')
    app.extensions['contact_storage'] = create_storage(storage_kind)

    if storage_kind != 'database':
        app.logger.info(f"✓ Using {storage_kind} contact storage")
        return

    # Create tables if they don't exist
    with app.app_context():
        try:
            from sqlalchemy import text
            db.create_all()
            # Verify connection
            db.session.execute(text('SELECT 1'))
            app.logger.info("✓ Database initialized successfully")
        except Exception as e:
            # Submissions will fail with a 500 until the database is reachable
            app.logger.error(f"✗ Database initialization failed: {str(e)}")


def register_blueprints(app):
    """Register all application blueprints"""
    app.register_blueprint(contact_bp)


def register_error_handlers(app):
    """Register JSON error handlers"""

    @app.errorhandler(HTTPException)
    def http_error(e):
        return jsonify({'success': False, 'message': e.description}), e.code

    @app.errorhandler(500)
    def internal_server_error(e):
        app.logger.error(f"Server Error: {str(e)}")
        return jsonify({'success': False, 'message': 'Internal server error'}), 500


def register_hooks(app):
    """Register request/response hooks"""

    @app.teardown_appcontext
    def shutdown_session(exception=None):
        if exception is not None:
            db.session.rollback()

    @app.after_request
    def security_headers(response):
        """Add security headers to all responses"""
        return add_security_headers(response)


if __name__ == '__main__':
    # Get environment
    env = os.environ.get('FLASK_ENV', 'development')

    # Create app
    app = create_app(env)

    # Run development server
    app.run(
        host='0.0.0.0',
        port=app.config['PORT'],
        debug=(env == 'development')
    )
