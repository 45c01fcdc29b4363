"""
Flask Application Factory for the Signage Server.

This module provides the create_app() factory function that creates and
configures the Flask application. It initializes:
- SQLAlchemy database connection (SQLite, or DATABASE_URL)
- Security extensions (Flask-Talisman, Flask-Limiter)
- Bearer-token authentication (Flask-Login request loader)
- Blueprint registration
- Error handlers
- Logging configuration
- Admin account seeding from SIGNAGE_ADMIN_EMAIL

Usage:
    # Development
    python -m signage.app

    # Production
    gunicorn -w 4 -b 0.0.0.0:5000 'signage.app:create_app()'
"""

import logging
import os
from datetime import datetime, timezone
from typing import Optional

import click
from flask import Flask, g, jsonify
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_login import LoginManager
from flask_migrate import Migrate
from flask_talisman import Talisman

from signage.config import get_config
from signage.models import db, User, UserRole
from signage.utils.auth import load_user_from_request

# Global migrate instance
migrate = Migrate()


def create_app(config_name: Optional[str] = None) -> Flask:
    """
    Create and configure the Flask application.

    Args:
        config_name: Configuration environment name ('development', 'testing', 'production').
                    If None, reads from FLASK_ENV environment variable.

    Returns:
        Configured Flask application instance.
    """
    app = Flask(__name__)

    # Load configuration
    config_class = get_config(config_name)
    app.config.from_object(config_class)
    config_class.init_app(app)

    # Store config class for reference
    app.config['CONFIG_CLASS'] = config_class

    # Configure logging first so startup messages reach the log file
    _configure_logging(app)

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)

    # Initialize Flask-Login; sessions are bearer tokens, never cookies
    login_manager = LoginManager()
    login_manager.init_app(app)
    login_manager.request_loader(load_user_from_request)

    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, user_id)

    @app.teardown_request
    def forget_request_user(exc):
        # Bearer auth is resolved per request, even when an app context is reused
        g.pop('_login_user', None)
        g.pop('current_session', None)

    # Register blueprints
    _register_blueprints(app)

    # Initialize security extensions
    _init_security(app, config_class)

    # Create database tables and seed the admin account
    with app.app_context():
        db.create_all()
        _seed_admin(app)

    # Register error handlers
    _register_error_handlers(app)

    # Register CLI commands
    _register_commands(app)

    # Register health check endpoint
    @app.route('/health')
    @app.route('/api/health')
    @app.route('/api/v1/health')
    def health_check():
        """Health check endpoint for monitoring.

        Available at /health, /api/health, and /api/v1/health for compatibility.
        """
        return jsonify({
            'status': 'healthy',
            'service': 'signage',
            'timestamp': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z')
        })

    return app


def _init_security(app: Flask, config_class) -> None:
    """
    Initialize security extensions for the application.

    - Flask-Talisman for security headers (production only)
    - Flask-Limiter default limits on the admin API; the player blueprint
      is exempt because every display polls it on a fixed interval

    Args:
        app: Flask application instance.
        config_class: Configuration class being used.
    """
    is_production = config_class.__name__ == 'ProductionConfig'

    # Initialize Talisman for security headers (production only)
    if is_production:
        Talisman(
            app,
            force_https=True,
            strict_transport_security=True,
            strict_transport_security_max_age=31536000,  # 1 year
            content_security_policy={
                'default-src': "'self'",
                'img-src': ["'self'", "data:", "https:"],
                'media-src': ["'self'", "https:"],
            },
            frame_options='DENY',
            content_type_options=True,
        )
        app.logger.info('Security headers enabled (Flask-Talisman)')

    # Initialize rate limiter (RATELIMIT_ENABLED=False turns it off)
    limiter = Limiter(
        key_func=get_remote_address,
        app=app,
        default_limits=app.config['RATELIMIT_DEFAULTS'],
        storage_uri=app.config['RATELIMIT_STORAGE_URI'],
    )
    from signage.routes import player_bp
    limiter.exempt(player_bp)

    # Store limiter on app for route-specific limits
    app.limiter = limiter
    if app.config['RATELIMIT_ENABLED']:
        app.logger.info('Rate limiting enabled (Flask-Limiter)')


def _seed_admin(app: Flask) -> None:
    """
    Promote (or create) the configured admin account.

    Does nothing unless ADMIN_EMAIL is configured.

    Args:
        app: Flask application instance.
    """
    email = app.config.get('ADMIN_EMAIL')
    if not email:
        return

    try:
        _ensure_admin(email)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        app.logger.error(f"Failed to seed admin user {email}: {e}")
        return

    app.logger.info(f"Admin account ensured: {User.normalize_email(email)}")


def _ensure_admin(email: str) -> User:
    """Find or create the user for ``email`` and give it the ADMIN role (not committed)."""
    user, created = User.find_or_create(email)
    user.role = UserRole.ADMIN.value
    return user


def _configure_logging(app: Flask) -> None:
    """
    Configure application logging.

    Writes to LOG_DIR/signage.log when the directory is writable. The
    handler sits on the ``signage`` package logger, which app.logger
    (``signage.app``) and every module logger propagate to.

    Args:
        app: Flask application instance.
    """
    package_logger = logging.getLogger('signage')

    if not app.testing:
        log_dir = str(app.config['LOG_DIR'])
        try:
            os.makedirs(log_dir, exist_ok=True)
            log_file = os.path.join(log_dir, 'signage.log')
            file_handler = logging.FileHandler(log_file)
            file_handler.setLevel(logging.INFO)
            file_handler.setFormatter(logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            ))
            package_logger.addHandler(file_handler)
        except (OSError, PermissionError):
            # Log path not writable, skip file logging
            pass

    # Set application log level
    app.logger.setLevel(logging.INFO)
    package_logger.setLevel(logging.INFO)


def _register_blueprints(app: Flask) -> None:
    """
    Register API blueprints with the application.

    All blueprints are registered under the /api/v1 prefix.

    Args:
        app: Flask application instance.
    """
    from signage.routes import (
        player_bp,
        auth_bp,
        displays_bp,
        content_bp,
        playlists_bp,
        assignments_bp,
        alerts_bp,
        audit_bp,
        settings_bp,
    )

    blueprints = [
        (player_bp, '/api/v1/player'),
        (auth_bp, '/api/v1/auth'),
        (displays_bp, '/api/v1/displays'),
        (content_bp, '/api/v1/content'),
        (playlists_bp, '/api/v1/playlists'),
        (assignments_bp, '/api/v1/assignments'),
        (alerts_bp, '/api/v1/alerts'),
        (audit_bp, '/api/v1/audit-logs'),
        (settings_bp, '/api/v1/settings'),
    ]

    for blueprint, url_prefix in blueprints:
        app.register_blueprint(blueprint, url_prefix=url_prefix)
        app.logger.debug(f'Registered {blueprint.name} blueprint at {url_prefix}')


def _register_error_handlers(app: Flask) -> None:
    """
    Register error handlers for common HTTP errors.

    Args:
        app: Flask application instance.
    """
    @app.errorhandler(400)
    def bad_request(error):
        return jsonify({
            'status': 'error',
            'error': 'Bad Request',
            'message': str(error.description) if hasattr(error, 'description') else 'Invalid request'
        }), 400

    @app.errorhandler(404)
    def not_found(error):
        return jsonify({
            'status': 'error',
            'error': 'Not Found',
            'message': 'The requested resource was not found'
        }), 404

    @app.errorhandler(405)
    def method_not_allowed(error):
        return jsonify({
            'status': 'error',
            'error': 'Method Not Allowed',
            'message': 'The method is not allowed for the requested URL'
        }), 405

    @app.errorhandler(413)
    def request_entity_too_large(error):
        return jsonify({
            'status': 'error',
            'error': 'Payload Too Large',
            'message': 'Request body exceeds the maximum allowed size'
        }), 413

    @app.errorhandler(429)
    def too_many_requests(error):
        return jsonify({
            'status': 'error',
            'error': 'Too Many Requests',
            'message': str(error.description) if hasattr(error, 'description') else 'Rate limit exceeded'
        }), 429

    @app.errorhandler(500)
    def internal_server_error(error):
        return jsonify({
            'status': 'error',
            'error': 'Internal Server Error',
            'message': 'An unexpected error occurred'
        }), 500


def _register_commands(app: Flask) -> None:
    """
    Register Flask CLI commands.

    Args:
        app: Flask application instance.
    """
    @app.cli.command('make-admin')
    @click.argument('email')
    def make_admin(email):
        """Grant the ADMIN role to EMAIL, creating the account if needed."""
        user = _ensure_admin(email)
        db.session.commit()
        click.echo(f'{user.email} is now an admin')


if __name__ == '__main__':
    # Development server
    application = create_app()
    config = application.config['CONFIG_CLASS']
    application.run(
        host=config.HOST,
        port=config.PORT,
        debug=config.DEBUG
    )
