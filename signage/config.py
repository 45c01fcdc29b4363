"""
Signage Server Configuration Module

Configuration settings for database, logging, rate limiting and server.
All sensitive values are loaded from environment variables.
"""

import os
from pathlib import Path


class Config:
    """Base configuration class with default settings."""

    # Flask Settings
    SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-secret-key-change-in-production')

    # Base Directory
    BASE_DIR = Path(__file__).parent.resolve()

    # Database Settings (SQLite unless DATABASE_URL is set)
    DATABASE_PATH = Path(os.environ.get('SIGNAGE_DATABASE_PATH', BASE_DIR / 'data' / 'signage.db'))
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        'DATABASE_URL',
        f'sqlite:///{DATABASE_PATH}'
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Logging
    LOG_DIR = Path(os.environ.get('SIGNAGE_LOG_DIR', BASE_DIR / 'logs'))

    # Request limits
    MAX_CONTENT_LENGTH = 1 * 1024 * 1024  # JSON bodies only
    RATELIMIT_ENABLED = True
    RATELIMIT_DEFAULTS = ['2000 per day', '300 per hour']
    RATELIMIT_STORAGE_URI = os.environ.get('RATELIMIT_STORAGE_URI', 'memory://')

    # Server Settings
    PORT = int(os.environ.get('SIGNAGE_PORT', 5000))
    HOST = os.environ.get('SIGNAGE_HOST', '0.0.0.0')

    # Account seeded as ADMIN on startup (optional)
    ADMIN_EMAIL = os.environ.get('SIGNAGE_ADMIN_EMAIL')

    # Audit log listing
    AUDIT_LOG_DEFAULT_LIMIT = 100
    AUDIT_LOG_MAX_LIMIT = 500

    # Global signage settings and their defaults
    DEFAULT_SETTINGS = {
        'school_name': 'Lincoln High School',
        'primary_color': '#1e40af',
        'secondary_color': '#059669',
        'logo_url': '',
        'default_duration': 10,
        'refresh_interval': 30,
        'enable_weather': True,
        'weather_location': 'New York, NY',
    }

    @classmethod
    def init_app(cls, app):
        """Initialize application with this configuration."""
        # Ensure storage directories exist
        if app.config['SQLALCHEMY_DATABASE_URI'].startswith('sqlite:///'):
            cls.DATABASE_PATH.parent.mkdir(parents=True, exist_ok=True)


class DevelopmentConfig(Config):
    """Development configuration with debug enabled."""

    DEBUG = True
    TESTING = False


class TestingConfig(Config):
    """Testing configuration with an in-memory database."""

    DEBUG = True
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    RATELIMIT_ENABLED = False
    ADMIN_EMAIL = None

    @classmethod
    def init_app(cls, app):
        """Nothing to create on disk for tests."""
        pass


class ProductionConfig(Config):
    """Production configuration with strict security settings."""

    DEBUG = False
    TESTING = False

    @classmethod
    def init_app(cls, app):
        """Production-specific initialization."""
        Config.init_app(app)

        # Verify required environment variables are set
        required_vars = [
            'SECRET_KEY',
        ]
        missing = [var for var in required_vars if not os.environ.get(var)]
        if missing:
            raise ValueError(f"Missing required environment variables: {', '.join(missing)}")


# Configuration mapping by environment name
config = {
    'development': DevelopmentConfig,
    'testing': TestingConfig,
    'production': ProductionConfig,
    'default': DevelopmentConfig,
}


def get_config(env_name=None):
    """Get configuration class by environment name.

    Args:
        env_name: Environment name ('development', 'testing', 'production').
                  If None, reads from FLASK_ENV environment variable.

    Returns:
        Configuration class for the specified environment.
    """
    if env_name is None:
        env_name = os.environ.get('FLASK_ENV', 'development')
    return config.get(env_name, config['default'])
