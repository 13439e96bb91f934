"""
Configuration management for Invoice Dashboard
Supports multiple environments with secure defaults
"""

import os
from datetime import timedelta
from dotenv import load_dotenv

# Load environment variables
basedir = os.path.abspath(os.path.dirname(__file__))
load_dotenv(os.path.join(basedir, '..', '.env'))


def _database_url():
    """Resolve the connection string, preferring POSTGRES_URL."""
    url = os.environ.get('POSTGRES_URL') or os.environ.get('DATABASE_URL')
    if not url:
        return f'sqlite:///{os.path.join(basedir, "invoice_dashboard.db")}'
    # SQLAlchemy no longer accepts the bare postgres:// scheme
    if url.startswith('postgres://'):
        url = 'postgresql://' + url[len('postgres://'):]
    return url


def engine_options_for(database_url):
    """Engine options for a connection string. PostgreSQL always requires TLS."""
    if database_url.startswith('postgresql'):
        return {
            'connect_args': {'sslmode': 'require'},
            'pool_pre_ping': True,
        }
    return {}


def cache_type_for(redis_url, per_process=False):
    """Cache backend for the list views.

    Revalidation must reach every worker, so without a shared Redis the cache
    is disabled unless a single-process cache is explicitly acceptable.
    """
    if redis_url:
        return 'RedisCache'
    return 'SimpleCache' if per_process else 'NullCache'


class Config:
    """Base configuration class with common settings."""

    # Flask Core Settings
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'
    FLASK_ENV = os.environ.get('FLASK_ENV') or 'production'

    # Database Configuration
    SQLALCHEMY_DATABASE_URI = _database_url()
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = engine_options_for(SQLALCHEMY_DATABASE_URI)

    # Session (JWT cookie) Configuration
    JWT_SECRET_KEY = os.environ.get('JWT_SECRET_KEY') or SECRET_KEY
    JWT_TOKEN_LOCATION = ['cookies']
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(
        seconds=int(os.environ.get('JWT_ACCESS_TOKEN_EXPIRES', 3600))
    )
    JWT_COOKIE_SECURE = os.environ.get('SESSION_COOKIE_SECURE', 'True').lower() == 'true'
    JWT_COOKIE_SAMESITE = 'Lax'
    JWT_COOKIE_CSRF_PROTECT = True
    JWT_CSRF_CHECK_FORM = True

    # Rate Limiting Configuration
    REDIS_URL = os.environ.get('REDIS_URL')
    RATELIMIT_STORAGE_URI = os.environ.get('RATE_LIMIT_STORAGE_URL') or REDIS_URL or 'memory://'
    RATELIMIT_LOGIN = os.environ.get('LOGIN_RATE_LIMIT', '10 per minute')

    # View cache Configuration
    CACHE_TYPE = cache_type_for(REDIS_URL)
    CACHE_REDIS_URL = REDIS_URL
    CACHE_DEFAULT_TIMEOUT = int(os.environ.get('CACHE_TTL', 3600))

    # CORS Configuration
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*').split(',')

    # Security Configuration
    SECURE_SSL_REDIRECT = os.environ.get('SECURE_SSL_REDIRECT', 'False').lower() == 'true'
    SESSION_COOKIE_SECURE = os.environ.get('SESSION_COOKIE_SECURE', 'True').lower() == 'true'
    SESSION_COOKIE_HTTPONLY = os.environ.get('SESSION_COOKIE_HTTPONLY', 'True').lower() == 'true'

    # Logging Configuration
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    LOG_FORMAT = os.environ.get('LOG_FORMAT', 'json')
    SENTRY_DSN = os.environ.get('SENTRY_DSN')

    # Dashboard Configuration
    ITEMS_PER_PAGE = int(os.environ.get('ITEMS_PER_PAGE', 6))
    MAX_FAILED_LOGINS = int(os.environ.get('MAX_FAILED_LOGINS', 5))
    ACCOUNT_LOCK_MINUTES = int(os.environ.get('ACCOUNT_LOCK_MINUTES', 60))

    @staticmethod
    def init_app(app):
        """Initialize application with configuration."""
        pass

class DevelopmentConfig(Config):
    """Development environment configuration."""
    DEBUG = True
    FLASK_ENV = 'development'
    LOG_FORMAT = 'console'
    CACHE_TYPE = cache_type_for(Config.REDIS_URL, per_process=True)
    SECURE_SSL_REDIRECT = False
    SESSION_COOKIE_SECURE = False
    JWT_COOKIE_SECURE = False

class TestingConfig(Config):
    """Testing environment configuration."""
    TESTING = True
    FLASK_ENV = 'testing'
    SECRET_KEY = 'testing-secret-key-with-enough-length-for-hs256'
    JWT_SECRET_KEY = SECRET_KEY
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SQLALCHEMY_ENGINE_OPTIONS = {}
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(seconds=300)  # 5 minutes for tests
    JWT_COOKIE_SECURE = False
    JWT_COOKIE_CSRF_PROTECT = False
    RATELIMIT_ENABLED = False
    RATELIMIT_STORAGE_URI = 'memory://'
    CACHE_TYPE = 'SimpleCache'
    LOG_FORMAT = 'console'
    SENTRY_DSN = None
    SECURE_SSL_REDIRECT = False
    SESSION_COOKIE_SECURE = False

class ProductionConfig(Config):
    """Production environment configuration."""
    DEBUG = False
    TESTING = False
    FLASK_ENV = 'production'

    @classmethod
    def init_app(cls, app):
        Config.init_app(app)

        # Log to syslog in production
        import logging
        from logging.handlers import SysLogHandler
        syslog_handler = SysLogHandler()
        syslog_handler.setLevel(logging.WARNING)
        app.logger.addHandler(syslog_handler)

# Configuration mapping
config = {
    'development': DevelopmentConfig,
    'testing': TestingConfig,
    'production': ProductionConfig,
    'default': DevelopmentConfig
}
