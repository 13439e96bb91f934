"""
Invoice Dashboard
Server-rendered invoicing admin panel built on Flask
"""

import logging
from flask import Flask, jsonify, redirect, render_template, request, url_for
from flask_sqlalchemy import SQLAlchemy
from flask_jwt_extended import JWTManager
from flask_jwt_extended.exceptions import CSRFError
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_migrate import Migrate
from flask_caching import Cache
from sqlalchemy import text
import structlog
import sentry_sdk
from sentry_sdk.integrations.flask import FlaskIntegration
from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

from invoice_dashboard.config import Config

# Initialize extensions
db = SQLAlchemy()
jwt = JWTManager()
cors = CORS()
limiter = Limiter(key_func=get_remote_address)
migrate = Migrate()
cache = Cache()

def create_app(config_class=Config):
    """Application factory pattern for creating Flask app."""
    app = Flask(__name__)
    app.config.from_object(config_class)

    # Initialize Sentry for error tracking
    if app.config.get('SENTRY_DSN'):
        sentry_sdk.init(
            dsn=app.config['SENTRY_DSN'],
            integrations=[
                FlaskIntegration(),
                SqlalchemyIntegration(),
            ],
            traces_sample_rate=1.0,
            environment=app.config.get('FLASK_ENV', 'production')
        )

    # Setup structured logging
    setup_logging(app)

    # Initialize extensions
    db.init_app(app)
    jwt.init_app(app)
    cors.init_app(app, resources={r'/query': {'origins': app.config['CORS_ORIGINS']}})
    limiter.init_app(app)
    migrate.init_app(app, db)
    cache.init_app(app)

    # Register blueprints
    register_blueprints(app)

    # Session handling for the dashboard
    register_jwt_callbacks(app)

    # Register error handlers
    register_error_handlers(app)

    # Register security headers
    register_security_headers(app)

    # Register health check
    register_health_check(app)

    register_template_filters(app)

    from invoice_dashboard.cli import register_commands
    register_commands(app)

    config_class.init_app(app)

    return app

def setup_logging(app):
    """Configure structured logging for production."""
    log_level = getattr(logging, app.config.get('LOG_LEVEL', 'INFO'))

    if app.config.get('LOG_FORMAT') == 'json':
        structlog.configure(
            processors=[
                structlog.stdlib.filter_by_level,
                structlog.stdlib.add_logger_name,
                structlog.stdlib.add_log_level,
                structlog.stdlib.PositionalArgumentsFormatter(),
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                structlog.processors.UnicodeDecoder(),
                structlog.processors.JSONRenderer()
            ],
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )

    logging.basicConfig(level=log_level)

def register_blueprints(app):
    """Register all application blueprints."""
    from invoice_dashboard.api.auth import auth_bp
    from invoice_dashboard.api.invoice_routes import invoice_bp
    from invoice_dashboard.api.query_routes import query_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(invoice_bp, url_prefix='/dashboard')
    app.register_blueprint(query_bp)

    @app.route('/')
    def index():
        return redirect(url_for('invoice.list_invoices'))

def register_jwt_callbacks(app):
    """Send anonymous or expired sessions back to the login page."""
    from invoice_dashboard.models.user import User

    def _to_login(reason):
        app.logger.info(f'Redirecting to login: {reason}')
        return redirect(url_for('auth.login', callbackUrl=request.full_path.rstrip('?')))

    @jwt.unauthorized_loader
    def missing_session(reason):
        return _to_login(reason)

    @jwt.invalid_token_loader
    def invalid_session(reason):
        return _to_login(reason)

    @jwt.expired_token_loader
    def expired_session(jwt_header, jwt_payload):
        return _to_login('session expired')

    @jwt.user_lookup_loader
    def load_user(jwt_header, jwt_payload):
        return db.session.get(User, jwt_payload['sub'])

    @jwt.user_lookup_error_loader
    def unknown_user(jwt_header, jwt_payload):
        return _to_login('user no longer exists')

def register_error_handlers(app):
    """Register global error handlers."""

    def render_error(status_code, title, message):
        if request.accept_mimetypes.best == 'application/json':
            return jsonify({
                'error': title,
                'message': message,
                'status_code': status_code
            }), status_code
        return render_template('error.html', status_code=status_code,
                               title=title, message=message), status_code

    @app.errorhandler(400)
    def bad_request(error):
        return render_error(400, 'Bad Request', 'The request was malformed or invalid')

    @app.errorhandler(401)
    def unauthorized(error):
        return render_error(401, 'Unauthorized', 'Authentication required')

    @app.errorhandler(403)
    def forbidden(error):
        return render_error(403, 'Forbidden', 'Insufficient permissions')

    @app.errorhandler(CSRFError)
    def csrf_failure(error):
        # Signed in, but the form did not echo the session's CSRF token
        app.logger.warning(f'Rejected form post to {request.path}: {error}')
        return render_error(403, 'Forbidden', 'The form has expired. Reload the page and try again.')

    @app.errorhandler(404)
    def not_found(error):
        return render_error(404, 'Not Found', 'The requested resource was not found')

    @app.errorhandler(429)
    def rate_limit_exceeded(error):
        return render_error(429, 'Rate Limit Exceeded', 'Too many requests. Please try again later.')

    @app.errorhandler(500)
    def internal_error(error):
        app.logger.error(f'Internal server error: {str(error)}')
        return render_error(500, 'Internal Server Error', 'An unexpected error occurred')

def register_security_headers(app):
    """Add security headers to all responses."""

    @app.after_request
    def add_security_headers(response):
        # Prevent XSS attacks
        response.headers['X-Content-Type-Options'] = 'nosniff'
        response.headers['X-Frame-Options'] = 'DENY'

        # HTTPS enforcement
        if app.config.get('SECURE_SSL_REDIRECT'):
            response.headers['Strict-Transport-Security'] = 'max-age=31536000; includeSubDomains'

        # Content Security Policy
        response.headers['Content-Security-Policy'] = "default-src 'self'"

        # Referrer Policy
        response.headers['Referrer-Policy'] = 'strict-origin-when-cross-origin'

        return response

def register_health_check(app):
    """Register health check endpoint."""

    @app.route('/health')
    def health_check():
        """Health check endpoint for load balancers and monitoring."""
        try:
            db.session.execute(text('SELECT 1'))
            db_status = 'healthy'
        except Exception as e:
            app.logger.error(f'Database health check failed: {str(e)}')
            db.session.rollback()
            db_status = 'unhealthy'

        health_data = {
            'status': 'healthy' if db_status == 'healthy' else 'unhealthy',
            'services': {
                'database': db_status,
                'application': 'healthy'
            },
            'version': '1.0.0'
        }

        status_code = 200 if health_data['status'] == 'healthy' else 503
        return jsonify(health_data), status_code

def register_template_filters(app):
    """Formatting helpers used by the dashboard templates."""
    from invoice_dashboard.utils.formatting import format_currency, format_date

    app.add_template_filter(format_currency, 'currency')
    app.add_template_filter(format_date, 'date')
