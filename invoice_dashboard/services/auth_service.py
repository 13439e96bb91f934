"""
Credential sign-in

The credentials provider verifies an email/password pair against the users
table. ``sign_in`` turns a verified user into a cookie session issued by
Flask-JWT-Extended; ``authenticate`` is the login form action that maps the
auth error taxonomy to the message shown on the form.
"""

import logging
from typing import Any, Mapping, Optional, Union
from urllib.parse import urlsplit

from flask import current_app, redirect, url_for
from flask_jwt_extended import create_access_token, set_access_cookies, unset_jwt_cookies

from invoice_dashboard import db
from invoice_dashboard.models.user import User
from invoice_dashboard.utils.validators import CredentialsForm

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = 'Invalid credentials.'
GENERIC_AUTH_MESSAGE = 'Something went wrong.'


class AuthError(Exception):
    """Base class for errors raised during sign-in."""
    type = 'AuthError'


class CredentialsSignin(AuthError):
    """The provider rejected the submitted credentials."""
    type = 'CredentialsSignin'


class AccessDenied(AuthError):
    """The user exists but may not sign in (inactive or locked)."""
    type = 'AccessDenied'


class InvalidProvider(AuthError):
    type = 'InvalidProvider'


class CredentialsProvider:
    """Email/password provider backed by the users table."""

    id = 'credentials'

    def authorize(self, form: Mapping[str, Any]) -> Optional[User]:
        """Return the user for valid credentials, None when they do not match."""
        parsed = CredentialsForm.safe_parse(form)
        if not parsed.success:
            return None

        credentials = parsed.data
        user = User.query.filter_by(email=credentials.email).first()
        if not user:
            logger.info(f"Sign-in for unknown email: {credentials.email}")
            return None

        if not user.is_active:
            raise AccessDenied(f'Account {user.email} is inactive')

        if user.is_account_locked():
            raise AccessDenied(f'Account {user.email} is locked')

        if not user.check_password(credentials.password):
            user.record_failed_login(
                max_attempts=current_app.config['MAX_FAILED_LOGINS'],
                lock_minutes=current_app.config['ACCOUNT_LOCK_MINUTES'],
            )
            db.session.commit()
            logger.info(f"Wrong password for {user.email} "
                        f"({user.failed_login_attempts} failed attempts)")
            return None

        user.record_successful_login()
        db.session.commit()
        return user


PROVIDERS = {
    CredentialsProvider.id: CredentialsProvider(),
}


def safe_callback_url(callback_url: Optional[str]) -> str:
    """Only same-site relative paths are allowed as post-login targets."""
    default = url_for('invoice.list_invoices')
    # Browsers read a backslash as a slash, so /\host is protocol-relative
    if not callback_url or '\\' in callback_url or not callback_url.startswith('/'):
        return default

    parts = urlsplit(callback_url)
    if parts.scheme or parts.netloc:
        return default
    return callback_url


def sign_in(provider_id: str, form: Mapping[str, Any], redirect_to: Optional[str] = None):
    """Verify credentials with a provider and start a session.

    Returns a redirect response carrying the session cookies.
    """
    provider = PROVIDERS.get(provider_id)
    if provider is None:
        raise InvalidProvider(f'Unknown provider: {provider_id}')

    user = provider.authorize(form)
    if user is None:
        raise CredentialsSignin()

    response = redirect(redirect_to or url_for('invoice.list_invoices'))
    set_access_cookies(response, create_access_token(identity=user.id))
    logger.info(f"User signed in: {user.email}")
    return response


def sign_out():
    """End the session and return to the login page."""
    response = redirect(url_for('auth.login'))
    unset_jwt_cookies(response)
    return response


def authenticate(form: Mapping[str, Any]) -> Union[str, Any]:
    """Login form action.

    Returns the signed-in redirect response, or the message to show on the
    form. Errors outside the auth taxonomy propagate.
    """
    try:
        return sign_in('credentials', form, redirect_to=safe_callback_url(form.get('callbackUrl')))
    except AuthError as error:
        if error.type == CredentialsSignin.type:
            return INVALID_CREDENTIALS_MESSAGE
        logger.warning(f"Sign-in failed ({error.type}): {error}")
        return GENERIC_AUTH_MESSAGE
