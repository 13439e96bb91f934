import pytest

from invoice_dashboard import db
from invoice_dashboard.models import User
from invoice_dashboard.services import auth_service
from invoice_dashboard.services.auth_service import (
    CredentialsProvider,
    CredentialsSignin,
    authenticate,
    sign_in,
)

from tests.conftest import USER_EMAIL, USER_PASSWORD


@pytest.fixture
def request_ctx(app):
    with app.test_request_context('/login', method='POST'):
        yield


def credentials(**overrides):
    form = {'email': USER_EMAIL, 'password': USER_PASSWORD}
    form.update(overrides)
    return form


def test_valid_credentials_start_a_session(user, request_ctx):
    response = authenticate(credentials())

    assert response.status_code == 302
    assert response.headers['Location'] == '/dashboard/invoices'
    cookies = response.headers.getlist('Set-Cookie')
    assert any(cookie.startswith('access_token_cookie=') for cookie in cookies)


def test_successful_sign_in_resets_failed_attempts(user, request_ctx):
    authenticate(credentials(password='wrong-password'))
    authenticate(credentials())

    assert db.session.get(User, user.id).failed_login_attempts == 0
    assert db.session.get(User, user.id).last_login_at is not None


def test_wrong_password_returns_invalid_credentials(user, request_ctx):
    assert authenticate(credentials(password='wrong-password')) == 'Invalid credentials.'
    assert db.session.get(User, user.id).failed_login_attempts == 1


@pytest.mark.parametrize('form', [
    {'email': 'nobody@nextmail.com', 'password': USER_PASSWORD},
    {'email': 'not-an-email', 'password': USER_PASSWORD},
    {'email': USER_EMAIL, 'password': '123'},
    {},
])
def test_rejected_credentials_return_invalid_credentials(user, request_ctx, form):
    assert authenticate(form) == 'Invalid credentials.'


def test_recognized_credentials_error_is_not_raised(request_ctx, monkeypatch):
    def reject(self, form):
        raise CredentialsSignin()

    monkeypatch.setattr(CredentialsProvider, 'authorize', reject)

    assert authenticate(credentials()) == 'Invalid credentials.'


def test_inactive_account_gets_generic_message(user, request_ctx):
    user.is_active = False
    db.session.commit()

    assert authenticate(credentials()) == 'Something went wrong.'


def test_account_locks_after_repeated_failures(app, user, request_ctx):
    for _ in range(app.config['MAX_FAILED_LOGINS']):
        assert authenticate(credentials(password='wrong-password')) == 'Invalid credentials.'

    assert authenticate(credentials()) == 'Something went wrong.'


def test_unrecognized_errors_propagate(request_ctx, monkeypatch):
    def explode(self, form):
        raise RuntimeError('identity backend unavailable')

    monkeypatch.setattr(CredentialsProvider, 'authorize', explode)

    with pytest.raises(RuntimeError, match='identity backend unavailable'):
        authenticate(credentials())


def test_unknown_provider_is_an_auth_error(request_ctx):
    with pytest.raises(auth_service.InvalidProvider):
        sign_in('github', credentials())


@pytest.mark.parametrize('callback_url, expected', [
    ('/dashboard/invoices?page=2', '/dashboard/invoices?page=2'),
    ('https://evil.example.com/', '/dashboard/invoices'),
    ('//evil.example.com/', '/dashboard/invoices'),
    ('/\\evil.example.com', '/dashboard/invoices'),
    ('/\\/evil.example.com', '/dashboard/invoices'),
    ('/\t/evil.example.com', '/dashboard/invoices'),
    ('dashboard/invoices', '/dashboard/invoices'),
    ('', '/dashboard/invoices'),
])
def test_callback_url_must_stay_on_site(user, request_ctx, callback_url, expected):
    response = authenticate(credentials(callbackUrl=callback_url))

    assert response.headers['Location'] == expected
