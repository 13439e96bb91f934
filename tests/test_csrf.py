import pytest

from invoice_dashboard import create_app, db
from invoice_dashboard.config import TestingConfig
from invoice_dashboard.models import Invoice

VALID_FORM = {'customerId': 'abc', 'amount': '50.00', 'status': 'paid'}


class CsrfProtectedConfig(TestingConfig):
    JWT_COOKIE_CSRF_PROTECT = True


@pytest.fixture
def app():
    app = create_app(CsrfProtectedConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def csrf_token(auth_client):
    return auth_client.get_cookie('csrf_access_token').value


def test_forms_carry_the_session_csrf_token(auth_client, customers, csrf_token):
    response = auth_client.get('/dashboard/invoices/create')

    assert f'name="csrf_token" value="{csrf_token}"'.encode() in response.data


def test_create_with_csrf_token_succeeds(auth_client, customers, csrf_token):
    response = auth_client.post('/dashboard/invoices/create',
                                data=dict(VALID_FORM, csrf_token=csrf_token))

    assert response.status_code == 302
    assert response.headers['Location'].endswith('/dashboard/invoices')
    assert Invoice.query.count() == 1


@pytest.mark.parametrize('form', [
    VALID_FORM,
    dict(VALID_FORM, csrf_token='not-the-session-token'),
])
def test_create_without_matching_csrf_token_is_forbidden(auth_client, customers, form):
    response = auth_client.post('/dashboard/invoices/create', data=form)

    assert response.status_code == 403
    assert b'The form has expired.' in response.data
    assert Invoice.query.count() == 0


def test_delete_without_csrf_token_is_forbidden(auth_client, invoices):
    response = auth_client.post(f'/dashboard/invoices/{invoices[0]}/delete')

    assert response.status_code == 403
    assert Invoice.query.count() == 2


def test_delete_with_csrf_token_succeeds(auth_client, invoices, csrf_token):
    response = auth_client.post(f'/dashboard/invoices/{invoices[0]}/delete',
                                data={'csrf_token': csrf_token})

    assert response.status_code == 302
    assert Invoice.query.count() == 1


def test_anonymous_post_still_goes_to_login(client, customers):
    response = client.post('/dashboard/invoices/create', data=VALID_FORM)

    assert response.status_code == 302
    assert response.headers['Location'].startswith('/login?callbackUrl=')
