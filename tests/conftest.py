from datetime import date

import pytest
from sqlalchemy import event

from invoice_dashboard import create_app, db
from invoice_dashboard.config import TestingConfig
from invoice_dashboard.models import Customer, Invoice, User

USER_EMAIL = 'user@nextmail.com'
USER_PASSWORD = '123456'


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def customers(app):
    amy = Customer(id='abc', name='Amy Burns', email='amy@burns.com')
    delba = Customer(id='def', name='Delba de Oliveira', email='delba@oliveira.com')
    db.session.add_all([amy, delba])
    db.session.commit()
    return {'abc': amy, 'def': delba}


@pytest.fixture
def invoices(customers):
    rows = [
        Invoice(customer_id='abc', amount=15795, status='pending', date=date(2022, 12, 6)),
        Invoice(customer_id='def', amount=666, status='paid', date=date(2023, 6, 27)),
    ]
    db.session.add_all(rows)
    db.session.commit()
    return [row.id for row in rows]


@pytest.fixture
def user(app):
    user = User(name='User', email=USER_EMAIL)
    user.set_password(USER_PASSWORD)
    db.session.add(user)
    db.session.commit()
    return user


@pytest.fixture
def auth_client(client, user):
    response = client.post('/login', data={'email': USER_EMAIL, 'password': USER_PASSWORD})
    assert response.status_code == 302
    return client


@pytest.fixture
def executed_statements(app):
    """Every SQL statement sent to the database while the test runs."""
    statements = []

    def record(conn, cursor, statement, parameters, context, executemany):
        statements.append((statement, parameters))

    event.listen(db.engine, 'before_cursor_execute', record)
    yield statements
    event.remove(db.engine, 'before_cursor_execute', record)
