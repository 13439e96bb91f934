from datetime import date

import pytest

from invoice_dashboard import create_app, db
from invoice_dashboard.config import TestingConfig, cache_type_for, engine_options_for
from invoice_dashboard.models import Customer, Invoice
from invoice_dashboard.services.invoice_data import fetch_filtered_invoices


class UncachedConfig(TestingConfig):
    CACHE_TYPE = cache_type_for(None)


@pytest.mark.parametrize('redis_url, per_process, cache_type', [
    ('redis://cache:6379/0', False, 'RedisCache'),
    ('redis://cache:6379/0', True, 'RedisCache'),
    (None, False, 'NullCache'),
    ('', False, 'NullCache'),
    (None, True, 'SimpleCache'),
])
def test_cache_type_for(redis_url, per_process, cache_type):
    assert cache_type_for(redis_url, per_process=per_process) == cache_type


def test_postgres_connections_require_tls():
    options = engine_options_for('postgresql://user:pw@db.example.com/invoices')

    assert options['connect_args'] == {'sslmode': 'require'}
    assert options['pool_pre_ping'] is True


def test_sqlite_connections_have_no_engine_options():
    assert engine_options_for('sqlite:///:memory:') == {}


def test_without_shared_cache_list_reads_are_never_stale():
    app = create_app(UncachedConfig)
    with app.app_context():
        db.create_all()
        db.session.add(Customer(id='abc', name='Amy Burns', email='amy@burns.com'))
        db.session.commit()

        assert fetch_filtered_invoices('', 1, 6) == []

        # Another worker's write, with no revalidation in this process
        db.session.add(Invoice(customer_id='abc', amount=1000, status='paid', date=date(2023, 6, 1)))
        db.session.commit()

        assert len(fetch_filtered_invoices('', 1, 6)) == 1

        db.session.remove()
        db.drop_all()
