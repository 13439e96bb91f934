"""
Read queries behind the dashboard pages
"""

import logging
import math

from sqlalchemy import String, cast, func, or_, select, text

from invoice_dashboard import db
from invoice_dashboard.models import Customer, Invoice
from invoice_dashboard.utils.formatting import cents_to_dollars
from invoice_dashboard.utils.revalidation import cached_for_path

logger = logging.getLogger(__name__)

INVOICES_PATH = '/dashboard/invoices'

DIAGNOSTIC_AMOUNT = 666


def _search_filter(query):
    pattern = f'%{query}%'
    return or_(
        Customer.name.ilike(pattern),
        Customer.email.ilike(pattern),
        cast(Invoice.amount, String).ilike(pattern),
        cast(Invoice.date, String).ilike(pattern),
        Invoice.status.ilike(pattern),
    )


@cached_for_path(INVOICES_PATH)
def fetch_filtered_invoices(query, page, per_page):
    """One page of invoices joined with their customer, newest first."""
    offset = (max(page, 1) - 1) * per_page
    stmt = (
        select(
            Invoice.id,
            Invoice.amount,
            Invoice.date,
            Invoice.status,
            Customer.name,
            Customer.email,
            Customer.image_url,
        )
        .join(Customer, Invoice.customer_id == Customer.id)
        .where(_search_filter(query))
        .order_by(Invoice.date.desc(), Invoice.id.desc())
        .limit(per_page)
        .offset(offset)
    )
    return [dict(row._mapping) for row in db.session.execute(stmt)]


@cached_for_path(INVOICES_PATH)
def fetch_invoices_pages(query, per_page):
    """Number of pages needed for invoices matching ``query``."""
    stmt = (
        select(func.count(Invoice.id))
        .join(Customer, Invoice.customer_id == Customer.id)
        .where(_search_filter(query))
    )
    total = db.session.execute(stmt).scalar_one()
    return math.ceil(total / per_page)


def fetch_invoice_by_id(invoice_id):
    """Invoice prepared for the edit form (amount in dollars), or None."""
    invoice = db.session.get(Invoice, invoice_id)
    if invoice is None:
        return None
    return {
        'id': invoice.id,
        'customer_id': invoice.customer_id,
        'amount': cents_to_dollars(invoice.amount),
        'status': invoice.status,
    }


def fetch_customers():
    """All customers ordered by name, for the customer select box."""
    customers = db.session.execute(
        select(Customer).order_by(Customer.name.asc())
    ).scalars()
    return [customer.to_dict() for customer in customers]


def list_invoices_with_amount(amount=DIAGNOSTIC_AMOUNT):
    """Invoices joined with customer names, filtered to one amount."""
    rows = db.session.execute(
        text(
            'SELECT invoices.amount, customers.name '
            'FROM invoices '
            'JOIN customers ON invoices.customer_id = customers.id '
            'WHERE invoices.amount = :amount'
        ),
        {'amount': amount},
    )
    return [dict(row._mapping) for row in rows]
