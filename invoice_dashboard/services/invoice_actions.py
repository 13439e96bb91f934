"""
Invoice mutations

Each action validates its form, runs exactly one parameterized statement,
commits and revalidates the invoice list. Failures come back as a
``FormState`` for the form to render. With ``strict=True`` they are raised
instead, for callers that have no form to report to.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Mapping, Optional

import structlog
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from invoice_dashboard import db
from invoice_dashboard.services.invoice_data import INVOICES_PATH
from invoice_dashboard.utils.revalidation import revalidate_path
from invoice_dashboard.utils.validators import FieldErrors, InvoiceForm, InvoicePayload

logger = structlog.get_logger(__name__)

INSERT_INVOICE = text(
    'INSERT INTO invoices (customer_id, amount, status, date) '
    'VALUES (:customer_id, :amount, :status, :date)'
)
UPDATE_INVOICE = text(
    'UPDATE invoices '
    'SET customer_id = :customer_id, amount = :amount, status = :status '
    'WHERE id = :id'
)
DELETE_INVOICE = text('DELETE FROM invoices WHERE id = :id')


class InvoiceActionError(RuntimeError):
    """Database failure raised by strict actions."""


@dataclass
class FormState:
    """Errors and message handed back to an invoice form."""
    errors: FieldErrors = field(default_factory=dict)
    message: Optional[str] = None


def insert_params(payload: InvoicePayload, today: Optional[date] = None) -> dict:
    """Bind parameters for the insert statement; the issue date defaults to today in UTC."""
    issued = today or datetime.now(timezone.utc).date()
    return {
        'customer_id': payload.customer_id,
        'amount': payload.cents,
        'status': payload.status,
        'date': issued.isoformat(),
    }


def update_params(invoice_id: int, payload: InvoicePayload) -> dict:
    return {
        'id': invoice_id,
        'customer_id': payload.customer_id,
        'amount': payload.cents,
        'status': payload.status,
    }


def _validate(form: Mapping[str, Any], verb: str, strict: bool):
    if strict:
        return InvoiceForm.parse(form), None

    result = InvoiceForm.safe_parse(form)
    if not result.success:
        return None, FormState(
            errors=result.errors,
            message=f'Missing Fields. Failed to {verb} Invoice.',
        )
    return result.data, None


def _write(statement, params: dict, verb: str, strict: bool) -> Optional[FormState]:
    try:
        db.session.execute(statement, params)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error('invoice_write_failed', action=verb.lower(), error=str(e), exc_info=True)
        if strict:
            raise InvoiceActionError(f'Failed to {verb.lower()} invoice.') from e
        return FormState(message=f'Database Error: Failed to {verb} Invoice.')

    revalidate_path(INVOICES_PATH)
    logger.info('invoice_written', action=verb.lower())
    return None


def create_invoice(form: Mapping[str, Any], strict: bool = False) -> Optional[FormState]:
    """Insert a new invoice dated today."""
    payload, state = _validate(form, 'Create', strict)
    if state is not None:
        return state
    return _write(INSERT_INVOICE, insert_params(payload), 'Create', strict)


def update_invoice(invoice_id: int, form: Mapping[str, Any], strict: bool = False) -> Optional[FormState]:
    """Overwrite customer, amount and status of an invoice.

    Unknown ids update nothing and are not reported.
    """
    payload, state = _validate(form, 'Update', strict)
    if state is not None:
        return state
    return _write(UPDATE_INVOICE, update_params(invoice_id, payload), 'Update', strict)


def delete_invoice(invoice_id: int, strict: bool = False) -> Optional[FormState]:
    """Delete an invoice. Unknown ids are a no-op."""
    return _write(DELETE_INVOICE, {'id': invoice_id}, 'Delete', strict)
