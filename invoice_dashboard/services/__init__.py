"""
Business services for Invoice Dashboard
Invoice reads and mutations, and credential sign-in
"""

from invoice_dashboard.services.invoice_actions import (
    FormState,
    InvoiceActionError,
    create_invoice,
    delete_invoice,
    update_invoice,
)
from invoice_dashboard.services.auth_service import authenticate, sign_in, sign_out

__all__ = [
    'FormState',
    'InvoiceActionError',
    'create_invoice',
    'update_invoice',
    'delete_invoice',
    'authenticate',
    'sign_in',
    'sign_out',
]
