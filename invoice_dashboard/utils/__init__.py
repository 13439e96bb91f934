"""
Utility modules for Invoice Dashboard
Form validation, display formatting and view-cache revalidation
"""

from invoice_dashboard.utils.validators import (
    CredentialsForm,
    InvoiceForm,
    ParseResult,
    ValidationError,
)

__all__ = [
    'CredentialsForm',
    'InvoiceForm',
    'ParseResult',
    'ValidationError',
]
