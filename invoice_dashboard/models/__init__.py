"""
Database models for Invoice Dashboard
"""

from invoice_dashboard.models.user import User
from invoice_dashboard.models.customer import Customer
from invoice_dashboard.models.invoice import Invoice, INVOICE_STATUSES

__all__ = ['User', 'Customer', 'Invoice', 'INVOICE_STATUSES']
