"""
Invoice model
"""

from datetime import datetime, timezone

from invoice_dashboard import db
from invoice_dashboard.utils.validators import INVOICE_STATUSES

class Invoice(db.Model):
    """An invoice row. Amounts are stored as integer cents."""

    __tablename__ = 'invoices'

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    customer_id = db.Column(db.String(36), db.ForeignKey('customers.id'), nullable=False, index=True)
    amount = db.Column(db.Integer, nullable=False)
    status = db.Column(db.String(20), nullable=False, default='pending', index=True)
    date = db.Column(db.Date, nullable=False, default=lambda: datetime.now(timezone.utc).date())

    __table_args__ = (
        db.CheckConstraint('amount > 0', name='ck_invoice_amount_positive'),
        db.CheckConstraint(
            'status IN ({})'.format(', '.join(f"'{s}'" for s in INVOICE_STATUSES)),
            name='ck_invoice_status'
        ),
        db.Index('idx_invoice_customer_date', 'customer_id', 'date'),
    )

    def __repr__(self):
        return f'<Invoice {self.id} {self.status} {self.amount}>'
