"""
Customer model referenced by invoices
"""

import uuid

from invoice_dashboard import db

class Customer(db.Model):
    """Billing entity an invoice is issued to. Read-only from the dashboard."""

    __tablename__ = 'customers'

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = db.Column(db.String(255), nullable=False, index=True)
    email = db.Column(db.String(255), nullable=False, index=True)
    image_url = db.Column(db.String(255))

    def to_dict(self):
        """Convert customer to dictionary for select boxes and API responses."""
        return {
            'id': self.id,
            'name': self.name,
            'email': self.email,
            'image_url': self.image_url,
        }

    def __repr__(self):
        return f'<Customer {self.name}>'
