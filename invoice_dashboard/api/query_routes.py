"""
Diagnostic query endpoint
Smoke-tests the database with a fixed join query and returns JSON
"""

from flask import Blueprint, jsonify
from sqlalchemy.exc import SQLAlchemyError
import logging

from invoice_dashboard import db
from invoice_dashboard.services.invoice_data import list_invoices_with_amount

query_bp = Blueprint('query', __name__)
logger = logging.getLogger(__name__)

@query_bp.route('/query', methods=['GET'])
def query():
    """Invoices joined with customer names for the diagnostic amount."""
    try:
        return jsonify(list_invoices_with_amount())
    except SQLAlchemyError as e:
        logger.error(f"Diagnostic query failed: {str(e)}")
        db.session.rollback()
        return jsonify({
            'error': 'Database query failed'
        }), 500
