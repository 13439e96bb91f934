"""
Invoice dashboard pages
List, create, edit and delete invoices
"""

from flask import Blueprint, abort, current_app, flash, redirect, render_template, request, url_for
from flask_jwt_extended import current_user, jwt_required
import logging

from invoice_dashboard.services.invoice_actions import (
    FormState,
    create_invoice,
    delete_invoice,
    update_invoice,
)
from invoice_dashboard.services.invoice_data import (
    fetch_customers,
    fetch_filtered_invoices,
    fetch_invoice_by_id,
    fetch_invoices_pages,
)

invoice_bp = Blueprint('invoice', __name__)
logger = logging.getLogger(__name__)

def current_page():
    """Page number from the query string, defaulting to 1."""
    try:
        page = int(request.args.get('page', 1))
    except (TypeError, ValueError):
        return 1
    return max(page, 1)

@invoice_bp.route('/invoices', methods=['GET'])
@jwt_required()
def list_invoices():
    """Invoice table with search and pagination."""
    query = request.args.get('query', '').strip()
    page = current_page()
    per_page = current_app.config['ITEMS_PER_PAGE']

    invoices = fetch_filtered_invoices(query, page, per_page)
    total_pages = fetch_invoices_pages(query, per_page)

    return render_template(
        'invoices/list.html',
        invoices=invoices,
        query=query,
        page=page,
        total_pages=total_pages,
        user=current_user,
    )

@invoice_bp.route('/invoices/create', methods=['GET', 'POST'])
@jwt_required()
def create():
    """Create-invoice form."""
    state = FormState()
    form = {}

    if request.method == 'POST':
        form = request.form
        state = create_invoice(form)
        if state is None:
            return redirect(url_for('invoice.list_invoices'))

    status_code = 400 if state.errors or state.message else 200
    return render_template(
        'invoices/create.html',
        customers=fetch_customers(),
        state=state,
        form=form,
        user=current_user,
    ), status_code

@invoice_bp.route('/invoices/<int:invoice_id>/edit', methods=['GET', 'POST'])
@jwt_required()
def edit(invoice_id):
    """Edit-invoice form. Unknown ids are a 404."""
    invoice = fetch_invoice_by_id(invoice_id)
    if invoice is None:
        abort(404)

    state = FormState()
    form = {
        'customerId': invoice['customer_id'],
        'amount': invoice['amount'],
        'status': invoice['status'],
    }

    if request.method == 'POST':
        form = request.form
        state = update_invoice(invoice_id, form)
        if state is None:
            return redirect(url_for('invoice.list_invoices'))

    status_code = 400 if state.errors or state.message else 200
    return render_template(
        'invoices/edit.html',
        invoice=invoice,
        customers=fetch_customers(),
        state=state,
        form=form,
        user=current_user,
    ), status_code

@invoice_bp.route('/invoices/<int:invoice_id>/delete', methods=['POST'])
@jwt_required()
def delete(invoice_id):
    """Delete an invoice and return to the list."""
    state = delete_invoice(invoice_id)
    if state is not None:
        flash(state.message, 'error')
    return redirect(url_for('invoice.list_invoices'))
