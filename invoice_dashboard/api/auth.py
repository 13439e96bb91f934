"""
Authentication pages
Login form backed by the credentials provider, and logout
"""

from flask import Blueprint, current_app, render_template, request
import logging

from invoice_dashboard import limiter
from invoice_dashboard.services.auth_service import authenticate, sign_out

auth_bp = Blueprint('auth', __name__)
logger = logging.getLogger(__name__)

def _login_limit():
    return current_app.config['RATELIMIT_LOGIN']

@auth_bp.route('/login', methods=['GET'])
def login():
    """Render the sign-in form."""
    return render_template(
        'auth/login.html',
        callback_url=request.args.get('callbackUrl', ''),
        error_message=None,
    )

@auth_bp.route('/login', methods=['POST'])
@limiter.limit(_login_limit)
def login_submit():
    """Authenticate the submitted credentials."""
    result = authenticate(request.form)

    if isinstance(result, str):
        return render_template(
            'auth/login.html',
            callback_url=request.form.get('callbackUrl', ''),
            email=request.form.get('email', ''),
            error_message=result,
        ), 401

    return result

@auth_bp.route('/logout', methods=['POST'])
def logout():
    """Clear the session cookies."""
    return sign_out()
