"""
Main application entry point for Invoice Dashboard
"""

import os
from invoice_dashboard import create_app, db
from invoice_dashboard.config import config
from invoice_dashboard.models import User, Customer, Invoice

# Create Flask application
app = create_app(config[os.environ.get('FLASK_CONFIG', 'default')])

@app.shell_context_processor
def make_shell_context():
    """Make database models available in Flask shell."""
    return {
        'db': db,
        'User': User,
        'Customer': Customer,
        'Invoice': Invoice,
    }

if __name__ == '__main__':
    # Development server
    app.run(host='0.0.0.0', port=5000, debug=True)
