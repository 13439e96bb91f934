"""
Command line tasks for Invoice Dashboard
Registered on the app as ``flask <command>``
"""

from datetime import date

import click

from invoice_dashboard import db
from invoice_dashboard.models import Customer, Invoice, User
from invoice_dashboard.services.invoice_actions import InvoiceActionError, create_invoice
from invoice_dashboard.utils.validators import INVOICE_STATUSES, ValidationError

PLACEHOLDER_CUSTOMERS = [
    {'id': 'd6e15727-9fe1-4961-8c5b-ea44a9bd81aa', 'name': 'Evil Rabbit',
     'email': 'evil@rabbit.com', 'image_url': '/static/customers/evil-rabbit.png'},
    {'id': '3958dc9e-712f-4377-85e9-fec4b6a6442a', 'name': 'Delba de Oliveira',
     'email': 'delba@oliveira.com', 'image_url': '/static/customers/delba-de-oliveira.png'},
    {'id': '3958dc9e-742f-4377-85e9-fec4b6a6442a', 'name': 'Lee Robinson',
     'email': 'lee@robinson.com', 'image_url': '/static/customers/lee-robinson.png'},
    {'id': '76d65c26-f784-44a2-ac19-586678f7c2f2', 'name': 'Michael Novotny',
     'email': 'michael@novotny.com', 'image_url': '/static/customers/michael-novotny.png'},
]

PLACEHOLDER_INVOICES = [
    (0, 15795, 'pending', date(2022, 12, 6)),
    (1, 20348, 'pending', date(2022, 11, 14)),
    (3, 3040, 'paid', date(2022, 10, 29)),
    (2, 44800, 'paid', date(2023, 9, 10)),
    (0, 666, 'pending', date(2023, 6, 27)),
    (3, 32545, 'paid', date(2023, 6, 9)),
    (1, 1250, 'paid', date(2023, 6, 17)),
]

PLACEHOLDER_USER = {
    'name': 'User',
    'email': 'user@nextmail.com',
    'password': '123456',
}


def seed_placeholder_data():
    """Insert demo customers, invoices and user. Skips rows that already exist."""
    created = {'customers': 0, 'invoices': 0, 'users': 0}

    for data in PLACEHOLDER_CUSTOMERS:
        if db.session.get(Customer, data['id']) is None:
            db.session.add(Customer(**data))
            created['customers'] += 1

    if Invoice.query.count() == 0:
        for customer_index, amount, status, issued in PLACEHOLDER_INVOICES:
            db.session.add(Invoice(
                customer_id=PLACEHOLDER_CUSTOMERS[customer_index]['id'],
                amount=amount,
                status=status,
                date=issued,
            ))
            created['invoices'] += 1

    if not User.query.filter_by(email=PLACEHOLDER_USER['email']).first():
        user = User(name=PLACEHOLDER_USER['name'], email=PLACEHOLDER_USER['email'])
        user.set_password(PLACEHOLDER_USER['password'])
        db.session.add(user)
        created['users'] += 1

    db.session.commit()
    return created


def register_commands(app):
    """Attach the CLI commands to ``app``."""

    @app.cli.command('init-db')
    def init_db():
        """Initialize the database."""
        db.create_all()
        click.echo('Database initialized successfully!')

    @app.cli.command('seed')
    def seed():
        """Load placeholder customers, invoices and a demo user."""
        db.create_all()
        created = seed_placeholder_data()
        click.echo(
            f"Seeded {created['customers']} customers, "
            f"{created['invoices']} invoices, {created['users']} users"
        )

    @app.cli.command('create-admin')
    @click.option('--name', prompt='Name')
    @click.option('--email', prompt='Email')
    @click.password_option()
    def create_admin(name, email, password):
        """Create a dashboard user."""
        email = email.strip().lower()
        if User.query.filter_by(email=email).first():
            raise click.ClickException(f'User with email {email} already exists')

        user = User(name=name, email=email)
        user.set_password(password)
        db.session.add(user)
        db.session.commit()
        click.echo(f'User created successfully: {user.email}')

    @app.cli.command('create-invoice')
    @click.option('--customer-id', required=True)
    @click.option('--amount', required=True, help='Amount in dollars, e.g. 50.00')
    @click.option('--status', required=True, type=click.Choice(INVOICE_STATUSES))
    def create_invoice_command(customer_id, amount, status):
        """Create an invoice dated today."""
        form = {'customerId': customer_id, 'amount': amount, 'status': status}
        try:
            create_invoice(form, strict=True)
        except ValidationError as e:
            messages = '; '.join(
                f'{field}: {" ".join(errors)}' for field, errors in e.errors.items()
            )
            raise click.ClickException(messages) from e
        except InvoiceActionError as e:
            raise click.ClickException(str(e)) from e
        click.echo('Invoice created.')
