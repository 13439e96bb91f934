"""
Display formatting for templates
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Union


def format_currency(cents: Optional[int]) -> str:
    """Format integer cents as US dollars, e.g. 123456 -> '$1,234.56'."""
    if cents is None:
        return ''
    dollars = Decimal(cents) / 100
    sign = '-' if dollars < 0 else ''
    return f'{sign}${abs(dollars):,.2f}'


def format_date(value: Union[str, date, datetime, None]) -> str:
    """Format a date as 'Oct 19, 2026'."""
    if not value:
        return ''
    if isinstance(value, str):
        value = datetime.strptime(value[:10], '%Y-%m-%d').date()
    return f"{value.strftime('%b')} {value.day}, {value.year}"


def cents_to_dollars(cents: int) -> str:
    """Render cents for an amount input, e.g. 5000 -> '50.00'."""
    return f'{Decimal(cents) / 100:.2f}'
