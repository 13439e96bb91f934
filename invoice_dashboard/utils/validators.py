"""
Form validation for Invoice Dashboard

Each form class turns raw, untyped form fields into either a typed payload or
a field error map. ``safe_parse`` never raises for malformed input; ``parse``
raises ``ValidationError`` for callers that do not surface field errors.
"""

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Dict, List, Mapping, Optional
import email_validator

INVOICE_STATUSES = ('pending', 'paid')

# Largest amount the integer cents column can hold
MAX_AMOUNT_CENTS = 2147483647
MAX_AMOUNT = Decimal(MAX_AMOUNT_CENTS) / 100

FieldErrors = Dict[str, List[str]]


class ValidationError(ValueError):
    """Raised by the strict ``parse`` variant."""

    def __init__(self, errors: FieldErrors):
        self.errors = errors
        fields = ', '.join(sorted(errors))
        super().__init__(f'Invalid form fields: {fields}')


@dataclass
class ParseResult:
    """Outcome of ``safe_parse``: typed data or a field error map."""
    data: Optional[Any] = None
    errors: FieldErrors = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return not self.errors


def to_cents(amount: Decimal) -> int:
    """Convert a dollar amount to integer cents, rounding half up."""
    return int((amount * 100).quantize(Decimal('1'), rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class InvoicePayload:
    customer_id: str
    amount: Decimal
    status: str

    @property
    def cents(self) -> int:
        return to_cents(self.amount)


@dataclass(frozen=True)
class Credentials:
    email: str
    password: str


class FormSchema:
    """Base class for form schemas."""

    @classmethod
    def collect_errors(cls, raw: Mapping[str, Any]) -> FieldErrors:
        raise NotImplementedError

    @classmethod
    def build(cls, raw: Mapping[str, Any]):
        raise NotImplementedError

    @classmethod
    def safe_parse(cls, raw: Mapping[str, Any]) -> ParseResult:
        """Validate ``raw`` and return a ParseResult. Never raises for bad input."""
        errors = cls.collect_errors(raw)
        if errors:
            return ParseResult(errors=errors)
        return ParseResult(data=cls.build(raw))

    @classmethod
    def parse(cls, raw: Mapping[str, Any]):
        """Validate ``raw`` and return the typed payload or raise ValidationError."""
        result = cls.safe_parse(raw)
        if not result.success:
            raise ValidationError(result.errors)
        return result.data

    @staticmethod
    def text(raw: Mapping[str, Any], name: str) -> str:
        value = raw.get(name)
        if value is None:
            return ''
        return str(value).strip()


class InvoiceForm(FormSchema):
    """Invoice create/update form: ``customerId``, ``amount``, ``status``."""

    @staticmethod
    def parse_amount(value: str) -> Optional[Decimal]:
        """Coerce an amount field to Decimal. Blank counts as zero."""
        if not value:
            return Decimal('0')
        try:
            amount = Decimal(value)
        except (InvalidOperation, TypeError, ValueError):
            return None
        if not amount.is_finite():
            return None
        return amount

    @classmethod
    def collect_errors(cls, raw: Mapping[str, Any]) -> FieldErrors:
        errors: FieldErrors = {}

        if not cls.text(raw, 'customerId'):
            errors.setdefault('customerId', []).append('Please select a customer.')

        amount = cls.parse_amount(cls.text(raw, 'amount'))
        if amount is None:
            errors.setdefault('amount', []).append('Amount must be a number.')
        elif amount > MAX_AMOUNT:
            errors.setdefault('amount', []).append('Amount must be at most $21,474,836.47.')
        elif amount <= 0 or to_cents(amount) <= 0:
            errors.setdefault('amount', []).append('Amount must be greater than $0.')

        if cls.text(raw, 'status') not in INVOICE_STATUSES:
            errors.setdefault('status', []).append('Please select an invoice status.')

        return errors

    @classmethod
    def build(cls, raw: Mapping[str, Any]) -> InvoicePayload:
        return InvoicePayload(
            customer_id=cls.text(raw, 'customerId'),
            amount=cls.parse_amount(cls.text(raw, 'amount')),
            status=cls.text(raw, 'status'),
        )


class CredentialsForm(FormSchema):
    """Sign-in form: ``email`` and ``password``."""

    MIN_PASSWORD_LENGTH = 6

    @staticmethod
    def validate_email(email: str) -> bool:
        """Validate email address format."""
        try:
            email_validator.validate_email(email, check_deliverability=False)
            return True
        except email_validator.EmailNotValidError:
            return False

    @classmethod
    def collect_errors(cls, raw: Mapping[str, Any]) -> FieldErrors:
        errors: FieldErrors = {}

        email = cls.text(raw, 'email')
        if not email or not cls.validate_email(email):
            errors.setdefault('email', []).append('Please enter a valid email address.')

        password = raw.get('password') or ''
        if len(password) < cls.MIN_PASSWORD_LENGTH:
            errors.setdefault('password', []).append(
                f'Password must be at least {cls.MIN_PASSWORD_LENGTH} characters.'
            )

        return errors

    @classmethod
    def build(cls, raw: Mapping[str, Any]) -> Credentials:
        return Credentials(email=cls.text(raw, 'email').lower(), password=raw.get('password'))
