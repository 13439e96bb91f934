"""
User model for dashboard sign-in
"""

from datetime import datetime, timedelta, timezone
from werkzeug.security import generate_password_hash, check_password_hash
import uuid

from invoice_dashboard import db

class User(db.Model):
    """Dashboard user verified by the credentials provider."""

    __tablename__ = 'users'

    # Primary key
    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    # Authentication fields
    name = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    is_active = db.Column(db.Boolean, default=True, nullable=False)

    # Security tracking
    last_login_at = db.Column(db.DateTime(timezone=True))
    failed_login_attempts = db.Column(db.Integer, default=0, nullable=False)
    locked_until = db.Column(db.DateTime(timezone=True))

    def set_password(self, password):
        """Set password hash."""
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        """Check password against hash."""
        return check_password_hash(self.password_hash, password)

    def is_account_locked(self):
        """Check if account is locked due to failed login attempts."""
        if self.locked_until:
            locked_until = self.locked_until
            # SQLite hands back naive datetimes
            if locked_until.tzinfo is None:
                locked_until = locked_until.replace(tzinfo=timezone.utc)
            if datetime.now(timezone.utc) < locked_until:
                return True
            # Unlock account if lock period has expired
            self.locked_until = None
            self.failed_login_attempts = 0
        return False

    def record_failed_login(self, max_attempts=5, lock_minutes=60):
        """Record a failed login attempt, locking the account past the threshold."""
        self.failed_login_attempts = (self.failed_login_attempts or 0) + 1

        if self.failed_login_attempts >= max_attempts:
            self.locked_until = datetime.now(timezone.utc) + timedelta(minutes=lock_minutes)

    def record_successful_login(self):
        """Record a successful login."""
        self.last_login_at = datetime.now(timezone.utc)
        self.failed_login_attempts = 0
        self.locked_until = None

    def __repr__(self):
        return f'<User {self.email}>'
