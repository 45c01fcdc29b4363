"""
UserSession Model for Signage Server.

Represents an active user session with token-based authentication.
Deleting a session immediately invalidates its token.
"""

from datetime import timedelta
import secrets
import uuid

from signage.models import db, DateTimeUTC, utcnow, isoformat


# Default session duration
DEFAULT_SESSION_HOURS = 8


class UserSession(db.Model):
    """
    SQLAlchemy model representing a user login session.

    Attributes:
        id: Unique UUID identifier
        user_id: Foreign key reference to the user who owns this session
        token: Unique, cryptographically secure bearer token
        ip_address: IP address from which the session was created
        user_agent: Client user agent string
        expires_at: Timestamp when the session expires
        last_active: Timestamp of last activity using this session
        created_at: Timestamp when the session was created
    """

    __tablename__ = 'user_sessions'

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = db.Column(db.String(36), db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    token = db.Column(db.String(64), unique=True, nullable=False, index=True)
    ip_address = db.Column(db.String(45), nullable=True)
    user_agent = db.Column(db.String(500), nullable=True)
    expires_at = db.Column(DateTimeUTC(), nullable=False)
    last_active = db.Column(DateTimeUTC(), nullable=True)
    created_at = db.Column(DateTimeUTC(), default=utcnow)

    # Relationships
    user = db.relationship('User', backref=db.backref('sessions', lazy='dynamic', cascade='all, delete-orphan'))

    @classmethod
    def generate_token(cls):
        """
        Generate a cryptographically secure session token.

        Returns:
            A 43-character URL-safe token (32 bytes of randomness)
        """
        return secrets.token_urlsafe(32)

    @classmethod
    def create_session(cls, user_id, ip_address=None, user_agent=None, hours=DEFAULT_SESSION_HOURS):
        """
        Create a new session for a user.

        Args:
            user_id: ID of the user to create session for
            ip_address: Client IP address
            user_agent: Client user agent string
            hours: Session lifetime in hours

        Returns:
            New UserSession instance (not yet committed to database)
        """
        now = utcnow()
        return cls(
            user_id=user_id,
            token=cls.generate_token(),
            ip_address=ip_address,
            user_agent=user_agent[:500] if user_agent else None,
            expires_at=now + timedelta(hours=hours),
            last_active=now
        )

    def is_expired(self):
        """
        Check if the session has expired.

        Returns:
            True if current time is past expires_at, False otherwise
        """
        return utcnow() > self.expires_at

    def update_activity(self):
        """Update the last_active timestamp to current time."""
        self.last_active = utcnow()

    def to_dict(self, include_token=False):
        """
        Serialize the session to a dictionary for API responses.

        Args:
            include_token: Include the bearer token (only right after login)

        Returns:
            Dictionary containing session fields
        """
        result = {
            'id': self.id,
            'user_id': self.user_id,
            'ip_address': self.ip_address,
            'user_agent': self.user_agent,
            'expires_at': isoformat(self.expires_at),
            'last_active': isoformat(self.last_active),
            'created_at': isoformat(self.created_at),
        }
        if include_token:
            result['token'] = self.token
        return result

    def __repr__(self):
        """String representation for debugging."""
        return f'<UserSession user={self.user_id}>'
