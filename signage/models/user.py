"""
User Model for Signage Server.

Represents an administrator account. Users are identified by email; the
first login with an unknown email creates a VIEWER account.

Roles (hierarchical):
- ADMIN: Full access including displays, settings and audit logs
- EDITOR: Can manage content, playlists, assignments and alerts
- VIEWER: Read-only access
"""

import enum
import uuid

from flask_login import UserMixin

from signage.models import db, DateTimeUTC, utcnow, isoformat


class UserRole(enum.Enum):
    """User roles."""
    ADMIN = 'ADMIN'
    EDITOR = 'EDITOR'
    VIEWER = 'VIEWER'


# Role hierarchy - higher number means more privileges
ROLE_HIERARCHY = {
    UserRole.ADMIN.value: 3,
    UserRole.EDITOR.value: 2,
    UserRole.VIEWER.value: 1,
}


class User(UserMixin, db.Model):
    """
    SQLAlchemy model representing a user account.

    Attributes:
        id: Unique UUID identifier
        email: Unique, lower-cased email address used for login
        name: User's display name
        avatar_url: Optional avatar image URL
        role: User's role (ADMIN, EDITOR, VIEWER)
        created_at: Timestamp when the user was created
    """

    __tablename__ = 'users'

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    name = db.Column(db.String(200), nullable=False)
    avatar_url = db.Column(db.String(500), nullable=True)
    role = db.Column(db.String(20), nullable=False, default=UserRole.VIEWER.value)
    created_at = db.Column(DateTimeUTC(), default=utcnow)

    @staticmethod
    def normalize_email(email):
        """Lower-case and strip an email address."""
        return email.strip().lower()

    @classmethod
    def find_or_create(cls, email):
        """
        Look up a user by email, creating a VIEWER account if none exists.

        The new user's name defaults to the local part of the email.
        The caller is responsible for committing the session.

        Args:
            email: Email address (normalized before lookup)

        Returns:
            Tuple of (User, created)
        """
        email = cls.normalize_email(email)
        user = cls.query.filter_by(email=email).first()
        if user:
            return user, False

        user = cls(email=email, name=email.split('@')[0], role=UserRole.VIEWER.value)
        db.session.add(user)
        return user, True

    @property
    def role_level(self):
        """Numeric level of the user's role."""
        return ROLE_HIERARCHY.get(self.role, 0)

    def to_dict(self):
        """
        Serialize the user to a dictionary for API responses.

        Returns:
            Dictionary containing all user fields
        """
        return {
            'id': self.id,
            'email': self.email,
            'name': self.name,
            'avatar_url': self.avatar_url,
            'role': self.role,
            'created_at': isoformat(self.created_at),
        }

    def __repr__(self):
        """String representation for debugging."""
        return f'<User {self.email}>'
