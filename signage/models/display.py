"""
Display Model for Signage Server.

Represents a screen endpoint that polls the server for content. A display
authenticates with its id and a secret key; every successful check updates
its liveness timestamp (last_seen_at).
"""

import secrets
import uuid

from signage.models import db, DateTimeUTC, utcnow, isoformat


class Display(db.Model):
    """
    SQLAlchemy model representing a display (screen).

    Attributes:
        id: Unique UUID identifier, also the player's display id
        name: Human-readable display name
        location: Optional free-text location (e.g., 'Main Lobby')
        secret_key: Credential the player presents with its id
        timezone: Declared IANA timezone of the display
        is_active: Whether the display is enabled by administrators
        last_seen_at: Timestamp of the last successful credential check
        theme_color: Accent color used by the player UI
        logo_url: Optional logo shown by the player UI
        created_at: Timestamp when the display was created
        updated_at: Timestamp of last modification
    """

    __tablename__ = 'displays'

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = db.Column(db.String(200), nullable=False)
    location = db.Column(db.String(200), nullable=True)
    secret_key = db.Column(db.String(128), nullable=False, default=lambda: Display.generate_secret_key())
    timezone = db.Column(db.String(64), nullable=False, default='UTC')
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    last_seen_at = db.Column(DateTimeUTC(), nullable=True)
    theme_color = db.Column(db.String(20), nullable=False, default='#1e40af')
    logo_url = db.Column(db.String(500), nullable=True)
    created_at = db.Column(DateTimeUTC(), default=utcnow, index=True)
    updated_at = db.Column(DateTimeUTC(), default=utcnow, onupdate=utcnow)

    @staticmethod
    def generate_secret_key():
        """
        Generate a new random secret key for a display.

        Returns:
            A 32-character URL-safe token
        """
        return secrets.token_urlsafe(24)

    def rotate_secret_key(self):
        """Replace the secret key; players using the old key stop resolving."""
        self.secret_key = self.generate_secret_key()
        return self.secret_key

    def touch(self, now):
        """Record a successful check-in at ``now``."""
        self.last_seen_at = now

    def to_dict(self):
        """
        Serialize the display to a dictionary for API responses.

        Returns:
            Dictionary containing all display fields
        """
        return {
            'id': self.id,
            'name': self.name,
            'location': self.location,
            'secret_key': self.secret_key,
            'timezone': self.timezone,
            'is_active': self.is_active,
            'last_seen_at': isoformat(self.last_seen_at),
            'theme_color': self.theme_color,
            'logo_url': self.logo_url,
            'created_at': isoformat(self.created_at),
            'updated_at': isoformat(self.updated_at),
        }

    def __repr__(self):
        """String representation for debugging."""
        return f'<Display {self.name}>'
