"""
Alert Model for Signage Server.

Represents a global broadcast shown on every display while active.
Alerts are not linked to playlists or assignments.
"""

import enum
import uuid

from signage.models import db, DateTimeUTC, utcnow, isoformat


class AlertLevel(enum.Enum):
    """Alert severity levels."""
    INFO = 'INFO'
    WARNING = 'WARNING'
    EMERGENCY = 'EMERGENCY'


class Alert(db.Model):
    """
    SQLAlchemy model representing a global alert.

    starts_at / ends_at are informational; visibility on displays is gated
    by is_active alone.

    Attributes:
        id: Unique UUID identifier
        title: Short alert title
        message: Alert text
        level: Severity (see AlertLevel)
        is_active: Whether the alert is currently broadcast
        starts_at: Declared start of the alert
        ends_at: Optional declared end of the alert
        created_by: ID of the user who created the alert
        created_at: Timestamp when the alert was created
        updated_at: Timestamp of last modification
    """

    __tablename__ = 'alerts'

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = db.Column(db.String(200), nullable=False)
    message = db.Column(db.Text, nullable=False)
    level = db.Column(db.String(20), nullable=False, default=AlertLevel.INFO.value)
    is_active = db.Column(db.Boolean, nullable=False, default=True, index=True)
    starts_at = db.Column(DateTimeUTC(), nullable=False, default=utcnow)
    ends_at = db.Column(DateTimeUTC(), nullable=True)
    created_by = db.Column(db.String(36), db.ForeignKey('users.id', ondelete='SET NULL'), nullable=True)
    created_at = db.Column(DateTimeUTC(), default=utcnow, index=True)
    updated_at = db.Column(DateTimeUTC(), default=utcnow, onupdate=utcnow)

    @classmethod
    def get_active(cls):
        """
        Get all active alerts, most recently created first.

        Returns:
            list: Active Alert instances
        """
        return cls.query.filter_by(is_active=True).order_by(cls.created_at.desc()).all()

    def to_dict(self):
        """
        Serialize the alert to a dictionary for API responses.

        Returns:
            Dictionary containing all alert fields
        """
        return {
            'id': self.id,
            'title': self.title,
            'message': self.message,
            'level': self.level,
            'is_active': self.is_active,
            'starts_at': isoformat(self.starts_at),
            'ends_at': isoformat(self.ends_at),
            'created_by': self.created_by,
            'created_at': isoformat(self.created_at),
            'updated_at': isoformat(self.updated_at),
        }

    def __repr__(self):
        """String representation for debugging."""
        return f'<Alert {self.level} {self.title!r}>'
