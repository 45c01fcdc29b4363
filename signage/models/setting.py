"""
Setting Model for Signage Server.

Key/value store for global signage settings (branding, default durations,
refresh interval). Values are stored as JSON text.
"""

import json

from signage.models import db, DateTimeUTC, utcnow, isoformat


class Setting(db.Model):
    """
    SQLAlchemy model representing one global setting.

    Attributes:
        key: Setting name (primary key)
        value: JSON-encoded value
        updated_at: Timestamp of last modification
    """

    __tablename__ = 'settings'

    key = db.Column(db.String(100), primary_key=True)
    value = db.Column(db.Text, nullable=False)
    updated_at = db.Column(DateTimeUTC(), default=utcnow, onupdate=utcnow)

    def get_value(self):
        """Decoded setting value."""
        return json.loads(self.value)

    def set_value(self, value):
        """Encode and store a setting value."""
        self.value = json.dumps(value)

    def to_dict(self):
        """Serialize the setting for API responses."""
        return {
            'key': self.key,
            'value': self.get_value(),
            'updated_at': isoformat(self.updated_at),
        }

    def __repr__(self):
        """String representation for debugging."""
        return f'<Setting {self.key}>'
