"""
AuditLog Model for Signage Server.

Represents an audit log entry for administrative actions: who did what to
which entity, with request context.
"""

import json
import uuid

from signage.models import db, DateTimeUTC, utcnow, isoformat


class AuditLog(db.Model):
    """
    SQLAlchemy model representing an audit log entry.

    Attributes:
        id: Unique UUID identifier
        user_id: ID of the acting user (NULL for system actions)
        user_email: Email of the user (denormalized for historical accuracy)
        action: Action performed (e.g., 'display.create', 'alert.activate')
        entity_type: Type of entity affected (e.g., 'display', 'playlist')
        entity_id: ID of the affected entity
        details: JSON string with additional context
        ip_address: IP address of the request
        user_agent: User agent string from the request
        created_at: Timestamp when the action occurred
    """

    __tablename__ = 'audit_logs'

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = db.Column(db.String(36), db.ForeignKey('users.id', ondelete='SET NULL'), nullable=True, index=True)
    user_email = db.Column(db.String(255), nullable=False, index=True)
    action = db.Column(db.String(100), nullable=False, index=True)
    entity_type = db.Column(db.String(50), nullable=False, index=True)
    entity_id = db.Column(db.String(36), nullable=True, index=True)
    details = db.Column(db.Text, nullable=True)
    ip_address = db.Column(db.String(45), nullable=True)
    user_agent = db.Column(db.String(500), nullable=True)
    created_at = db.Column(DateTimeUTC(), default=utcnow, index=True)

    # Relationship to User (optional - user may be deleted)
    user = db.relationship('User', backref=db.backref('audit_logs', lazy='dynamic'))

    # Valid entity types
    VALID_ENTITY_TYPES = [
        'auth',
        'user',
        'display',
        'content_item',
        'playlist',
        'playlist_item',
        'assignment',
        'alert',
        'setting',
        'system',
    ]

    def to_dict(self):
        """
        Serialize the audit log entry to a dictionary for API responses.

        Returns:
            Dictionary containing all audit log fields, details decoded
        """
        details = None
        if self.details:
            try:
                details = json.loads(self.details)
            except ValueError:
                details = self.details

        return {
            'id': self.id,
            'user_id': self.user_id,
            'user_email': self.user_email,
            'user_name': self.user.name if self.user else None,
            'action': self.action,
            'entity_type': self.entity_type,
            'entity_id': self.entity_id,
            'details': details,
            'ip_address': self.ip_address,
            'user_agent': self.user_agent,
            'created_at': isoformat(self.created_at),
        }

    def __repr__(self):
        """String representation for debugging."""
        return f'<AuditLog {self.action} by {self.user_email}>'
