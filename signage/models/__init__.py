"""
Signage Models Package.

SQLAlchemy models for the signage server including:
- Displays (screens polling for content)
- Content Items (renderable units with publication windows)
- Playlists and Playlist Items (ordered content collections)
- Display Assignments (display-to-playlist mappings)
- Alerts (global broadcast messages)
- Users and User Sessions (identity lookup and bearer tokens)
- Audit Logs (activity tracking)
- Settings (global key/value configuration)
"""

from datetime import datetime, timezone

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy import DateTime as _SADateTime
from sqlalchemy.types import TypeDecorator


class DateTimeUTC(TypeDecorator):
    """DateTime type that ensures values are always timezone-aware (UTC).

    SQLite stores datetimes as naive strings.  This TypeDecorator adds UTC
    timezone info when reading and strips it when writing, so Python code
    can safely compare with ``datetime.now(timezone.utc)`` without hitting
    "can't compare offset-naive and offset-aware datetimes".
    """

    impl = _SADateTime
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is not None and isinstance(value, datetime):
            if value.tzinfo is not None:
                value = value.astimezone(timezone.utc)
            return value.replace(tzinfo=None)
        return value

    def process_result_value(self, value, dialect):
        if value is not None and isinstance(value, datetime):
            if value.tzinfo is None:
                return value.replace(tzinfo=timezone.utc)
        return value


def utcnow():
    """Current time as an aware UTC datetime (column default helper)."""
    return datetime.now(timezone.utc)


def isoformat(value):
    """Serialize an optional datetime for API responses."""
    return value.isoformat() if value else None


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy models.

    All models should inherit from db.Model which uses this Base class.
    """
    pass


# SQLAlchemy database instance
db = SQLAlchemy(model_class=Base)


# Import models after db is defined to avoid circular imports
from signage.models.display import Display
from signage.models.content_item import ContentItem, ContentType, ContentStatus
from signage.models.playlist import Playlist, PlaylistItem
from signage.models.display_assignment import DisplayAssignment, LayoutPreset
from signage.models.alert import Alert, AlertLevel
from signage.models.user import User, UserRole
from signage.models.user_session import UserSession
from signage.models.audit_log import AuditLog
from signage.models.setting import Setting

__all__ = [
    'db',
    'Base',
    'DateTimeUTC',
    'Display',
    'ContentItem',
    'ContentType',
    'ContentStatus',
    'Playlist',
    'PlaylistItem',
    'DisplayAssignment',
    'LayoutPreset',
    'Alert',
    'AlertLevel',
    'User',
    'UserRole',
    'UserSession',
    'AuditLog',
    'Setting',
]
