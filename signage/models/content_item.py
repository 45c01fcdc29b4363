"""
ContentItem Model for Signage Server.

Represents a renderable unit shown on displays:
- Kind: one of seven content types (announcement, event, image, ...)
- Lifecycle: draft, published or archived
- Publication window: optional start_at / end_at
- Ordering: integer priority (higher is shown first)
"""

import enum
import uuid

from signage.models import db, DateTimeUTC, utcnow, isoformat


class ContentType(enum.Enum):
    """Content type enum.

    Closed set of content kinds the player knows how to render.
    """
    ANNOUNCEMENT = 'ANNOUNCEMENT'
    EVENT = 'EVENT'
    IMAGE = 'IMAGE'
    VIDEO = 'VIDEO'
    SCHEDULE = 'SCHEDULE'
    WEATHER = 'WEATHER'
    HTML_WIDGET = 'HTML_WIDGET'


class ContentStatus(enum.Enum):
    """Content lifecycle status.

    - DRAFT: Being edited, never shown on displays
    - PUBLISHED: Eligible for display within its window
    - ARCHIVED: Retired, never shown on displays
    """
    DRAFT = 'DRAFT'
    PUBLISHED = 'PUBLISHED'
    ARCHIVED = 'ARCHIVED'


class ContentItem(db.Model):
    """
    SQLAlchemy model representing a content item.

    Attributes:
        id: Unique UUID identifier
        type: Content kind (see ContentType)
        title: Headline shown on the display
        body: Optional text body (announcements, events, HTML widgets)
        media_url: Optional media URL (images, videos)
        duration_seconds: How long the player shows the item
        start_at: Optional instant before which the item is hidden
        end_at: Optional instant after which the item is hidden
        priority: Sort key, higher values are shown first
        status: Lifecycle status (see ContentStatus)
        created_by: ID of the user who created the item
        created_at: Timestamp when the item was created
        updated_at: Timestamp of last modification
    """

    __tablename__ = 'content_items'

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    type = db.Column(db.String(20), nullable=False, default=ContentType.ANNOUNCEMENT.value)
    title = db.Column(db.String(300), nullable=False)
    body = db.Column(db.Text, nullable=True)
    media_url = db.Column(db.String(1000), nullable=True)
    duration_seconds = db.Column(db.Integer, nullable=False, default=10)
    start_at = db.Column(DateTimeUTC(), nullable=True)
    end_at = db.Column(DateTimeUTC(), nullable=True)
    priority = db.Column(db.Integer, nullable=False, default=0)
    status = db.Column(db.String(20), nullable=False, default=ContentStatus.DRAFT.value, index=True)
    created_by = db.Column(db.String(36), db.ForeignKey('users.id', ondelete='SET NULL'), nullable=True)
    created_at = db.Column(DateTimeUTC(), default=utcnow, index=True)
    updated_at = db.Column(DateTimeUTC(), default=utcnow, onupdate=utcnow)

    def is_published_at(self, now):
        """
        Check whether the item may be shown at instant ``now``.

        Only PUBLISHED items qualify. An item whose start_at lies after
        ``now`` or whose end_at lies before ``now`` is hidden; a missing
        bound never hides the item.

        Args:
            now: Aware UTC datetime to evaluate against

        Returns:
            bool: True if the item is visible at ``now``
        """
        if self.status != ContentStatus.PUBLISHED.value:
            return False
        if self.start_at and self.start_at > now:
            return False
        if self.end_at and self.end_at < now:
            return False
        return True

    def to_dict(self):
        """
        Serialize the content item to a dictionary for API responses.

        Returns:
            Dictionary containing all content item fields
        """
        return {
            'id': self.id,
            'type': self.type,
            'title': self.title,
            'body': self.body,
            'media_url': self.media_url,
            'duration_seconds': self.duration_seconds,
            'start_at': isoformat(self.start_at),
            'end_at': isoformat(self.end_at),
            'priority': self.priority,
            'status': self.status,
            'created_by': self.created_by,
            'created_at': isoformat(self.created_at),
            'updated_at': isoformat(self.updated_at),
        }

    def __repr__(self):
        """String representation for debugging."""
        return f'<ContentItem {self.type} {self.title!r}>'
