"""
DisplayAssignment Model for Signage Server.

Represents the binding of a display to a playlist with a layout preset.

Supported layout presets:
- fullscreen: One item at a time, full screen
- grid: Several items tiled on screen
- ticker: Items scroll along a ticker band
"""

import enum
import uuid

from signage.models import db, DateTimeUTC, utcnow, isoformat


class LayoutPreset(enum.Enum):
    """Layout preset enum for assignments."""
    FULLSCREEN = 'fullscreen'
    GRID = 'grid'
    TICKER = 'ticker'


class DisplayAssignment(db.Model):
    """
    SQLAlchemy model representing a display-to-playlist assignment.

    The active_from / active_to window is stored for administrators but the
    player resolution only looks at is_active.

    Attributes:
        id: Unique UUID identifier
        display_id: Foreign key reference to the display
        playlist_id: Foreign key reference to the playlist
        layout_preset: Layout the player should use (see LayoutPreset)
        is_active: Whether the assignment is the display's live one
        active_from: Optional start of the assignment window
        active_to: Optional end of the assignment window
        created_at: Timestamp when the assignment was created
        updated_at: Timestamp of last modification
    """

    __tablename__ = 'display_assignments'

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    display_id = db.Column(
        db.String(36),
        db.ForeignKey('displays.id', ondelete='CASCADE'),
        nullable=False,
        index=True
    )
    playlist_id = db.Column(
        db.String(36),
        db.ForeignKey('playlists.id', ondelete='CASCADE'),
        nullable=False,
        index=True
    )
    layout_preset = db.Column(db.String(20), nullable=False, default=LayoutPreset.FULLSCREEN.value)
    is_active = db.Column(db.Boolean, nullable=False, default=True, index=True)
    active_from = db.Column(DateTimeUTC(), nullable=True)
    active_to = db.Column(DateTimeUTC(), nullable=True)
    created_at = db.Column(DateTimeUTC(), default=utcnow, index=True)
    updated_at = db.Column(DateTimeUTC(), default=utcnow, onupdate=utcnow)

    # Relationships
    display = db.relationship('Display', backref=db.backref('assignments', lazy='dynamic', cascade='all, delete-orphan'))
    playlist = db.relationship('Playlist', backref=db.backref('assignments', lazy='dynamic', cascade='all, delete-orphan'))

    @classmethod
    def get_active_for_display(cls, display_id):
        """
        Get all assignments flagged active for a display.

        Only the is_active flag is consulted; active_from / active_to are
        not evaluated. Results are ordered oldest first.

        Args:
            display_id: The display ID to filter by

        Returns:
            list: DisplayAssignment instances
        """
        return cls.query.filter_by(display_id=display_id, is_active=True).order_by(
            cls.created_at.asc(),
            cls.id.asc(),
        ).all()

    def to_dict(self):
        """
        Serialize the assignment to a dictionary for API responses.

        Returns:
            Dictionary containing all assignment fields
        """
        return {
            'id': self.id,
            'display_id': self.display_id,
            'playlist_id': self.playlist_id,
            'layout_preset': self.layout_preset,
            'is_active': self.is_active,
            'active_from': isoformat(self.active_from),
            'active_to': isoformat(self.active_to),
            'created_at': isoformat(self.created_at),
            'updated_at': isoformat(self.updated_at),
        }

    def to_dict_with_relations(self):
        """
        Serialize the assignment with related display and playlist info.

        Returns:
            Dictionary containing assignment fields with nested display and playlist
        """
        result = self.to_dict()
        result['display'] = self.display.to_dict() if self.display else None
        result['playlist'] = self.playlist.to_dict() if self.playlist else None
        return result

    def __repr__(self):
        """String representation for debugging."""
        return f'<DisplayAssignment display={self.display_id} playlist={self.playlist_id}>'
