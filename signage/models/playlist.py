"""
Playlist Model for Signage Server.

Represents playlists and their ordered items:
- Playlist metadata: name, description
- Playlist items: content references ordered by order_index
"""

import uuid

from signage.models import db, DateTimeUTC, utcnow, isoformat


class Playlist(db.Model):
    """
    SQLAlchemy model representing a playlist.

    A playlist is a named, ordered collection of content items that can be
    assigned to displays.

    Attributes:
        id: Unique UUID identifier
        name: Human-readable playlist name
        description: Optional detailed description
        created_by: ID of the user who created the playlist
        created_at: Timestamp when the playlist was created
        updated_at: Timestamp when the playlist was last modified
    """

    __tablename__ = 'playlists'

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)
    created_by = db.Column(db.String(36), db.ForeignKey('users.id', ondelete='SET NULL'), nullable=True)
    created_at = db.Column(DateTimeUTC(), default=utcnow, index=True)
    updated_at = db.Column(DateTimeUTC(), default=utcnow, onupdate=utcnow)

    # Relationships
    items = db.relationship(
        'PlaylistItem',
        backref='playlist',
        lazy='dynamic',
        cascade='all, delete-orphan',
        order_by='PlaylistItem.order_index'
    )

    def ordered_items(self):
        """
        Get the playlist items in render order.

        Items are ordered by order_index ascending; equal indexes keep
        insertion order.

        Returns:
            list: PlaylistItem instances
        """
        return PlaylistItem.query.filter_by(playlist_id=self.id).order_by(
            PlaylistItem.order_index.asc(),
            PlaylistItem.created_at.asc(),
        ).all()

    def next_order_index(self):
        """Order index that appends a new item after the current last one."""
        last = db.session.query(db.func.max(PlaylistItem.order_index)).filter(
            PlaylistItem.playlist_id == self.id
        ).scalar()
        return 0 if last is None else last + 1

    def to_dict(self):
        """
        Serialize the playlist to a dictionary for API responses.

        Returns:
            Dictionary containing all playlist fields
        """
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'created_by': self.created_by,
            'created_at': isoformat(self.created_at),
            'updated_at': isoformat(self.updated_at),
            'item_count': self.items.count(),
        }

    def to_dict_with_items(self):
        """
        Serialize the playlist with all items for detailed API responses.

        Returns:
            Dictionary containing playlist fields and all items
        """
        result = self.to_dict()
        result['items'] = [item.to_dict() for item in self.ordered_items()]
        return result

    def __repr__(self):
        """String representation for debugging."""
        return f'<Playlist {self.name}>'


class PlaylistItem(db.Model):
    """
    SQLAlchemy model representing an item in a playlist.

    Playlist items link content items to playlists. order_index values do
    not need to be contiguous; lower values render first.

    Attributes:
        id: Unique UUID identifier
        playlist_id: Foreign key reference to the parent playlist
        content_item_id: Foreign key reference to the content item
        order_index: Position of the item within the playlist
        created_at: Timestamp when the item was added
    """

    __tablename__ = 'playlist_items'

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    playlist_id = db.Column(
        db.String(36),
        db.ForeignKey('playlists.id', ondelete='CASCADE'),
        nullable=False,
        index=True
    )
    content_item_id = db.Column(
        db.String(36),
        db.ForeignKey('content_items.id', ondelete='CASCADE'),
        nullable=False,
        index=True
    )
    order_index = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(DateTimeUTC(), default=utcnow)

    # Relationships
    content_item = db.relationship(
        'ContentItem',
        backref=db.backref('playlist_items', lazy='dynamic', cascade='all, delete-orphan')
    )

    def to_dict(self):
        """
        Serialize the playlist item to a dictionary for API responses.

        Returns:
            Dictionary containing all playlist item fields and its content
        """
        return {
            'id': self.id,
            'playlist_id': self.playlist_id,
            'content_item_id': self.content_item_id,
            'order_index': self.order_index,
            'created_at': isoformat(self.created_at),
            'content_item': self.content_item.to_dict() if self.content_item else None,
        }

    def __repr__(self):
        """String representation for debugging."""
        return f'<PlaylistItem {self.id} idx={self.order_index}>'
