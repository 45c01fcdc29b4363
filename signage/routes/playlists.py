"""
Signage Playlists Routes

Blueprint for playlist management API endpoints:
- GET /: List all playlists
- POST /: Create playlist
- GET /<playlist_id>: Get playlist with its items
- PATCH /<playlist_id>: Update playlist
- DELETE /<playlist_id>: Delete playlist
- GET /<playlist_id>/items: List playlist items in render order
- POST /<playlist_id>/items: Add a content item to the playlist
- DELETE /<playlist_id>/items/<item_id>: Remove item from playlist
- PUT /<playlist_id>/items/reorder: Reorder playlist items

Reads need any role; writes need EDITOR. All endpoints are prefixed with
/api/v1/playlists when registered with the app.
"""

from flask import Blueprint, jsonify

from signage.models import db, Playlist, PlaylistItem, ContentItem
from signage.utils.auth import login_required, get_current_user
from signage.utils.audit import log_action
from signage.utils.permissions import require_editor
from signage.utils.validation import PayloadError, json_body, parse_int, parse_string


# Create playlists blueprint
playlists_bp = Blueprint('playlists', __name__)


@playlists_bp.route('', methods=['GET'])
@login_required
def list_playlists():
    """
    List all playlists, newest first.

    Returns:
        200: List of playlists
            {
                "playlists": [ { playlist data }, ... ],
                "count": 2
            }
    """
    playlists = Playlist.query.order_by(Playlist.created_at.desc()).all()

    return jsonify({
        'playlists': [playlist.to_dict() for playlist in playlists],
        'count': len(playlists)
    }), 200


@playlists_bp.route('', methods=['POST'])
@login_required
@require_editor
def create_playlist():
    """
    Create a new playlist.

    Request Body:
        {
            "name": "Morning loop" (required),
            "description": "Optional description"
        }

    Returns:
        201: { playlist data }
        400: Missing or invalid field
    """
    data = json_body()

    if not data:
        return jsonify({'error': 'Request body is required'}), 400

    try:
        name = parse_string(data.get('name'), 'name', 200, required=True)
        description = parse_string(data.get('description'), 'description', 5000)
    except PayloadError as e:
        return jsonify({'error': str(e)}), 400

    user = get_current_user()
    playlist = Playlist(
        name=name,
        description=description,
        created_by=user.id if user else None
    )

    try:
        db.session.add(playlist)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        return jsonify({'error': f'Failed to create playlist: {str(e)}'}), 500

    log_action(
        action='playlist.create',
        entity_type='playlist',
        entity_id=playlist.id,
        details={'name': playlist.name}
    )

    return jsonify(playlist.to_dict()), 201


@playlists_bp.route('/<playlist_id>', methods=['GET'])
@login_required
def get_playlist(playlist_id):
    """
    Get a playlist by ID, including its items in render order.

    Returns:
        200: { playlist data with items }
        404: Playlist not found
    """
    playlist = db.session.get(Playlist, playlist_id)

    if not playlist:
        return jsonify({'error': 'Playlist not found'}), 404

    return jsonify(playlist.to_dict_with_items()), 200


@playlists_bp.route('/<playlist_id>', methods=['PATCH'])
@login_required
@require_editor
def update_playlist(playlist_id):
    """
    Update a playlist's name or description.

    Request Body:
        {
            "name": "New name",
            "description": "New description"
        }

    Returns:
        200: { updated playlist data }
        400: Invalid field
        404: Playlist not found
    """
    playlist = db.session.get(Playlist, playlist_id)

    if not playlist:
        return jsonify({'error': 'Playlist not found'}), 404

    data = json_body()
    if not data:
        return jsonify({'error': 'Request body is required'}), 400

    try:
        if 'name' in data:
            playlist.name = parse_string(data['name'], 'name', 200, required=True)
        if 'description' in data:
            playlist.description = parse_string(data['description'], 'description', 5000)
    except PayloadError as e:
        db.session.rollback()
        return jsonify({'error': str(e)}), 400

    try:
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        return jsonify({'error': f'Failed to update playlist: {str(e)}'}), 500

    log_action(
        action='playlist.update',
        entity_type='playlist',
        entity_id=playlist.id,
        details={'fields': sorted(data.keys())}
    )

    return jsonify(playlist.to_dict()), 200


@playlists_bp.route('/<playlist_id>', methods=['DELETE'])
@login_required
@require_editor
def delete_playlist(playlist_id):
    """
    Delete a playlist with its items and display assignments.

    Returns:
        200: Playlist deleted
            {
                "message": "Playlist deleted successfully",
                "id": "uuid"
            }
        404: Playlist not found
    """
    playlist = db.session.get(Playlist, playlist_id)

    if not playlist:
        return jsonify({'error': 'Playlist not found'}), 404

    playlist_name = playlist.name

    try:
        db.session.delete(playlist)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        return jsonify({'error': f'Failed to delete playlist: {str(e)}'}), 500

    log_action(
        action='playlist.delete',
        entity_type='playlist',
        entity_id=playlist_id,
        details={'name': playlist_name}
    )

    return jsonify({
        'message': 'Playlist deleted successfully',
        'id': playlist_id
    }), 200


@playlists_bp.route('/<playlist_id>/items', methods=['GET'])
@login_required
def list_playlist_items(playlist_id):
    """
    List the items of a playlist in render order.

    Returns:
        200:
            {
                "items": [ { playlist item data }, ... ],
                "count": 3
            }
        404: Playlist not found
    """
    playlist = db.session.get(Playlist, playlist_id)

    if not playlist:
        return jsonify({'error': 'Playlist not found'}), 404

    items = playlist.ordered_items()

    return jsonify({
        'items': [item.to_dict() for item in items],
        'count': len(items)
    }), 200


@playlists_bp.route('/<playlist_id>/items', methods=['POST'])
@login_required
@require_editor
def add_playlist_item(playlist_id):
    """
    Add a content item to a playlist.

    The same content item may appear in a playlist more than once.

    Request Body:
        {
            "content_item_id": "uuid" (required),
            "order_index": 2 (optional, defaults to after the last item)
        }

    Returns:
        201: { playlist item data }
        400: Missing or invalid field, or unknown content item
        404: Playlist not found
    """
    playlist = db.session.get(Playlist, playlist_id)

    if not playlist:
        return jsonify({'error': 'Playlist not found'}), 404

    data = json_body()
    if not data:
        return jsonify({'error': 'Request body is required'}), 400

    content_item_id = data.get('content_item_id')
    if not content_item_id:
        return jsonify({'error': 'content_item_id is required'}), 400

    content_item = db.session.get(ContentItem, content_item_id)
    if not content_item:
        return jsonify({
            'error': f'Content item with id {content_item_id} not found'
        }), 400

    if data.get('order_index') is None:
        order_index = playlist.next_order_index()
    else:
        try:
            order_index = parse_int(data['order_index'], 'order_index', minimum=0)
        except PayloadError as e:
            return jsonify({'error': str(e)}), 400

    item = PlaylistItem(
        playlist_id=playlist.id,
        content_item_id=content_item.id,
        order_index=order_index
    )

    try:
        db.session.add(item)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        return jsonify({'error': f'Failed to add item: {str(e)}'}), 500

    log_action(
        action='playlist_item.create',
        entity_type='playlist_item',
        entity_id=item.id,
        details={
            'playlist_id': playlist.id,
            'content_item_id': content_item.id,
            'order_index': order_index
        }
    )

    return jsonify(item.to_dict()), 201


@playlists_bp.route('/<playlist_id>/items/<item_id>', methods=['DELETE'])
@login_required
@require_editor
def remove_playlist_item(playlist_id, item_id):
    """
    Remove an item from a playlist. The content item itself is kept.

    Returns:
        200: Item removed
            {
                "message": "Item removed from playlist",
                "id": "uuid"
            }
        404: Playlist or item not found
    """
    playlist = db.session.get(Playlist, playlist_id)

    if not playlist:
        return jsonify({'error': 'Playlist not found'}), 404

    item = PlaylistItem.query.filter_by(id=item_id, playlist_id=playlist_id).first()
    if not item:
        return jsonify({'error': 'Playlist item not found'}), 404

    try:
        db.session.delete(item)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        return jsonify({'error': f'Failed to remove item: {str(e)}'}), 500

    log_action(
        action='playlist_item.delete',
        entity_type='playlist_item',
        entity_id=item_id,
        details={'playlist_id': playlist_id}
    )

    return jsonify({
        'message': 'Item removed from playlist',
        'id': item_id
    }), 200


@playlists_bp.route('/<playlist_id>/items/reorder', methods=['PUT'])
@login_required
@require_editor
def reorder_playlist_items(playlist_id):
    """
    Reorder the items of a playlist.

    The body must list every item of the playlist exactly once; items get
    order_index 0..n-1 in the given order.

    Request Body:
        {
            "item_ids": ["uuid-3", "uuid-1", "uuid-2"] (required)
        }

    Returns:
        200: { playlist data with items }
        400: item_ids missing, duplicated, or not matching the playlist
        404: Playlist not found
    """
    playlist = db.session.get(Playlist, playlist_id)

    if not playlist:
        return jsonify({'error': 'Playlist not found'}), 404

    data = json_body()
    if not data:
        return jsonify({'error': 'Request body is required'}), 400

    item_ids = data.get('item_ids')
    if not isinstance(item_ids, list) or not all(isinstance(i, str) for i in item_ids):
        return jsonify({'error': 'item_ids must be a list of item IDs'}), 400

    if len(set(item_ids)) != len(item_ids):
        return jsonify({'error': 'item_ids contains duplicates'}), 400

    items_by_id = {item.id: item for item in playlist.ordered_items()}
    if set(item_ids) != set(items_by_id):
        return jsonify({
            'error': 'item_ids must contain every item of the playlist exactly once'
        }), 400

    try:
        for index, item_id in enumerate(item_ids):
            items_by_id[item_id].order_index = index
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        return jsonify({'error': f'Failed to reorder items: {str(e)}'}), 500

    log_action(
        action='playlist.reorder_items',
        entity_type='playlist',
        entity_id=playlist.id,
        details={'item_ids': item_ids}
    )

    return jsonify(playlist.to_dict_with_items()), 200
