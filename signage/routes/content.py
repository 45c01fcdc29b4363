"""
Signage Content Routes

Blueprint for content item management API endpoints:
- GET /: List content items (filter by status, type)
- POST /: Create content item
- GET /<content_id>: Get content item
- PATCH /<content_id>: Update content item
- DELETE /<content_id>: Delete content item

Reads need any role; writes need EDITOR. All endpoints are prefixed with
/api/v1/content when registered with the app.
"""

from flask import Blueprint, request, jsonify

from signage.models import db, ContentItem, ContentType, ContentStatus
from signage.utils.auth import login_required, get_current_user
from signage.utils.audit import log_action
from signage.utils.permissions import require_editor
from signage.utils.validation import (
    json_body,
    PayloadError,
    parse_datetime,
    parse_enum,
    parse_int,
    parse_string,
    check_window,
)


# Create content blueprint
content_bp = Blueprint('content', __name__)


def _apply_content_fields(item, data):
    """
    Copy the editable content fields present in ``data`` onto ``item``.

    The publication window is checked against the resulting values, so a
    PATCH that only moves end_at is still compared to the stored start_at.

    Raises:
        PayloadError: If any field is invalid
    """
    if 'type' in data:
        item.type = parse_enum(data['type'], ContentType, 'type')
    if 'title' in data:
        item.title = parse_string(data['title'], 'title', 300, required=True)
    if 'body' in data:
        item.body = parse_string(data['body'], 'body', 100000)
    if 'media_url' in data:
        item.media_url = parse_string(data['media_url'], 'media_url', 1000)
    if 'duration_seconds' in data:
        item.duration_seconds = parse_int(data['duration_seconds'], 'duration_seconds', minimum=1)
    if 'priority' in data:
        item.priority = parse_int(data['priority'], 'priority')
    if 'status' in data:
        item.status = parse_enum(data['status'], ContentStatus, 'status')
    if 'start_at' in data:
        item.start_at = parse_datetime(data['start_at'], 'start_at')
    if 'end_at' in data:
        item.end_at = parse_datetime(data['end_at'], 'end_at')

    check_window(item.start_at, item.end_at, 'start_at', 'end_at')


@content_bp.route('', methods=['GET'])
@login_required
def list_content():
    """
    List content items, newest first.

    Query Parameters:
        status: Filter by status (DRAFT, PUBLISHED, ARCHIVED)
        type: Filter by content type

    Returns:
        200: List of content items
            {
                "content": [ { content data }, ... ],
                "count": 5
            }
        400: Invalid filter value
    """
    query = ContentItem.query

    try:
        status = request.args.get('status')
        if status:
            query = query.filter_by(status=parse_enum(status, ContentStatus, 'status'))

        content_type = request.args.get('type')
        if content_type:
            query = query.filter_by(type=parse_enum(content_type, ContentType, 'type'))
    except PayloadError as e:
        return jsonify({'error': str(e)}), 400

    items = query.order_by(ContentItem.created_at.desc()).all()

    return jsonify({
        'content': [item.to_dict() for item in items],
        'count': len(items)
    }), 200


@content_bp.route('', methods=['POST'])
@login_required
@require_editor
def create_content():
    """
    Create a content item.

    Request Body:
        {
            "type": "ANNOUNCEMENT" (required),
            "title": "Picture day" (required),
            "body": "Bring your best smile",
            "media_url": "https://...",
            "duration_seconds": 10,
            "start_at": "2024-01-15T10:00:00Z",
            "end_at": "2024-01-20T10:00:00Z",
            "priority": 0,
            "status": "DRAFT"
        }

    Returns:
        201: { content data }
        400: Missing or invalid field
            {
                "error": "error message"
            }
    """
    data = json_body()

    if not data:
        return jsonify({'error': 'Request body is required'}), 400

    if not data.get('type'):
        return jsonify({'error': 'type is required'}), 400
    if not data.get('title'):
        return jsonify({'error': 'title is required'}), 400

    user = get_current_user()
    item = ContentItem(
        duration_seconds=10,
        priority=0,
        status=ContentStatus.DRAFT.value,
        created_by=user.id if user else None
    )
    try:
        _apply_content_fields(item, data)
    except PayloadError as e:
        return jsonify({'error': str(e)}), 400

    try:
        db.session.add(item)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        return jsonify({'error': f'Failed to create content: {str(e)}'}), 500

    log_action(
        action='content_item.create',
        entity_type='content_item',
        entity_id=item.id,
        details={'title': item.title, 'type': item.type, 'status': item.status}
    )

    return jsonify(item.to_dict()), 201


@content_bp.route('/<content_id>', methods=['GET'])
@login_required
def get_content(content_id):
    """
    Get a content item by ID.

    Returns:
        200: { content data }
        404: Content not found
    """
    item = db.session.get(ContentItem, content_id)

    if not item:
        return jsonify({'error': 'Content not found'}), 404

    return jsonify(item.to_dict()), 200


@content_bp.route('/<content_id>', methods=['PATCH'])
@login_required
@require_editor
def update_content(content_id):
    """
    Update a content item. Only the fields present in the body change;
    send null to clear an optional field.

    Returns:
        200: { updated content data }
        400: Invalid field
        404: Content not found
    """
    item = db.session.get(ContentItem, content_id)

    if not item:
        return jsonify({'error': 'Content not found'}), 404

    data = json_body()
    if not data:
        return jsonify({'error': 'Request body is required'}), 400

    previous_status = item.status
    try:
        _apply_content_fields(item, data)
    except PayloadError as e:
        db.session.rollback()
        return jsonify({'error': str(e)}), 400

    try:
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        return jsonify({'error': f'Failed to update content: {str(e)}'}), 500

    details = {'fields': sorted(data.keys())}
    if item.status != previous_status:
        details['status'] = {'from': previous_status, 'to': item.status}

    log_action(
        action='content_item.update',
        entity_type='content_item',
        entity_id=item.id,
        details=details
    )

    return jsonify(item.to_dict()), 200


@content_bp.route('/<content_id>', methods=['DELETE'])
@login_required
@require_editor
def delete_content(content_id):
    """
    Delete a content item. It is removed from every playlist.

    Returns:
        200: Content deleted
            {
                "message": "Content deleted successfully",
                "id": "uuid"
            }
        404: Content not found
    """
    item = db.session.get(ContentItem, content_id)

    if not item:
        return jsonify({'error': 'Content not found'}), 404

    title = item.title

    try:
        db.session.delete(item)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        return jsonify({'error': f'Failed to delete content: {str(e)}'}), 500

    log_action(
        action='content_item.delete',
        entity_type='content_item',
        entity_id=content_id,
        details={'title': title}
    )

    return jsonify({
        'message': 'Content deleted successfully',
        'id': content_id
    }), 200
