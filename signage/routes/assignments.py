"""
Signage Assignments Routes

Blueprint for display assignment API endpoints:
- GET /: List assignments with display and playlist
- POST /: Assign a playlist to a display
- PATCH /<assignment_id>: Update assignment
- PATCH /<assignment_id>/active: Toggle the active flag
- DELETE /<assignment_id>: Delete assignment

Reads need any role; writes need EDITOR. All endpoints are prefixed with
/api/v1/assignments when registered with the app.
"""

from flask import Blueprint, request, jsonify

from signage.models import db, Display, Playlist, DisplayAssignment, LayoutPreset
from signage.utils.auth import login_required
from signage.utils.audit import log_action
from signage.utils.permissions import require_editor
from signage.utils.validation import (
    json_body,
    PayloadError,
    parse_bool,
    parse_datetime,
    parse_enum,
    check_window,
)


# Create assignments blueprint
assignments_bp = Blueprint('assignments', __name__)


def _apply_assignment_fields(assignment, data):
    """
    Copy the editable assignment fields present in ``data``.

    Raises:
        PayloadError: If any field is invalid
    """
    if 'layout_preset' in data:
        assignment.layout_preset = parse_enum(data['layout_preset'], LayoutPreset, 'layout_preset')
    if 'is_active' in data:
        assignment.is_active = parse_bool(data['is_active'], 'is_active')
    if 'active_from' in data:
        assignment.active_from = parse_datetime(data['active_from'], 'active_from')
    if 'active_to' in data:
        assignment.active_to = parse_datetime(data['active_to'], 'active_to')

    check_window(assignment.active_from, assignment.active_to, 'active_from', 'active_to')


@assignments_bp.route('', methods=['GET'])
@login_required
def list_assignments():
    """
    List assignments, newest first.

    Query Parameters:
        display_id: Filter by display
        playlist_id: Filter by playlist

    Returns:
        200:
            {
                "assignments": [ { assignment data with display and playlist }, ... ],
                "count": 2
            }
    """
    query = DisplayAssignment.query

    display_id = request.args.get('display_id')
    if display_id:
        query = query.filter_by(display_id=display_id)

    playlist_id = request.args.get('playlist_id')
    if playlist_id:
        query = query.filter_by(playlist_id=playlist_id)

    assignments = query.order_by(DisplayAssignment.created_at.desc()).all()

    return jsonify({
        'assignments': [a.to_dict_with_relations() for a in assignments],
        'count': len(assignments)
    }), 200


@assignments_bp.route('', methods=['POST'])
@login_required
@require_editor
def create_assignment():
    """
    Assign a playlist to a display.

    Request Body:
        {
            "display_id": "uuid" (required),
            "playlist_id": "uuid" (required),
            "layout_preset": "fullscreen" | "grid" | "ticker",
            "is_active": true,
            "active_from": "2024-01-15T10:00:00Z",
            "active_to": "2024-01-20T10:00:00Z"
        }

    Returns:
        201: { assignment data with display and playlist }
        400: Missing or invalid field, unknown display or playlist
    """
    data = json_body()

    if not data:
        return jsonify({'error': 'Request body is required'}), 400

    display_id = data.get('display_id')
    if not display_id:
        return jsonify({'error': 'display_id is required'}), 400

    playlist_id = data.get('playlist_id')
    if not playlist_id:
        return jsonify({'error': 'playlist_id is required'}), 400

    if not db.session.get(Display, display_id):
        return jsonify({'error': f'Display with id {display_id} not found'}), 400

    if not db.session.get(Playlist, playlist_id):
        return jsonify({'error': f'Playlist with id {playlist_id} not found'}), 400

    assignment = DisplayAssignment(
        display_id=display_id,
        playlist_id=playlist_id,
        layout_preset=LayoutPreset.FULLSCREEN.value,
        is_active=True
    )
    try:
        _apply_assignment_fields(assignment, data)
    except PayloadError as e:
        return jsonify({'error': str(e)}), 400

    try:
        db.session.add(assignment)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        return jsonify({'error': f'Failed to create assignment: {str(e)}'}), 500

    log_action(
        action='assignment.create',
        entity_type='assignment',
        entity_id=assignment.id,
        details={
            'display_id': display_id,
            'playlist_id': playlist_id,
            'layout_preset': assignment.layout_preset
        }
    )

    return jsonify(assignment.to_dict_with_relations()), 201


@assignments_bp.route('/<assignment_id>', methods=['PATCH'])
@login_required
@require_editor
def update_assignment(assignment_id):
    """
    Update an assignment. Only the fields present in the body change.

    Request Body:
        {
            "playlist_id": "uuid",
            "layout_preset": "grid",
            "is_active": false,
            "active_from": "...",
            "active_to": "..."
        }

    Returns:
        200: { assignment data with display and playlist }
        400: Invalid field
        404: Assignment not found
    """
    assignment = db.session.get(DisplayAssignment, assignment_id)

    if not assignment:
        return jsonify({'error': 'Assignment not found'}), 404

    data = json_body()
    if not data:
        return jsonify({'error': 'Request body is required'}), 400

    if 'playlist_id' in data:
        if not data['playlist_id'] or not db.session.get(Playlist, data['playlist_id']):
            return jsonify({'error': f"Playlist with id {data['playlist_id']} not found"}), 400
        assignment.playlist_id = data['playlist_id']

    try:
        _apply_assignment_fields(assignment, data)
    except PayloadError as e:
        db.session.rollback()
        return jsonify({'error': str(e)}), 400

    try:
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        return jsonify({'error': f'Failed to update assignment: {str(e)}'}), 500

    log_action(
        action='assignment.update',
        entity_type='assignment',
        entity_id=assignment.id,
        details={'fields': sorted(data.keys())}
    )

    return jsonify(assignment.to_dict_with_relations()), 200


@assignments_bp.route('/<assignment_id>/active', methods=['PATCH'])
@login_required
@require_editor
def set_assignment_active(assignment_id):
    """
    Turn an assignment on or off.

    Request Body:
        {
            "is_active": true (required)
        }

    Returns:
        200: { assignment data }
        400: is_active missing or not a boolean
        404: Assignment not found
    """
    assignment = db.session.get(DisplayAssignment, assignment_id)

    if not assignment:
        return jsonify({'error': 'Assignment not found'}), 404

    data = json_body() or {}

    try:
        is_active = parse_bool(data.get('is_active'), 'is_active')
    except PayloadError as e:
        return jsonify({'error': str(e)}), 400

    try:
        assignment.is_active = is_active
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        return jsonify({'error': f'Failed to update assignment: {str(e)}'}), 500

    log_action(
        action='assignment.activate' if is_active else 'assignment.deactivate',
        entity_type='assignment',
        entity_id=assignment.id,
        details={'display_id': assignment.display_id}
    )

    return jsonify(assignment.to_dict()), 200


@assignments_bp.route('/<assignment_id>', methods=['DELETE'])
@login_required
@require_editor
def delete_assignment(assignment_id):
    """
    Delete an assignment.

    Returns:
        200: Assignment deleted
            {
                "message": "Assignment deleted successfully",
                "id": "uuid"
            }
        404: Assignment not found
    """
    assignment = db.session.get(DisplayAssignment, assignment_id)

    if not assignment:
        return jsonify({'error': 'Assignment not found'}), 404

    details = {
        'display_id': assignment.display_id,
        'playlist_id': assignment.playlist_id
    }

    try:
        db.session.delete(assignment)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        return jsonify({'error': f'Failed to delete assignment: {str(e)}'}), 500

    log_action(
        action='assignment.delete',
        entity_type='assignment',
        entity_id=assignment_id,
        details=details
    )

    return jsonify({
        'message': 'Assignment deleted successfully',
        'id': assignment_id
    }), 200
