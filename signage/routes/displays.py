"""
Signage Displays Routes

Blueprint for display management API endpoints:
- GET /: List all displays
- POST /: Register a new display
- GET /<display_id>: Get display details
- PATCH /<display_id>: Update display
- DELETE /<display_id>: Delete display
- POST /<display_id>/rotate-key: Issue a new secret key

Reads need any role; writes need ADMIN. All endpoints are prefixed with
/api/v1/displays when registered with the app.
"""

from flask import Blueprint, jsonify

from signage.models import db, Display
from signage.utils.auth import login_required
from signage.utils.audit import log_action
from signage.utils.permissions import require_admin
from signage.utils.validation import PayloadError, json_body, parse_bool, parse_string


# Create displays blueprint
displays_bp = Blueprint('displays', __name__)


def _apply_display_fields(display, data):
    """Copy the editable display fields present in ``data``, validating each."""
    if 'name' in data:
        display.name = parse_string(data['name'], 'name', 200, required=True)
    if 'location' in data:
        display.location = parse_string(data['location'], 'location', 200)
    if 'timezone' in data:
        display.timezone = parse_string(data['timezone'], 'timezone', 64, required=True)
    if 'theme_color' in data:
        display.theme_color = parse_string(data['theme_color'], 'theme_color', 20, required=True)
    if 'logo_url' in data:
        display.logo_url = parse_string(data['logo_url'], 'logo_url', 500)
    if 'is_active' in data:
        display.is_active = parse_bool(data['is_active'], 'is_active')


@displays_bp.route('', methods=['GET'])
@login_required
def list_displays():
    """
    List all displays, newest first.

    Returns:
        200: List of displays
            {
                "displays": [ { display data }, ... ],
                "count": 3
            }
    """
    displays = Display.query.order_by(Display.created_at.desc()).all()

    return jsonify({
        'displays': [display.to_dict() for display in displays],
        'count': len(displays)
    }), 200


@displays_bp.route('', methods=['POST'])
@login_required
@require_admin
def create_display():
    """
    Register a new display. The secret key is generated server-side.

    Request Body:
        {
            "name": "Main Hallway" (required),
            "location": "Building A, floor 1",
            "timezone": "America/New_York",
            "theme_color": "#1e40af",
            "logo_url": "https://...",
            "is_active": true
        }

    Returns:
        201: Display created
            { display data, including secret_key }
        400: Missing or invalid field
            {
                "error": "error message"
            }
    """
    data = json_body()

    if not data:
        return jsonify({'error': 'Request body is required'}), 400

    if not data.get('name'):
        return jsonify({'error': 'name is required'}), 400

    display = Display()
    try:
        _apply_display_fields(display, data)
    except PayloadError as e:
        return jsonify({'error': str(e)}), 400

    try:
        db.session.add(display)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        return jsonify({'error': f'Failed to create display: {str(e)}'}), 500

    log_action(
        action='display.create',
        entity_type='display',
        entity_id=display.id,
        details={'name': display.name, 'location': display.location}
    )

    return jsonify(display.to_dict()), 201


@displays_bp.route('/<display_id>', methods=['GET'])
@login_required
def get_display(display_id):
    """
    Get a display by ID.

    Returns:
        200: { display data }
        404: Display not found
    """
    display = db.session.get(Display, display_id)

    if not display:
        return jsonify({'error': 'Display not found'}), 404

    return jsonify(display.to_dict()), 200


@displays_bp.route('/<display_id>', methods=['PATCH'])
@login_required
@require_admin
def update_display(display_id):
    """
    Update a display. Only the fields present in the body change.

    Request Body:
        {
            "name": "New name",
            "location": "...",
            "timezone": "...",
            "theme_color": "...",
            "logo_url": "...",
            "is_active": false
        }

    Returns:
        200: { updated display data }
        400: Invalid field
        404: Display not found
    """
    display = db.session.get(Display, display_id)

    if not display:
        return jsonify({'error': 'Display not found'}), 404

    data = json_body()
    if not data:
        return jsonify({'error': 'Request body is required'}), 400

    try:
        _apply_display_fields(display, data)
    except PayloadError as e:
        db.session.rollback()
        return jsonify({'error': str(e)}), 400

    try:
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        return jsonify({'error': f'Failed to update display: {str(e)}'}), 500

    log_action(
        action='display.update',
        entity_type='display',
        entity_id=display.id,
        details={'fields': sorted(data.keys())}
    )

    return jsonify(display.to_dict()), 200


@displays_bp.route('/<display_id>', methods=['DELETE'])
@login_required
@require_admin
def delete_display(display_id):
    """
    Delete a display and its assignments.

    Returns:
        200: Display deleted
            {
                "message": "Display deleted successfully",
                "id": "uuid"
            }
        404: Display not found
    """
    display = db.session.get(Display, display_id)

    if not display:
        return jsonify({'error': 'Display not found'}), 404

    display_name = display.name

    try:
        db.session.delete(display)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        return jsonify({'error': f'Failed to delete display: {str(e)}'}), 500

    log_action(
        action='display.delete',
        entity_type='display',
        entity_id=display_id,
        details={'name': display_name}
    )

    return jsonify({
        'message': 'Display deleted successfully',
        'id': display_id
    }), 200


@displays_bp.route('/<display_id>/rotate-key', methods=['POST'])
@login_required
@require_admin
def rotate_display_key(display_id):
    """
    Replace a display's secret key. The old key stops working immediately.

    Returns:
        200: { display data with the new secret_key }
        404: Display not found
    """
    display = db.session.get(Display, display_id)

    if not display:
        return jsonify({'error': 'Display not found'}), 404

    try:
        display.rotate_secret_key()
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        return jsonify({'error': f'Failed to rotate key: {str(e)}'}), 500

    log_action(
        action='display.rotate_key',
        entity_type='display',
        entity_id=display.id
    )

    return jsonify(display.to_dict()), 200
