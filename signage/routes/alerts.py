"""
Signage Alerts Routes

Blueprint for alert management API endpoints:
- GET /: List alerts
- POST /: Create alert
- PATCH /<alert_id>: Update alert
- DELETE /<alert_id>: Delete alert
- POST /<alert_id>/activate: Show alert on every display
- POST /<alert_id>/deactivate: Withdraw alert

Active alerts are broadcast to every display on its next content poll.
Reads need any role; writes need EDITOR. All endpoints are prefixed with
/api/v1/alerts when registered with the app.
"""

from flask import Blueprint, request, jsonify

from signage.models import db, Alert, AlertLevel
from signage.utils.auth import login_required, get_current_user
from signage.utils.audit import log_action
from signage.utils.permissions import require_editor
from signage.utils.validation import (
    json_body,
    PayloadError,
    parse_bool,
    parse_datetime,
    parse_enum,
    parse_string,
    check_window,
)


# Create alerts blueprint
alerts_bp = Blueprint('alerts', __name__)


def _apply_alert_fields(alert, data):
    """
    Copy the editable alert fields present in ``data``.

    Raises:
        PayloadError: If any field is invalid
    """
    if 'title' in data:
        alert.title = parse_string(data['title'], 'title', 200, required=True)
    if 'message' in data:
        alert.message = parse_string(data['message'], 'message', 5000, required=True)
    if 'level' in data:
        alert.level = parse_enum(data['level'], AlertLevel, 'level')
    if 'is_active' in data:
        alert.is_active = parse_bool(data['is_active'], 'is_active')
    if 'starts_at' in data:
        starts_at = parse_datetime(data['starts_at'], 'starts_at')
        if starts_at is None:
            raise PayloadError('starts_at cannot be cleared')
        alert.starts_at = starts_at
    if 'ends_at' in data:
        alert.ends_at = parse_datetime(data['ends_at'], 'ends_at')

    check_window(alert.starts_at, alert.ends_at, 'starts_at', 'ends_at')


@alerts_bp.route('', methods=['GET'])
@login_required
def list_alerts():
    """
    List alerts, newest first.

    Query Parameters:
        active: "true" to list only active alerts

    Returns:
        200:
            {
                "alerts": [ { alert data }, ... ],
                "count": 1
            }
    """
    if request.args.get('active', '').lower() == 'true':
        alerts = Alert.get_active()
    else:
        alerts = Alert.query.order_by(Alert.created_at.desc()).all()

    return jsonify({
        'alerts': [alert.to_dict() for alert in alerts],
        'count': len(alerts)
    }), 200


@alerts_bp.route('', methods=['POST'])
@login_required
@require_editor
def create_alert():
    """
    Create an alert. New alerts are active unless is_active is false.

    Request Body:
        {
            "title": "Fire drill" (required),
            "message": "Proceed to the nearest exit" (required),
            "level": "INFO" | "WARNING" | "EMERGENCY",
            "is_active": true,
            "starts_at": "2024-01-15T10:00:00Z",
            "ends_at": "2024-01-15T11:00:00Z"
        }

    Returns:
        201: { alert data }
        400: Missing or invalid field
    """
    data = json_body()

    if not data:
        return jsonify({'error': 'Request body is required'}), 400

    if not data.get('title'):
        return jsonify({'error': 'title is required'}), 400
    if not data.get('message'):
        return jsonify({'error': 'message is required'}), 400

    user = get_current_user()
    alert = Alert(
        level=AlertLevel.INFO.value,
        is_active=True,
        created_by=user.id if user else None
    )
    try:
        _apply_alert_fields(alert, data)
    except PayloadError as e:
        return jsonify({'error': str(e)}), 400

    try:
        db.session.add(alert)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        return jsonify({'error': f'Failed to create alert: {str(e)}'}), 500

    log_action(
        action='alert.create',
        entity_type='alert',
        entity_id=alert.id,
        details={'title': alert.title, 'level': alert.level, 'is_active': alert.is_active}
    )

    return jsonify(alert.to_dict()), 201


@alerts_bp.route('/<alert_id>', methods=['PATCH'])
@login_required
@require_editor
def update_alert(alert_id):
    """
    Update an alert. Only the fields present in the body change.

    Returns:
        200: { alert data }
        400: Invalid field
        404: Alert not found
    """
    alert = db.session.get(Alert, alert_id)

    if not alert:
        return jsonify({'error': 'Alert not found'}), 404

    data = json_body()
    if not data:
        return jsonify({'error': 'Request body is required'}), 400

    try:
        _apply_alert_fields(alert, data)
    except PayloadError as e:
        db.session.rollback()
        return jsonify({'error': str(e)}), 400

    try:
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        return jsonify({'error': f'Failed to update alert: {str(e)}'}), 500

    log_action(
        action='alert.update',
        entity_type='alert',
        entity_id=alert.id,
        details={'fields': sorted(data.keys())}
    )

    return jsonify(alert.to_dict()), 200


@alerts_bp.route('/<alert_id>', methods=['DELETE'])
@login_required
@require_editor
def delete_alert(alert_id):
    """
    Delete an alert.

    Returns:
        200: Alert deleted
            {
                "message": "Alert deleted successfully",
                "id": "uuid"
            }
        404: Alert not found
    """
    alert = db.session.get(Alert, alert_id)

    if not alert:
        return jsonify({'error': 'Alert not found'}), 404

    title = alert.title

    try:
        db.session.delete(alert)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        return jsonify({'error': f'Failed to delete alert: {str(e)}'}), 500

    log_action(
        action='alert.delete',
        entity_type='alert',
        entity_id=alert_id,
        details={'title': title}
    )

    return jsonify({
        'message': 'Alert deleted successfully',
        'id': alert_id
    }), 200


def _set_alert_active(alert_id, is_active):
    """Shared body of the activate / deactivate endpoints."""
    alert = db.session.get(Alert, alert_id)

    if not alert:
        return jsonify({'error': 'Alert not found'}), 404

    try:
        alert.is_active = is_active
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        return jsonify({'error': f'Failed to update alert: {str(e)}'}), 500

    log_action(
        action='alert.activate' if is_active else 'alert.deactivate',
        entity_type='alert',
        entity_id=alert.id,
        details={'title': alert.title, 'level': alert.level}
    )

    return jsonify(alert.to_dict()), 200


@alerts_bp.route('/<alert_id>/activate', methods=['POST'])
@login_required
@require_editor
def activate_alert(alert_id):
    """
    Activate an alert.

    Returns:
        200: { alert data }
        404: Alert not found
    """
    return _set_alert_active(alert_id, True)


@alerts_bp.route('/<alert_id>/deactivate', methods=['POST'])
@login_required
@require_editor
def deactivate_alert(alert_id):
    """
    Deactivate an alert.

    Returns:
        200: { alert data }
        404: Alert not found
    """
    return _set_alert_active(alert_id, False)
