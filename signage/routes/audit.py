"""
Signage Audit Logs Routes

Blueprint for audit log API endpoints:
- GET /: List audit logs, newest first (ADMIN only)
- GET /<log_id>: Get one audit log entry (ADMIN only)
- POST /: Record an audit entry on behalf of the current user

All endpoints are prefixed with /api/v1/audit-logs when registered with the app.
"""

from flask import Blueprint, current_app, request, jsonify

from signage.models import db, AuditLog
from signage.utils.auth import login_required
from signage.utils.audit import log_action, ENTITY_TYPES
from signage.utils.permissions import require_admin
from signage.utils.validation import json_body


# Create audit blueprint
audit_bp = Blueprint('audit', __name__)


@audit_bp.route('', methods=['GET'])
@login_required
@require_admin
def list_audit_logs():
    """
    List audit logs, newest first.

    Query Parameters:
        limit: Maximum entries to return (default 100, max 500)
        entity_type: Filter by entity type
        action: Filter by exact action name
        user_id: Filter by acting user ID

    Returns:
        200:
            {
                "audit_logs": [ { audit log data }, ... ],
                "count": 100
            }
        400: Unknown entity_type
    """
    default_limit = current_app.config['AUDIT_LOG_DEFAULT_LIMIT']
    max_limit = current_app.config['AUDIT_LOG_MAX_LIMIT']

    limit = request.args.get('limit', default_limit, type=int)
    if limit < 1:
        limit = default_limit
    if limit > max_limit:
        limit = max_limit

    query = AuditLog.query

    entity_type = request.args.get('entity_type')
    if entity_type:
        if entity_type not in ENTITY_TYPES:
            return jsonify({
                'error': f'Invalid entity_type. Must be one of: {", ".join(ENTITY_TYPES)}'
            }), 400
        query = query.filter_by(entity_type=entity_type)

    action = request.args.get('action')
    if action:
        query = query.filter_by(action=action)

    user_id = request.args.get('user_id')
    if user_id:
        query = query.filter_by(user_id=user_id)

    logs = query.order_by(AuditLog.created_at.desc()).limit(limit).all()

    return jsonify({
        'audit_logs': [log.to_dict() for log in logs],
        'count': len(logs)
    }), 200


@audit_bp.route('/<log_id>', methods=['GET'])
@login_required
@require_admin
def get_audit_log(log_id):
    """
    Get a specific audit log by ID.

    Returns:
        200: { audit log data }
        404: Audit log not found
    """
    audit_log = db.session.get(AuditLog, log_id)

    if not audit_log:
        return jsonify({'error': 'Audit log not found'}), 404

    return jsonify(audit_log.to_dict()), 200


@audit_bp.route('', methods=['POST'])
@login_required
def create_audit_log():
    """
    Record an audit entry for an action performed by the current user.

    Request Body:
        {
            "action": "display.preview" (required),
            "entity_type": "display" (required),
            "entity_id": "uuid",
            "details": { ... }
        }

    Returns:
        201: { audit log data }
        400: Missing or invalid field
        500: Entry could not be stored
    """
    data = json_body()

    if not data:
        return jsonify({'error': 'Request body is required'}), 400

    action = data.get('action')
    if not action or not isinstance(action, str) or len(action) > 100:
        return jsonify({'error': 'action is required (max 100 characters)'}), 400

    entity_type = data.get('entity_type')
    if entity_type not in ENTITY_TYPES:
        return jsonify({
            'error': f'Invalid entity_type. Must be one of: {", ".join(ENTITY_TYPES)}'
        }), 400

    details = data.get('details')
    if details is not None and not isinstance(details, dict):
        return jsonify({'error': 'details must be an object'}), 400

    entity_id = data.get('entity_id')
    if entity_id is not None and not isinstance(entity_id, str):
        return jsonify({'error': 'entity_id must be a string'}), 400

    audit_log = log_action(
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        details=details
    )

    if audit_log is None:
        return jsonify({'error': 'Failed to write audit log'}), 500

    return jsonify(audit_log.to_dict()), 201
