"""
Signage Audit Logging Utilities.

Helper for creating audit log entries for administrative actions.

Usage:
    from signage.utils.audit import log_action

    log_action(
        action='display.create',
        entity_type='display',
        entity_id=display.id,
        details={'name': display.name}
    )
"""

import json
import logging
from datetime import date, datetime
from typing import Any, Optional

from flask import has_request_context

from signage.models import db, AuditLog
from signage.utils.auth import get_current_user, get_client_ip, get_user_agent


logger = logging.getLogger(__name__)

ENTITY_TYPES = AuditLog.VALID_ENTITY_TYPES


def log_action(
    action: str,
    entity_type: str,
    entity_id: Optional[str] = None,
    details: Optional[dict] = None,
    user_id: Optional[str] = None,
    user_email: Optional[str] = None,
) -> Optional[AuditLog]:
    """
    Create an audit log entry.

    User, IP address and user agent are taken from the current request
    when available; explicit arguments override them.

    Args:
        action: Action performed (e.g., 'playlist.reorder_items')
        entity_type: Type of entity affected - must be one of ENTITY_TYPES
        entity_id: ID of the affected entity
        details: Additional context, JSON-serialized before storage
        user_id: Override for the acting user's ID
        user_email: Override for the acting user's email

    Returns:
        The created AuditLog entry, or None if creation failed

    Raises:
        ValueError: If entity_type is not in ENTITY_TYPES
    """
    if entity_type not in ENTITY_TYPES:
        raise ValueError(
            f"Invalid entity_type '{entity_type}'. "
            f"Must be one of: {', '.join(ENTITY_TYPES)}"
        )

    current_user = None
    ip_address = None
    user_agent = None
    if has_request_context():
        current_user = get_current_user()
        ip_address = get_client_ip()
        user_agent = get_user_agent()

    if current_user and not user_id:
        user_id = current_user.id
    if current_user and not user_email:
        user_email = current_user.email

    details_json = None
    if details is not None:
        try:
            details_json = json.dumps(details, default=_json_serializer)
        except (TypeError, ValueError) as e:
            details_json = json.dumps({'_serialization_error': str(e)})

    try:
        audit_log = AuditLog(
            user_id=user_id,
            user_email=user_email or 'anonymous',
            action=action,
            entity_type=entity_type,
            entity_id=entity_id,
            details=details_json,
            ip_address=ip_address,
            user_agent=user_agent,
        )
        db.session.add(audit_log)
        db.session.commit()
        return audit_log

    except Exception as e:
        # Audit failures must not break the main operation
        db.session.rollback()
        logger.error(f"Failed to write audit log for {action}: {e}")
        return None


def _json_serializer(obj: Any) -> Any:
    """
    JSON serializer for objects not serializable by default.

    Handles datetimes, objects with to_dict(), sets, and falls back to str().
    """
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    if hasattr(obj, 'to_dict'):
        return obj.to_dict()
    if isinstance(obj, set):
        return list(obj)
    return str(obj)
