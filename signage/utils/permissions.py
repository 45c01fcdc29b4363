"""
Signage Permission Utilities.

Role-based access control on top of @login_required.

Role Hierarchy (highest to lowest):
- ADMIN (level 3): Displays, settings, audit logs, everything below
- EDITOR (level 2): Content, playlists, assignments, alerts
- VIEWER (level 1): Read-only access

Usage:
    @blueprint.route('/admin-only', methods=['POST'])
    @login_required
    @require_role('ADMIN')
    def admin_route():
        ...
"""

from functools import wraps

from flask import jsonify

from signage.models.user import ROLE_HIERARCHY, UserRole
from signage.utils.auth import get_current_user


ROLE_ADMIN = UserRole.ADMIN.value
ROLE_EDITOR = UserRole.EDITOR.value
ROLE_VIEWER = UserRole.VIEWER.value

VALID_ROLES = list(ROLE_HIERARCHY.keys())


def get_role_level(role):
    """
    Get the numeric level of a role.

    Args:
        role: Role name string

    Returns:
        Integer role level, or 0 if role is invalid
    """
    return ROLE_HIERARCHY.get(role, 0)


def has_permission(user, minimum_role):
    """
    Check if a user has at least the specified role level.

    Args:
        user: User object with a 'role' attribute, or None
        minimum_role: The minimum required role name string

    Returns:
        True if user has sufficient permission, False otherwise
    """
    if user is None:
        return False

    return get_role_level(user.role) >= get_role_level(minimum_role)


def require_role(minimum_role):
    """
    Decorator factory requiring a minimum role.

    Must be applied below @login_required. Returns 403 when the current
    user's role is too low.

    Args:
        minimum_role: The minimum required role name string

    Returns:
        Decorator enforcing the role
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            user = get_current_user()
            if not has_permission(user, minimum_role):
                return jsonify({
                    'error': 'Insufficient permissions',
                    'code': 'forbidden',
                    'required_role': minimum_role
                }), 403
            return f(*args, **kwargs)
        return decorated_function
    return decorator


require_admin = require_role(ROLE_ADMIN)
require_editor = require_role(ROLE_EDITOR)
