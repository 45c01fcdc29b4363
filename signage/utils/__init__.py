"""
Signage Utility Functions.

This package contains utility functions and decorators used across the server:
- auth: Bearer-token authentication and login_required
- permissions: Role-based permission checking
- audit: Audit logging helpers
- validation: Request payload parsing
"""

from signage.utils.auth import login_required, get_current_user
from signage.utils.permissions import (
    has_permission,
    require_role,
    require_admin,
    require_editor,
)

__all__ = [
    'login_required',
    'get_current_user',
    'has_permission',
    'require_role',
    'require_admin',
    'require_editor',
]
