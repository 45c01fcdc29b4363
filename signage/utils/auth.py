"""
Signage Authentication Utilities.

Provides bearer-token authentication for the administrative API.

Features:
- Flask-Login request loader resolving "Authorization: Bearer <token>"
- @login_required decorator returning JSON 401 responses
- Current user / session retrieval
- Automatic session activity tracking

Usage:
    from signage.utils.auth import login_required, get_current_user

    @blueprint.route('/protected')
    @login_required
    def protected_route():
        user = get_current_user()
        return jsonify({'user': user.to_dict()})
"""

from functools import wraps

from flask import request, jsonify, g
from flask_login import current_user

from signage.models import db, User, UserSession


def get_current_user():
    """
    Get the currently authenticated user.

    Returns:
        User object if authenticated, None otherwise
    """
    if current_user and current_user.is_authenticated:
        return current_user._get_current_object()
    return None


def get_current_session():
    """
    Get the session used by the current request.

    Returns:
        UserSession object if authenticated by token, None otherwise
    """
    return getattr(g, 'current_session', None)


def _extract_token_from_header():
    """
    Extract the bearer token from the Authorization header.

    Supports the format: "Bearer <token>"

    Returns:
        Token string if present and valid format, None otherwise
    """
    auth_header = request.headers.get('Authorization')
    if not auth_header:
        return None

    parts = auth_header.split()
    if len(parts) != 2 or parts[0].lower() != 'bearer':
        return None

    return parts[1]


def _validate_session(token):
    """
    Validate a session token and return the associated user and session.

    Expired sessions are deleted. On success the session's last_active
    timestamp is updated.

    Args:
        token: The session token to validate

    Returns:
        Tuple of (User, UserSession) if valid, (None, None) otherwise
    """
    if not token:
        return None, None

    session = UserSession.query.filter_by(token=token).first()
    if not session:
        return None, None

    if session.is_expired():
        try:
            db.session.delete(session)
            db.session.commit()
        except Exception:
            db.session.rollback()
        return None, None

    user = db.session.get(User, session.user_id)
    if not user:
        return None, None

    try:
        session.update_activity()
        db.session.commit()
    except Exception:
        db.session.rollback()

    return user, session


def load_user_from_request(req):
    """
    Flask-Login request loader.

    Resolves the bearer token of the request to a user and stores the
    session on g for audit logging.

    Args:
        req: The incoming request

    Returns:
        User if the token is valid, None otherwise
    """
    user, session = _validate_session(_extract_token_from_header())
    g.current_session = session
    return user


def login_required(f):
    """
    Decorator to require authentication for a route.

    On failure, returns a 401 JSON response with a machine-readable code:
    'missing_token' when no bearer token was sent, 'invalid_session' when
    the token is unknown or expired.

    Args:
        f: The route function to wrap

    Returns:
        Decorated function that enforces authentication
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if _extract_token_from_header() is None:
            return jsonify({
                'error': 'Authentication required',
                'code': 'missing_token'
            }), 401

        if not current_user.is_authenticated:
            return jsonify({
                'error': 'Invalid or expired session',
                'code': 'invalid_session'
            }), 401

        return f(*args, **kwargs)

    return decorated_function


def get_client_ip():
    """
    Get the client's IP address from the request.

    Handles X-Forwarded-For header for proxied requests.

    Returns:
        Client IP address string
    """
    forwarded_for = request.headers.get('X-Forwarded-For')
    if forwarded_for:
        # Take the first IP in the list (client's original IP)
        return forwarded_for.split(',')[0].strip()

    return request.remote_addr


def get_user_agent():
    """
    Get the client's user agent string from the request.

    Returns:
        User agent string, truncated to 500 characters
    """
    user_agent = request.headers.get('User-Agent', '')
    return user_agent[:500] if user_agent else None
