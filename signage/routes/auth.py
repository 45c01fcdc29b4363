"""
Signage Auth Routes

Blueprint for administrator identity endpoints:
- POST /login: Look up (or create) a user by email and issue a session token
- POST /logout: Revoke the current session token
- GET /me: Get the authenticated user

All endpoints are prefixed with /api/v1/auth when registered with the app.
"""

import re

from flask import Blueprint, jsonify

from signage.models import db, User, UserSession
from signage.utils.auth import login_required, get_current_user, get_current_session, get_client_ip, get_user_agent
from signage.utils.audit import log_action
from signage.utils.validation import json_body


# Create auth blueprint
auth_bp = Blueprint('auth', __name__)

_EMAIL_PATTERN = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')


@auth_bp.route('/login', methods=['POST'])
def login():
    """
    Login with an email address.

    Unknown emails get a new VIEWER account.

    Request Body:
        {
            "email": "user@example.com" (required)
        }

    Returns:
        200: Login successful
            {
                "message": "Login successful",
                "user": { user data },
                "session": { session data with token },
                "created": false
            }
        400: Missing or malformed email
            {
                "error": "email is required"
            }
    """
    data = json_body()

    if not data:
        return jsonify({'error': 'Request body is required'}), 400

    email = data.get('email')
    if not email:
        return jsonify({'error': 'email is required'}), 400

    if not isinstance(email, str) or not _EMAIL_PATTERN.match(email.strip()):
        return jsonify({'error': 'email must be a valid email address'}), 400

    try:
        user, created = User.find_or_create(email)
        db.session.flush()
        session = UserSession.create_session(
            user_id=user.id,
            ip_address=get_client_ip(),
            user_agent=get_user_agent()
        )
        db.session.add(session)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        return jsonify({'error': f'Failed to login: {str(e)}'}), 500

    log_action(
        action='auth.login',
        entity_type='auth',
        entity_id=user.id,
        user_id=user.id,
        user_email=user.email,
        details={'created': created}
    )

    return jsonify({
        'message': 'Login successful',
        'user': user.to_dict(),
        'session': session.to_dict(include_token=True),
        'created': created
    }), 200


@auth_bp.route('/logout', methods=['POST'])
@login_required
def logout():
    """
    Revoke the session token used for this request.

    Returns:
        200: Logged out
            {
                "message": "Logged out"
            }
    """
    user = get_current_user()
    session = get_current_session()

    if session is not None:
        try:
            db.session.delete(session)
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            return jsonify({'error': f'Failed to logout: {str(e)}'}), 500

    log_action(
        action='auth.logout',
        entity_type='auth',
        entity_id=user.id,
        user_id=user.id,
        user_email=user.email
    )

    return jsonify({'message': 'Logged out'}), 200


@auth_bp.route('/me', methods=['GET'])
@login_required
def me():
    """
    Get the authenticated user.

    Returns:
        200: { user data }
    """
    return jsonify(get_current_user().to_dict()), 200
