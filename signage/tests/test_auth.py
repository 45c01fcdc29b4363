"""
Integration tests for authentication and permissions.

Tests:
- POST /api/v1/auth/login - Email login issuing a bearer token
- POST /api/v1/auth/logout - Session revocation
- GET /api/v1/auth/me - Current user
- login_required / require_role behaviour
"""

from datetime import timedelta

from signage.models import db, AuditLog, User, UserRole, UserSession, utcnow
from signage.utils.permissions import has_permission, get_role_level


class TestLogin:
    """Tests for POST /api/v1/auth/login."""

    def test_login_creates_viewer_for_unknown_email(self, client):
        """First login creates a VIEWER account named after the email."""
        response = client.post('/api/v1/auth/login', json={'email': 'New.Staff@School.test'})

        assert response.status_code == 200
        data = response.get_json()
        assert data['created'] is True
        assert data['user']['email'] == 'new.staff@school.test'
        assert data['user']['role'] == UserRole.VIEWER.value
        assert data['user']['name'] == 'new.staff'
        assert data['session']['token']

    def test_login_reuses_existing_user(self, client, editor_user):
        """Logging in with a known email keeps the user's role."""
        response = client.post('/api/v1/auth/login', json={'email': 'EDITOR@school.test'})

        data = response.get_json()
        assert response.status_code == 200
        assert data['created'] is False
        assert data['user']['id'] == editor_user.id
        assert data['user']['role'] == UserRole.EDITOR.value

    def test_login_token_authenticates(self, client):
        """The returned token works as a bearer token."""
        login = client.post('/api/v1/auth/login', json={'email': 'someone@school.test'})
        token = login.get_json()['session']['token']

        response = client.get('/api/v1/auth/me', headers={'Authorization': f'Bearer {token}'})

        assert response.status_code == 200
        assert response.get_json()['email'] == 'someone@school.test'

    def test_login_is_audited(self, client):
        """A login writes an auth.login audit entry."""
        client.post('/api/v1/auth/login', json={'email': 'someone@school.test'})

        entry = AuditLog.query.filter_by(action='auth.login').one()
        assert entry.user_email == 'someone@school.test'
        assert entry.entity_type == 'auth'

    def test_login_requires_email(self, client):
        """Missing email is a 400."""
        response = client.post('/api/v1/auth/login', json={})

        assert response.status_code == 400

    def test_login_rejects_malformed_email(self, client):
        """Strings that are not email addresses are rejected."""
        response = client.post('/api/v1/auth/login', json={'email': 'not-an-email'})

        assert response.status_code == 400
        assert User.query.count() == 0


class TestSessionAuth:
    """Tests for bearer-token authentication."""

    def test_missing_token(self, client):
        """No Authorization header returns missing_token."""
        response = client.get('/api/v1/displays')

        assert response.status_code == 401
        assert response.get_json()['code'] == 'missing_token'

    def test_unknown_token(self, client):
        """An unknown token returns invalid_session."""
        response = client.get('/api/v1/displays', headers={'Authorization': 'Bearer nope'})

        assert response.status_code == 401
        assert response.get_json()['code'] == 'invalid_session'

    def test_malformed_header(self, client, admin_headers):
        """A non-Bearer scheme is treated as missing."""
        token = admin_headers['Authorization'].split()[1]
        response = client.get('/api/v1/displays', headers={'Authorization': f'Token {token}'})

        assert response.status_code == 401
        assert response.get_json()['code'] == 'missing_token'

    def test_expired_session_is_deleted(self, client, db_session, viewer_user):
        """An expired session is rejected and removed."""
        session = UserSession.create_session(user_id=viewer_user.id)
        session.expires_at = utcnow() - timedelta(minutes=1)
        db_session.add(session)
        db_session.commit()
        session_id = session.id

        response = client.get('/api/v1/auth/me', headers={'Authorization': f'Bearer {session.token}'})

        assert response.status_code == 401
        assert db.session.get(UserSession, session_id) is None

    def test_auth_does_not_leak_between_requests(self, client, admin_headers):
        """A request without a token after an authenticated one is rejected."""
        assert client.get('/api/v1/auth/me', headers=admin_headers).status_code == 200

        response = client.get('/api/v1/auth/me')

        assert response.status_code == 401


class TestLogout:
    """Tests for POST /api/v1/auth/logout."""

    def test_logout_revokes_token(self, client, admin_headers):
        """After logout the same token no longer works."""
        response = client.post('/api/v1/auth/logout', headers=admin_headers)

        assert response.status_code == 200
        assert client.get('/api/v1/auth/me', headers=admin_headers).status_code == 401

    def test_logout_requires_auth(self, client):
        """Logout without a token is a 401."""
        response = client.post('/api/v1/auth/logout')

        assert response.status_code == 401


class TestPermissions:
    """Tests for role checks."""

    def test_role_levels(self):
        """ADMIN > EDITOR > VIEWER; unknown roles have level 0."""
        assert get_role_level('ADMIN') > get_role_level('EDITOR') > get_role_level('VIEWER') > 0
        assert get_role_level('superuser') == 0

    def test_has_permission(self, admin_user, viewer_user):
        """has_permission compares role levels."""
        assert has_permission(admin_user, 'EDITOR')
        assert not has_permission(viewer_user, 'EDITOR')
        assert not has_permission(None, 'VIEWER')

    def test_viewer_cannot_write(self, client, viewer_headers):
        """A VIEWER gets 403 on an EDITOR endpoint."""
        response = client.post('/api/v1/playlists', json={'name': 'Nope'}, headers=viewer_headers)

        assert response.status_code == 403
        data = response.get_json()
        assert data['code'] == 'forbidden'
        assert data['required_role'] == 'EDITOR'

    def test_editor_cannot_manage_displays(self, client, editor_headers):
        """Display writes need ADMIN."""
        response = client.post('/api/v1/displays', json={'name': 'Lobby'}, headers=editor_headers)

        assert response.status_code == 403
        assert response.get_json()['required_role'] == 'ADMIN'
