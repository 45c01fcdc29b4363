"""
Integration tests for the player API endpoints.

Tests:
- POST /api/v1/player/content - Resolve content for a display
- POST /api/v1/player/heartbeat - Record display liveness
"""

from datetime import datetime, timedelta, timezone
from unittest import mock

from sqlalchemy.exc import OperationalError

from signage.models import db, Alert, Display, ContentStatus


CONTENT_URL = '/api/v1/player/content'
HEARTBEAT_URL = '/api/v1/player/heartbeat'


class TestPlayerContent:
    """Tests for POST /api/v1/player/content."""

    def test_content_with_assignment(self, client, player_credentials, sample_assignment,
                                     sample_playlist, make_content, add_to_playlist):
        """A valid request returns the full payload in priority order."""
        add_to_playlist(sample_playlist, make_content('Lunch menu', priority=1), 0)
        add_to_playlist(sample_playlist, make_content('Assembly', priority=4), 1)
        add_to_playlist(sample_playlist, make_content('Draft', status=ContentStatus.DRAFT.value), 2)

        response = client.post(CONTENT_URL, json=player_credentials)

        assert response.status_code == 200
        data = response.get_json()
        assert data['isValid'] is True
        assert data['display']['id'] == player_credentials['displayId']
        assert data['display']['last_seen_at'] is not None
        assert data['assignment']['id'] == sample_assignment.id
        assert data['playlist']['id'] == sample_playlist.id
        assert [item['title'] for item in data['items']] == ['Assembly', 'Lunch menu']
        assert data['alerts'] == []

    def test_content_without_assignment(self, client, player_credentials):
        """A display with no assignment still gets a valid, empty payload."""
        response = client.post(CONTENT_URL, json=player_credentials)

        assert response.status_code == 200
        data = response.get_json()
        assert data['isValid'] is True
        assert data['assignment'] is None
        assert data['playlist'] is None
        assert data['items'] == []

    def test_content_includes_active_alerts(self, client, player_credentials, make_alert):
        """Active alerts are returned newest first."""
        now = datetime.now(timezone.utc)
        make_alert('Snow day', now - timedelta(hours=2))
        make_alert('Lockdown drill', now - timedelta(hours=1), level='EMERGENCY')

        response = client.post(CONTENT_URL, json=player_credentials)

        titles = [alert['title'] for alert in response.get_json()['alerts']]
        assert titles == ['Lockdown drill', 'Snow day']

    def test_wrong_secret_returns_401(self, client, sample_display):
        """A wrong secret is rejected with the generic message."""
        response = client.post(CONTENT_URL, json={
            'displayId': sample_display.id,
            'secretKey': 'guess',
        })

        assert response.status_code == 401
        assert response.get_json() == {'isValid': False, 'error': 'Invalid display credentials'}
        assert db.session.get(Display, sample_display.id).last_seen_at is None

    def test_unknown_display_returns_same_error(self, client, sample_display):
        """Unknown display and wrong secret are indistinguishable."""
        unknown = client.post(CONTENT_URL, json={'displayId': 'nope', 'secretKey': 'hallway-secret-key'})
        wrong = client.post(CONTENT_URL, json={'displayId': sample_display.id, 'secretKey': 'nope'})

        assert unknown.status_code == wrong.status_code == 401
        assert unknown.get_json() == wrong.get_json()

    def test_missing_body_returns_401(self, client, sample_display):
        """No JSON body is treated as invalid credentials, not a 400."""
        response = client.post(CONTENT_URL, data='not json', content_type='text/plain')

        assert response.status_code == 401
        assert response.get_json()['isValid'] is False

    def test_missing_fields_returns_401(self, client, sample_display):
        """A body without secretKey is rejected."""
        response = client.post(CONTENT_URL, json={'displayId': sample_display.id})

        assert response.status_code == 401

    def test_store_failure_returns_500(self, client, player_credentials):
        """A data-store failure surfaces as a 500 with a generic message."""
        error = OperationalError('SELECT alerts', {}, Exception('database is locked'))
        with mock.patch.object(Alert, 'get_active', side_effect=error):
            response = client.post(CONTENT_URL, json=player_credentials)

        assert response.status_code == 500
        assert response.get_json() == {'isValid': False, 'error': 'Internal server error'}

    def test_unexpected_error_keeps_player_shape(self, client, player_credentials):
        """Non-database errors still answer in the player format."""
        with mock.patch.object(Alert, 'get_active', side_effect=ValueError('bad row')):
            response = client.post(CONTENT_URL, json=player_credentials)

        assert response.status_code == 500
        assert response.get_json() == {'isValid': False, 'error': 'Internal server error'}

    def test_get_not_allowed(self, client):
        """Only POST is accepted."""
        response = client.get(CONTENT_URL)

        assert response.status_code == 405

    def test_no_admin_session_needed(self, client, player_credentials, admin_headers):
        """Player endpoints ignore bearer tokens entirely."""
        response = client.post(CONTENT_URL, json=player_credentials)

        assert response.status_code == 200


class TestPlayerHeartbeat:
    """Tests for POST /api/v1/player/heartbeat."""

    def test_heartbeat_success(self, client, player_credentials):
        """A valid heartbeat records liveness."""
        response = client.post(HEARTBEAT_URL, json=player_credentials)

        assert response.status_code == 200
        assert response.get_json() == {'success': True}
        display = db.session.get(Display, player_credentials['displayId'])
        assert display.last_seen_at is not None

    def test_heartbeat_invalid_credentials(self, client, sample_display):
        """A wrong secret returns 401 without touching the display."""
        response = client.post(HEARTBEAT_URL, json={
            'displayId': sample_display.id,
            'secretKey': 'wrong',
        })

        assert response.status_code == 401
        assert response.get_json() == {'error': 'Invalid credentials'}
        assert db.session.get(Display, sample_display.id).last_seen_at is None

    def test_heartbeat_missing_body(self, client):
        """No body is an authentication failure."""
        response = client.post(HEARTBEAT_URL)

        assert response.status_code == 401

    def test_heartbeat_store_failure(self, client, player_credentials):
        """A commit failure returns 500."""
        error = OperationalError('UPDATE displays', {}, Exception('disk I/O error'))
        with mock.patch.object(db.session, 'commit', side_effect=error):
            response = client.post(HEARTBEAT_URL, json=player_credentials)

        assert response.status_code == 500
        assert response.get_json() == {'error': 'Failed to update heartbeat'}

    def test_heartbeat_unexpected_error(self, client, player_credentials):
        """Non-database errors return the heartbeat failure body."""
        with mock.patch.object(Display, 'touch', side_effect=ValueError('clock')):
            response = client.post(HEARTBEAT_URL, json=player_credentials)

        assert response.status_code == 500
        assert response.get_json() == {'error': 'Failed to update heartbeat'}
