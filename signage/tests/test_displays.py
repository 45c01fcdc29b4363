"""
Integration tests for display API endpoints.

Tests:
- GET /api/v1/displays - List displays
- POST /api/v1/displays - Create display
- GET/PATCH/DELETE /api/v1/displays/<id>
- POST /api/v1/displays/<id>/rotate-key
"""

from signage.models import db, AuditLog, Display, DisplayAssignment


class TestDisplayModel:
    """Tests for the Display model."""

    def test_defaults(self, db_session):
        """New displays get a secret key and default theme."""
        display = Display(name='Gym')
        db_session.add(display)
        db_session.commit()

        assert len(display.secret_key) >= 32
        assert display.timezone == 'UTC'
        assert display.theme_color == '#1e40af'
        assert display.is_active is True
        assert display.last_seen_at is None

    def test_secret_keys_are_unique(self, db_session):
        """Two displays never share a generated key."""
        first, second = Display(name='A'), Display(name='B')
        db_session.add_all([first, second])
        db_session.commit()

        assert first.secret_key != second.secret_key


class TestListDisplays:
    """Tests for GET /api/v1/displays."""

    def test_list_requires_auth(self, client):
        """Listing needs a session."""
        assert client.get('/api/v1/displays').status_code == 401

    def test_viewer_can_list(self, client, viewer_headers, sample_display):
        """Any role can read displays."""
        response = client.get('/api/v1/displays', headers=viewer_headers)

        assert response.status_code == 200
        data = response.get_json()
        assert data['count'] == 1
        assert data['displays'][0]['name'] == 'Main Hallway'


class TestCreateDisplay:
    """Tests for POST /api/v1/displays."""

    def test_create_display(self, client, admin_headers):
        """An admin can register a display; the key is generated."""
        response = client.post('/api/v1/displays', json={
            'name': 'Cafeteria',
            'location': 'Building B',
            'theme_color': '#059669',
        }, headers=admin_headers)

        assert response.status_code == 201
        data = response.get_json()
        assert data['name'] == 'Cafeteria'
        assert data['theme_color'] == '#059669'
        assert data['secret_key']

        entry = AuditLog.query.filter_by(action='display.create').one()
        assert entry.entity_id == data['id']
        assert entry.user_email == 'admin@school.test'

    def test_client_cannot_choose_secret(self, client, admin_headers):
        """A secret_key in the body is ignored."""
        response = client.post('/api/v1/displays', json={
            'name': 'Cafeteria',
            'secret_key': 'chosen',
        }, headers=admin_headers)

        assert response.get_json()['secret_key'] != 'chosen'

    def test_create_requires_name(self, client, admin_headers):
        """Name is required."""
        response = client.post('/api/v1/displays', json={'location': 'Nowhere'}, headers=admin_headers)

        assert response.status_code == 400
        assert Display.query.count() == 0

    def test_create_rejects_bad_is_active(self, client, admin_headers):
        """is_active must be a boolean."""
        response = client.post('/api/v1/displays', json={
            'name': 'Lobby',
            'is_active': 'yes',
        }, headers=admin_headers)

        assert response.status_code == 400


class TestUpdateDisplay:
    """Tests for PATCH /api/v1/displays/<id>."""

    def test_update_display(self, client, admin_headers, sample_display):
        """Only the given fields change."""
        response = client.patch(f'/api/v1/displays/{sample_display.id}', json={
            'name': 'North Hallway',
            'is_active': False,
        }, headers=admin_headers)

        assert response.status_code == 200
        data = response.get_json()
        assert data['name'] == 'North Hallway'
        assert data['is_active'] is False
        assert data['location'] == 'Building A'

    def test_update_invalid_field_leaves_display_unchanged(self, client, admin_headers, sample_display):
        """A validation error rolls back every field."""
        response = client.patch(f'/api/v1/displays/{sample_display.id}', json={
            'name': 'Renamed',
            'timezone': '',
        }, headers=admin_headers)

        assert response.status_code == 400
        assert db.session.get(Display, sample_display.id).name == 'Main Hallway'

    def test_update_not_found(self, client, admin_headers):
        """Unknown ids are a 404."""
        response = client.patch('/api/v1/displays/missing', json={'name': 'X'}, headers=admin_headers)

        assert response.status_code == 404


class TestDeleteDisplay:
    """Tests for DELETE /api/v1/displays/<id>."""

    def test_delete_display_removes_assignments(self, client, admin_headers, sample_assignment, sample_display):
        """Deleting a display removes its assignments."""
        display_id = sample_display.id

        response = client.delete(f'/api/v1/displays/{display_id}', headers=admin_headers)

        assert response.status_code == 200
        assert db.session.get(Display, display_id) is None
        assert DisplayAssignment.query.filter_by(display_id=display_id).count() == 0

    def test_delete_not_found(self, client, admin_headers):
        """Unknown ids are a 404."""
        assert client.delete('/api/v1/displays/missing', headers=admin_headers).status_code == 404


class TestRotateKey:
    """Tests for POST /api/v1/displays/<id>/rotate-key."""

    def test_rotate_key_invalidates_old_key(self, client, admin_headers, sample_display, player_credentials):
        """The old key stops working and the new one works."""
        response = client.post(f'/api/v1/displays/{sample_display.id}/rotate-key', headers=admin_headers)

        assert response.status_code == 200
        new_key = response.get_json()['secret_key']
        assert new_key != 'hallway-secret-key'

        old = client.post('/api/v1/player/heartbeat', json=player_credentials)
        new = client.post('/api/v1/player/heartbeat', json={
            'displayId': sample_display.id,
            'secretKey': new_key,
        })
        assert old.status_code == 401
        assert new.status_code == 200
