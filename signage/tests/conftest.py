"""
Pytest configuration and fixtures for signage server tests.

This module provides shared fixtures for testing:
- Flask application with test configuration
- In-memory SQLite database
- Test client
- Users for every role with bearer-token headers
- Sample displays, content, playlists, assignments and alerts
"""

import pytest

from signage.app import create_app
from signage.models import (
    db,
    Display,
    ContentItem,
    ContentStatus,
    ContentType,
    Playlist,
    PlaylistItem,
    DisplayAssignment,
    Alert,
    AlertLevel,
    User,
    UserRole,
    UserSession,
)


@pytest.fixture(scope='function')
def app():
    """
    Create a Flask application configured for testing.

    This fixture provides an isolated Flask app with:
    - In-memory SQLite database
    - Testing mode enabled (rate limiting off)
    - Clean database tables

    Yields:
        Flask application instance
    """
    application = create_app(config_name='testing')

    with application.app_context():
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """
    Create a test client for the Flask application.

    Args:
        app: Flask application fixture

    Returns:
        Flask test client
    """
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """
    Provide a database session for testing.

    Args:
        app: Flask application fixture

    Yields:
        SQLAlchemy session
    """
    yield db.session


# ---------------------------------------------------------------------------
# Users and auth headers
# ---------------------------------------------------------------------------

def _create_user(db_session, email, role):
    user = User(email=email, name=email.split('@')[0], role=role)
    db_session.add(user)
    db_session.commit()
    return user


def _auth_headers(db_session, user):
    session = UserSession.create_session(user_id=user.id)
    db_session.add(session)
    db_session.commit()
    return {'Authorization': f'Bearer {session.token}'}


@pytest.fixture(scope='function')
def admin_user(db_session):
    """Create a user with the ADMIN role."""
    return _create_user(db_session, 'admin@school.test', UserRole.ADMIN.value)


@pytest.fixture(scope='function')
def editor_user(db_session):
    """Create a user with the EDITOR role."""
    return _create_user(db_session, 'editor@school.test', UserRole.EDITOR.value)


@pytest.fixture(scope='function')
def viewer_user(db_session):
    """Create a user with the VIEWER role."""
    return _create_user(db_session, 'viewer@school.test', UserRole.VIEWER.value)


@pytest.fixture(scope='function')
def admin_headers(db_session, admin_user):
    """Bearer-token headers for the admin user."""
    return _auth_headers(db_session, admin_user)


@pytest.fixture(scope='function')
def editor_headers(db_session, editor_user):
    """Bearer-token headers for the editor user."""
    return _auth_headers(db_session, editor_user)


@pytest.fixture(scope='function')
def viewer_headers(db_session, viewer_user):
    """Bearer-token headers for the viewer user."""
    return _auth_headers(db_session, viewer_user)


# ---------------------------------------------------------------------------
# Signage entities
# ---------------------------------------------------------------------------

@pytest.fixture(scope='function')
def sample_display(db_session):
    """
    Create a sample Display with a known secret key.

    Returns:
        Display instance
    """
    display = Display(
        name='Main Hallway',
        location='Building A',
        secret_key='hallway-secret-key',
    )
    db_session.add(display)
    db_session.commit()
    return display


@pytest.fixture(scope='function')
def make_content(db_session):
    """
    Factory fixture creating ContentItem records.

    Defaults to a published announcement with no publication window.
    """
    def _make(title, **kwargs):
        kwargs.setdefault('type', ContentType.ANNOUNCEMENT.value)
        kwargs.setdefault('status', ContentStatus.PUBLISHED.value)
        kwargs.setdefault('priority', 0)
        kwargs.setdefault('duration_seconds', 10)
        item = ContentItem(title=title, **kwargs)
        db_session.add(item)
        db_session.commit()
        return item
    return _make


@pytest.fixture(scope='function')
def sample_playlist(db_session):
    """
    Create an empty sample Playlist.

    Returns:
        Playlist instance
    """
    playlist = Playlist(name='Morning Loop', description='Announcements before first bell')
    db_session.add(playlist)
    db_session.commit()
    return playlist


@pytest.fixture(scope='function')
def add_to_playlist(db_session):
    """Factory fixture appending a content item to a playlist at an explicit order_index."""
    def _add(playlist, content_item, order_index):
        item = PlaylistItem(
            playlist_id=playlist.id,
            content_item_id=content_item.id,
            order_index=order_index,
        )
        db_session.add(item)
        db_session.commit()
        return item
    return _add


@pytest.fixture(scope='function')
def sample_assignment(db_session, sample_display, sample_playlist):
    """
    Create an active fullscreen assignment of the sample playlist to the sample display.

    Returns:
        DisplayAssignment instance
    """
    assignment = DisplayAssignment(
        display_id=sample_display.id,
        playlist_id=sample_playlist.id,
        layout_preset='fullscreen',
        is_active=True,
    )
    db_session.add(assignment)
    db_session.commit()
    return assignment


@pytest.fixture(scope='function')
def make_alert(db_session):
    """Factory fixture creating Alert records with an explicit created_at."""
    def _make(title, created_at, **kwargs):
        kwargs.setdefault('message', f'{title} message')
        kwargs.setdefault('level', AlertLevel.INFO.value)
        kwargs.setdefault('is_active', True)
        alert = Alert(title=title, created_at=created_at, **kwargs)
        db_session.add(alert)
        db_session.commit()
        return alert
    return _make


@pytest.fixture(scope='function')
def player_credentials(sample_display):
    """Request body for the player endpoints using the sample display."""
    return {
        'displayId': sample_display.id,
        'secretKey': 'hallway-secret-key',
    }
