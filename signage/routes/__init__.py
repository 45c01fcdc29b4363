"""
Signage Routes Package

Blueprint registration for all API route modules:
- Player: Content resolution and heartbeat for display players
- Auth: Email login, logout, current user
- Displays: Display registration and secret key rotation
- Content: Content item management
- Playlists: Playlists and their ordered items
- Assignments: Playlist-to-display assignments
- Alerts: Global alerts shown on every display
- Audit: Audit log listing and manual entries
- Settings: Global signage settings
"""

# Import Player blueprint from its module
from signage.routes.player import player_bp

# Import Auth blueprint from its module
from signage.routes.auth import auth_bp

# Import Displays blueprint from its module
from signage.routes.displays import displays_bp

# Import Content blueprint from its module
from signage.routes.content import content_bp

# Import Playlists blueprint from its module
from signage.routes.playlists import playlists_bp

# Import Assignments blueprint from its module
from signage.routes.assignments import assignments_bp

# Import Alerts blueprint from its module
from signage.routes.alerts import alerts_bp

# Import Audit blueprint from its module
from signage.routes.audit import audit_bp

# Import Settings blueprint from its module
from signage.routes.settings import settings_bp


__all__ = [
    'player_bp',
    'auth_bp',
    'displays_bp',
    'content_bp',
    'playlists_bp',
    'assignments_bp',
    'alerts_bp',
    'audit_bp',
    'settings_bp',
]
