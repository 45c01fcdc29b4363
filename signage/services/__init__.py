"""
Signage Services Package.

Business logic services for the signage server:
- PlayerService: Resolves what a display renders and records heartbeats
- SettingsService: Global key/value settings with defaults
"""

from signage.services.player_service import PlayerService, PlayerResolution, ResolutionStatus
from signage.services.settings_service import SettingsService, SettingsValidationError

__all__ = [
    'PlayerService',
    'PlayerResolution',
    'ResolutionStatus',
    'SettingsService',
    'SettingsValidationError',
]
