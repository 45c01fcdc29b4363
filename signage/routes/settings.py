"""
Signage Settings Routes

Blueprint for global signage settings:
- GET /: Get all settings (defaults merged with stored values)
- PUT /: Update one or more settings (ADMIN only)

All endpoints are prefixed with /api/v1/settings when registered with the app.
"""

from flask import Blueprint, jsonify

from signage.services.settings_service import SettingsService, SettingsValidationError
from signage.utils.auth import login_required
from signage.utils.audit import log_action
from signage.utils.permissions import require_admin
from signage.utils.validation import json_body


# Create settings blueprint
settings_bp = Blueprint('settings', __name__)


@settings_bp.route('', methods=['GET'])
@login_required
def get_settings():
    """
    Get all settings.

    Returns:
        200:
            {
                "school_name": "Lincoln High School",
                "primary_color": "#1e40af",
                "secondary_color": "#059669",
                "logo_url": "",
                "default_duration": 10,
                "refresh_interval": 30,
                "enable_weather": true,
                "weather_location": "New York, NY"
            }
    """
    return jsonify(SettingsService.get_all()), 200


@settings_bp.route('', methods=['PUT'])
@login_required
@require_admin
def update_settings():
    """
    Update settings. Keys not in the body keep their value.

    Request Body:
        {
            "default_duration": 15,
            "enable_weather": false
        }

    Returns:
        200: { all settings after the update }
        400: Unknown key or invalid value (nothing is stored)
    """
    data = json_body()

    try:
        settings = SettingsService.set_many(data)
    except SettingsValidationError as e:
        return jsonify({'error': str(e)}), 400

    log_action(
        action='setting.update',
        entity_type='setting',
        details={'values': data}
    )

    return jsonify(settings), 200
