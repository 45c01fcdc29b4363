"""
Signage Player Routes

Blueprint for the endpoints polled by unattended players:
- POST /content: Resolve what the display must render now
- POST /heartbeat: Report liveness without fetching content

Players authenticate with their display id and secret key in the body;
no admin session is involved. All endpoints are prefixed with
/api/v1/player when registered with the app.
"""

from flask import Blueprint, request, jsonify

from signage.services.player_service import PlayerService, ResolutionStatus


# Create player blueprint
player_bp = Blueprint('player', __name__)


def _credentials():
    """Read displayId / secretKey from the JSON body; missing values come back as None."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return None, None
    return data.get('displayId'), data.get('secretKey')


@player_bp.route('/content', methods=['POST'])
def get_player_content():
    """
    Get the render payload for a display.

    Request Body:
        {
            "displayId": "uuid of the display",
            "secretKey": "display secret key"
        }

    Returns:
        200: Content resolved
            {
                "isValid": true,
                "display": { display data },
                "assignment": { assignment data } or null,
                "playlist": { playlist data } or null,
                "items": [ { content item }, ... ],
                "alerts": [ { alert }, ... ]
            }
        401: Unknown display or wrong secret key
            {
                "isValid": false,
                "error": "Invalid display credentials"
            }
        500: Data store failure
            {
                "isValid": false,
                "error": "Internal server error"
            }
    """
    display_id, secret_key = _credentials()
    resolution = PlayerService.resolve_content(display_id, secret_key)

    if resolution.status is ResolutionStatus.INVALID_CREDENTIALS:
        return jsonify(resolution.to_dict()), 401
    if resolution.status is ResolutionStatus.SERVER_ERROR:
        return jsonify(resolution.to_dict()), 500

    return jsonify(resolution.to_dict()), 200


@player_bp.route('/heartbeat', methods=['POST'])
def player_heartbeat():
    """
    Record that a display is alive.

    Request Body:
        {
            "displayId": "uuid of the display",
            "secretKey": "display secret key"
        }

    Returns:
        200: Heartbeat recorded
            {
                "success": true
            }
        401: Unknown display or wrong secret key
            {
                "error": "Invalid credentials"
            }
        500: Data store failure
            {
                "error": "Failed to update heartbeat"
            }
    """
    display_id, secret_key = _credentials()
    result = PlayerService.heartbeat(display_id, secret_key)

    if result.status is ResolutionStatus.INVALID_CREDENTIALS:
        return jsonify({'error': 'Invalid credentials'}), 401
    if result.status is ResolutionStatus.SERVER_ERROR:
        return jsonify({'error': 'Failed to update heartbeat'}), 500

    return jsonify({'success': True}), 200
