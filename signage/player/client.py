"""
Player client - talks to the signage server's player endpoints.

Fetches the render payload and reports liveness for one display. Failures
are logged and reported through return values; nothing is raised to the
caller so a polling loop keeps running while the server is unreachable.
"""

import logging
import threading
from typing import Any, Dict, List, Optional

import requests

from signage.player.config import PlayerConfig


logger = logging.getLogger(__name__)

CONTENT_PATH = '/api/v1/player/content'
HEARTBEAT_PATH = '/api/v1/player/heartbeat'


class PlayerClient:
    """HTTP client for a single display."""

    def __init__(self, config: PlayerConfig, session: Optional[requests.Session] = None):
        """
        Initialize the client.

        Args:
            config: Player configuration (server URL, credentials, timeout)
            session: Optional requests session shared by every thread. If not
                     given, each calling thread gets its own session.
        """
        self.config = config
        self._shared_session = session
        self._local = threading.local()
        self._sessions: List[requests.Session] = []

        # Guards the outcome tracking and the session list across poller threads
        self._lock = threading.Lock()

        # Track last request outcome
        self.last_status_code: Optional[int] = None
        self.consecutive_failures = 0

    @property
    def session(self) -> requests.Session:
        """HTTP session for the calling thread."""
        if self._shared_session is not None:
            return self._shared_session

        session = getattr(self._local, 'session', None)
        if session is None:
            session = requests.Session()
            self._local.session = session
            with self._lock:
                self._sessions.append(session)
        return session

    def _credentials(self) -> Dict[str, str]:
        return {
            'displayId': self.config.display_id,
            'secretKey': self.config.secret_key,
        }

    def _post(self, path: str) -> Optional[requests.Response]:
        """POST the display credentials to ``path``; None on network failure."""
        url = f"{self.config.base_url}{path}"
        try:
            response = self.session.post(
                url,
                json=self._credentials(),
                timeout=self.config.timeout
            )
        except requests.Timeout:
            logger.warning(f"Request to {url} timed out - server unreachable")
            self._record_failure(None)
            return None
        except requests.RequestException as e:
            logger.warning(f"Request to {url} failed: {e}")
            self._record_failure(None)
            return None

        with self._lock:
            self.last_status_code = response.status_code
        return response

    def _record_failure(self, status_code: Optional[int]) -> None:
        with self._lock:
            self.last_status_code = status_code
            self.consecutive_failures += 1

    def _record_success(self) -> None:
        with self._lock:
            self.consecutive_failures = 0

    def fetch_content(self) -> Optional[Dict[str, Any]]:
        """
        Fetch what the display should render now.

        Returns:
            The payload ({isValid, display, assignment, playlist, items,
            alerts}) on success, None on rejection or any failure
        """
        response = self._post(CONTENT_PATH)
        if response is None:
            return None

        if response.status_code == 401:
            logger.error(
                f"Display {self.config.display_id} rejected: check display id and secret key"
            )
            self._record_failure(response.status_code)
            return None

        if response.status_code != 200:
            logger.warning(f"Content fetch failed: HTTP {response.status_code}")
            self._record_failure(response.status_code)
            return None

        try:
            payload = response.json()
        except ValueError:
            logger.warning("Content fetch returned a non-JSON body")
            self._record_failure(response.status_code)
            return None

        if not isinstance(payload, dict) or not payload.get('isValid'):
            logger.warning("Content fetch returned an invalid payload")
            self._record_failure(response.status_code)
            return None

        self._record_success()
        logger.debug(
            f"Fetched {len(payload.get('items', []))} items, "
            f"{len(payload.get('alerts', []))} alerts"
        )
        return payload

    def send_heartbeat(self) -> bool:
        """
        Report that the display is alive.

        Returns:
            True if the server accepted the heartbeat, False otherwise
        """
        response = self._post(HEARTBEAT_PATH)
        if response is None:
            return False

        if response.status_code != 200:
            logger.warning(f"Heartbeat failed: HTTP {response.status_code}")
            self._record_failure(response.status_code)
            return False

        self._record_success()
        logger.debug("Heartbeat sent")
        return True

    def close(self) -> None:
        """Close every HTTP session the client opened."""
        if self._shared_session is not None:
            self._shared_session.close()
            return

        with self._lock:
            sessions, self._sessions = self._sessions, []
        for session in sessions:
            session.close()
