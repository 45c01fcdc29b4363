"""
Player poller - keeps a display's content and liveness current.

Runs two background threads: one fetches content every
``content_interval`` seconds and hands fresh payloads to a callback, the
other sends a heartbeat every ``heartbeat_interval`` seconds.
"""

import logging
import threading
from typing import Any, Callable, Dict, List, Optional

from signage.player.client import PlayerClient


logger = logging.getLogger(__name__)

ContentCallback = Callable[[Dict[str, Any]], None]


class PlayerPoller:
    """Polls the server for content and sends heartbeats on daemon threads."""

    def __init__(
        self,
        client: PlayerClient,
        on_content: Optional[ContentCallback] = None,
        content_interval: Optional[int] = None,
        heartbeat_interval: Optional[int] = None
    ):
        """
        Initialize the poller.

        Args:
            client: Client used for both requests
            on_content: Called with each successfully fetched payload
            content_interval: Seconds between content polls (default from config)
            heartbeat_interval: Seconds between heartbeats (default from config)
        """
        self.client = client
        self.on_content = on_content
        self.content_interval = content_interval or client.config.content_interval
        self.heartbeat_interval = heartbeat_interval or client.config.heartbeat_interval

        self._stop_event = threading.Event()
        self._threads: List[threading.Thread] = []

        # Most recent payload, kept so the display can keep rendering offline
        self.last_payload: Optional[Dict[str, Any]] = None

    def poll_content_once(self) -> Optional[Dict[str, Any]]:
        """
        Fetch content once and deliver it to the callback.

        Returns:
            The fetched payload, or None if the fetch failed
        """
        payload = self.client.fetch_content()
        if payload is None:
            return None

        self.last_payload = payload
        if self.on_content:
            try:
                self.on_content(payload)
            except Exception:
                logger.exception("Content callback failed")
        return payload

    def _run(self, action: Callable[[], Any], interval: int, name: str) -> None:
        """Run ``action`` immediately, then every ``interval`` seconds until stopped."""
        logger.info(f"{name} loop started (interval: {interval}s)")

        while not self._stop_event.is_set():
            try:
                action()
            except Exception:
                logger.exception(f"{name} iteration failed")
            self._stop_event.wait(interval)

        logger.info(f"{name} loop stopped")

    def start(self) -> None:
        """Start the content and heartbeat threads."""
        if self.is_running():
            logger.warning("Player poller already running")
            return

        self._stop_event.clear()
        self._threads = [
            threading.Thread(
                target=self._run,
                args=(self.poll_content_once, self.content_interval, 'Content'),
                name='signage-content-poller',
                daemon=True
            ),
            threading.Thread(
                target=self._run,
                args=(self.client.send_heartbeat, self.heartbeat_interval, 'Heartbeat'),
                name='signage-heartbeat',
                daemon=True
            ),
        ]
        for thread in self._threads:
            thread.start()

    def stop(self, timeout: float = 5.0) -> None:
        """Stop both threads and wait for them to exit."""
        if not self._threads:
            return

        self._stop_event.set()
        for thread in self._threads:
            thread.join(timeout=timeout)
        self._threads = []

        logger.info("Player poller stopped")

    def is_running(self) -> bool:
        """Check if the poller threads are alive."""
        return any(thread.is_alive() for thread in self._threads)
