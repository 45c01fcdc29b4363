"""
Player Service for Signage Server.

Resolves what a display must render right now:
1. Check the display's id and secret key
2. Record the display as seen
3. Select the display's active assignment
4. Load the assigned playlist, keep published in-window items, order by priority
5. Collect all active alerts

Credential failures, data-store failures and unexpected errors come back as
structured results; nothing is raised to the caller.
"""

import enum
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from signage.models import db, Display, DisplayAssignment, Alert, ContentItem


# Configure logging
logger = logging.getLogger(__name__)


INVALID_CREDENTIALS_MESSAGE = 'Invalid display credentials'
INTERNAL_ERROR_MESSAGE = 'Internal server error'


class ResolutionStatus(enum.Enum):
    """Outcome of a player request."""
    OK = 'ok'
    INVALID_CREDENTIALS = 'invalid_credentials'
    SERVER_ERROR = 'server_error'


@dataclass
class PlayerResolution:
    """
    Render payload for one display at one instant.

    Model fields are held already serialized so the payload is complete
    even after the database session is gone.
    """

    status: ResolutionStatus
    error: Optional[str] = None
    display: Optional[Dict[str, Any]] = None
    assignment: Optional[Dict[str, Any]] = None
    playlist: Optional[Dict[str, Any]] = None
    items: List[Dict[str, Any]] = field(default_factory=list)
    alerts: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return self.status is ResolutionStatus.OK

    @classmethod
    def invalid(cls) -> 'PlayerResolution':
        return cls(status=ResolutionStatus.INVALID_CREDENTIALS, error=INVALID_CREDENTIALS_MESSAGE)

    @classmethod
    def failure(cls) -> 'PlayerResolution':
        return cls(status=ResolutionStatus.SERVER_ERROR, error=INTERNAL_ERROR_MESSAGE)

    def to_dict(self) -> Dict[str, Any]:
        """Response body in the player wire format."""
        if not self.is_valid:
            return {'isValid': False, 'error': self.error}
        return {
            'isValid': True,
            'display': self.display,
            'assignment': self.assignment,
            'playlist': self.playlist,
            'items': self.items,
            'alerts': self.alerts,
        }


@dataclass
class HeartbeatResult:
    """Outcome of a heartbeat request."""

    status: ResolutionStatus
    last_seen_at: Optional[datetime] = None

    @property
    def success(self) -> bool:
        return self.status is ResolutionStatus.OK


def filter_publishable(items: Iterable[ContentItem], now: datetime) -> List[ContentItem]:
    """Keep items that are PUBLISHED and inside their window at ``now``."""
    return [item for item in items if item.is_published_at(now)]


def order_by_priority(items: Iterable[ContentItem]) -> List[ContentItem]:
    """
    Sort items by priority, highest first.

    sorted() is stable, so items of equal priority keep the order they
    arrived in (playlist order).
    """
    return sorted(items, key=lambda item: item.priority, reverse=True)


class PlayerService:
    """
    Service class for resolving player content and heartbeats.

    All methods are class methods following the service pattern used
    across the server. Each call is independent; the only write is the
    display's last_seen_at.
    """

    @classmethod
    def resolve_content(cls, display_id, secret_key, now: Optional[datetime] = None) -> PlayerResolution:
        """
        Resolve the render payload for a display.

        Args:
            display_id: Display identifier sent by the player
            secret_key: Secret key sent by the player
            now: Evaluation instant (defaults to the current UTC time)

        Returns:
            PlayerResolution with status OK, INVALID_CREDENTIALS or SERVER_ERROR
        """
        now = cls._normalize_now(now)

        try:
            display = cls._authenticate(display_id, secret_key)
            if display is None:
                logger.info(f"Rejected content request for display {display_id!r}")
                return PlayerResolution.invalid()

            cls._record_liveness(display, now)

            assignment = cls._select_assignment(display)
            playlist = None
            items: List[ContentItem] = []
            if assignment is not None and assignment.playlist is not None:
                playlist = assignment.playlist
                items = cls._assemble_items(playlist, now)

            alerts = Alert.get_active()

            resolution = PlayerResolution(
                status=ResolutionStatus.OK,
                display=display.to_dict(),
                assignment=assignment.to_dict() if assignment else None,
                playlist=playlist.to_dict() if playlist else None,
                items=[item.to_dict() for item in items],
                alerts=[alert.to_dict() for alert in alerts],
            )
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception(f"Failed to resolve content for display {display_id!r}")
            return PlayerResolution.failure()
        except Exception:
            db.session.rollback()
            logger.exception(f"Unexpected error resolving content for display {display_id!r}")
            return PlayerResolution.failure()

        logger.debug(
            f"Resolved display {display.id}: {len(resolution.items)} items, "
            f"{len(resolution.alerts)} alerts"
        )
        return resolution

    @classmethod
    def heartbeat(cls, display_id, secret_key, now: Optional[datetime] = None) -> HeartbeatResult:
        """
        Record that a display is alive without resolving content.

        Args:
            display_id: Display identifier sent by the player
            secret_key: Secret key sent by the player
            now: Evaluation instant (defaults to the current UTC time)

        Returns:
            HeartbeatResult with status OK, INVALID_CREDENTIALS or SERVER_ERROR
        """
        now = cls._normalize_now(now)

        try:
            display = cls._authenticate(display_id, secret_key)
            if display is None:
                logger.info(f"Rejected heartbeat for display {display_id!r}")
                return HeartbeatResult(status=ResolutionStatus.INVALID_CREDENTIALS)

            cls._record_liveness(display, now)
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception(f"Failed to record heartbeat for display {display_id!r}")
            return HeartbeatResult(status=ResolutionStatus.SERVER_ERROR)
        except Exception:
            db.session.rollback()
            logger.exception(f"Unexpected error recording heartbeat for display {display_id!r}")
            return HeartbeatResult(status=ResolutionStatus.SERVER_ERROR)

        return HeartbeatResult(status=ResolutionStatus.OK, last_seen_at=now)

    # ==========================================================================
    # Resolution steps
    # ==========================================================================

    @staticmethod
    def _normalize_now(now: Optional[datetime]) -> datetime:
        if now is None:
            return datetime.now(timezone.utc)
        if now.tzinfo is None:
            return now.replace(tzinfo=timezone.utc)
        return now.astimezone(timezone.utc)

    @staticmethod
    def _authenticate(display_id, secret_key) -> Optional[Display]:
        """Exact, case-sensitive match of id and secret; None on any mismatch."""
        if not isinstance(display_id, str) or not isinstance(secret_key, str):
            return None
        if not display_id:
            return None

        display = db.session.get(Display, display_id)
        if display is None or display.secret_key != secret_key:
            return None
        return display

    @staticmethod
    def _record_liveness(display: Display, now: datetime) -> None:
        display.touch(now)
        db.session.commit()

    @staticmethod
    def _select_assignment(display: Display) -> Optional[DisplayAssignment]:
        """
        Pick the display's active assignment.

        Only the is_active flag counts. When several are flagged the oldest
        wins and the overlap is logged, not corrected.
        """
        active = DisplayAssignment.get_active_for_display(display.id)
        if not active:
            return None
        if len(active) > 1:
            logger.warning(
                f"Display {display.id} has {len(active)} active assignments; "
                f"using {active[0].id}"
            )
        return active[0]

    @staticmethod
    def _assemble_items(playlist, now: datetime) -> List[ContentItem]:
        content = [pi.content_item for pi in playlist.ordered_items() if pi.content_item is not None]
        return order_by_priority(filter_publishable(content, now))
