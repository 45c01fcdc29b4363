"""
Slide building for the signage player.

Turns a content payload into a render plan: one Slide per content item,
the layout to use, and the alerts to show. Each content type maps to a
builder through a single dispatch table.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from signage.models.alert import AlertLevel
from signage.models.content_item import ContentType


logger = logging.getLogger(__name__)

DEFAULT_DURATION_SECONDS = 10
DEFAULT_THEME_COLOR = '#1e40af'
DEFAULT_LAYOUT = 'fullscreen'
TICKER_MAX_ITEMS = 5

# Slide kinds
TEXT = 'text'
MEDIA = 'media'
WIDGET = 'widget'


@dataclass
class Slide:
    """What the player shows for one content item."""

    item_id: str
    content_type: ContentType
    kind: str
    title: str
    duration_seconds: int = DEFAULT_DURATION_SECONDS
    body: Optional[str] = None
    media_url: Optional[str] = None
    media_kind: Optional[str] = None


@dataclass
class RenderPlan:
    """Everything the player needs to draw one refresh cycle."""

    layout_preset: str = DEFAULT_LAYOUT
    theme_color: str = DEFAULT_THEME_COLOR
    display_name: str = ''
    slides: List[Slide] = field(default_factory=list)
    emergency_alert: Optional[Dict[str, Any]] = None
    banner_alerts: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def ticker_slides(self) -> List[Slide]:
        """Announcements scrolled by the ticker layout."""
        announcements = [s for s in self.slides if s.content_type is ContentType.ANNOUNCEMENT]
        return announcements[:TICKER_MAX_ITEMS]


def _duration(item: Dict[str, Any]) -> int:
    return item.get('duration_seconds') or DEFAULT_DURATION_SECONDS


def _text_slide(item: Dict[str, Any], content_type: ContentType) -> Slide:
    return Slide(
        item_id=item.get('id', ''),
        content_type=content_type,
        kind=TEXT,
        title=item.get('title', ''),
        body=item.get('body'),
        duration_seconds=_duration(item),
    )


def _media_slide(media_kind: str) -> Callable[[Dict[str, Any], ContentType], Slide]:
    def build(item: Dict[str, Any], content_type: ContentType) -> Slide:
        return Slide(
            item_id=item.get('id', ''),
            content_type=content_type,
            kind=MEDIA,
            title=item.get('title', ''),
            body=item.get('body'),
            media_url=item.get('media_url'),
            media_kind=media_kind,
            duration_seconds=_duration(item),
        )
    return build


def _widget_slide(item: Dict[str, Any], content_type: ContentType) -> Slide:
    # Widgets (clock/schedule, weather, raw HTML) render their body themselves
    return Slide(
        item_id=item.get('id', ''),
        content_type=content_type,
        kind=WIDGET,
        title=item.get('title', ''),
        body=item.get('body'),
        duration_seconds=_duration(item),
    )


SLIDE_BUILDERS: Dict[ContentType, Callable[[Dict[str, Any], ContentType], Slide]] = {
    ContentType.ANNOUNCEMENT: _text_slide,
    ContentType.EVENT: _text_slide,
    ContentType.IMAGE: _media_slide('image'),
    ContentType.VIDEO: _media_slide('video'),
    ContentType.SCHEDULE: _widget_slide,
    ContentType.WEATHER: _widget_slide,
    ContentType.HTML_WIDGET: _widget_slide,
}


def build_slide(item: Dict[str, Any]) -> Optional[Slide]:
    """
    Build the slide for one content item.

    Args:
        item: Serialized content item from the content payload

    Returns:
        Slide, or None if the item's type is unknown
    """
    try:
        content_type = ContentType(item.get('type'))
    except ValueError:
        logger.warning(f"Skipping item {item.get('id')} with unknown type {item.get('type')!r}")
        return None

    return SLIDE_BUILDERS[content_type](item, content_type)


def build_slides(payload: Dict[str, Any]) -> List[Slide]:
    """Build slides for every item of a payload, keeping payload order."""
    slides = []
    for item in payload.get('items') or []:
        slide = build_slide(item)
        if slide is not None:
            slides.append(slide)
    return slides


def build_render_plan(payload: Dict[str, Any]) -> RenderPlan:
    """
    Build the full render plan for a content payload.

    An EMERGENCY alert takes over the screen; other active alerts are shown
    in a banner above the content. Without an assignment the layout falls
    back to fullscreen.
    """
    display = payload.get('display') or {}
    assignment = payload.get('assignment') or {}
    alerts = [a for a in payload.get('alerts') or [] if a.get('is_active', True)]

    emergency = next((a for a in alerts if a.get('level') == AlertLevel.EMERGENCY.value), None)

    return RenderPlan(
        layout_preset=assignment.get('layout_preset') or DEFAULT_LAYOUT,
        theme_color=display.get('theme_color') or DEFAULT_THEME_COLOR,
        display_name=display.get('name') or '',
        slides=build_slides(payload),
        emergency_alert=emergency,
        banner_alerts=[] if emergency else alerts,
    )
