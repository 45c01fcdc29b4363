"""
Tests for player slide building and render plans.
"""

import pytest

from signage.models.content_item import ContentType
from signage.player.slides import (
    MEDIA,
    TEXT,
    WIDGET,
    TICKER_MAX_ITEMS,
    build_render_plan,
    build_slide,
    build_slides,
)


def _item(item_id, type_, **kwargs):
    item = {'id': item_id, 'type': type_, 'title': f'{type_} {item_id}', 'duration_seconds': 10}
    item.update(kwargs)
    return item


class TestBuildSlide:
    """Tests for per-type slide building."""

    @pytest.mark.parametrize('type_, kind', [
        ('ANNOUNCEMENT', TEXT),
        ('EVENT', TEXT),
        ('IMAGE', MEDIA),
        ('VIDEO', MEDIA),
        ('SCHEDULE', WIDGET),
        ('WEATHER', WIDGET),
        ('HTML_WIDGET', WIDGET),
    ])
    def test_every_type_has_a_builder(self, type_, kind):
        """Each content type maps to one slide kind."""
        slide = build_slide(_item('1', type_))

        assert slide.content_type is ContentType(type_)
        assert slide.kind == kind

    def test_media_slide(self):
        """Image and video slides carry their URL and media kind."""
        image = build_slide(_item('1', 'IMAGE', media_url='https://cdn.test/a.png'))
        video = build_slide(_item('2', 'VIDEO', media_url='https://cdn.test/b.mp4'))

        assert image.media_url == 'https://cdn.test/a.png'
        assert image.media_kind == 'image'
        assert video.media_kind == 'video'

    def test_missing_duration_falls_back(self):
        """A missing or zero duration uses the default."""
        slide = build_slide(_item('1', 'ANNOUNCEMENT', duration_seconds=None))

        assert slide.duration_seconds == 10

    def test_unknown_type_is_skipped(self, caplog):
        """Unknown types produce no slide and a warning."""
        assert build_slide(_item('1', 'HOLOGRAM')) is None
        assert 'unknown type' in caplog.text

    def test_build_slides_keeps_order(self):
        """Slides follow payload order; unknown items are dropped."""
        payload = {'items': [
            _item('a', 'EVENT'),
            _item('b', 'HOLOGRAM'),
            _item('c', 'IMAGE'),
        ]}

        assert [s.item_id for s in build_slides(payload)] == ['a', 'c']


class TestRenderPlan:
    """Tests for build_render_plan."""

    def test_layout_and_theme(self):
        """Layout comes from the assignment, theme from the display."""
        plan = build_render_plan({
            'display': {'name': 'Gym', 'theme_color': '#059669'},
            'assignment': {'layout_preset': 'grid'},
            'items': [_item('a', 'EVENT')],
            'alerts': [],
        })

        assert plan.layout_preset == 'grid'
        assert plan.theme_color == '#059669'
        assert plan.display_name == 'Gym'
        assert len(plan.slides) == 1

    def test_no_assignment_defaults_to_fullscreen(self):
        """Without an assignment the layout is fullscreen."""
        plan = build_render_plan({'display': {}, 'assignment': None, 'items': [], 'alerts': []})

        assert plan.layout_preset == 'fullscreen'
        assert plan.slides == []

    def test_emergency_alert_takes_over(self):
        """An EMERGENCY alert replaces the banner."""
        plan = build_render_plan({
            'items': [],
            'alerts': [
                {'id': '1', 'title': 'Lockdown', 'level': 'EMERGENCY'},
                {'id': '2', 'title': 'Snow day', 'level': 'INFO'},
            ],
        })

        assert plan.emergency_alert['title'] == 'Lockdown'
        assert plan.banner_alerts == []

    def test_banner_alerts(self):
        """Non-emergency alerts go to the banner in payload order."""
        plan = build_render_plan({
            'items': [],
            'alerts': [
                {'id': '1', 'title': 'Bus delay', 'level': 'WARNING'},
                {'id': '2', 'title': 'Snow day', 'level': 'INFO'},
            ],
        })

        assert plan.emergency_alert is None
        assert [a['title'] for a in plan.banner_alerts] == ['Bus delay', 'Snow day']

    def test_ticker_shows_first_announcements(self):
        """The ticker scrolls at most five announcements."""
        items = [_item(str(i), 'ANNOUNCEMENT') for i in range(7)] + [_item('e', 'EVENT')]

        plan = build_render_plan({'items': items, 'alerts': []})

        assert len(plan.ticker_slides) == TICKER_MAX_ITEMS
        assert [s.item_id for s in plan.ticker_slides] == ['0', '1', '2', '3', '4']
