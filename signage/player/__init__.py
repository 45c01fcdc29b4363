"""
Signage Player Client.

Runs on the machine driving a screen:
- config: YAML settings with environment overrides
- client: HTTP calls to the player endpoints
- poller: Background content polling and heartbeats
- slides: Content payload to render plan
"""

from signage.player.config import PlayerConfig
from signage.player.client import PlayerClient
from signage.player.poller import PlayerPoller
from signage.player.slides import Slide, RenderPlan, build_slide, build_slides, build_render_plan

__all__ = [
    'PlayerConfig',
    'PlayerClient',
    'PlayerPoller',
    'Slide',
    'RenderPlan',
    'build_slide',
    'build_slides',
    'build_render_plan',
]
