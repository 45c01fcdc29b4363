"""
Headless signage player.

Polls the server for one display and logs each render plan. Useful for
checking display credentials and what a screen will show.

Usage:
    python -m signage.player --config player.yaml
"""

import argparse
import logging
import signal
import threading

from signage.player.client import PlayerClient
from signage.player.config import PlayerConfig
from signage.player.poller import PlayerPoller
from signage.player.slides import build_render_plan


logger = logging.getLogger('signage.player')


def log_render_plan(payload):
    """Content callback: summarize the render plan in the log."""
    plan = build_render_plan(payload)
    logger.info(
        f"Display {plan.display_name!r}: layout={plan.layout_preset}, "
        f"{len(plan.slides)} slides, {len(plan.banner_alerts)} banner alerts"
    )
    if plan.emergency_alert:
        logger.warning(f"EMERGENCY: {plan.emergency_alert.get('title')}")
    for slide in plan.slides:
        logger.info(f"  [{slide.content_type.value}] {slide.title} ({slide.duration_seconds}s)")


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Signage player")
    parser.add_argument('--config', default=None,
                        help='Path to player YAML config')
    parser.add_argument('--once', action='store_true',
                        help='Fetch content once and exit')

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    config = PlayerConfig(args.config)
    client = PlayerClient(config)
    poller = PlayerPoller(client, on_content=log_render_plan)

    if args.once:
        payload = poller.poll_content_once()
        client.close()
        return 0 if payload is not None else 1

    stop = threading.Event()
    signal.signal(signal.SIGINT, lambda *_: stop.set())
    signal.signal(signal.SIGTERM, lambda *_: stop.set())

    poller.start()
    stop.wait()
    poller.stop()
    client.close()
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
