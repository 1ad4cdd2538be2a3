"""Entry point: poll best bid / best ask / depth over the monitor channel."""

from __future__ import annotations

import asyncio
import logging

from .config import Settings, load_settings
from .main import open_venue, setup_logging
from ..exec.runner import run_forever
from ..strategy.poll import BookPoller

log = logging.getLogger(__name__)


async def poll(settings: Settings) -> None:
    log.info("connecting to %s ...", settings.monitor_url)
    async with open_venue(settings, default_mode="monitor") as venue:
        log.info(
            "connected. gateway %s depth=%d period=%.3fs",
            settings.gateway_url,
            settings.depth_levels,
            settings.period_s,
        )
        await run_forever(BookPoller(venue, settings.depth_levels), settings.period_s)


def main():  # pragma: no cover - manual run
    settings = load_settings(period_default_s=1.0)
    setup_logging(settings)
    try:
        asyncio.run(poll(settings))
    except KeyboardInterrupt:
        log.info("stopped")


if __name__ == "__main__":  # pragma: no cover
    main()
