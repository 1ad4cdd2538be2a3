"""Entry point: drain the remote order book with aggressive orders."""

from __future__ import annotations

import asyncio
import logging

from .config import Settings, load_settings
from .main import open_venue, setup_logging
from ..core.utils import OrderIdAllocator
from ..exec.runner import run_forever
from ..strategy.drain import DrainStrategy

log = logging.getLogger(__name__)


async def drain(settings: Settings) -> None:
    async with open_venue(settings) as venue:
        strategy = DrainStrategy(
            venue,
            OrderIdAllocator(settings.first_order_id(1_000_000)),
            depth_levels=settings.n_levels,
            empty_wait_min=settings.empty_wait_min_s,
            empty_wait_max=settings.empty_wait_max_s,
        )
        log.info(
            "draining %s via %s: N_LEVELS=%d period=%.3fs empty_wait=%.3f-%.3fs",
            settings.gateway_url,
            venue.name,
            settings.n_levels,
            settings.period_s,
            settings.empty_wait_min_s,
            settings.empty_wait_max_s,
        )
        await run_forever(strategy, settings.period_s)


def main():  # pragma: no cover - manual run
    settings = load_settings(period_default_s=0.5)
    setup_logging(settings)
    try:
        asyncio.run(drain(settings))
    except KeyboardInterrupt:
        log.info("stopped")


if __name__ == "__main__":  # pragma: no cover
    main()
