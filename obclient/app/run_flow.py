"""Entry point: submit random buy/sell flow around a base price."""

from __future__ import annotations

import asyncio
import logging

from .config import Settings, load_settings
from .main import open_venue, setup_logging
from ..core.utils import OrderIdAllocator
from ..exec.runner import run_forever
from ..strategy.flow import RandomOrderFlow

log = logging.getLogger(__name__)


async def flow(settings: Settings) -> None:
    async with open_venue(settings) as venue:
        strategy = RandomOrderFlow(
            venue,
            OrderIdAllocator(settings.first_order_id(1)),
            batch=settings.batch,
            base_price=settings.base_price,
            price_spread=settings.price_spread,
            qty_min=settings.qty_min,
            qty_max=settings.qty_max,
        )
        log.info(
            "gateway %s via %s: period=%.3fs batch=%d price~%d+/-%d qty %d-%d",
            settings.gateway_url,
            venue.name,
            settings.period_s,
            settings.batch,
            settings.base_price,
            settings.price_spread,
            settings.qty_min,
            settings.qty_max,
        )
        await run_forever(strategy, settings.period_s)


def main():  # pragma: no cover - manual run
    settings = load_settings(period_default_s=1.0)
    setup_logging(settings)
    try:
        asyncio.run(flow(settings))
    except KeyboardInterrupt:
        log.info("stopped")


if __name__ == "__main__":  # pragma: no cover
    main()
