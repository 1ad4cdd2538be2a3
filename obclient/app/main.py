"""App bootstrap shared by the loop entry points."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from .config import Settings
from ..venue.base import Venue
from ..venue.gateway import GatewayVenue, MonitorVenue
from ..venue.monitor import MonitorDispatcher


def setup_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@asynccontextmanager
async def open_venue(settings: Settings, default_mode: str = "direct") -> AsyncIterator[Venue]:
    """Yield a venue for ``settings.mode`` (or ``default_mode``).

    Monitor mode holds the shared channel open for the lifetime of the block.
    """
    mode = settings.mode or default_mode
    if mode == "monitor":
        async with MonitorDispatcher(settings.monitor_url, settings.submit_url) as disp:
            yield MonitorVenue(disp)
    else:
        yield GatewayVenue(settings.gateway_url)
