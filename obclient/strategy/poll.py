"""Read-only poller: best bid, best ask and depth, issued together."""

from __future__ import annotations

import asyncio
import logging

from .base import CycleResult, Strategy
from ..core.types import fmt_levels
from ..venue.base import Venue

log = logging.getLogger(__name__)


def _fmt_price(p) -> str:
    return "-" if p is None else str(p)


class BookPoller(Strategy):
    def __init__(self, venue: Venue, depth_levels: int = 5):
        self.venue = venue
        self.depth_levels = depth_levels
        self.best_bid = None
        self.best_ask = None

    async def run_cycle(self, tick: int) -> CycleResult:
        # completion order of the three queries is not fixed
        bb, ba, snap = await asyncio.gather(
            self.venue.best_bid(),
            self.venue.best_ask(),
            self.venue.top_n_depth(self.depth_levels),
        )
        self.best_bid, self.best_ask = bb, ba
        log.info(
            "tick %d: best_bid=%s best_ask=%s | bids[%d]=%s | asks[%d]=%s",
            tick,
            _fmt_price(bb),
            _fmt_price(ba),
            len(snap.bids),
            fmt_levels(snap.bids),
            len(snap.asks),
            fmt_levels(snap.asks),
        )
        return CycleResult(snapshot=snap)
