"""Book draining: sweep both sides of the book with aggressive orders.

Per cycle:

1. read top-N depth;
2. if there are asks, buy the total ask quantity at the highest visible ask,
   which sits at or above every listed level;
3. read depth again, never reusing the pre-buy view, so the sell is priced
   against what the buy left behind;
4. if there are bids, sell the total bid quantity at the best bid, which is
   at or below every listed level;
5. read depth once more and, if both sides are empty, ask the runner for a
   randomized backoff instead of the normal period.

Cycles carry no state apart from the order id allocator.
"""

from __future__ import annotations

import logging
import random
from typing import List, Optional

from .base import CycleResult, Strategy
from ..core.types import Order, OrderBookSnapshot, OrderSide, Trade, fmt_levels
from ..core.utils import OrderIdAllocator, uniform_delay
from ..exec.router import route
from ..venue.base import Venue

log = logging.getLogger(__name__)


class DrainStrategy(Strategy):
    def __init__(
        self,
        venue: Venue,
        ids: OrderIdAllocator,
        depth_levels: int = 100,
        empty_wait_min: float = 5.0,
        empty_wait_max: float = 7.0,
        rng: Optional[random.Random] = None,
    ):
        if empty_wait_min > empty_wait_max:
            raise ValueError("empty_wait_min must not exceed empty_wait_max")
        self.venue = venue
        self.ids = ids
        self.depth_levels = depth_levels
        self.empty_wait_min = empty_wait_min
        self.empty_wait_max = empty_wait_max
        self.rng = rng or random.Random()

    def buy_order(self, snap: OrderBookSnapshot) -> Optional[Order]:
        qty = snap.ask_qty
        if qty <= 0:
            return None
        return Order(self.ids.allocate(), OrderSide.BUY, snap.max_ask(), qty)

    def sell_order(self, snap: OrderBookSnapshot) -> Optional[Order]:
        qty = snap.bid_qty
        if qty <= 0:
            return None
        return Order(self.ids.allocate(), OrderSide.SELL, snap.best_bid(), qty)

    async def _execute(self, order: Order, result: CycleResult) -> List[Trade]:
        (trades,) = await route(self.venue, [order])
        result.orders.append(order)
        result.trades.extend(trades)
        log.info(
            "  %s qty=%s @%s%s -> trades=%d",
            order.side.value.lower(),
            order.qty,
            ">=" if order.side == OrderSide.BUY else "<=",
            order.price,
            len(trades),
        )
        return trades

    async def run_cycle(self, tick: int) -> CycleResult:
        result = CycleResult()
        snap = await self.venue.top_n_depth(self.depth_levels)
        log.info(
            "tick %d: asks[%d]=%s | bids[%d]=%s",
            tick,
            len(snap.asks),
            fmt_levels(snap.asks),
            len(snap.bids),
            fmt_levels(snap.bids),
        )

        buy = self.buy_order(snap)
        if buy is not None:
            await self._execute(buy, result)

        snap = await self.venue.top_n_depth(self.depth_levels)
        sell = self.sell_order(snap)
        if sell is not None:
            await self._execute(sell, result)

        final = await self.venue.top_n_depth(self.depth_levels)
        result.snapshot = final
        if final.is_empty():
            result.delay = uniform_delay(
                self.empty_wait_min, self.empty_wait_max, self.rng
            )
            log.info("book is empty; waiting %.3fs before re-check", result.delay)
        return result
