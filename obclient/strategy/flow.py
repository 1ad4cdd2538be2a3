"""Random order flow to keep a test book populated.

Each cycle places ``batch`` buys priced at or below ``base_price`` and
``batch`` sells at or above it, all in flight at once.
"""

from __future__ import annotations

import logging
import random
from typing import List, Optional

from .base import CycleResult, Strategy
from ..core.types import Order, OrderSide, fmt_trades
from ..core.utils import OrderIdAllocator
from ..exec.router import route
from ..venue.base import Venue

log = logging.getLogger(__name__)


class RandomOrderFlow(Strategy):
    def __init__(
        self,
        venue: Venue,
        ids: OrderIdAllocator,
        batch: int = 1,
        base_price: int = 1000,
        price_spread: int = 20,
        qty_min: int = 1,
        qty_max: int = 5,
        rng: Optional[random.Random] = None,
    ):
        if qty_min > qty_max:
            raise ValueError("qty_min must not exceed qty_max")
        self.venue = venue
        self.ids = ids
        self.batch = batch
        self.base_price = base_price
        self.price_spread = price_spread
        self.qty_min = qty_min
        self.qty_max = qty_max
        self.rng = rng or random.Random()

    def make_orders(self) -> List[Order]:
        buys = [
            (self.base_price - self.rng.randint(0, self.price_spread), self._qty())
            for _ in range(self.batch)
        ]
        sells = [
            (self.base_price + self.rng.randint(0, self.price_spread), self._qty())
            for _ in range(self.batch)
        ]
        orders = [Order(self.ids.allocate(), OrderSide.BUY, p, q) for p, q in buys]
        orders += [Order(self.ids.allocate(), OrderSide.SELL, p, q) for p, q in sells]
        return orders

    def _qty(self) -> int:
        return self.rng.randint(self.qty_min, self.qty_max)

    async def run_cycle(self, tick: int) -> CycleResult:
        orders = self.make_orders()
        results = await route(self.venue, orders)
        result = CycleResult(orders=orders)
        for trades in results:
            result.trades.extend(trades)
        log.info(
            "tick %d: placed %d orders, trades=%d", tick, len(orders), len(result.trades)
        )
        for o, trades in zip(orders, results):
            log.info(
                "  %s id=%d %d@%d -> trades: %s",
                o.side.value.lower(),
                o.id,
                o.qty,
                o.price,
                fmt_trades(trades),
            )
        return result
