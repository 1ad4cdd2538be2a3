"""In-memory venue for offline runs and tests.

Implements the gateway's matching rules: price-time priority, trades at the
resting (maker) price, unfilled remainder rests at the order's limit price.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Dict, List, Optional, Tuple

from .base import Venue
from ..core.types import BookLevel, Order, OrderBookSnapshot, OrderSide, Trade


class MockVenue(Venue):
    def __init__(self, name: str = "mock"):
        super().__init__(name)
        self._bids: Dict[int, List[Order]] = {}
        self._asks: Dict[int, List[Order]] = {}
        self._index: Dict[int, Tuple[OrderSide, int]] = {}
        self.placed: List[Order] = []
        self.depth_calls = 0

    def seed(self, side: OrderSide, price: int, qty: int, order_id: int) -> None:
        """Rest liquidity without matching (test setup)."""
        book = self._bids if side == OrderSide.BUY else self._asks
        book.setdefault(price, []).append(Order(order_id, side, price, qty))
        self._index[order_id] = (side, price)

    def _best(self, side: OrderSide) -> Optional[int]:
        if side == OrderSide.BUY:
            return max(self._bids) if self._bids else None
        return min(self._asks) if self._asks else None

    def match(self, order: Order) -> List[Trade]:
        if order.side == OrderSide.BUY:
            own, opposite, maker_side = self._bids, self._asks, OrderSide.SELL
        else:
            own, opposite, maker_side = self._asks, self._bids, OrderSide.BUY

        def crosses(price: int) -> bool:
            if order.side == OrderSide.BUY:
                return price <= order.price
            return price >= order.price

        remaining = order.qty
        trades: List[Trade] = []
        while remaining > 0:
            best = self._best(maker_side)
            if best is None or not crosses(best):
                break
            level = opposite[best]
            while remaining > 0 and level:
                maker = level[0]
                fill = min(maker.qty, remaining)
                trades.append(Trade(best, fill, order.id, maker.id))
                remaining -= fill
                if fill == maker.qty:
                    level.pop(0)
                    self._index.pop(maker.id, None)
                else:
                    maker.qty -= fill
            if not level:
                del opposite[best]
        if remaining > 0:
            own.setdefault(order.price, []).append(replace(order, qty=remaining))
            self._index[order.id] = (order.side, order.price)
        return trades

    def snapshot(self, n: int) -> OrderBookSnapshot:
        def levels(book: Dict[int, List[Order]], reverse: bool) -> List[BookLevel]:
            prices = sorted(book, reverse=reverse)[:n]
            return [BookLevel(p, sum(o.qty for o in book[p])) for p in prices]

        return OrderBookSnapshot(
            bids=levels(self._bids, True), asks=levels(self._asks, False)
        )

    async def top_n_depth(self, n: int) -> OrderBookSnapshot:
        self.depth_calls += 1
        return self.snapshot(n)

    async def best_bid(self) -> Optional[int]:
        return self._best(OrderSide.BUY)

    async def best_ask(self) -> Optional[int]:
        return self._best(OrderSide.SELL)

    async def place_order(self, order: Order) -> List[Trade]:
        if order.qty <= 0:
            return []
        self.placed.append(order)
        return self.match(order)

    async def cancel(self, order_id: int) -> bool:
        entry = self._index.pop(order_id, None)
        if entry is None:
            return False
        side, price = entry
        book = self._bids if side == OrderSide.BUY else self._asks
        level = book.get(price, [])
        book[price] = [o for o in level if o.id != order_id]
        if not book[price]:
            del book[price]
        return True
