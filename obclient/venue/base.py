"""Venue abstraction over the order book gateway."""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from typing import List, Optional

from ..core.types import Order, OrderBookSnapshot, Trade

FIBER_TYPE = "order_book"


class Venue(ABC):
    name: str

    def __init__(self, name: str):
        self.name = name

    @abstractmethod
    async def top_n_depth(self, n: int) -> OrderBookSnapshot: ...

    @abstractmethod
    async def best_bid(self) -> Optional[int]: ...

    @abstractmethod
    async def best_ask(self) -> Optional[int]: ...

    @abstractmethod
    async def place_order(self, order: Order) -> List[Trade]: ...

    @abstractmethod
    async def cancel(self, order_id: int) -> bool: ...

    async def place_orders(self, orders: List[Order]) -> List[List[Trade]]:
        """Place orders concurrently; results line up with ``orders``.

        Completion order between the individual requests is not guaranteed.
        """
        return list(await asyncio.gather(*(self.place_order(o) for o in orders)))
