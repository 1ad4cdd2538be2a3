"""Order book gateway adapters.

Two ways to reach the same ``order_book`` fiber:

* ``GatewayVenue`` opens a direct channel per call on
  ``/ws/order_book/<function>``; the gateway reads one JSON payload and
  replies on the same socket.
* ``MonitorVenue`` submits through ``MonitorDispatcher`` and picks results
  off the shared monitor channel. Handy for pollers that issue several
  queries per cycle and would rather not open a socket for each.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from .base import FIBER_TYPE, Venue
from .monitor import MonitorDispatcher
from .ws_client import DirectChannel
from ..core.types import Order, OrderBookSnapshot, OrderSide, Trade
from ..core.utils import http_to_ws
from ..core.values import (
    expect_option_u64,
    expect_snapshot,
    expect_trades,
    expect_u64,
    u64,
)


def _add_function(order: Order) -> str:
    return "add_buy" if order.side == OrderSide.BUY else "add_sell"


class GatewayVenue(Venue):
    def __init__(
        self,
        base_url: str = "http://localhost:5000",
        name: str = "gateway",
        channel: Optional[DirectChannel] = None,
    ):
        super().__init__(name)
        self.base_url = base_url.rstrip("/")
        self.ws_base = http_to_ws(self.base_url) + "/ws/" + FIBER_TYPE
        self.channel = channel or DirectChannel()

    def endpoint(self, function_key: str) -> str:
        return f"{self.ws_base}/{function_key}"

    async def _call(self, function_key: str, payload: Dict[str, Any]) -> Any:
        return await self.channel.request(self.endpoint(function_key), payload)

    async def top_n_depth(self, n: int) -> OrderBookSnapshot:
        return expect_snapshot(await self._call("top_n_depth", {"n": n}))

    async def best_bid(self) -> Optional[int]:
        return expect_option_u64(await self._call("best_bid", {}))

    async def best_ask(self) -> Optional[int]:
        return expect_option_u64(await self._call("best_ask", {}))

    async def place_order(self, order: Order) -> List[Trade]:
        return expect_trades(await self._call(_add_function(order), order.to_payload()))

    async def cancel(self, order_id: int) -> bool:
        return expect_u64(await self._call("cancel", {"id": order_id})) == 1


class MonitorVenue(Venue):
    def __init__(self, dispatcher: MonitorDispatcher, name: str = "monitor"):
        super().__init__(name)
        self.dispatcher = dispatcher

    async def _submit(self, function_key: str, init_values: List[Any]) -> Any:
        return await self.dispatcher.submit(FIBER_TYPE, function_key, init_values)

    async def top_n_depth(self, n: int) -> OrderBookSnapshot:
        return expect_snapshot(await self._submit("top_n_depth", [u64(n)]))

    async def best_bid(self) -> Optional[int]:
        return expect_option_u64(await self._submit("best_bid", []))

    async def best_ask(self) -> Optional[int]:
        return expect_option_u64(await self._submit("best_ask", []))

    async def place_order(self, order: Order) -> List[Trade]:
        values = [u64(order.id), u64(order.price), u64(order.qty)]
        return expect_trades(await self._submit(_add_function(order), values))

    async def cancel(self, order_id: int) -> bool:
        return expect_u64(await self._submit("cancel", [u64(order_id)])) == 1
