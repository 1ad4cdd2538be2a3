import asyncio
import random

import pytest

from obclient.core.types import BookLevel, Order, OrderBookSnapshot, OrderSide
from obclient.core.utils import OrderIdAllocator, uniform_delay
from obclient.strategy.drain import DrainStrategy
from obclient.strategy.flow import RandomOrderFlow
from obclient.strategy.poll import BookPoller
from obclient.venue.base import Venue
from obclient.venue.mock import MockVenue


class ScriptedVenue(Venue):
    """Serves pre-baked depth snapshots and records the call sequence."""

    def __init__(self, snapshots):
        super().__init__("scripted")
        self.snapshots = list(snapshots)
        self.calls = []

    async def top_n_depth(self, n):
        self.calls.append("depth")
        return self.snapshots.pop(0)

    async def best_bid(self):
        return None

    async def best_ask(self):
        return None

    async def place_order(self, order):
        self.calls.append(f"place {order.side.value}")
        return []

    async def cancel(self, order_id):
        return False


def _drainer(venue, start=1000, seed=1):
    return DrainStrategy(
        venue,
        OrderIdAllocator(start),
        depth_levels=10,
        empty_wait_min=5.0,
        empty_wait_max=7.0,
        rng=random.Random(seed),
    )


def test_drain_sweeps_asks_then_backs_off():
    v = MockVenue()
    v.seed(OrderSide.SELL, 101, 3, order_id=1)
    v.seed(OrderSide.SELL, 102, 2, order_id=2)
    result = asyncio.run(_drainer(v).run_cycle(1))
    assert result.orders == [Order(1000, OrderSide.BUY, 102, 5)]
    assert [(t.price, t.qty, t.maker_id) for t in result.trades] == [
        (101, 3, 1),
        (102, 2, 2),
    ]
    assert result.snapshot.is_empty()
    assert 5.0 <= result.delay <= 7.0


def test_drain_empties_both_sides_in_one_cycle():
    v = MockVenue()
    v.seed(OrderSide.SELL, 101, 3, order_id=1)
    v.seed(OrderSide.SELL, 102, 2, order_id=2)
    v.seed(OrderSide.BUY, 99, 4, order_id=3)
    v.seed(OrderSide.BUY, 99, 1, order_id=4)
    result = asyncio.run(_drainer(v).run_cycle(1))
    assert result.orders == [
        Order(1000, OrderSide.BUY, 102, 5),
        Order(1001, OrderSide.SELL, 99, 5),
    ]
    assert v.snapshot(10).is_empty()
    assert result.delay is not None
    assert v.depth_calls == 3


def test_drain_deeper_bids_settle_on_the_next_cycle():
    # a sell at the best bid leaves lower bids untouched and rests the rest
    v = MockVenue()
    v.seed(OrderSide.BUY, 99, 4, order_id=3)
    v.seed(OrderSide.BUY, 98, 1, order_id=4)
    drainer = _drainer(v)
    first = asyncio.run(drainer.run_cycle(1))
    assert first.orders == [Order(1000, OrderSide.SELL, 99, 5)]
    assert first.snapshot.asks == [BookLevel(99, 1)]
    assert first.snapshot.bids == [BookLevel(98, 1)]
    assert first.delay is None

    second = asyncio.run(drainer.run_cycle(2))
    assert second.orders == [
        Order(1001, OrderSide.BUY, 99, 1),
        Order(1002, OrderSide.SELL, 98, 1),
    ]
    assert second.snapshot.is_empty()


def test_drain_nonempty_book_uses_normal_period():
    v = MockVenue()
    v.seed(OrderSide.BUY, 99, 4, order_id=3)
    # a second bidder arrives between the sell and the final read
    original = v.place_order

    async def place_and_refill(order):
        trades = await original(order)
        v.seed(OrderSide.BUY, 97, 1, order_id=50)
        return trades

    v.place_order = place_and_refill
    result = asyncio.run(_drainer(v).run_cycle(1))
    assert result.orders == [Order(1000, OrderSide.SELL, 99, 4)]
    assert not result.snapshot.is_empty()
    assert result.delay is None


def test_drain_prices_sell_from_post_buy_snapshot():
    first = OrderBookSnapshot(
        bids=[BookLevel(100, 2)], asks=[BookLevel(101, 3), BookLevel(103, 1)]
    )
    after_buy = OrderBookSnapshot(bids=[BookLevel(99, 1)], asks=[])
    venue = ScriptedVenue([first, after_buy, OrderBookSnapshot()])
    result = asyncio.run(_drainer(venue).run_cycle(1))
    assert venue.calls == ["depth", "place BUY", "depth", "place SELL", "depth"]
    buy, sell = result.orders
    assert (buy.price, buy.qty) == (103, 4)
    assert (sell.price, sell.qty) == (99, 1)


def test_drain_empty_book_places_nothing():
    venue = ScriptedVenue([OrderBookSnapshot()] * 3)
    result = asyncio.run(_drainer(venue).run_cycle(1))
    assert result.orders == []
    assert venue.calls == ["depth", "depth", "depth"]
    assert 5.0 <= result.delay <= 7.0


def test_order_ids_keep_increasing_across_cycles():
    v = MockVenue()
    drainer = _drainer(v, start=7)
    v.seed(OrderSide.SELL, 10, 1, order_id=1)
    r1 = asyncio.run(drainer.run_cycle(1))
    v.seed(OrderSide.BUY, 9, 1, order_id=2)
    r2 = asyncio.run(drainer.run_cycle(2))
    assert [o.id for o in r1.orders + r2.orders] == [7, 8]
    assert drainer.ids.peek() == 9


def test_poller_reports_best_prices_and_depth():
    v = MockVenue()
    v.seed(OrderSide.SELL, 105, 2, order_id=1)
    v.seed(OrderSide.BUY, 95, 3, order_id=2)
    poller = BookPoller(v, depth_levels=5)
    result = asyncio.run(poller.run_cycle(1))
    assert (poller.best_bid, poller.best_ask) == (95, 105)
    assert result.snapshot.bids == [BookLevel(95, 3)]
    assert result.delay is None


def test_random_flow_prices_around_base():
    v = MockVenue()
    flow = RandomOrderFlow(
        v,
        OrderIdAllocator(1),
        batch=3,
        base_price=1000,
        price_spread=20,
        qty_min=1,
        qty_max=5,
        rng=random.Random(42),
    )
    result = asyncio.run(flow.run_cycle(1))
    buys = [o for o in result.orders if o.side == OrderSide.BUY]
    sells = [o for o in result.orders if o.side == OrderSide.SELL]
    assert len(buys) == 3 and len(sells) == 3
    assert all(980 <= o.price <= 1000 for o in buys)
    assert all(1000 <= o.price <= 1020 for o in sells)
    assert all(1 <= o.qty <= 5 for o in result.orders)
    assert [o.id for o in result.orders] == [1, 2, 3, 4, 5, 6]
    assert len(v.placed) == 6


def test_reversed_empty_wait_bounds_are_rejected():
    with pytest.raises(ValueError):
        DrainStrategy(MockVenue(), OrderIdAllocator(1), empty_wait_min=7.0, empty_wait_max=5.0)
    with pytest.raises(ValueError):
        uniform_delay(2.0, 1.0)
    assert uniform_delay(1.5, 1.5) == 1.5
